"""Options controlling one extraction run."""

from dataclasses import dataclass
from typing import Any, ClassVar

LATEST_DIALECT = 3


@dataclass(frozen=True)
class ExtractOptions:
    """Represents the options recognised by ``extract``.

    ``dialect_version`` selects the script and markup conventions (2 for the
    component options object, 3 for top-level declarations). ``file_name`` is
    only used to name the component when its comment has no ``@name``.
    """

    include_source_locations: bool = False
    dialect_version: int = LATEST_DIALECT
    ignore_private: bool = False
    ignore_keywords: tuple[str, ...] = ()
    file_name: str | None = None

    SUPPORTED_DIALECTS: ClassVar[tuple[int, ...]] = (2, 3)

    def __post_init__(self) -> None:
        """Validate the dialect and normalise the keyword list."""
        if self.dialect_version not in self.SUPPORTED_DIALECTS:
            msg = (
                f"Unsupported dialect version {self.dialect_version!r}; "
                f"expected one of {self.SUPPORTED_DIALECTS}"
            )
            raise ValueError(msg)
        object.__setattr__(self, "ignore_keywords", tuple(self.ignore_keywords))

    @classmethod
    def from_config(cls, config: dict[str, Any], **overrides: Any) -> "ExtractOptions":
        """Build options from a loaded configuration, then apply overrides.

        Overrides set to ``None`` are ignored so unset CLI flags keep the
        configured value.
        """
        section = config.get("options") or {}
        values: dict[str, Any] = {
            "include_source_locations": bool(
                section.get("include_source_locations", False)
            ),
            "dialect_version": int(section.get("dialect_version", LATEST_DIALECT)),
            "ignore_private": bool(section.get("ignore_private", False)),
            "ignore_keywords": tuple(config.get("ignore_keywords") or ()),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
