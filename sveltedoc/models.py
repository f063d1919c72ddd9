"""Data models for the Svelte component documentation object."""

from dataclasses import dataclass, field, fields
from typing import Any, Literal

Visibility = Literal["public", "protected", "private"]
TypeKind = Literal["type", "union", "const"]


class _NoValue:
    """Marker for an absent literal value; ``None`` is a real JS ``null``."""

    def __repr__(self) -> str:
        return "NO_VALUE"

    def __bool__(self) -> bool:
        return False


NO_VALUE: Any = _NoValue()


def _plain(value: Any) -> Any:
    """Convert a model value to JSON-compatible data."""
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


class _Record:
    """Mixin rendering a dataclass as a dict, omitting unset optional fields."""

    # Fields always rendered, even when empty.
    _always: tuple[str, ...] = ("name",)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for f in fields(self):  # type: ignore[arg-type]
            value = getattr(self, f.name)
            if value is NO_VALUE:
                continue
            if value is None and f.name not in self._always:
                continue
            out[f.name] = _plain(value)
        return out


@dataclass(frozen=True)
class JSDocKeyword(_Record):
    """One parsed ``@tag`` line of a comment block."""

    name: str
    description: str = ""

    _always = ("name", "description")


@dataclass(frozen=True)
class JSDocType(_Record):
    """Type information of an item.

    For ``kind`` of ``type`` or ``const`` the ``type`` field is a type name; for
    ``union`` it is a tuple of at least two ``JSDocType`` alternatives.
    """

    kind: TypeKind
    text: str
    type: "str | tuple[JSDocType, ...]"
    value: Any = NO_VALUE

    _always = ("kind", "text", "type", "value")

    @property
    def has_value(self) -> bool:
        return self.value is not NO_VALUE


@dataclass(frozen=True)
class SourceLocation(_Record):
    """Character offsets of a symbol from the document beginning."""

    start: int
    end: int

    _always = ("start", "end")


@dataclass(frozen=True, kw_only=True)
class SvelteItem(_Record):
    """Field set shared by every documented item."""

    name: str
    loc: SourceLocation | None = None
    description: str | None = None
    visibility: Visibility = "public"
    keywords: tuple[JSDocKeyword, ...] | None = None


@dataclass(frozen=True, kw_only=True)
class SvelteDataItem(SvelteItem):
    """A model (state) property."""

    type: JSDocType | None = None
    value: Any = NO_VALUE

    _always = ("name", "value")


@dataclass(frozen=True, kw_only=True)
class SvelteComputedItem(SvelteItem):
    """A derived property and the names it reads."""

    dependencies: tuple[str, ...] = ()

    _always = ("name", "dependencies")


@dataclass(frozen=True, kw_only=True)
class SvelteMethodArgumentItem(_Record):
    """One formal parameter of a callable."""

    name: str
    type: JSDocType
    repeated: bool | None = None
    optional: bool | None = None
    default: str | None = None
    description: str | None = None


@dataclass(frozen=True, kw_only=True)
class SvelteMethodItem(SvelteItem):
    """A method, action, helper or transition."""

    args: tuple[SvelteMethodArgumentItem, ...] | None = None


@dataclass(frozen=True, kw_only=True)
class SvelteComponentItem(SvelteItem):
    """A child component and the import it resolves to."""

    value: str

    _always = ("name", "value")


@dataclass(frozen=True, kw_only=True)
class SvelteEventItem(SvelteItem):
    """An event fired or forwarded by the component."""

    parent: str | None = None


@dataclass(frozen=True, kw_only=True)
class SvelteSlotParameter(SvelteItem):
    """A value a slot exposes to its content."""


@dataclass(frozen=True, kw_only=True)
class SvelteSlotItem(SvelteItem):
    """A named insertion point of the component markup."""

    parameters: tuple[SvelteSlotParameter, ...] | None = None


@dataclass(frozen=True, kw_only=True)
class SvelteRefItem(SvelteItem):
    """A named handle bound to an element or component."""

    parent: str | None = None


@dataclass(frozen=True, kw_only=True)
class SvelteComponentDoc(_Record):
    """Represents a Svelte component documentation object."""

    name: str | None = None
    version: int | None = None
    description: str | None = None
    data: tuple[SvelteDataItem, ...] = field(default_factory=tuple)
    computed: tuple[SvelteComputedItem, ...] = field(default_factory=tuple)
    components: tuple[SvelteComponentItem, ...] = field(default_factory=tuple)
    events: tuple[SvelteEventItem, ...] = field(default_factory=tuple)
    slots: tuple[SvelteSlotItem, ...] = field(default_factory=tuple)
    refs: tuple[SvelteRefItem, ...] = field(default_factory=tuple)
    methods: tuple[SvelteMethodItem, ...] = field(default_factory=tuple)
    actions: tuple[SvelteMethodItem, ...] = field(default_factory=tuple)
    helpers: tuple[SvelteMethodItem, ...] = field(default_factory=tuple)
    transitions: tuple[SvelteMethodItem, ...] = field(default_factory=tuple)

    _always = ("name", "description")
