"""Structured failures raised by the extraction engine."""

from typing import Any

from sveltedoc.models import SourceLocation


class ExtractionError(Exception):
    """Base class for failures that abort an extraction run."""

    kind = "ExtractionError"

    def __init__(
        self, message: str, locations: tuple[SourceLocation, ...] = ()
    ) -> None:
        """Initialize the error with a message and the offending locations."""
        super().__init__(message)
        self.message = message
        self.locations = locations

    def to_dict(self) -> dict[str, Any]:
        """Return the failure as plain data for callers and the CLI."""
        return {
            "kind": self.kind,
            "message": self.message,
            "locations": [loc.to_dict() for loc in self.locations],
        }


class ParseError(ExtractionError):
    """Malformed script or markup syntax."""

    kind = "ParseError"

    def __init__(self, message: str, start: int, end: int) -> None:
        """Initialize with the offending offset range."""
        super().__init__(message, (SourceLocation(start=start, end=max(start, end)),))

    @property
    def location(self) -> SourceLocation:
        return self.locations[0]


class DuplicateNameError(ExtractionError):
    """Two items collide within a category that requires unique names."""

    kind = "DuplicateNameError"

    def __init__(
        self,
        category: str,
        name: str,
        first: SourceLocation | None,
        second: SourceLocation | None,
    ) -> None:
        """Initialize with the category, the name and both declarations."""
        locations = tuple(loc for loc in (first, second) if loc is not None)
        super().__init__(
            f"Duplicate {category} name '{name}'",
            locations,
        )
        self.category = category
        self.name = name

    def to_dict(self) -> dict[str, Any]:
        """Return the failure including the colliding category and name."""
        out = super().to_dict()
        out["category"] = self.category
        out["name"] = self.name
        return out


class UnresolvedTypeWarning(UserWarning):
    """Type inference fell back to ``any``; recorded, never raised."""

    def __init__(self, subject: str, text: str | None = None) -> None:
        """Initialize with the subject and the source text that failed."""
        detail = f" from '{text}'" if text else ""
        super().__init__(f"Could not resolve type of {subject}{detail}")
        self.subject = subject
        self.text = text
