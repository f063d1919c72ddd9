"""Tagged declaration variants produced once by the declaration classifiers."""

from dataclasses import dataclass, field
from typing import Any, Literal

from tree_sitter import Node

from sveltedoc.comment_parser import ParsedComment
from sveltedoc.errors import UnresolvedTypeWarning
from sveltedoc.models import (
    NO_VALUE,
    JSDocType,
    SourceLocation,
    SvelteMethodArgumentItem,
)
from sveltedoc.script_parser import ScriptSource

CallableBucket = Literal["methods", "actions", "helpers", "transitions"]
CALLABLE_BUCKETS: tuple[CallableBucket, ...] = (
    "methods",
    "actions",
    "helpers",
    "transitions",
)


@dataclass
class Declaration:
    """Fields common to every classified script declaration."""

    name: str
    loc: SourceLocation
    comment: ParsedComment | None = None


@dataclass
class DataDecl(Declaration):
    """A plain model property."""

    type: JSDocType | None = None
    value: Any = NO_VALUE


@dataclass
class ComputedDecl(Declaration):
    """A derived property.

    ``expression`` is kept for the dependency analyzer; ``dependencies`` is set
    up front when the dialect declares them explicitly.
    """

    expression: Node | None = None
    dependencies: tuple[str, ...] | None = None


@dataclass
class CallableDecl(Declaration):
    """A method, action, helper or transition."""

    bucket: CallableBucket = "methods"
    args: tuple[SvelteMethodArgumentItem, ...] = ()


@dataclass
class ComponentDecl(Declaration):
    """A child component registered by the script."""

    value: str = ""


@dataclass
class EventDecl(Declaration):
    """A custom event fired from the script."""


@dataclass(frozen=True)
class ImportBinding:
    """A local identifier bound by an import statement."""

    name: str
    path: str
    loc: SourceLocation
    comment: ParsedComment | None = None


@dataclass
class ScriptDeclarations:
    """Everything the classifier found in the script region."""

    source: ScriptSource | None = None
    data: list[DataDecl] = field(default_factory=list)
    computed: list[ComputedDecl] = field(default_factory=list)
    callables: list[CallableDecl] = field(default_factory=list)
    components: list[ComponentDecl] = field(default_factory=list)
    events: list[EventDecl] = field(default_factory=list)
    imports: dict[str, ImportBinding] = field(default_factory=dict)
    dispatchers: set[str] = field(default_factory=set)
    aliases: dict[str, str] = field(default_factory=dict)
    component_comment: ParsedComment | None = None
    warnings: list[UnresolvedTypeWarning] = field(default_factory=list)

    def known_names(self) -> list[str]:
        """Return the data and computed names in declaration order."""
        return [d.name for d in self.data] + [c.name for c in self.computed]

    def public_name(self, name: str) -> str:
        """Return the name a local binding is exported under."""
        return self.aliases.get(name, name)
