"""Logic for collecting components, events, slots and refs from markup."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from tree_sitter import Node

from sveltedoc.comment_parser import ParsedComment, comment_fields, parse_comment
from sveltedoc.declarations import ImportBinding
from sveltedoc.markup_parser import Attribute, Comment, Element, Text
from sveltedoc.models import (
    SourceLocation,
    SvelteComponentItem,
    SvelteEventItem,
    SvelteRefItem,
    SvelteSlotItem,
    SvelteSlotParameter,
)
from sveltedoc.script_helpers import first_string_argument
from sveltedoc.script_parser import ScriptSource, parse_expression, walk

logger = logging.getLogger(__name__)

COMPONENT_KEYWORD = "component"
DEFAULT_SLOT_NAME = "default"
SLOT_TAG = "slot"
EVENT_DIRECTIVE = "on"
V2_REF_DIRECTIVE = "ref"
V3_REF_ATTRIBUTE = "bind:this"
V2_FIRE = "fire"


@dataclass
class MarkupCandidates:
    """Items found in the markup, one per occurrence and in document order."""

    components: list[SvelteComponentItem] = field(default_factory=list)
    events: list[SvelteEventItem] = field(default_factory=list)
    slots: list[SvelteSlotItem] = field(default_factory=list)
    refs: list[SvelteRefItem] = field(default_factory=list)
    component_comment: ParsedComment | None = None


def _component_comment(parsed: ParsedComment) -> ParsedComment:
    """Fold the ``@component`` keyword text into the description."""
    marker = parsed.first_keyword(COMPONENT_KEYWORD)
    parts = [parsed.description, marker.description if marker else None]
    description = "\n".join(p for p in parts if p) or None
    keywords = tuple(kw for kw in parsed.keywords if kw is not marker)
    return ParsedComment(description=description, keywords=keywords, loc=parsed.loc)


def _tag_loc(element: Element) -> SourceLocation:
    start = element.start + 1
    return SourceLocation(start=start, end=start + len(element.name))


class MarkupAnalyzer:
    """Walks the element tree and records candidate items for one dialect.

    ``imports`` maps script identifiers to module paths (components are only
    collected from markup in dialect 3). ``dispatchers`` names the event
    dispatcher functions whose calls inside handlers mark custom events.
    """

    def __init__(
        self,
        root: Element,
        *,
        version: int = 3,
        imports: Mapping[str, ImportBinding] | None = None,
        dispatchers: set[str] | None = None,
    ) -> None:
        """Initialize the analyzer over a parsed markup tree."""
        self.root = root
        self.version = version
        self.imports = dict(imports or {})
        self.dispatchers = set(dispatchers or ())
        self.result = MarkupCandidates()

    def analyze(self) -> MarkupCandidates:
        """Collect candidates from every element of the tree."""
        self._visit(self.root)
        logger.debug(
            "Markup: %d component uses, %d events, %d slots, %d refs",
            len(self.result.components),
            len(self.result.events),
            len(self.result.slots),
            len(self.result.refs),
        )
        return self.result

    def _visit(self, parent: Element) -> None:
        pending: ParsedComment | None = None
        for child in parent.children:
            if isinstance(child, Comment):
                parsed = parse_comment(
                    child.text, SourceLocation(start=child.start, end=child.end)
                )
                if self.version >= 3 and parsed.has_keyword(COMPONENT_KEYWORD):
                    if self.result.component_comment is None:
                        self.result.component_comment = _component_comment(parsed)
                    pending = None
                    continue
                pending = parsed
            elif isinstance(child, Text):
                if child.text.strip():
                    pending = None
            else:
                self._element(child, pending)
                pending = None
                self._visit(child)

    def _element(self, element: Element, comment: ParsedComment | None) -> None:
        if self.version >= 3:
            self._component(element, comment)
        for attr in element.attributes:
            if attr.spread:
                continue
            if attr.directive == EVENT_DIRECTIVE:
                self._event(element, attr, comment)
            elif self._is_ref(attr):
                self._ref(element, attr, comment)
        if element.name == SLOT_TAG:
            self._slot(element, comment)

    def _component(self, element: Element, comment: ParsedComment | None) -> None:
        head = element.name.split(".", 1)[0]
        binding = self.imports.get(head)
        if binding is None:
            return
        if comment is None:
            comment = binding.comment
        start = element.start + 1
        self.result.components.append(
            SvelteComponentItem(
                name=head,
                value=binding.path,
                loc=SourceLocation(start=start, end=start + len(head)),
                **comment_fields(comment),
            )
        )

    def _event(
        self, element: Element, attr: Attribute, comment: ParsedComment | None
    ) -> None:
        if not attr.has_value:
            start = attr.start + len(EVENT_DIRECTIVE) + 1
            self.result.events.append(
                SvelteEventItem(
                    name=attr.target,
                    parent=element.name,
                    loc=SourceLocation(start=start, end=start + len(attr.target)),
                    **comment_fields(comment),
                )
            )
            return

        if attr.expression is not None:
            handler, offset = attr.expression, attr.expression_start
        elif self.version < 3 and attr.value is not None:
            handler, offset = attr.value, attr.value_start
        else:
            return
        for name, loc in self._dispatched_events(handler, offset):
            self.result.events.append(
                SvelteEventItem(name=name, loc=loc, **comment_fields(comment))
            )

    def _is_dispatch(self, source: ScriptSource, callee: Node | None) -> bool:
        if callee is None:
            return False
        if self.version >= 3:
            return source.text_of(callee) in self.dispatchers
        if callee.type == "member_expression":
            callee = callee.child_by_field_name("property")
        return source.text_of(callee) == V2_FIRE

    def _dispatched_events(
        self, handler: str, offset: int
    ) -> list[tuple[str, SourceLocation]]:
        """Return the event names a handler expression dispatches."""
        names = self.dispatchers if self.version >= 3 else {V2_FIRE}
        if not any(name in handler for name in names):
            return []
        source, expression = parse_expression(handler, offset)
        found: list[tuple[str, SourceLocation]] = []
        for node in walk(expression):
            if node.type != "call_expression":
                continue
            if not self._is_dispatch(source, node.child_by_field_name("function")):
                continue
            argument = first_string_argument(source, node)
            if argument is None:
                logger.debug("Handler dispatches a dynamic event name, skipping")
                continue
            name, name_node = argument
            found.append((name, source.loc_of(name_node)))
        return found

    def _is_ref(self, attr: Attribute) -> bool:
        if self.version >= 3:
            return attr.name == V3_REF_ATTRIBUTE
        return attr.directive == V2_REF_DIRECTIVE

    def _ref(
        self, element: Element, attr: Attribute, comment: ParsedComment | None
    ) -> None:
        if self.version >= 3:
            if attr.expression is None or not attr.expression.strip():
                logger.warning("bind:this on <%s> has no target", element.name)
                return
            name = attr.expression.strip()
            start = attr.expression_start + attr.expression.index(name)
        else:
            name = attr.target
            start = attr.start + len(V2_REF_DIRECTIVE) + 1
        self.result.refs.append(
            SvelteRefItem(
                name=name,
                parent=element.name,
                loc=SourceLocation(start=start, end=start + len(name)),
                **comment_fields(comment),
            )
        )

    def _slot(self, element: Element, comment: ParsedComment | None) -> None:
        name_attr = element.attribute("name")
        name = DEFAULT_SLOT_NAME
        if name_attr is not None and name_attr.value:
            name = name_attr.value.strip() or DEFAULT_SLOT_NAME
        elif name_attr is not None and name_attr.expression is not None:
            logger.warning("Slot name bound to an expression, using '%s'", name)

        parameters: list[SvelteSlotParameter] | None = None
        if self.version >= 3:
            parameters = [
                self._slot_parameter(attr)
                for attr in element.attributes
                if attr.name != "name" and not attr.spread and attr.directive is None
            ]
        self.result.slots.append(
            SvelteSlotItem(
                name=name,
                loc=_tag_loc(element),
                parameters=tuple(parameters) if parameters else None,
                **comment_fields(comment),
            )
        )

    def _slot_parameter(self, attr: Attribute) -> SvelteSlotParameter:
        start = attr.start
        if attr.shorthand and attr.expression is not None:
            start = attr.expression_start + attr.expression.index(attr.name)
        return SvelteSlotParameter(
            name=attr.name,
            loc=SourceLocation(start=start, end=start + len(attr.name)),
        )


def analyze_markup(
    root: Element,
    *,
    version: int = 3,
    imports: Mapping[str, ImportBinding] | None = None,
    dispatchers: set[str] | None = None,
) -> MarkupCandidates:
    """Collect the markup candidates of a parsed component document."""
    return MarkupAnalyzer(
        root, version=version, imports=imports, dispatchers=dispatchers
    ).analyze()
