"""Declaration classifier for the Svelte 2 component options dialect.

Svelte 2 components describe themselves with an ``export default { ... }``
options object whose sections (``data``, ``computed``, ``methods``, ...) name
each documentation category explicitly.
"""

import logging
from collections.abc import Callable

from tree_sitter import Node

from sveltedoc.comment_index import CommentIndex
from sveltedoc.declarations import (
    CALLABLE_BUCKETS,
    CallableBucket,
    CallableDecl,
    ComponentDecl,
    ComputedDecl,
    DataDecl,
    EventDecl,
    ScriptDeclarations,
)
from sveltedoc.models import SourceLocation
from sveltedoc.script_helpers import (
    build_arguments,
    collect_imports,
    enclosing_statement,
    first_string_argument,
    function_parameters,
    is_function,
    object_entries,
    pattern_names,
    type_keyword_text,
    unwrap_parens,
)
from sveltedoc.script_parser import ScriptSource, string_value, walk
from sveltedoc.type_resolver import literal_value, resolve_type

logger = logging.getLogger(__name__)

FIRE_METHOD = "fire"

# Options that are valid Svelte 2 but carry nothing to document.
IGNORED_SECTIONS = {
    "oncreate",
    "onrender",
    "ondestroy",
    "onteardown",
    "onstate",
    "onupdate",
    "setup",
    "preload",
    "store",
    "tag",
    "props",
    "namespace",
    "immutable",
    "events",
    "animations",
}


class ScriptClassifierV2:
    """Classifies the sections of a Svelte 2 component options object."""

    def __init__(self, source: ScriptSource) -> None:
        """Initialize the classifier over a parsed script."""
        self.source = source
        self.comments = CommentIndex(source)
        self.result = ScriptDeclarations(source=source)

    def classify(self) -> ScriptDeclarations:
        """Locate the options object and classify each of its sections."""
        self.result.imports = collect_imports(self.source, self.comments)
        options = self._find_options()
        if options is not None:
            for key, entry, value in object_entries(self.source, options):
                self._classify_section(key, entry, value)
        else:
            logger.info("No 'export default' options object found in script")
        self._collect_events()
        return self.result

    def _find_options(self) -> Node | None:
        for statement in self.source.root.named_children:
            if statement.type != "export_statement":
                continue
            if not any(child.type == "default" for child in statement.children):
                continue
            value = unwrap_parens(statement.child_by_field_name("value"))
            if value is not None and value.type == "object":
                self.result.component_comment = self.comments.take(statement)
                return value
        return None

    def _classify_section(self, key: str, entry: Node, value: Node | None) -> None:
        # Section comments describe the section, not its first member.
        self.comments.take(entry)
        if key == "data":
            self._classify_data(value)
        elif key == "computed":
            self._for_object(value, self._add_computed)
        elif key == "components":
            self._for_object(value, self._add_component)
        elif key in CALLABLE_BUCKETS:
            bucket: CallableBucket = key  # type: ignore[assignment]
            self._for_object(
                value,
                lambda name, node, fn: self._add_callable(name, node, fn, bucket),
            )
        elif key in IGNORED_SECTIONS:
            logger.debug("Ignoring component option '%s'", key)
        else:
            logger.warning("Unrecognised component option '%s'", key)

    def _for_object(
        self,
        value: Node | None,
        handler: Callable[[str, Node, Node | None], None],
    ) -> None:
        value = unwrap_parens(value)
        if value is None or value.type != "object":
            logger.warning("Expected an object literal in component options")
            return
        for name, node, member in object_entries(self.source, value):
            handler(name, node, member)

    def _returned_object(self, fn: Node | None) -> Node | None:
        """Find the object literal a ``data`` function returns."""
        fn = unwrap_parens(fn)
        if fn is None:
            return None
        if fn.type == "object":
            return fn
        body = fn.child_by_field_name("body")
        body = unwrap_parens(body)
        if body is None:
            return None
        if body.type == "object":
            return body
        if body.type == "statement_block":
            for statement in body.named_children:
                if statement.type == "return_statement" and statement.named_children:
                    returned = unwrap_parens(statement.named_children[0])
                    if returned is not None and returned.type == "object":
                        return returned
        return None

    def _classify_data(self, value: Node | None) -> None:
        obj = self._returned_object(value)
        if obj is None:
            logger.warning("Component 'data' does not return an object literal")
            return
        for name, node, initializer in object_entries(self.source, obj):
            comment = self.comments.take(node)
            initializer = None if initializer is node else initializer
            self.result.data.append(
                DataDecl(
                    name=name,
                    loc=self._key_loc(node),
                    comment=comment,
                    type=resolve_type(
                        self.source,
                        type_keyword_text(comment),
                        initializer,
                        subject=f"data '{name}'",
                        warnings=self.result.warnings,
                    ),
                    value=literal_value(self.source, initializer),
                )
            )

    def _key_loc(self, node: Node) -> SourceLocation:
        key = node.child_by_field_name("key") or node.child_by_field_name("name")
        return self.source.loc_of(key if key is not None else node)

    def _add_computed(self, name: str, node: Node, fn: Node | None) -> None:
        comment = self.comments.take(node)
        fn = unwrap_parens(fn)
        dependencies: list[str] = []
        if fn is not None and (is_function(fn) or fn.type == "method_definition"):
            for param in function_parameters(self.source, fn):
                for bound in pattern_names(self.source, param):
                    dep = self.source.text_of(bound)
                    if dep != name and dep not in dependencies:
                        dependencies.append(dep)
        self.result.computed.append(
            ComputedDecl(
                name=name,
                loc=self._key_loc(node),
                comment=comment,
                dependencies=tuple(dependencies),
            )
        )

    def _add_component(self, name: str, node: Node, value: Node | None) -> None:
        comment = self.comments.take(node)
        path = ""
        value = unwrap_parens(value)
        if value is None:
            binding = self.result.imports.get(name)
            path = binding.path if binding else ""
        elif value.type == "identifier":
            binding = self.result.imports.get(self.source.text_of(value))
            path = binding.path if binding else self.source.text_of(value)
        else:
            path = string_value(self.source, value) or self.source.text_of(value)
        if comment is None:
            binding = self.result.imports.get(name)
            comment = binding.comment if binding else None
        self.result.components.append(
            ComponentDecl(
                name=name, loc=self._key_loc(node), comment=comment, value=path
            )
        )

    def _add_callable(
        self, name: str, node: Node, fn: Node | None, bucket: CallableBucket
    ) -> None:
        comment = self.comments.take(node)
        fn = unwrap_parens(fn)
        if fn is None or not (is_function(fn) or fn.type == "method_definition"):
            logger.warning("%s entry '%s' is not a function", bucket, name)
            return
        self.result.callables.append(
            CallableDecl(
                name=name,
                loc=self._key_loc(node),
                comment=comment,
                bucket=bucket,
                args=build_arguments(
                    self.source,
                    fn,
                    comment,
                    subject=f"'{name}'",
                    warnings=self.result.warnings,
                ),
            )
        )

    def _collect_events(self) -> None:
        """Collect ``this.fire('name')`` calls as custom events."""
        for node in walk(self.source.root):
            if node.type != "call_expression":
                continue
            callee = node.child_by_field_name("function")
            if callee is None or callee.type != "member_expression":
                continue
            prop = callee.child_by_field_name("property")
            if self.source.text_of(prop) != FIRE_METHOD:
                continue
            found = first_string_argument(self.source, node)
            if found is None:
                continue
            name, name_node = found
            self.result.events.append(
                EventDecl(
                    name=name,
                    loc=self.source.loc_of(name_node),
                    comment=self.comments.take(enclosing_statement(node)),
                )
            )


def classify_v2(source: ScriptSource) -> ScriptDeclarations:
    """Classify the declarations of a Svelte 2 script."""
    return ScriptClassifierV2(source).classify()
