"""Declaration classifier for the Svelte 3 script dialect.

Top-level ``let``/``var`` bindings are model properties, ``$:`` reactive
assignments are computed properties, exported functions are callables, and
calls to an event dispatcher created by ``createEventDispatcher()`` are custom
events.
"""

import logging

from tree_sitter import Node

from sveltedoc.comment_index import CommentIndex
from sveltedoc.comment_parser import ParsedComment
from sveltedoc.declarations import (
    CallableDecl,
    ComputedDecl,
    DataDecl,
    EventDecl,
    ScriptDeclarations,
)
from sveltedoc.script_helpers import (
    build_arguments,
    callable_bucket,
    collect_imports,
    enclosing_statement,
    first_string_argument,
    is_function,
    pattern_names,
    type_keyword_text,
    unwrap_parens,
)
from sveltedoc.script_parser import ScriptSource, walk
from sveltedoc.type_resolver import literal_value, resolve_type

logger = logging.getLogger(__name__)

DISPATCHER_FACTORY = "createEventDispatcher"
REACTIVE_LABEL = "$"


class ScriptClassifierV3:
    """Classifies module-level statements of a Svelte 3 instance script."""

    def __init__(self, source: ScriptSource) -> None:
        """Initialize the classifier over a parsed script."""
        self.source = source
        self.comments = CommentIndex(source)
        self.result = ScriptDeclarations(source=source)

    def classify(self) -> ScriptDeclarations:
        """Walk the top-level statements in source order."""
        self.result.imports = collect_imports(self.source, self.comments)
        reactive_targets: dict[str, ComputedDecl] = {}

        for statement in self.source.root.named_children:
            kind = statement.type
            if kind == "export_statement":
                self._classify_export(statement)
            elif kind in ("lexical_declaration", "variable_declaration"):
                self._classify_binding(statement, statement, exported=False)
            elif kind == "labeled_statement":
                computed = self._classify_reactive(statement)
                if computed is not None:
                    reactive_targets.setdefault(computed.name, computed)

        self._absorb_reactive_bindings(reactive_targets)
        self._collect_events()
        return self.result

    def _classify_export(self, statement: Node) -> None:
        declaration = statement.child_by_field_name("declaration")
        clause = next(
            (c for c in statement.named_children if c.type == "export_clause"), None
        )
        if clause is not None and statement.child_by_field_name("source") is None:
            self._collect_aliases(clause)
            return
        if declaration is None:
            logger.debug(
                "Skipping export without declaration: %s",
                self.source.text_of(statement)[:40],
            )
            return
        if declaration.type in (
            "function_declaration",
            "generator_function_declaration",
        ):
            comment = self.comments.take(statement)
            name_node = declaration.child_by_field_name("name")
            self._add_callable(name_node, declaration, comment)
        elif declaration.type in ("lexical_declaration", "variable_declaration"):
            self._classify_binding(statement, declaration, exported=True)

    def _collect_aliases(self, clause: Node) -> None:
        """Record renamed exports such as ``export { klass as cls }``."""
        for specifier in clause.named_children:
            if specifier.type != "export_specifier":
                continue
            local = specifier.child_by_field_name("name")
            alias = specifier.child_by_field_name("alias")
            if local is None or alias is None:
                continue
            name = self.source.text_of(local)
            public = self.source.text_of(alias).strip("'\"")
            self.result.aliases[name] = public
            logger.debug("'%s' is exported as '%s'", name, public)

    def _classify_binding(
        self, statement: Node, declaration: Node, *, exported: bool
    ) -> None:
        keyword = declaration.children[0].type if declaration.children else "let"
        if keyword == "const" and not exported:
            return

        comment = self.comments.take(statement)
        for declarator in declaration.named_children:
            if declarator.type != "variable_declarator":
                continue
            name_node = declarator.child_by_field_name("name")
            value = declarator.child_by_field_name("value")

            if keyword == "const" and is_function(unwrap_parens(value)):
                self._add_callable(name_node, unwrap_parens(value), comment)
                continue

            annotation = type_keyword_text(comment)
            if annotation is None:
                ts_type = declarator.child_by_field_name("type")
                if ts_type is not None:
                    annotation = self.source.text_of(ts_type)

            simple = name_node is not None and name_node.type == "identifier"
            for bound in pattern_names(self.source, name_node):
                name = self.source.text_of(bound)
                initializer = value if simple else None
                self.result.data.append(
                    DataDecl(
                        name=name,
                        loc=self.source.loc_of(bound),
                        comment=comment,
                        type=resolve_type(
                            self.source,
                            annotation,
                            initializer,
                            subject=f"data '{name}'",
                            warnings=self.result.warnings,
                        ),
                        value=literal_value(self.source, initializer),
                    )
                )

    def _add_callable(
        self,
        name_node: Node | None,
        fn: Node | None,
        comment: ParsedComment | None,
    ) -> None:
        if name_node is None or fn is None:
            return
        name = self.source.text_of(name_node)
        self.result.callables.append(
            CallableDecl(
                name=name,
                loc=self.source.loc_of(name_node),
                comment=comment,
                bucket=callable_bucket(comment),
                args=build_arguments(
                    self.source,
                    fn,
                    comment,
                    subject=f"'{name}'",
                    warnings=self.result.warnings,
                ),
            )
        )

    def _classify_reactive(self, statement: Node) -> ComputedDecl | None:
        label = statement.child_by_field_name("label")
        if label is None or self.source.text_of(label) != REACTIVE_LABEL:
            return None
        body = statement.child_by_field_name("body")
        expression = None
        if body is not None and body.type == "expression_statement":
            expression = unwrap_parens(body.named_children[0])
        if expression is None or expression.type != "assignment_expression":
            logger.debug("Reactive statement is not an assignment, ignoring")
            return None
        target = expression.child_by_field_name("left")
        if target is None or target.type != "identifier":
            logger.warning(
                "Ignoring reactive assignment to '%s'", self.source.text_of(target)
            )
            return None

        computed = ComputedDecl(
            name=self.source.text_of(target),
            loc=self.source.loc_of(target),
            comment=self.comments.take(statement),
            expression=expression.child_by_field_name("right"),
        )
        self.result.computed.append(computed)
        return computed

    def _absorb_reactive_bindings(self, targets: dict[str, ComputedDecl]) -> None:
        """Turn ``let x; $: x = ...`` pairs into a single computed property."""
        if not targets:
            return
        kept: list[DataDecl] = []
        for decl in self.result.data:
            computed = targets.get(decl.name)
            if computed is None:
                kept.append(decl)
                continue
            if computed.comment is None:
                computed.comment = decl.comment
            logger.debug("Data '%s' is reactively assigned", decl.name)
        self.result.data = kept

    def _collect_events(self) -> None:
        dispatchers = self.result.dispatchers
        for node in walk(self.source.root):
            if node.type != "variable_declarator":
                continue
            value = unwrap_parens(node.child_by_field_name("value"))
            name_node = node.child_by_field_name("name")
            if value is None or value.type != "call_expression" or name_node is None:
                continue
            callee = value.child_by_field_name("function")
            if self.source.text_of(callee) == DISPATCHER_FACTORY:
                dispatchers.add(self.source.text_of(name_node))
        if not dispatchers:
            return

        for node in walk(self.source.root):
            if node.type != "call_expression":
                continue
            callee = node.child_by_field_name("function")
            if callee is None or self.source.text_of(callee) not in dispatchers:
                continue
            found = first_string_argument(self.source, node)
            if found is None:
                logger.debug("Dispatch with a dynamic event name, skipping")
                continue
            name, name_node = found
            self.result.events.append(
                EventDecl(
                    name=name,
                    loc=self.source.loc_of(name_node),
                    comment=self.comments.take(enclosing_statement(node)),
                )
            )


def classify_v3(source: ScriptSource) -> ScriptDeclarations:
    """Classify the declarations of a Svelte 3 script."""
    return ScriptClassifierV3(source).classify()
