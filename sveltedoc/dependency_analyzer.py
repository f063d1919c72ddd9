"""Logic for computing the read-set of derived (computed) properties."""

import logging
from collections.abc import Iterable

from tree_sitter import Node

from sveltedoc.script_helpers import (
    FUNCTION_NODES,
    function_parameters,
    pattern_names,
)
from sveltedoc.script_parser import ScriptSource

logger = logging.getLogger(__name__)

STORE_PREFIX = "$"
REFERENCE_NODES = {"identifier", "shorthand_property_identifier"}
DECLARATION_NODES = {"lexical_declaration", "variable_declaration"}
NAMED_DECLARATION_NODES = {
    "function_declaration",
    "generator_function_declaration",
    "class_declaration",
}


class DependencyAnalyzer:
    """Collects the data/computed names an expression statically reads."""

    def __init__(self, source: ScriptSource, known_names: Iterable[str]) -> None:
        """Initialize with the script and every data/computed name."""
        self.source = source
        self.known = set(known_names)

    def analyze(self, expression: Node | None, self_name: str) -> tuple[str, ...]:
        """Return referenced names in first-use order, without duplicates.

        Locally bound names (parameters, block declarations) shadow outer
        properties, and the property's own name is left out.
        """
        if expression is None:
            return ()
        found: list[str] = []
        self._visit(expression, frozenset(), found)
        if self_name in found:
            logger.debug("Dropping self-reference of computed '%s'", self_name)
            found.remove(self_name)
        return tuple(found)

    def _resolve(self, name: str) -> str | None:
        if name in self.known:
            return name
        if name.startswith(STORE_PREFIX) and name[1:] in self.known:
            return name[1:]
        return None

    def _declared_in(self, block: Node) -> set[str]:
        """Names a block declares directly, including hoisted functions."""
        names: set[str] = set()
        for statement in block.named_children:
            if statement.type in DECLARATION_NODES:
                names.update(self._declared_in_statement(statement))
            elif statement.type in NAMED_DECLARATION_NODES:
                name = statement.child_by_field_name("name")
                if name is not None:
                    names.add(self.source.text_of(name))
        return names

    def _declared_in_statement(self, statement: Node) -> set[str]:
        names: set[str] = set()
        for declarator in statement.named_children:
            if declarator.type == "variable_declarator":
                names.update(self._bound(declarator.child_by_field_name("name")))
        return names

    def _bound(self, pattern: Node | None) -> set[str]:
        return {self.source.text_of(n) for n in pattern_names(self.source, pattern)}

    def _visit(self, node: Node, bound: frozenset[str], found: list[str]) -> None:
        kind = node.type
        if kind in REFERENCE_NODES:
            name = self.source.text_of(node)
            resolved = self._resolve(name)
            if resolved and name not in bound and resolved not in found:
                found.append(resolved)
            return

        if kind in FUNCTION_NODES or kind == "method_definition":
            params = function_parameters(self.source, node)
            inner = set(bound)
            for param in params:
                inner.update(self._bound(param))
                default = param.child_by_field_name(
                    "right"
                ) or param.child_by_field_name("value")
                if default is not None:
                    self._visit(default, bound, found)
            name = node.child_by_field_name("name")
            if name is not None and kind != "method_definition":
                inner.add(self.source.text_of(name))
            body = node.child_by_field_name("body")
            if body is not None:
                self._visit(body, frozenset(inner), found)
            return

        if kind == "statement_block":
            bound = bound | self._declared_in(node)
        elif kind == "for_statement":
            initializer = node.child_by_field_name("initializer")
            if initializer is not None and initializer.type in DECLARATION_NODES:
                bound = bound | self._declared_in_statement(initializer)
        elif kind == "for_in_statement" and node.child_by_field_name("kind"):
            bound = bound | self._bound(node.child_by_field_name("left"))
        elif kind == "catch_clause":
            bound = bound | self._bound(node.child_by_field_name("parameter"))
        elif kind == "pair":
            key = node.child_by_field_name("key")
            value = node.child_by_field_name("value")
            if key is not None and key.type == "computed_property_name":
                self._visit(key, bound, found)
            if value is not None:
                self._visit(value, bound, found)
            return

        for child in node.named_children:
            self._visit(child, bound, found)


def analyze_dependencies(
    source: ScriptSource,
    expression: Node | None,
    known_names: Iterable[str],
    self_name: str,
) -> tuple[str, ...]:
    """Compute the dependency list of one computed property."""
    return DependencyAnalyzer(source, known_names).analyze(expression, self_name)
