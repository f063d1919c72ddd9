"""Helpers shared by the dialect classifiers for reading script syntax."""

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass

from tree_sitter import Node

from sveltedoc.comment_index import CommentIndex
from sveltedoc.comment_parser import ParsedComment
from sveltedoc.declarations import CallableBucket, ImportBinding
from sveltedoc.errors import UnresolvedTypeWarning
from sveltedoc.models import JSDocType, SvelteMethodArgumentItem
from sveltedoc.script_parser import ScriptSource, string_value, walk
from sveltedoc.type_resolver import resolve_type

logger = logging.getLogger(__name__)

FUNCTION_NODES = {
    "arrow_function",
    "function",
    "function_expression",
    "generator_function",
}
STATEMENT_PARENTS = {"program", "statement_block", "switch_case", "switch_default"}
PROPERTY_NAME_NODES = {
    "property_identifier",
    "identifier",
    "private_property_identifier",
}
PARAM_NAME_RE = re.compile(r"^(\[[^\]]*\]|[^\s]+)\s*(?:-\s+)?(.*)$", re.DOTALL)

BUCKET_KEYWORDS: dict[str, CallableBucket] = {
    "method": "methods",
    "action": "actions",
    "helper": "helpers",
    "transition": "transitions",
}


@dataclass(frozen=True)
class ParamDoc:
    """A parsed ``@param`` keyword."""

    name: str
    type_text: str | None = None
    description: str | None = None
    optional: bool = False
    default: str | None = None
    repeated: bool = False


def leading_braced(text: str) -> tuple[str | None, str]:
    """Split a ``{type} rest`` keyword description into its two parts."""
    text = text.strip()
    if not text.startswith("{"):
        return None, text
    depth = 0
    for index, ch in enumerate(text):
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[1:index].strip(), text[index + 1 :].strip()
    return None, text


def parse_param_keyword(description: str) -> ParamDoc | None:
    """Parse ``{type} [name=default] - description`` from a @param keyword."""
    type_text, rest = leading_braced(description)
    match = PARAM_NAME_RE.match(rest)
    if not match:
        return None
    token, desc = match.group(1), match.group(2).strip()
    optional = False
    default = None
    repeated = False
    if token.startswith("["):
        optional = True
        token = token[1:-1].strip()
        if "=" in token:
            token, default = (part.strip() for part in token.split("=", 1))
    if type_text:
        if type_text.startswith("..."):
            repeated = True
            type_text = type_text[3:].strip()
        if type_text.endswith("="):
            optional = True
            type_text = type_text[:-1].strip()
    if not token:
        return None
    return ParamDoc(
        name=token,
        type_text=type_text or None,
        description=desc or None,
        optional=optional,
        default=default,
        repeated=repeated,
    )


def type_keyword_text(comment: ParsedComment | None) -> str | None:
    """Return the type expression of an ``@type {…}`` keyword."""
    if comment is None:
        return None
    keyword = comment.first_keyword("type")
    if keyword is None:
        return None
    type_text, _ = leading_braced(keyword.description)
    return type_text


def callable_bucket(
    comment: ParsedComment | None, default: CallableBucket = "methods"
) -> CallableBucket:
    """Select the callable list from marker keywords such as ``@action``."""
    if comment is not None:
        for kw in comment.keywords:
            if kw.name in BUCKET_KEYWORDS:
                return BUCKET_KEYWORDS[kw.name]
    return default


def is_function(node: Node | None) -> bool:
    return node is not None and node.type in FUNCTION_NODES


def unwrap_parens(node: Node | None) -> Node | None:
    while node is not None and node.type == "parenthesized_expression":
        inner = node.named_children
        node = inner[0] if inner else None
    return node


def enclosing_statement(node: Node) -> Node:
    """Return the statement that contains a node."""
    current = node
    while current.parent is not None and current.parent.type not in STATEMENT_PARENTS:
        current = current.parent
    return current


def property_key(source: ScriptSource, node: Node | None) -> str | None:
    """Return the key text of an object property name node."""
    if node is None:
        return None
    if node.type == "string":
        return string_value(source, node)
    if node.type in PROPERTY_NAME_NODES:
        return source.text_of(node)
    return None


def object_entries(
    source: ScriptSource, obj: Node
) -> Iterator[tuple[str, Node, Node | None]]:
    """Yield ``(key, entry_node, value_node)`` for the entries of an object literal.

    Method definitions yield the method node itself as the value.
    """
    for entry in obj.named_children:
        if entry.type == "pair":
            key = property_key(source, entry.child_by_field_name("key"))
            if key is not None:
                yield key, entry, entry.child_by_field_name("value")
        elif entry.type == "method_definition":
            key = property_key(source, entry.child_by_field_name("name"))
            if key is not None:
                yield key, entry, entry
        elif entry.type == "shorthand_property_identifier":
            yield source.text_of(entry), entry, None


def pattern_names(source: ScriptSource, node: Node | None) -> list[Node]:
    """Return the identifier nodes bound by a declaration pattern."""
    if node is None:
        return []
    kind = node.type
    if kind in ("identifier", "shorthand_property_identifier_pattern"):
        return [node]
    if kind == "assignment_pattern":
        return pattern_names(source, node.child_by_field_name("left"))
    if kind == "object_assignment_pattern":
        return pattern_names(source, node.child_by_field_name("left"))
    if kind == "pair_pattern":
        return pattern_names(source, node.child_by_field_name("value"))
    if kind in ("rest_pattern", "object_pattern", "array_pattern"):
        names: list[Node] = []
        for child in node.named_children:
            names.extend(pattern_names(source, child))
        return names
    if kind in ("required_parameter", "optional_parameter"):
        return pattern_names(source, node.child_by_field_name("pattern"))
    return []


def collect_imports(
    source: ScriptSource, index: CommentIndex
) -> dict[str, ImportBinding]:
    """Map each imported local identifier to the module path it comes from."""
    imports: dict[str, ImportBinding] = {}
    for statement in source.root.named_children:
        if statement.type != "import_statement":
            continue
        path = string_value(source, statement.child_by_field_name("source")) or ""
        comment = index.peek(statement)
        for node in walk(statement):
            name_node: Node | None = None
            if node.type == "import_clause":
                for child in node.named_children:
                    if child.type == "identifier":
                        name_node = child
            elif node.type == "import_specifier":
                name_node = node.child_by_field_name(
                    "alias"
                ) or node.child_by_field_name("name")
            elif node.type == "namespace_import":
                ids = [c for c in node.named_children if c.type == "identifier"]
                name_node = ids[0] if ids else None
            if name_node is not None:
                name = source.text_of(name_node)
                imports[name] = ImportBinding(
                    name=name, path=path, loc=source.loc_of(name_node), comment=comment
                )
    return imports


def _param_parts(node: Node) -> tuple[Node | None, Node | None, bool, bool, bool]:
    """Return ``(pattern, default, typed, optional, rest)`` of a parameter node."""
    kind = node.type
    if kind == "assignment_pattern":
        left = node.child_by_field_name("left")
        return left, node.child_by_field_name("right"), False, True, False
    if kind == "rest_pattern":
        inner = node.named_children
        return (inner[0] if inner else None), None, False, False, True
    if kind in ("required_parameter", "optional_parameter"):
        pattern = node.child_by_field_name("pattern")
        default = node.child_by_field_name("value")
        rest = pattern is not None and pattern.type == "rest_pattern"
        if rest and pattern is not None and pattern.named_children:
            pattern = pattern.named_children[0]
        optional = kind == "optional_parameter" or default is not None
        return pattern, default, True, optional, rest
    return node, None, False, False, False


def _ts_annotation(source: ScriptSource, node: Node) -> str | None:
    annotation = node.child_by_field_name("type")
    return source.text_of(annotation) if annotation is not None else None


def function_parameters(source: ScriptSource, fn: Node) -> list[Node]:
    """Return the parameter nodes of a function, method or arrow function."""
    single = fn.child_by_field_name("parameter")
    if single is not None:
        return [single]
    params = fn.child_by_field_name("parameters")
    if params is None:
        return []
    return [p for p in params.named_children if p.type != "comment"]


def build_arguments(
    source: ScriptSource,
    fn: Node,
    comment: ParsedComment | None,
    *,
    subject: str,
    warnings: list[UnresolvedTypeWarning],
) -> tuple[SvelteMethodArgumentItem, ...]:
    """Convert the parameter list of a callable into argument items."""
    docs: dict[str, ParamDoc] = {}
    if comment is not None:
        for kw in comment.keywords_named("param"):
            doc = parse_param_keyword(kw.description)
            if doc is not None and "." not in doc.name:
                docs.setdefault(doc.name, doc)

    params = function_parameters(source, fn)
    args: list[SvelteMethodArgumentItem] = []
    for position, param in enumerate(params):
        pattern, default_node, typed, optional, rest = _param_parts(param)
        name = source.text_of(pattern) if pattern is not None else source.text_of(param)
        doc = docs.get(name)
        annotation = doc.type_text if doc and doc.type_text else None
        if annotation is None and typed:
            annotation = _ts_annotation(source, param)
        arg_type: JSDocType = resolve_type(
            source,
            annotation,
            default_node,
            subject=f"parameter '{name}' of {subject}",
            warnings=warnings,
        )

        is_last = position == len(params) - 1
        repeated = rest or bool(doc and doc.repeated and is_last)
        default = source.text_of(default_node) if default_node is not None else None
        if default is None and doc is not None:
            default = doc.default
        optional = optional or bool(doc and doc.optional)

        args.append(
            SvelteMethodArgumentItem(
                name=name,
                type=arg_type,
                repeated=True if repeated else None,
                optional=True if optional else None,
                default=default,
                description=doc.description if doc else None,
            )
        )
        if doc is not None and doc.repeated and not is_last:
            logger.debug("Ignoring repetition of non-trailing parameter '%s'", name)
    return tuple(args)


def first_string_argument(source: ScriptSource, call: Node) -> tuple[str, Node] | None:
    """Return the value and node of a call's first argument when it is a string."""
    arguments = call.child_by_field_name("arguments")
    if arguments is None or not arguments.named_children:
        return None
    first = arguments.named_children[0]
    value = string_value(source, first)
    if value is None:
        return None
    return value, first
