"""Logic for resolving JSDoc/TypeScript annotations and literals into JSDocType."""

import logging
import re

from tree_sitter import Node

from sveltedoc.errors import UnresolvedTypeWarning
from sveltedoc.models import NO_VALUE, JSDocType
from sveltedoc.script_parser import ScriptSource, string_value, unescape_js

logger = logging.getLogger(__name__)

# Union nesting deeper than this resolves to ``any``.
MAX_TYPE_DEPTH = 4

ANY_TYPE = JSDocType(kind="type", text="any", type="any")

NUMBER_RE = re.compile(
    r"^[+-]?(?:0[xX][0-9a-fA-F_]+|0[oO][0-7_]+|0[bB][01_]+|"
    r"(?:\d[\d_]*\.?[\d_]*|\.\d[\d_]*)(?:[eE][+-]?\d+)?)n?$"
)
QUOTED_RE = re.compile(r"""^(['"`])(.*)\1$""", re.DOTALL)

_OPEN = "([{<"
_CLOSE = ")]}>"

_FUNCTION_NODES = {
    "arrow_function",
    "function",
    "function_expression",
    "generator_function",
    "class",
}


def const_type(value: object) -> JSDocType:
    """Build a const type for a literal Python value."""
    if value is None:
        name = "null"
    elif isinstance(value, bool):
        name = "boolean"
    elif isinstance(value, (int, float)):
        name = "number"
    else:
        name = "string"
    return JSDocType(kind="const", text=name, type=name, value=value)


def parse_number(text: str) -> int | float:
    """Parse a JavaScript numeric literal."""
    clean = text.replace("_", "")
    if clean.endswith("n"):
        clean = clean[:-1]
    sign = -1 if clean.startswith("-") else 1
    clean = clean.lstrip("+-")
    lower = clean.lower()
    if lower.startswith("0x"):
        return sign * int(clean[2:], 16)
    if lower.startswith("0o"):
        return sign * int(clean[2:], 8)
    if lower.startswith("0b"):
        return sign * int(clean[2:], 2)
    if re.fullmatch(r"0[0-7]+", clean):
        return sign * int(clean, 8)
    if re.fullmatch(r"\d+", clean):
        return sign * int(clean)
    return sign * float(clean)


def split_top_level(text: str, sep: str = "|") -> list[str]:
    """Split a type expression on ``sep`` outside brackets and quotes."""
    parts: list[str] = []
    depth = 0
    quote: str | None = None
    current: list[str] = []
    prev = ""
    for ch in text:
        if quote:
            current.append(ch)
            if ch == quote and prev != "\\":
                quote = None
        elif ch in "'\"`":
            quote = ch
            current.append(ch)
        elif ch in _OPEN:
            depth += 1
            current.append(ch)
        elif ch in _CLOSE and not (ch == ">" and prev == "="):
            depth = max(0, depth - 1)
            current.append(ch)
        elif ch == sep and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
        prev = ch
    parts.append("".join(current))
    return [p.strip() for p in parts]


def _is_wrapped(text: str, opener: str, closer: str) -> bool:
    """Check that the outer opener and closer enclose the whole text."""
    if not (text.startswith(opener) and text.endswith(closer)):
        return False
    depth = 0
    for index, ch in enumerate(text):
        if ch == opener:
            depth += 1
        elif ch == closer:
            depth -= 1
            if depth == 0 and index != len(text) - 1:
                return False
    return True


def normalize_annotation(text: str) -> str:
    """Strip JSDoc braces or a TypeScript colon around a type expression."""
    text = text.strip()
    if text.startswith(":"):
        return text[1:].strip()
    if _is_wrapped(text, "{", "}"):
        text = text[1:-1].strip()
    return text


def _literal_alternative(text: str) -> JSDocType | None:
    quoted = QUOTED_RE.match(text)
    if quoted:
        return const_type(unescape_js(quoted.group(2)))
    if NUMBER_RE.match(text):
        return const_type(parse_number(text))
    if text in ("true", "false"):
        return const_type(text == "true")
    if text == "null":
        return const_type(None)
    return None


def parse_type_expression(text: str | None, depth: int = 0) -> JSDocType | None:
    """Resolve a JSDoc ``{type}`` or TypeScript annotation text.

    Returns None when the text is empty so callers can fall through to
    other sources of type information.
    """
    if text is None:
        return None
    text = normalize_annotation(text)
    if not text:
        return None
    if depth > MAX_TYPE_DEPTH:
        logger.debug("Type nesting deeper than %d in '%s'", MAX_TYPE_DEPTH, text)
        return ANY_TYPE

    alternatives = [a for a in split_top_level(text) if a]
    if len(alternatives) > 1:
        resolved = tuple(
            parse_type_expression(a, depth + 1) or ANY_TYPE for a in alternatives
        )
        return JSDocType(kind="union", text=text, type=resolved)
    if not alternatives:
        return None
    text = alternatives[0]

    if _is_wrapped(text, "(", ")"):
        return parse_type_expression(text[1:-1], depth + 1)

    literal = _literal_alternative(text)
    if literal is not None:
        return literal
    if text in ("*", "any", "?"):
        return ANY_TYPE
    return JSDocType(kind="type", text=text, type=text)


def literal_type(source: ScriptSource, node: Node | None) -> JSDocType | None:
    """Infer a type from an initializer or default-value node.

    Literals yield ``const`` types carrying their value; other recognised
    shapes yield a plain type name; anything else returns None.
    """
    if node is None:
        return None
    kind = node.type
    if kind == "parenthesized_expression" and node.named_children:
        return literal_type(source, node.named_children[0])
    if kind == "number":
        return const_type(parse_number(source.text_of(node)))
    if kind in ("string", "template_string"):
        value = string_value(source, node)
        if value is None:
            return JSDocType(kind="type", text="string", type="string")
        return const_type(value)
    if kind in ("true", "false"):
        return const_type(kind == "true")
    if kind == "null":
        return const_type(None)
    if kind == "undefined":
        return JSDocType(kind="type", text="undefined", type="undefined")
    if kind == "unary_expression":
        operator = node.child_by_field_name("operator")
        argument = node.child_by_field_name("argument")
        op = source.text_of(operator)
        if argument is not None and argument.type == "number" and op in ("+", "-"):
            value = parse_number(source.text_of(argument))
            return const_type(-value if op == "-" else value)
        if op == "!":
            return JSDocType(kind="type", text="boolean", type="boolean")
        return None
    if kind == "array":
        return JSDocType(kind="type", text="array", type="array")
    if kind == "object":
        return JSDocType(kind="type", text="object", type="object")
    if kind == "regex":
        return JSDocType(kind="type", text="RegExp", type="RegExp")
    if kind in _FUNCTION_NODES:
        return JSDocType(kind="type", text="function", type="function")
    if kind == "new_expression":
        constructor = node.child_by_field_name("constructor")
        if constructor is not None and constructor.type in (
            "identifier",
            "member_expression",
        ):
            name = source.text_of(constructor)
            return JSDocType(kind="type", text=name, type=name)
    return None


def literal_value(source: ScriptSource, node: Node | None) -> object:
    """Return the literal value of an initializer, or NO_VALUE."""
    resolved = literal_type(source, node)
    if resolved is not None and resolved.kind == "const":
        return resolved.value
    return NO_VALUE


def resolve_type(
    source: ScriptSource | None,
    annotation: str | None = None,
    initializer: Node | None = None,
    *,
    subject: str = "item",
    warnings: list[UnresolvedTypeWarning] | None = None,
) -> JSDocType:
    """Resolve the type of an item from its annotation and/or initializer.

    The annotation is authoritative, including an explicit ``*`` or ``any``;
    when it names the same primitive as the literal initializer, the const
    form is kept so the value is not lost.
    Never raises: unknown constructs resolve to ``any``.
    """
    declared = parse_type_expression(annotation)
    inferred = literal_type(source, initializer) if source is not None else None

    if declared is not None:
        if (
            inferred is not None
            and inferred.kind == "const"
            and declared.kind == "type"
            and declared.type == inferred.type
        ):
            return inferred
        return declared
    if inferred is not None:
        return inferred

    if warnings is not None:
        text = source.text_of(initializer) if source and initializer else annotation
        warnings.append(UnresolvedTypeWarning(subject, text))
    logger.debug("Falling back to 'any' for %s", subject)
    return ANY_TYPE
