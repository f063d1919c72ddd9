"""Logic for parsing the script region into a tree-sitter syntax tree."""

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass

import tree_sitter_javascript as tsjs
import tree_sitter_typescript as tsts
from tree_sitter import Language, Node, Parser, Tree

from sveltedoc.errors import ParseError
from sveltedoc.models import SourceLocation

logger = logging.getLogger(__name__)

JS_LANGUAGE = Language(tsjs.language())
TS_LANGUAGE = Language(tsts.language_typescript())

TS_LANGS = {"ts", "typescript"}

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}
_ESCAPE_RE = re.compile(
    r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])"
)


def _decode_escape(match: re.Match) -> str:
    seq = match.group(1)
    if seq.startswith("u{"):
        return chr(int(seq[2:-1], 16))
    if seq[0] in "ux" and len(seq) > 1:
        return chr(int(seq[1:], 16))
    if seq in ("\n", "\r\n", "\r"):
        return ""
    return _ESCAPES.get(seq, seq)


def unescape_js(raw: str) -> str:
    """Decode JavaScript escape sequences of a string body."""
    return _ESCAPE_RE.sub(_decode_escape, raw)


@dataclass
class ScriptSource:
    """A parsed script region and the mapping back to document offsets."""

    text: str
    offset: int
    tree: Tree
    is_typescript: bool = False

    def __post_init__(self) -> None:
        """Build the byte to character offset table for non-ASCII scripts."""
        self.data = self.text.encode("utf-8")
        self._char_at: list[int] | None = None
        if len(self.data) != len(self.text):
            table = []
            for index, ch in enumerate(self.text):
                table.extend([index] * len(ch.encode("utf-8")))
            table.append(len(self.text))
            self._char_at = table

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def char_offset(self, byte_offset: int) -> int:
        """Convert a byte offset of the tree to a document character offset."""
        if self._char_at is None:
            return self.offset + byte_offset
        return self.offset + self._char_at[byte_offset]

    def text_of(self, node: Node | None) -> str:
        if node is None:
            return ""
        return self.data[node.start_byte : node.end_byte].decode("utf-8")

    def loc_of(self, node: Node) -> SourceLocation:
        return self.loc_of_bytes(node.start_byte, node.end_byte)

    def loc_of_bytes(self, start_byte: int, end_byte: int) -> SourceLocation:
        return SourceLocation(
            start=self.char_offset(start_byte),
            end=self.char_offset(end_byte),
        )


def walk(node: Node) -> Iterator[Node]:
    """Yield a node and all of its descendants in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def _first_error(node: Node) -> Node | None:
    for current in walk(node):
        if current.type == "ERROR" or current.is_missing:
            return current
    return None


def parse_script(text: str, offset: int = 0, lang: str | None = None) -> ScriptSource:
    """Parse script text, raising ParseError on malformed syntax."""
    is_typescript = (lang or "").lower() in TS_LANGS
    parser = Parser(TS_LANGUAGE if is_typescript else JS_LANGUAGE)
    tree = parser.parse(text.encode("utf-8"))
    source = ScriptSource(
        text=text, offset=offset, tree=tree, is_typescript=is_typescript
    )
    if tree.root_node.has_error:
        bad = _first_error(tree.root_node) or tree.root_node
        loc = source.loc_of(bad)
        snippet = source.text_of(bad).strip().splitlines()
        near = f" near '{snippet[0][:40]}'" if snippet else ""
        msg = f"Malformed script syntax{near}"
        raise ParseError(msg, loc.start, loc.end)
    logger.debug("Parsed script region at offset %d (%d chars)", offset, len(text))
    return source


def parse_expression(
    text: str, offset: int = 0, lang: str | None = None
) -> tuple[ScriptSource, Node]:
    """Parse a standalone expression such as a markup attribute value.

    The expression is wrapped in parentheses so object literals parse as
    expressions; offsets still map back onto ``text``.
    """
    source = parse_script(f"({text}\n)", offset - 1, lang)
    statement = source.root.named_children[0]
    expression = statement.named_children[0]
    if expression.type == "parenthesized_expression" and expression.named_children:
        expression = expression.named_children[0]
    return source, expression


def string_value(source: ScriptSource, node: Node) -> str | None:
    """Return the value of a string or substitution-free template literal."""
    if node.type == "string":
        return unescape_js(source.text_of(node)[1:-1])
    if node.type == "template_string":
        if any(child.type == "template_substitution" for child in node.children):
            return None
        return unescape_js(source.text_of(node)[1:-1])
    return None
