"""Logic for parsing Svelte markup into an element tree."""

import re
from collections.abc import Iterator
from dataclasses import dataclass, field

from sveltedoc.errors import ParseError

TAG_NAME_RE = re.compile(r"[A-Za-z][\w:.-]*")
ATTR_NAME_RE = re.compile(r"[^\s=/>\"'{}]+")
UNQUOTED_VALUE_RE = re.compile(r"[^\s>\"'`=<]+")

VOID_ELEMENTS = {
    "area",
    "base",
    "br",
    "col",
    "command",
    "embed",
    "hr",
    "img",
    "input",
    "keygen",
    "link",
    "meta",
    "param",
    "source",
    "track",
    "wbr",
}

RAW_TEXT_ELEMENTS = {"script", "style"}


@dataclass
class Attribute:
    """One attribute or directive of a start tag.

    ``expression`` holds the JavaScript between braces when the whole value is a
    single ``{...}`` expression (or a ``{shorthand}`` attribute); ``value`` is
    the raw text between the quotes otherwise.
    """

    name: str
    start: int
    end: int
    value: str | None = None
    expression: str | None = None
    value_start: int = 0
    expression_start: int = 0
    spread: bool = False
    shorthand: bool = False

    @property
    def directive(self) -> str | None:
        """Return the directive prefix, e.g. ``on`` for ``on:click``."""
        if ":" not in self.name:
            return None
        return self.name.split(":", 1)[0]

    @property
    def target(self) -> str:
        """Return the directive target without modifiers, e.g. ``click``."""
        rest = self.name.split(":", 1)[-1]
        return rest.split("|", 1)[0]

    @property
    def has_value(self) -> bool:
        return self.value is not None or self.expression is not None


@dataclass
class Comment:
    """An HTML comment."""

    text: str
    start: int
    end: int


@dataclass
class Text:
    """Text, including mustache tags such as ``{#if}`` or ``{value}``."""

    text: str
    start: int
    end: int


@dataclass
class Element:
    """An element or component tag with its children."""

    name: str
    start: int
    end: int = 0
    tag_end: int = 0
    attributes: list[Attribute] = field(default_factory=list)
    children: list["Element | Comment | Text"] = field(default_factory=list)

    def attribute(self, name: str) -> Attribute | None:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        return None

    def iter_elements(self) -> Iterator["Element"]:
        """Yield every descendant element in document order."""
        for child in self.children:
            if isinstance(child, Element):
                yield child
                yield from child.iter_elements()


def skip_expression(text: str, pos: int) -> int:
    """Return the offset just past the ``}`` matching the ``{`` at ``pos``.

    String, template literal and comment contents are skipped so braces inside
    them do not count.
    """
    depth = 0
    i = pos
    n = len(text)
    while i < n:
        ch = text[i]
        if ch in "'\"":
            i = _skip_string(text, i)
            continue
        if ch == "`":
            i = _skip_template(text, i)
            continue
        if text.startswith("//", i):
            newline = text.find("\n", i)
            i = n if newline == -1 else newline
            continue
        if text.startswith("/*", i):
            close = text.find("*/", i + 2)
            if close == -1:
                break
            i = close + 2
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    msg = "Unterminated expression in markup"
    raise ParseError(msg, pos, n)


def _skip_string(text: str, pos: int) -> int:
    quote = text[pos]
    i = pos + 1
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == quote:
            return i + 1
        if text[i] == "\n":
            break
        i += 1
    msg = "Unterminated string in markup expression"
    raise ParseError(msg, pos, i)


def _skip_template(text: str, pos: int) -> int:
    i = pos + 1
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == "`":
            return i + 1
        if text.startswith("${", i):
            i = skip_expression(text, i + 1)
            continue
        i += 1
    msg = "Unterminated template literal in markup expression"
    raise ParseError(msg, pos, len(text))


class MarkupParser:
    """Builds an element tree from markup text.

    Offsets are kept relative to the text given, which is the whole document
    with script and style elements blanked out.
    """

    def __init__(self, text: str) -> None:
        """Initialize the parser over the markup text."""
        self.text = text
        self.pos = 0

    def parse(self) -> Element:
        """Parse the markup, raising ParseError on malformed syntax."""
        root = Element(name="#root", start=0)
        stack = [root]
        text = self.text
        n = len(text)

        while self.pos < n:
            if text.startswith("<!--", self.pos):
                stack[-1].children.append(self._comment())
            elif text.startswith("</", self.pos):
                self._close_tag(stack)
            elif text.startswith("<", self.pos) and TAG_NAME_RE.match(
                text, self.pos + 1
            ):
                element, self_closing = self._open_tag()
                stack[-1].children.append(element)
                if not self_closing and element.name in RAW_TEXT_ELEMENTS:
                    self._raw_text(element)
                elif not self_closing and element.name.lower() not in VOID_ELEMENTS:
                    stack.append(element)
                else:
                    element.end = element.tag_end
            elif text.startswith("{", self.pos):
                start = self.pos
                self.pos = skip_expression(text, start)
                stack[-1].children.append(Text(text[start : self.pos], start, self.pos))
            else:
                start = self.pos
                self.pos += 1
                while self.pos < n and text[self.pos] not in "<{":
                    self.pos += 1
                stack[-1].children.append(Text(text[start : self.pos], start, self.pos))

        if len(stack) > 1:
            unclosed = stack[-1]
            msg = f"<{unclosed.name}> was left open"
            raise ParseError(msg, unclosed.start, unclosed.tag_end)
        root.end = n
        return root

    def _comment(self) -> Comment:
        start = self.pos
        close = self.text.find("-->", start + 4)
        if close == -1:
            msg = "Unterminated comment"
            raise ParseError(msg, start, len(self.text))
        self.pos = close + 3
        return Comment(self.text[start : self.pos], start, self.pos)

    def _raw_text(self, element: Element) -> None:
        close = re.compile(rf"</{element.name}\s*>").search(self.text, self.pos)
        if close is None:
            msg = f"<{element.name}> was left open"
            raise ParseError(msg, element.start, element.tag_end)
        if close.start() > self.pos:
            content = self.text[self.pos : close.start()]
            element.children.append(Text(content, self.pos, close.start()))
        self.pos = close.end()
        element.end = self.pos

    def _close_tag(self, stack: list[Element]) -> None:
        start = self.pos
        close = self.text.find(">", start)
        if close == -1:
            msg = "Unterminated closing tag"
            raise ParseError(msg, start, len(self.text))
        name = self.text[start + 2 : close].strip()
        self.pos = close + 1
        for depth in range(len(stack) - 1, 0, -1):
            if stack[depth].name == name:
                # Elements left open inside (e.g. <li>, <p>) close implicitly.
                for element in stack[depth:]:
                    element.end = start if element is not stack[depth] else self.pos
                del stack[depth:]
                return
        msg = f"</{name}> attempted to close an element that was not open"
        raise ParseError(msg, start, self.pos)

    def _open_tag(self) -> tuple[Element, bool]:
        text = self.text
        start = self.pos
        match = TAG_NAME_RE.match(text, start + 1)
        if match is None:
            msg = "Invalid tag name"
            raise ParseError(msg, start, start + 1)
        element = Element(name=match.group(0), start=start)
        self.pos = match.end()

        while True:
            self._skip_space()
            if self.pos >= len(text):
                msg = f"Unterminated <{element.name}> tag"
                raise ParseError(msg, start, len(text))
            if text.startswith("/>", self.pos):
                self.pos += 2
                element.tag_end = self.pos
                return element, True
            if text[self.pos] == ">":
                self.pos += 1
                element.tag_end = self.pos
                return element, False
            element.attributes.append(self._attribute())

    def _skip_space(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def _attribute(self) -> Attribute:
        text = self.text
        start = self.pos
        if text[start] == "{":
            self.pos = skip_expression(text, start)
            inner = text[start + 1 : self.pos - 1]
            stripped = inner.strip()
            if stripped.startswith("..."):
                return Attribute(
                    name=stripped,
                    start=start,
                    end=self.pos,
                    expression=stripped[3:],
                    expression_start=start + 1 + inner.index("...") + 3,
                    spread=True,
                )
            return Attribute(
                name=stripped,
                start=start,
                end=self.pos,
                expression=inner,
                expression_start=start + 1,
                shorthand=True,
            )

        match = ATTR_NAME_RE.match(text, start)
        if not match:
            msg = f"Unexpected character '{text[start]}' in tag"
            raise ParseError(msg, start, start + 1)
        attr = Attribute(name=match.group(0), start=start, end=match.end())
        self.pos = match.end()
        self._skip_space()
        if not text.startswith("=", self.pos):
            self.pos = attr.end
            return attr

        self.pos += 1
        self._skip_space()
        if self.pos >= len(text):
            msg = f"Missing value for attribute '{attr.name}'"
            raise ParseError(msg, start, len(text))
        ch = text[self.pos]
        if ch in "'\"":
            value_start = self.pos + 1
            self.pos = self._quoted_end(ch, value_start)
            attr.value = text[value_start : self.pos - 1]
            attr.value_start = value_start
            lead = attr.value.find("{")
            if lead != -1 and not attr.value[:lead].strip():
                close = skip_expression(attr.value, lead)
                if not attr.value[close:].strip():
                    attr.expression = attr.value[lead + 1 : close - 1]
                    attr.expression_start = value_start + lead + 1
                    attr.value = None
        elif ch == "{":
            value_start = self.pos
            self.pos = skip_expression(text, value_start)
            attr.expression = text[value_start + 1 : self.pos - 1]
            attr.expression_start = value_start + 1
        else:
            value = UNQUOTED_VALUE_RE.match(text, self.pos)
            if not value:
                msg = f"Invalid value for attribute '{attr.name}'"
                raise ParseError(msg, self.pos, self.pos + 1)
            attr.value = value.group(0)
            attr.value_start = value.start()
            self.pos = value.end()
        attr.end = self.pos
        return attr

    def _quoted_end(self, quote: str, pos: int) -> int:
        """Return the offset after the closing quote, skipping ``{...}`` parts."""
        text = self.text
        while pos < len(text):
            if text[pos] == "{":
                pos = skip_expression(text, pos)
                continue
            if text[pos] == quote:
                return pos + 1
            pos += 1
        msg = "Unterminated attribute value"
        raise ParseError(msg, pos, len(text))


def parse_markup(text: str) -> Element:
    """Parse markup text into a root element holding the top-level nodes."""
    return MarkupParser(text).parse()
