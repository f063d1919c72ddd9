"""Logic for splitting a component document into script, markup and style."""

import re
from dataclasses import dataclass, field

from sveltedoc.errors import ParseError
from sveltedoc.markup_parser import RAW_TEXT_ELEMENTS, VOID_ELEMENTS, skip_expression

TAG_START_RE = re.compile(r"<(/?)([A-Za-z][\w:.-]*)")
ATTR_RE = re.compile(r"""([^\s=/>]+)(?:\s*=\s*("[^"]*"|'[^']*'|[^\s>]+))?""")


@dataclass(frozen=True)
class SourceRegion:
    """A top-level script or style element of the document."""

    tag: str
    content: str
    start: int  # offset of the opening '<'
    end: int  # offset just after the closing tag
    content_start: int
    attributes: dict[str, str] = field(default_factory=dict)

    @property
    def content_end(self) -> int:
        return self.content_start + len(self.content)

    @property
    def lang(self) -> str | None:
        lang = self.attributes.get("lang") or self.attributes.get("type")
        if lang and "/" in lang:
            lang = lang.rsplit("/", 1)[-1]
        return lang


@dataclass(frozen=True)
class SplitSource:
    """The regions of a component document.

    ``markup`` has the same length as the document, with script and style
    elements replaced by spaces so markup offsets are document offsets.
    """

    source: str
    markup: str
    script: SourceRegion | None = None
    module_script: SourceRegion | None = None
    style: SourceRegion | None = None


def parse_tag_attributes(text: str) -> dict[str, str]:
    """Parse the attribute list of a script or style opening tag."""
    attrs: dict[str, str] = {}
    for match in ATTR_RE.finditer(text or ""):
        value = match.group(2) or ""
        if value[:1] in ("'", '"'):
            value = value[1:-1]
        attrs[match.group(1).lower()] = value
    return attrs


def _blank(text: str, start: int, end: int) -> str:
    """Replace a span with whitespace, keeping newlines."""
    span = re.sub(r"[^\n]", " ", text[start:end])
    return text[:start] + span + text[end:]


def _tag_end(source: str, name: str, start: int, pos: int) -> tuple[int, bool]:
    """Return the offset after a start tag and whether it is self-closing."""
    n = len(source)
    while pos < n:
        ch = source[pos]
        if ch == "{":
            pos = skip_expression(source, pos)
        elif ch in "'\"":
            close = source.find(ch, pos + 1)
            if close == -1:
                break
            pos = close + 1
        elif source.startswith("/>", pos):
            return pos + 2, True
        elif ch == ">":
            return pos + 1, False
        else:
            pos += 1
    msg = f"Unterminated <{name}> tag"
    raise ParseError(msg, start, n)


def _close_element(stack: list[str], name: str) -> None:
    for depth in range(len(stack) - 1, -1, -1):
        if stack[depth] == name:
            del stack[depth:]
            return


def split_source(source: str) -> SplitSource:
    """Divide a component document into its script, markup and style regions.

    Only script and style elements at the top level of the document are
    regions. Nested ones, e.g. inside ``<svelte:head>``, stay in the markup.
    """
    script: SourceRegion | None = None
    module_script: SourceRegion | None = None
    style: SourceRegion | None = None
    markup = source
    open_elements: list[str] = []

    pos = 0
    n = len(source)
    while pos < n:
        if source.startswith("<!--", pos):
            close = source.find("-->", pos + 4)
            pos = n if close == -1 else close + 3
            continue
        if source[pos] == "{":
            pos = skip_expression(source, pos)
            continue
        match = TAG_START_RE.match(source, pos)
        if match is None:
            pos += 1
            continue

        tag = match.group(2)
        if match.group(1):
            close = source.find(">", match.end())
            pos = n if close == -1 else close + 1
            _close_element(open_elements, tag)
            continue

        tag_end, self_closing = _tag_end(source, tag, pos, match.end())
        if self_closing or tag.lower() in VOID_ELEMENTS:
            pos = tag_end
            continue
        if tag not in RAW_TEXT_ELEMENTS:
            open_elements.append(tag)
            pos = tag_end
            continue

        close = re.compile(rf"</{tag}\s*>").search(source, tag_end)
        if not close:
            msg = f"Unclosed <{tag}> element"
            raise ParseError(msg, pos, n)
        if open_elements:
            pos = close.end()
            continue

        region = SourceRegion(
            tag=tag,
            content=source[tag_end : close.start()],
            start=pos,
            end=close.end(),
            content_start=tag_end,
            attributes=parse_tag_attributes(source[match.end() : tag_end - 1]),
        )
        if tag == "style":
            if style is not None:
                msg = "A component can only have one top-level <style> element"
                raise ParseError(msg, region.start, region.end)
            style = region
        elif region.attributes.get("context") == "module":
            if module_script is not None:
                msg = "A component can only have one module-level <script> element"
                raise ParseError(msg, region.start, region.end)
            module_script = region
        else:
            if script is not None:
                msg = "A component can only have one instance-level <script> element"
                raise ParseError(msg, region.start, region.end)
            script = region

        markup = _blank(markup, region.start, region.end)
        pos = region.end

    return SplitSource(
        source=source,
        markup=markup,
        script=script,
        module_script=module_script,
        style=style,
    )
