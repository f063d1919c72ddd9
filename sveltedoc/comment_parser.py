"""Logic for parsing comment blocks into a description and JSDoc keywords."""

import re
from dataclasses import dataclass
from typing import Any

from sveltedoc.models import JSDocKeyword, SourceLocation, Visibility

KEYWORD_RE = re.compile(r"^@([A-Za-z_][\w-]*)(?:\s+|(?=\{)|$)(.*)$")
VISIBILITY_KEYWORDS: tuple[Visibility, ...] = ("private", "protected", "public")

_OPENERS = ("<!--", "/**", "/*", "//")
_CLOSERS = ("-->", "*/")


@dataclass(frozen=True)
class ParsedComment:
    """Represents the parsed content of one comment block."""

    description: str | None
    keywords: tuple[JSDocKeyword, ...]
    loc: SourceLocation | None = None

    @property
    def visibility(self) -> Visibility:
        """Return the visibility declared by keywords, defaulting to public."""
        for kw in self.keywords:
            if kw.name in VISIBILITY_KEYWORDS:
                return kw.name  # type: ignore[return-value]
        return "public"

    def has_keyword(self, name: str) -> bool:
        return any(kw.name == name for kw in self.keywords)

    def keywords_named(self, name: str) -> list[JSDocKeyword]:
        return [kw for kw in self.keywords if kw.name == name]

    def first_keyword(self, name: str) -> JSDocKeyword | None:
        for kw in self.keywords:
            if kw.name == name:
                return kw
        return None


def _strip_line(line: str) -> str:
    """Remove per-line decoration (indentation, leading stars, line markers)."""
    line = line.strip()
    if line.startswith("//"):
        line = line[2:]
    elif line.startswith("*") and not line.startswith("*/"):
        line = line.lstrip("*")
    return line.strip()


def strip_delimiters(text: str) -> list[str]:
    """Strip comment delimiters and return the undecorated lines."""
    body = text.strip()
    for opener in _OPENERS:
        if body.startswith(opener):
            body = body[len(opener) :]
            break
    for closer in _CLOSERS:
        if body.endswith(closer):
            body = body[: -len(closer)]
            break
    return [_strip_line(line) for line in body.splitlines()]


def parse_comment(text: str, loc: SourceLocation | None = None) -> ParsedComment:
    """Parse a raw comment block.

    The leading run of lines not starting with ``@`` becomes the description.
    Every ``@word`` line starts a keyword whose description continues over the
    following lines until the next keyword or the end of the block. A bare
    ``@`` line is ignored.
    """
    description_lines: list[str] = []
    keywords: list[tuple[str, list[str]]] = []

    for line in strip_delimiters(text):
        if line.startswith("@"):
            match = KEYWORD_RE.match(line)
            if match:
                keywords.append((match.group(1), [match.group(2) or ""]))
            continue
        if keywords:
            keywords[-1][1].append(line)
        else:
            description_lines.append(line)

    description = "\n".join(description_lines).strip() or None
    parsed = tuple(
        JSDocKeyword(name=name, description="\n".join(parts).strip())
        for name, parts in keywords
    )
    return ParsedComment(description=description, keywords=parsed, loc=loc)


def comment_fields(comment: ParsedComment | None) -> dict[str, Any]:
    """Return the item fields a comment block contributes.

    Without a comment the item keeps its defaults (public, no keywords).
    """
    if comment is None:
        return {}
    return {
        "description": comment.description,
        "visibility": comment.visibility,
        "keywords": comment.keywords,
    }
