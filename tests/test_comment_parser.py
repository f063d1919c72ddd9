"""Tests for comment block parsing."""

from sveltedoc.comment_parser import comment_fields, parse_comment, strip_delimiters
from sveltedoc.models import JSDocKeyword, SourceLocation


def test_parse_description_and_keyword() -> None:
    """Verify the leading lines form the description and @lines the keywords."""
    parsed = parse_comment("/**\n * Counter value\n * @type {number}\n */")
    assert parsed.description == "Counter value"
    assert parsed.keywords == (JSDocKeyword(name="type", description="{number}"),)


def test_keyword_description_continues_over_lines() -> None:
    """Verify keyword text runs until the next keyword."""
    parsed = parse_comment(
        "/**\n * @param {string} name - The name\n *   used for greeting\n"
        " * @returns nothing\n */"
    )
    assert parsed.description is None
    assert [kw.name for kw in parsed.keywords] == ["param", "returns"]
    assert parsed.keywords[0].description == (
        "{string} name - The name\nused for greeting"
    )


def test_duplicate_keywords_keep_order() -> None:
    """Verify repeated keywords are all kept in source order."""
    parsed = parse_comment("/** @param a\n * @param b */")
    assert [kw.description for kw in parsed.keywords_named("param")] == ["a", "b"]


def test_visibility_from_keywords() -> None:
    """Verify the first visibility keyword wins and public is the default."""
    assert parse_comment("/** @private */").visibility == "private"
    assert parse_comment("/** @protected\n * @public */").visibility == "protected"
    assert parse_comment("/** Just text */").visibility == "public"


def test_html_comment() -> None:
    """Verify markup comments are parsed like script comments."""
    parsed = parse_comment("<!-- Shows the title\n  @slot header -->")
    assert parsed.description == "Shows the title"
    assert parsed.has_keyword("slot")


def test_line_comment_block() -> None:
    """Verify merged line comments strip every line marker."""
    parsed = parse_comment("// first line\n// second line")
    assert parsed.description == "first line\nsecond line"


def test_bare_at_line_is_ignored() -> None:
    """Verify an @ without a keyword name is dropped."""
    parsed = parse_comment("/**\n * Text\n * @\n */")
    assert parsed.description == "Text"
    assert parsed.keywords == ()


def test_strip_delimiters_block() -> None:
    """Verify star decoration is removed from each line."""
    assert strip_delimiters("/**\n  * a\n  ** b\n */") == ["", "a", "b", ""]


def test_location_is_kept() -> None:
    """Verify the comment location passes through."""
    loc = SourceLocation(start=3, end=10)
    assert parse_comment("/* x */", loc).loc == loc


def test_comment_fields() -> None:
    """Verify item fields are only contributed by an existing comment."""
    assert comment_fields(None) == {}
    fields = comment_fields(parse_comment("/** Hidden\n * @private */"))
    assert fields["description"] == "Hidden"
    assert fields["visibility"] == "private"
    assert fields["keywords"] == (JSDocKeyword(name="private", description=""),)


def test_keyword_with_attached_type() -> None:
    """Verify a type expression directly after the keyword name is kept."""
    parsed = parse_comment("/** @type{string} */")
    assert parsed.keywords == (JSDocKeyword(name="type", description="{string}"),)
