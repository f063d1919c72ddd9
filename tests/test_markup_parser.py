"""Tests for the markup element tree parser."""

import pytest

from sveltedoc.errors import ParseError
from sveltedoc.markup_parser import (
    Comment,
    Element,
    Text,
    parse_markup,
    skip_expression,
)


def test_nested_elements_and_text() -> None:
    """Verify elements, attributes and mustache text are parsed."""
    root = parse_markup('<div class="box"><span>{name}</span></div>')
    div = root.children[0]
    assert isinstance(div, Element)
    assert div.name == "div"
    assert div.attributes[0].name == "class"
    assert div.attributes[0].value == "box"
    span = div.children[0]
    assert isinstance(span, Element)
    assert isinstance(span.children[0], Text)
    assert span.children[0].text == "{name}"
    assert div.end == len('<div class="box"><span>{name}</span></div>')


def test_void_and_self_closing_elements() -> None:
    """Verify void and self-closing tags take no children."""
    root = parse_markup("<input bind:value={x}><Child/><p>t</p>")
    names = [child.name for child in root.children if isinstance(child, Element)]
    assert names == ["input", "Child", "p"]
    attr = root.children[0].attributes[0]
    assert (attr.directive, attr.target, attr.expression) == ("bind", "value", "x")


def test_directive_modifiers() -> None:
    """Verify modifiers are stripped from the directive target."""
    root = parse_markup("<button on:click|once|preventDefault={go}>x</button>")
    attr = root.children[0].attributes[0]
    assert attr.directive == "on"
    assert attr.target == "click"
    assert attr.expression == "go"


def test_forwarded_event_has_no_value() -> None:
    """Verify a bare directive carries no value."""
    root = parse_markup("<button on:click>x</button>")
    assert not root.children[0].attributes[0].has_value


def test_shorthand_and_spread() -> None:
    """Verify {shorthand} and {...spread} attributes."""
    root = parse_markup("<slot {item} {...rest}/>")
    shorthand, spread = root.children[0].attributes
    assert shorthand.shorthand
    assert shorthand.name == "item"
    assert spread.spread
    assert spread.expression == "rest"


def test_quoted_values() -> None:
    """Verify a quoted single expression and mixed text values."""
    root = parse_markup('<a href="{url}" class="x {y}">l</a>')
    href, cls = root.children[0].attributes
    assert href.expression == "url"
    assert href.value is None
    assert href.expression_start == len('<a href="{')
    assert cls.value == "x {y}"
    assert cls.expression is None


def test_braces_inside_strings() -> None:
    """Verify braces inside JavaScript strings do not close expressions."""
    root = parse_markup("<p title={'}'}>x</p>")
    assert root.children[0].attributes[0].expression == "'}'"
    assert skip_expression("{a: {b: '}'}} rest", 0) == len("{a: {b: '}'}}")


def test_comments_and_blocks() -> None:
    """Verify comments and control blocks around elements."""
    root = parse_markup("<!-- hi -->{#if x}<p>a</p>{:else}<p>b</p>{/if}")
    assert isinstance(root.children[0], Comment)
    assert root.children[0].text == "<!-- hi -->"
    assert [e.name for e in root.iter_elements()] == ["p", "p"]


def test_less_than_in_text() -> None:
    """Verify a lone less-than sign is plain text."""
    root = parse_markup("<p>a < b</p>")
    assert "".join(c.text for c in root.children[0].children) == "a < b"


def test_implicit_close() -> None:
    """Verify a closing tag closes elements left open inside it."""
    root = parse_markup("<ul><li>a<li>b</ul><p></p>")
    assert [e.name for e in root.iter_elements()] == ["ul", "li", "li", "p"]


def test_unclosed_element_raises() -> None:
    """Verify an element left open is a parse error."""
    with pytest.raises(ParseError) as exc:
        parse_markup("<p>ok</p><div>")
    assert exc.value.location.start == len("<p>ok</p>")


def test_stray_closing_tag_raises() -> None:
    """Verify closing a tag that is not open is a parse error."""
    with pytest.raises(ParseError):
        parse_markup("<p></p></div>")


def test_unterminated_constructs_raise() -> None:
    """Verify unterminated comments, expressions and tags are parse errors."""
    for text in ("<!-- open", "<p>{value</p>", "<div class='a'"):
        with pytest.raises(ParseError):
            parse_markup(text)


def test_script_content_is_raw_text() -> None:
    """Verify script and style content is not parsed as markup."""
    root = parse_markup("<svelte:head><script>if (a<b) {}</script></svelte:head>")
    head = root.children[0]
    assert isinstance(head, Element)
    script = head.children[0]
    assert isinstance(script, Element)
    assert script.name == "script"
    assert [c.text for c in script.children] == ["if (a<b) {}"]
    assert head.end == root.end
