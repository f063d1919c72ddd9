"""Tests for collecting markup candidates."""

from sveltedoc.declarations import ImportBinding
from sveltedoc.markup_analyzer import analyze_markup
from sveltedoc.markup_parser import parse_markup
from sveltedoc.models import SourceLocation

CHILD_IMPORT = {
    "Child": ImportBinding(
        name="Child", path="./Child.svelte", loc=SourceLocation(start=0, end=5)
    )
}


def test_imported_components_per_use() -> None:
    """Verify every use of an imported component is a candidate."""
    root = parse_markup("<Child/><Child/><div><Child/><span/></div>")
    found = analyze_markup(root, imports=CHILD_IMPORT)
    assert [c.name for c in found.components] == ["Child", "Child", "Child"]
    assert {c.value for c in found.components} == {"./Child.svelte"}
    assert found.components[0].loc == SourceLocation(start=1, end=6)


def test_namespaced_component_uses_head() -> None:
    """Verify a dotted tag resolves through its leading identifier."""
    root = parse_markup("<Child.Item/>")
    found = analyze_markup(root, imports=CHILD_IMPORT)
    assert [c.name for c in found.components] == ["Child"]


def test_forwarded_event() -> None:
    """Verify a bare on: directive is forwarded with its parent tag."""
    root = parse_markup("<button on:click></button>")
    found = analyze_markup(root)
    event = found.events[0]
    assert (event.name, event.parent) == ("click", "button")
    assert event.loc == SourceLocation(start=11, end=16)


def test_handler_with_value_is_not_forwarded() -> None:
    """Verify a handled native event is not documented."""
    root = parse_markup("<button on:click={increment}></button>")
    assert analyze_markup(root, dispatchers={"dispatch"}).events == []


def test_dispatch_in_handler() -> None:
    """Verify dispatcher calls inside handlers yield custom events."""
    text = "<button on:click={() => dispatch('select', id)}>x</button>"
    found = analyze_markup(parse_markup(text), dispatchers={"dispatch"})
    event = found.events[0]
    assert (event.name, event.parent) == ("select", None)
    start = text.index("'select'")
    assert event.loc == SourceLocation(start=start, end=start + len("'select'"))


def test_fire_in_v2_handler() -> None:
    """Verify fire calls in quoted dialect-2 handlers yield custom events."""
    root = parse_markup("<button on:click=\"fire('select', item)\">x</button>")
    found = analyze_markup(root, version=2)
    assert [(e.name, e.parent) for e in found.events] == [("select", None)]


def test_v3_slots_with_parameters() -> None:
    """Verify slot names, the default slot and slot parameters."""
    root = parse_markup('<slot name="item" {item} index={i}></slot><slot/>')
    found = analyze_markup(root)
    named, default = found.slots
    assert named.name == "item"
    assert [p.name for p in named.parameters] == ["item", "index"]
    assert default.name == "default"
    assert default.parameters is None


def test_v2_slots_have_no_parameters() -> None:
    """Verify dialect 2 slots never expose parameters."""
    root = parse_markup('<slot name="x" foo={y}></slot>')
    found = analyze_markup(root, version=2)
    assert found.slots[0].name == "x"
    assert found.slots[0].parameters is None


def test_v3_ref() -> None:
    """Verify bind:this creates a ref on its element."""
    root = parse_markup("<input bind:this={field}>")
    ref = analyze_markup(root).refs[0]
    assert (ref.name, ref.parent) == ("field", "input")
    assert ref.loc == SourceLocation(start=18, end=23)


def test_v2_ref() -> None:
    """Verify ref: directives create refs in dialect 2."""
    root = parse_markup("<div ref:box></div>")
    ref = analyze_markup(root, version=2).refs[0]
    assert (ref.name, ref.parent) == ("box", "div")
    assert ref.loc == SourceLocation(start=9, end=12)


def test_preceding_comment_documents_element() -> None:
    """Verify a comment directly before an element documents its items."""
    root = parse_markup("<!-- Main action -->\n<button on:click></button>")
    event = analyze_markup(root).events[0]
    assert event.description == "Main action"
    assert event.keywords == ()


def test_text_breaks_comment_association() -> None:
    """Verify text between a comment and an element detaches the comment."""
    root = parse_markup("<!-- note -->\ntext\n<button on:click></button>")
    event = analyze_markup(root).events[0]
    assert event.description is None
    assert event.keywords is None


def test_component_comment() -> None:
    """Verify the @component comment documents the component itself."""
    root = parse_markup(
        "<!-- @component\n Shows a greeting.\n @name Greeter -->\n<p>hi</p>"
    )
    found = analyze_markup(root)
    assert found.component_comment is not None
    assert found.component_comment.description == "Shows a greeting."
    assert [kw.name for kw in found.component_comment.keywords] == ["name"]
