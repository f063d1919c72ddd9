"""Tests for computed property dependency analysis."""

from sveltedoc.classifier_v3 import classify_v3
from sveltedoc.dependency_analyzer import analyze_dependencies
from sveltedoc.script_parser import parse_script


def _dependencies(code: str) -> tuple[str, ...]:
    source = parse_script(code)
    result = classify_v3(source)
    computed = result.computed[-1]
    return analyze_dependencies(
        source, computed.expression, result.known_names(), computed.name
    )


def test_first_use_order_without_duplicates() -> None:
    """Verify names are listed once, in the order they are first read."""
    assert _dependencies("let a = 1; let b = 2;\n$: c = b + a + b;") == ("b", "a")


def test_parameters_shadow_properties() -> None:
    """Verify arrow parameters hide properties of the same name."""
    code = "let a = 1; let b = 2;\n$: c = [1].map((a) => a + b);"
    assert _dependencies(code) == ("b",)


def test_block_declarations_shadow_properties() -> None:
    """Verify declarations inside function bodies hide properties."""
    code = (
        "let a = 1; let b = 2;\n"
        "$: c = (() => { const a = 5; return a + b; })();"
    )
    assert _dependencies(code) == ("b",)


def test_store_reference() -> None:
    """Verify a $store read counts as a read of the store."""
    assert _dependencies("let count = 0;\n$: d = $count * 2;") == ("count",)


def test_self_reference_is_dropped() -> None:
    """Verify a computed property never depends on itself."""
    assert _dependencies("let step = 1;\n$: x = x + step;") == ("step",)


def test_member_properties_are_not_reads() -> None:
    """Verify property names after a dot are not dependencies."""
    assert _dependencies("let a = {}; let b = 1;\n$: c = a.b;") == ("a",)


def test_shorthand_object_property() -> None:
    """Verify shorthand object properties are reads."""
    assert _dependencies("let a = 1;\n$: c = { a };") == ("a",)


def test_computed_reads_computed() -> None:
    """Verify computed properties may depend on each other."""
    code = "let a = 1;\n$: b = a * 2;\n$: c = b + 1;"
    assert _dependencies(code) == ("b",)


def test_unknown_names_are_ignored() -> None:
    """Verify globals and imports are not dependencies."""
    assert _dependencies("let a = 1;\n$: c = Math.max(a, limit);") == ("a",)
