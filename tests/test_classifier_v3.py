"""Tests for the dialect 3 declaration classifier."""

from sveltedoc.classifier_v3 import classify_v3
from sveltedoc.declarations import ScriptDeclarations
from sveltedoc.models import NO_VALUE
from sveltedoc.script_parser import parse_script

SCRIPT = """
import Child from './Child.svelte';
import { createEventDispatcher } from 'svelte';

/** Counter value */
export let count = 0;
let internal = 'x';
const LIMIT = 10;
export const VERSION = '1.0';

/** Doubled count */
$: doubled = count * 2;

let total;
$: total = count + internal;

const dispatch = createEventDispatcher();

/**
 * Reset the counter.
 * @param {boolean} [force=false] - Skip confirmation
 */
export function reset(force = false, ...rest) {
  /** Fired after reset */
  dispatch('reset', { force });
}

/** @action */
export const tooltip = (node) => {};
"""


def _classify(code: str, lang: str | None = None) -> ScriptDeclarations:
    return classify_v3(parse_script(code, lang=lang))


def test_data_declarations() -> None:
    """Verify let/var and exported const bindings become data."""
    result = _classify(SCRIPT)
    assert [d.name for d in result.data] == ["count", "internal", "VERSION"]
    count = result.data[0]
    assert count.comment is not None
    assert count.comment.description == "Counter value"
    assert (count.type.kind, count.type.type, count.value) == ("const", "number", 0)
    assert result.data[2].value == "1.0"


def test_reactive_declarations() -> None:
    """Verify reactive assignments become computed and absorb their let."""
    result = _classify(SCRIPT)
    assert [c.name for c in result.computed] == ["doubled", "total"]
    assert result.computed[0].comment.description == "Doubled count"
    assert result.computed[0].expression is not None
    assert result.computed[1].comment is None
    assert "total" not in [d.name for d in result.data]


def test_callables_and_buckets() -> None:
    """Verify exported functions and marker keywords."""
    result = _classify(SCRIPT)
    assert [(c.name, c.bucket) for c in result.callables] == [
        ("reset", "methods"),
        ("tooltip", "actions"),
    ]


def test_callable_arguments() -> None:
    """Verify defaults, rest parameters and @param descriptions."""
    reset = _classify(SCRIPT).callables[0]
    force, rest = reset.args
    assert force.name == "force"
    assert force.optional is True
    assert force.default == "false"
    assert force.description == "Skip confirmation"
    assert (force.type.kind, force.type.value) == ("const", False)
    assert force.repeated is None
    assert rest.name == "rest"
    assert rest.repeated is True
    assert rest.optional is None


def test_imports_and_events() -> None:
    """Verify imports, dispatchers and dispatched events."""
    result = _classify(SCRIPT)
    assert result.imports["Child"].path == "./Child.svelte"
    assert result.imports["createEventDispatcher"].path == "svelte"
    assert result.dispatchers == {"dispatch"}
    assert [e.name for e in result.events] == ["reset"]
    assert result.events[0].comment.description == "Fired after reset"


def test_destructuring_yields_each_name() -> None:
    """Verify destructured bindings produce one data item per name."""
    result = _classify("let { a, b: c } = props;")
    assert [d.name for d in result.data] == ["a", "c"]
    assert result.data[0].value is NO_VALUE
    assert len(result.warnings) == 2


def test_exported_let_function_is_data() -> None:
    """Verify a function-valued prop stays a data property."""
    result = _classify("export let onSelect = () => {};")
    assert [d.name for d in result.data] == ["onSelect"]
    assert result.data[0].type.type == "function"
    assert result.callables == []


def test_type_keyword_wins() -> None:
    """Verify an @type keyword supplies the type."""
    result = _classify("/** @type {'a'|'b'} */\nexport let size = 'a';")
    assert result.data[0].type.kind == "union"


def test_typescript_annotations() -> None:
    """Verify TypeScript annotations are used in ts scripts."""
    result = _classify("export let name: string = 'x';\nexport let n: number;", "ts")
    name, n = result.data
    assert (name.type.kind, name.type.value) == ("const", "x")
    assert (n.type.kind, n.type.type) == ("type", "number")


def test_non_assignment_reactive_statement_is_ignored() -> None:
    """Verify reactive side effects are not computed properties."""
    result = _classify("let count = 0;\n$: console.log(count);")
    assert result.computed == []


def test_export_clause_aliases() -> None:
    """Verify renamed exports are recorded against the local binding."""
    result = _classify("let klass = '';\nexport { klass as cls };\n")
    assert [d.name for d in result.data] == ["klass"]
    assert result.aliases == {"klass": "cls"}
    assert result.public_name("klass") == "cls"
    assert result.public_name("other") == "other"


def test_reexport_is_not_an_alias() -> None:
    """Verify re-exports from another module are skipped."""
    result = _classify("export { a as b } from './other.js';\n")
    assert result.aliases == {}
    assert result.data == []
