"""Tests for reference classification: call targets, state and props."""
from hooklint.analyzer.context import AnalysisContext
from hooklint.analyzer.references import (
    call_site,
    is_call_target,
    is_direct_call_target,
    is_prop_reference,
    is_state_reference,
    is_state_setter_reference,
    state_cell_node,
)
from hooklint.analyzer.syntax import field, node_text


def _context(code):
    return AnalysisContext.from_source(code)


def _reads(ctx, name):
    return [
        ref
        for scope in ctx.scopes.all_scopes()
        for ref in scope.references
        if ref.name == name and not ref.is_write
    ]


class TestCallTargets:

    def test_direct_callee_versus_argument(self):
        ctx = _context("const Child = ({ onClose }) => { onClose(); run(onClose); };")
        as_callee, as_argument = _reads(ctx, 'onClose')

        assert is_call_target(as_callee)
        assert is_direct_call_target(as_callee)
        assert not is_call_target(as_argument)
        assert not is_direct_call_target(as_argument)

    def test_member_chain_maps_to_enclosing_call(self):
        ctx = _context(
            "function Form({ events }) {\n"
            "  events.onClose();\n"
            "  events.list.push(1);\n"
            "  log(events.name);\n"
            "}\n"
        )
        method, nested, argument = _reads(ctx, 'events')

        assert node_text(call_site(method)) == 'events.onClose()'
        assert not is_direct_call_target(method)
        assert node_text(call_site(nested)) == 'events.list.push(1)'
        assert call_site(argument) is None

    def test_object_of_computed_call_is_not_a_target(self):
        ctx = _context("const f = {}; g(f)();\n")
        assert not is_call_target(_reads(ctx, 'f')[0])


class TestStateReferences:

    CODE = (
        "function Form() {\n"
        "  const [value, setValue] = useState(0);\n"
        "  const copy = value;\n"
        "  const update = setValue;\n"
        "  const other = compute();\n"
        "  use(copy, other, value);\n"
        "  update(1);\n"
        "  value.toFixed();\n"
        "}\n"
    )

    def test_state_values_and_aliases(self):
        ctx = _context(self.CODE)

        assert is_state_reference(ctx, _reads(ctx, 'copy')[-1])
        assert is_state_reference(ctx, _reads(ctx, 'value')[-1])
        assert not is_state_reference(ctx, _reads(ctx, 'other')[-1])

    def test_setters(self):
        ctx = _context(self.CODE)

        assert is_state_setter_reference(ctx, _reads(ctx, 'update')[-1])
        assert is_state_setter_reference(ctx, _reads(ctx, 'setValue')[-1])
        assert not is_state_setter_reference(ctx, _reads(ctx, 'value')[-1])
        assert not is_state_setter_reference(ctx, _reads(ctx, 'other')[-1])

    def test_state_cell_node(self):
        ctx = _context(self.CODE)
        cell = state_cell_node(ctx, _reads(ctx, 'copy')[-1])

        assert cell.type == 'variable_declarator'
        assert node_text(field(cell, 'value')) == 'useState(0)'
        assert state_cell_node(ctx, _reads(ctx, 'other')[-1]) is None

    def test_globals_are_not_state(self):
        ctx = _context("function Form() { window.alert(1); }\n")
        assert not is_state_reference(ctx, _reads(ctx, 'window')[0])


class TestPropReferences:

    def test_destructured_arrow_component(self):
        ctx = _context("const Child = ({ onFetched }) => { onFetched(); };")
        assert is_prop_reference(ctx, _reads(ctx, 'onFetched')[0])

    def test_props_object_of_function_component(self):
        ctx = _context("function Form(props) { props.onClose(); }\n")
        assert is_prop_reference(ctx, _reads(ctx, 'props')[0])

    def test_wrapped_component(self):
        ctx = _context("const Child = memo(({ onSave }) => { onSave(); });")
        assert is_prop_reference(ctx, _reads(ctx, 'onSave')[0])

    def test_alias_of_prop(self):
        ctx = _context(
            "const Child = (props) => {\n"
            "  const { onClose } = props;\n"
            "  onClose();\n"
            "};\n"
        )
        assert is_prop_reference(ctx, _reads(ctx, 'onClose')[-1])

    def test_helper_parameters_are_not_props(self):
        ctx = _context("function helper(cb) { cb(); }\n")
        assert not is_prop_reference(ctx, _reads(ctx, 'cb')[0])

    def test_nested_callback_parameters_are_not_props(self):
        ctx = _context("function List() { items.map((item) => item()); }\n")
        assert not is_prop_reference(ctx, _reads(ctx, 'item')[0])

    def test_local_variables_are_not_props(self):
        ctx = _context("function Form() { const cb = make(); cb(); }\n")
        assert not is_prop_reference(ctx, _reads(ctx, 'cb')[-1])
