"""Tests for recognizing components, state cells and effects by shape."""
import pytest

from hooklint.analyzer.context import AnalysisContext, HookNames
from hooklint.analyzer.shapes import (
    effect_body_fn,
    effect_body_references,
    effect_dependency_references,
    enclosing_component,
    is_component,
    is_effect_call,
    is_state_cell_decl,
    state_cell_parts,
)
from hooklint.analyzer.syntax import field, node_text
from hooklint.analyzer.tree_query import traverse


def _context(code, hooks=None):
    return AnalysisContext.from_source(code, hooks=hooks)


def _nodes(ctx, node_type):
    found = []
    traverse(ctx.root, lambda node: found.append(node) if node.type == node_type else None)
    return found


def _named(ctx, node_type, name):
    """First node of ``node_type`` whose name field reads ``name``."""
    for node in _nodes(ctx, node_type):
        if node_text(field(node, 'name')) == name:
            return node
    raise AssertionError(f"no {node_type} named {name}")


def _call(ctx, callee):
    for node in _nodes(ctx, 'call_expression'):
        if node_text(field(node, 'function')) == callee:
            return node
    raise AssertionError(f"no call to {callee}")


class TestIsComponent:

    @pytest.mark.parametrize("code", [
        "const Child = () => null;",
        "const Child = memo(() => null);",
        "const Child = React.memo(React.forwardRef((props, ref) => null));",
        "const Child = memo(function Inner() { return null; });",
        "export const Child = (props) => <div />;",
    ])
    def test_component_declarators(self, code):
        ctx = _context(code)
        assert is_component(_named(ctx, 'variable_declarator', 'Child'))

    @pytest.mark.parametrize("code", [
        "const child = () => null;",
        "const Child = 42;",
        "const Child = useMemo(() => null, []);",
        "const Child = function () { return null; };",
    ])
    def test_non_component_declarators(self, code):
        ctx = _context(code)
        declarator = _nodes(ctx, 'variable_declarator')[0]
        assert not is_component(declarator)

    def test_function_declarations(self):
        ctx = _context(
            "function Form() {\n"
            "  function Inner() {}\n"
            "}\n"
            "function helper() {}\n"
            "export function Exported() {}\n"
        )

        assert is_component(_named(ctx, 'function_declaration', 'Form'))
        assert is_component(_named(ctx, 'function_declaration', 'Exported'))
        assert not is_component(_named(ctx, 'function_declaration', 'Inner'))
        assert not is_component(_named(ctx, 'function_declaration', 'helper'))

    def test_custom_wrapper(self):
        hooks = HookNames(component_wrappers=frozenset({'observer'}))
        ctx = _context("const Child = observer(() => null);", hooks=hooks)

        assert is_component(_named(ctx, 'variable_declarator', 'Child'), hooks)
        assert not is_component(_named(ctx, 'variable_declarator', 'Child'))

    def test_enclosing_component(self):
        ctx = _context(
            "const Child = () => {\n"
            "  useEffect(() => {}, []);\n"
            "};\n"
            "useEffect(() => {}, []);\n"
        )
        inner, outer = _nodes(ctx, 'call_expression')

        assert node_text(field(enclosing_component(inner), 'name')) == 'Child'
        assert enclosing_component(outer) is None


class TestStateCells:

    @pytest.mark.parametrize("code", [
        "const [a, setA] = useState(0);",
        "const [a, setA] = React.useState(0);",
        "let [a, setA] = useState();",
    ])
    def test_accepted(self, code):
        ctx = _context(code)
        declarator = _nodes(ctx, 'variable_declarator')[0]

        assert is_state_cell_decl(declarator)
        value, setter = state_cell_parts(declarator)
        assert (node_text(value), node_text(setter)) == ('a', 'setA')

    @pytest.mark.parametrize("code", [
        "const [a] = useState(0);",
        "const [a, setA, extra] = useState(0);",
        "const [a, { set }] = useState(0);",
        "const [, setA] = useState(0);",
        "const state = useState(0);",
        "const [a, setA] = useReducer(reducer, 0);",
        "const [a, setA] = Other.useState(0);",
    ])
    def test_rejected(self, code):
        ctx = _context(code)
        declarator = _nodes(ctx, 'variable_declarator')[0]

        assert not is_state_cell_decl(declarator)
        assert state_cell_parts(declarator) is None

    def test_custom_state_hook(self):
        hooks = HookNames(state_hooks=frozenset({'useState', 'useImmer'}))
        ctx = _context("const [a, setA] = useImmer({});", hooks=hooks)

        assert is_state_cell_decl(_nodes(ctx, 'variable_declarator')[0], hooks)


class TestEffects:

    def test_arrow_callback(self):
        ctx = _context("useEffect(() => { run(); }, []);")
        call = _call(ctx, 'useEffect')

        assert is_effect_call(call)
        assert effect_body_fn(call).type == 'arrow_function'

    def test_function_expression_callback(self):
        ctx = _context("useEffect(function () { run(); }, []);")
        assert effect_body_fn(_call(ctx, 'useEffect')) is not None

    def test_namespaced_effect(self):
        ctx = _context("React.useEffect(() => {}, []);")
        assert is_effect_call(_call(ctx, 'React.useEffect'))

    @pytest.mark.parametrize("code", [
        "useEffect(handler, []);",
        "useEffect();",
    ])
    def test_callback_not_inline(self, code):
        ctx = _context(code)
        call = _call(ctx, 'useEffect')

        assert effect_body_fn(call) is None
        assert effect_body_references(ctx, call) is None

    def test_other_hooks_are_not_effects(self):
        ctx = _context("useMemo(() => 1, []);")
        call = _call(ctx, 'useMemo')

        assert not is_effect_call(call)
        assert effect_body_fn(call) is None
        assert effect_dependency_references(ctx, call) is None

    def test_custom_effect_hook(self):
        hooks = HookNames(effect_hooks=frozenset({'useEffect', 'useLayoutEffect'}))
        ctx = _context("useLayoutEffect(() => {}, []);", hooks=hooks)

        assert is_effect_call(_call(ctx, 'useLayoutEffect'), hooks)
        assert not is_effect_call(_call(ctx, 'useLayoutEffect'))

    def test_body_references_include_nested_callbacks(self):
        ctx = _context(
            "useEffect(() => {\n"
            "  const id = setTimeout(() => tick(count), 10);\n"
            "  return () => clearTimeout(id);\n"
            "}, [count]);\n"
        )
        refs = effect_body_references(ctx, _call(ctx, 'useEffect'))

        assert {ref.name for ref in refs} == {'id', 'setTimeout', 'tick', 'count', 'clearTimeout'}

    def test_dependency_references(self):
        ctx = _context(
            "function Child({ value }) {\n"
            "  const [a, setA] = useState();\n"
            "  useEffect(() => {}, [value, a, a.length]);\n"
            "}\n"
        )
        refs = effect_dependency_references(ctx, _call(ctx, 'useEffect'))

        assert [ref.name for ref in refs] == ['value', 'a', 'a']
        assert all(ref.resolved is not None for ref in refs)

    def test_dependency_shadowed_inside_array(self):
        """A parameter inside the array is not the outer binding of the same name."""
        ctx = _context(
            "function Child({ value }) {\n"
            "  const [a, setA] = useState();\n"
            "  useEffect(() => {}, [a, (value) => value]);\n"
            "}\n"
        )
        refs = effect_dependency_references(ctx, _call(ctx, 'useEffect'))

        assert [ref.name for ref in refs] == ['a']

    def test_empty_dependency_array(self):
        ctx = _context("useEffect(() => {}, []);")
        assert effect_dependency_references(ctx, _call(ctx, 'useEffect')) == []

    @pytest.mark.parametrize("code", [
        "useEffect(() => {});",
        "useEffect(() => {}, deps);",
    ])
    def test_dependencies_not_a_literal(self, code):
        ctx = _context(code)
        assert effect_dependency_references(ctx, _call(ctx, 'useEffect')) is None
