"""Recognize components, state cells and effects by syntactic shape."""
from typing import FrozenSet, List, Optional, Tuple
from tree_sitter import Node

from .context import AnalysisContext, HookNames
from .scope import Reference
from .syntax import (
    NodeKind,
    ancestors,
    call_arguments,
    field,
    identifier_name,
    kind_of,
    named_children,
    node_text,
    same_node,
    unwrap_parens,
)
from .tree_query import collect_references, downstream_identifiers

DEFAULT_HOOKS = HookNames()

_FUNCTION_VALUE_KINDS = (NodeKind.ARROW_FUNCTION, NodeKind.FUNCTION_EXPRESSION)


def calls_primitive(node: Optional[Node], names: FrozenSet[str], namespaces: FrozenSet[str]) -> bool:
    """True for ``name(...)`` or ``Namespace.name(...)`` with a recognized name."""
    if kind_of(node) is not NodeKind.CALL:
        return False
    callee = field(node, 'function')
    callee_kind = kind_of(callee)
    if callee_kind is NodeKind.IDENTIFIER:
        return node_text(callee) in names
    if callee_kind is NodeKind.MEMBER:
        namespace = identifier_name(field(callee, 'object'))
        prop = field(callee, 'property')
        return namespace in namespaces and prop is not None and node_text(prop) in names
    return False


def component_function(value: Optional[Node], hooks: HookNames = DEFAULT_HOOKS) -> Optional[Node]:
    """The render function a declarator's initializer defines, if it defines one.

    Accepts a bare arrow function, or a wrapper call such as
    ``memo(...)``/``React.forwardRef(...)`` around one (wrappers may nest).
    """
    value = unwrap_parens(value)
    if kind_of(value) is NodeKind.ARROW_FUNCTION:
        return value
    if calls_primitive(value, hooks.component_wrappers, hooks.namespaces):
        args = call_arguments(value)
        if not args:
            return None
        if kind_of(args[0]) in _FUNCTION_VALUE_KINDS:
            return args[0]
        return component_function(args[0], hooks)
    return None


def _is_top_level(node: Node) -> bool:
    parent = node.parent
    if kind_of(parent) is NodeKind.EXPORT:
        parent = parent.parent
    return kind_of(parent) is NodeKind.PROGRAM


def is_component(node: Optional[Node], hooks: HookNames = DEFAULT_HOOKS) -> bool:
    """A top-level function declaration or a component-valued declarator with a capitalized name."""
    kind = kind_of(node)
    if kind is NodeKind.FUNCTION_DECLARATION:
        if not _is_top_level(node):
            return False
    elif kind is NodeKind.DECLARATOR:
        if component_function(field(node, 'value'), hooks) is None:
            return False
    else:
        return False

    name = identifier_name(field(node, 'name'))
    return bool(name) and name[0].isupper()


def is_state_cell_decl(node: Optional[Node], hooks: HookNames = DEFAULT_HOOKS) -> bool:
    """``const [value, setValue] = useState(...)`` and nothing looser."""
    return state_cell_parts(node, hooks) is not None


def state_cell_parts(node: Optional[Node], hooks: HookNames = DEFAULT_HOOKS) -> Optional[Tuple[Node, Node]]:
    """The ``(value, setter)`` identifiers of a state cell declarator."""
    if kind_of(node) is not NodeKind.DECLARATOR:
        return None
    if not calls_primitive(field(node, 'value'), hooks.state_hooks, hooks.namespaces):
        return None
    pattern = field(node, 'name')
    if kind_of(pattern) is not NodeKind.ARRAY_PATTERN:
        return None
    elements = named_children(pattern)
    if len(elements) != 2 or any(kind_of(el) is not NodeKind.IDENTIFIER for el in elements):
        return None
    return elements[0], elements[1]


def is_effect_call(node: Optional[Node], hooks: HookNames = DEFAULT_HOOKS) -> bool:
    return calls_primitive(node, hooks.effect_hooks, hooks.namespaces)


def effect_body_fn(node: Optional[Node], hooks: HookNames = DEFAULT_HOOKS) -> Optional[Node]:
    """The effect's callback when it is written inline as a function."""
    if not is_effect_call(node, hooks):
        return None
    args = call_arguments(node)
    if not args:
        return None
    effect_fn = args[0]
    if kind_of(effect_fn) not in _FUNCTION_VALUE_KINDS:
        return None
    return effect_fn


# NOTE: for `events.onClose()` the scope graph only records `events`; the
# property itself is never a reference.
def effect_body_references(ctx: AnalysisContext, node: Node) -> Optional[List[Reference]]:
    """Every reference inside the effect callback, nested callbacks included."""
    effect_fn = effect_body_fn(node, ctx.hooks)
    if effect_fn is None:
        return None
    return collect_references(ctx.scopes.scope_of(effect_fn))


def effect_dependency_references(ctx: AnalysisContext, node: Node) -> Optional[List[Reference]]:
    """References made from the dependency array literal.

    The array has no scope of its own, so identifiers are resolved from the
    effect call's scope and mapped back to the exact reference recorded for
    that identifier node.
    """
    if not is_effect_call(node, ctx.hooks):
        return None
    args = call_arguments(node)
    if len(args) < 2:
        return None
    deps = args[1]
    if kind_of(deps) is not NodeKind.ARRAY:
        return None

    scope = ctx.scopes.scope_of(node)
    references: List[Reference] = []
    for identifier in downstream_identifiers(deps):
        binding = ctx.scopes.resolve(scope, identifier)
        if binding is None:
            continue
        references.extend(ref for ref in binding.references if same_node(ref.identifier, identifier))
    return references


def enclosing_component(node: Node, hooks: HookNames = DEFAULT_HOOKS) -> Optional[Node]:
    """Nearest ancestor that declares a component."""
    for ancestor in ancestors(node):
        if is_component(ancestor, hooks):
            return ancestor
    return None
