"""Classify resolved references: calls, state reads/writes, props."""
from typing import Optional, Tuple
from tree_sitter import Node

from .context import AnalysisContext, HookNames
from .scope import Binding, DefinitionType, Reference
from .shapes import calls_primitive, is_component, is_state_cell_decl, state_cell_parts
from .syntax import NodeKind, is_field_of, kind_of, node_text
from .tree_query import upstream_chain


def call_site(ref: Reference) -> Optional[Node]:
    """The call that ``ref`` is the callee of.

    A reference that is the root object of a member chain maps to the call
    on that chain, so ``events`` in ``events.onClose()`` yields the call.
    Being passed as an argument does not count.
    """
    current = ref.identifier
    parent = current.parent
    while kind_of(parent) is NodeKind.MEMBER and is_field_of(current, parent, 'object'):
        current, parent = parent, parent.parent
    if kind_of(parent) is NodeKind.CALL and is_field_of(current, parent, 'function'):
        return parent
    return None


def is_call_target(ref: Reference) -> bool:
    return call_site(ref) is not None


def is_direct_call_target(ref: Reference) -> bool:
    """``ref`` itself is the callee, as in ``setData(x)``."""
    parent = ref.identifier.parent
    return kind_of(parent) is NodeKind.CALL and is_field_of(ref.identifier, parent, 'function')


def _state_origin(ctx: AnalysisContext, ref: Reference) -> Optional[Tuple[Binding, Node]]:
    # Ambient globals have no defs, so they never match.
    for binding in upstream_chain(ctx, ref):
        for definition in binding.defs:
            if definition.type is DefinitionType.VARIABLE and is_state_cell_decl(definition.node, ctx.hooks):
                return binding, definition.node
    return None


def is_state_reference(ctx: AnalysisContext, ref: Reference) -> bool:
    return _state_origin(ctx, ref) is not None


def state_cell_node(ctx: AnalysisContext, ref: Reference) -> Optional[Node]:
    """The ``useState`` declarator ``ref`` ultimately reads, if any."""
    origin = _state_origin(ctx, ref)
    return origin[1] if origin else None


def is_state_setter_reference(ctx: AnalysisContext, ref: Reference) -> bool:
    """``ref`` names the setter half of a state cell, directly or through aliases."""
    origin = _state_origin(ctx, ref)
    if origin is None:
        return False
    binding, cell = origin
    _, setter = state_cell_parts(cell, ctx.hooks)
    return binding.name == node_text(setter)


def _declaring_node(function: Node, hooks: HookNames) -> Optional[Node]:
    """Where a function gets its name: itself, or the declarator an arrow is assigned to."""
    if kind_of(function) not in (NodeKind.ARROW_FUNCTION, NodeKind.FUNCTION_EXPRESSION):
        return function
    current = function
    parent = current.parent
    while kind_of(parent) is NodeKind.ARGUMENTS and calls_primitive(
            parent.parent, hooks.component_wrappers, hooks.namespaces):
        current = parent.parent
        parent = current.parent
    return parent


def is_prop_reference(ctx: AnalysisContext, ref: Reference) -> bool:
    """``ref`` ultimately reads a parameter of a component."""
    for binding in upstream_chain(ctx, ref):
        for definition in binding.defs:
            if definition.type is not DefinitionType.PARAMETER:
                continue
            if is_component(_declaring_node(definition.node, ctx.hooks), ctx.hooks):
                return True
    return False
