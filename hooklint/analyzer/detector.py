"""Decide whether an effect couples a child's internal state to its parent.

Every function here answers ``None`` when the node is not an effect the
analysis understands, so "does not apply" stays distinct from "applies and
is false".
"""
from dataclasses import dataclass
from typing import List, Optional, Tuple
from tree_sitter import Node

from .context import AnalysisContext
from .messages import (
    AVOID_INTERNAL_EFFECT,
    AVOID_PARENT_CHILD_COUPLING,
    AVOID_RESETTING_STATE_FROM_PROPS,
)
from .references import (
    is_call_target,
    is_direct_call_target,
    is_prop_reference,
    is_state_reference,
    is_state_setter_reference,
    state_cell_node,
)
from .scope import Reference
from .shapes import (
    effect_body_references,
    effect_dependency_references,
    enclosing_component,
    is_state_cell_decl,
)
from .syntax import FUNCTION_KINDS, ancestors, call_arguments, field, kind_of, node_key, structurally_equal
from .tree_query import traverse


@dataclass(frozen=True)
class EffectVerdict:
    """What the detector concluded about one effect call."""
    node: Node
    internal_effect: bool
    state_only: bool
    resets_all_state: bool
    prop_callback_calls: Tuple[Reference, ...]

    @property
    def parent_child_coupling(self) -> bool:
        return bool(self.prop_callback_calls)

    def message_ids(self) -> List[str]:
        ids = []
        if self.internal_effect:
            ids.append(AVOID_INTERNAL_EFFECT)
        if self.parent_child_coupling:
            ids.append(AVOID_PARENT_CHILD_COUPLING)
        if self.resets_all_state:
            ids.append(AVOID_RESETTING_STATE_FROM_PROPS)
        return ids


def setter_references(ctx: AnalysisContext, effect_fn_refs: List[Reference]) -> List[Reference]:
    """Calls in the effect body that invoke a state setter."""
    return [
        ref for ref in effect_fn_refs
        if is_direct_call_target(ref) and is_state_setter_reference(ctx, ref)
    ]


def is_setter_called_with_default_value(ctx: AnalysisContext, setter_ref: Reference) -> bool:
    """The setter receives the same expression its ``useState`` was initialized with."""
    cell = state_cell_node(ctx, setter_ref)
    if cell is None:
        return False
    default_args = call_arguments(field(cell, 'value'))
    passed_args = call_arguments(setter_ref.identifier.parent)
    default_value = default_args[0] if default_args else None
    passed_value = passed_args[0] if passed_args else None
    return structurally_equal(passed_value, default_value)


def count_state_cells(ctx: AnalysisContext, root: Node) -> int:
    count = 0

    def visit(node: Node):
        nonlocal count
        if is_state_cell_decl(node, ctx.hooks):
            count += 1

    traverse(root, visit)
    return count


def _owning_function(ctx: AnalysisContext, node: Node) -> Optional[Node]:
    component = enclosing_component(node, ctx.hooks)
    if component is not None:
        return component
    for ancestor in ancestors(node):
        if kind_of(ancestor) in FUNCTION_KINDS:
            return ancestor
    return None


def is_props_used_to_reset_all_state(ctx: AnalysisContext, effect_fn_refs: List[Reference],
                                     deps_refs: List[Reference], effect_node: Node) -> bool:
    """A prop change resets every state cell of the component to its default."""
    if not any(is_prop_reference(ctx, ref) for ref in deps_refs):
        return False

    setters = setter_references(ctx, effect_fn_refs)
    if not setters:
        return False
    if not all(is_setter_called_with_default_value(ctx, ref) for ref in setters):
        return False

    owner = _owning_function(ctx, effect_node)
    if owner is None:
        return False
    reset_cells = {node_key(state_cell_node(ctx, ref)) for ref in setters}
    return len(reset_cells) == count_state_cells(ctx, owner)


def is_internal_effect(ctx: AnalysisContext, deps_refs: List[Reference]) -> bool:
    """Every dependency is the component's own state or props, nothing external."""
    return bool(deps_refs) and all(
        is_state_reference(ctx, ref) or is_prop_reference(ctx, ref) for ref in deps_refs
    )


def is_state_only_effect(ctx: AnalysisContext, deps_refs: List[Reference]) -> bool:
    """Every dependency is internal state and none reaches a prop."""
    return bool(deps_refs) and all(
        is_state_reference(ctx, ref) and not is_prop_reference(ctx, ref) for ref in deps_refs
    )


def prop_callback_calls(ctx: AnalysisContext, effect_fn_refs: List[Reference]) -> List[Reference]:
    """References in the effect body that call something the parent passed in."""
    return [ref for ref in effect_fn_refs if is_call_target(ref) and is_prop_reference(ctx, ref)]


def analyze_effect(ctx: AnalysisContext, node: Node) -> Optional[EffectVerdict]:
    """Run every check against one effect call, or ``None`` if it is not one."""
    effect_fn_refs = effect_body_references(ctx, node)
    deps_refs = effect_dependency_references(ctx, node)
    if effect_fn_refs is None or deps_refs is None:
        return None

    return EffectVerdict(
        node=node,
        internal_effect=is_internal_effect(ctx, deps_refs),
        state_only=is_state_only_effect(ctx, deps_refs),
        resets_all_state=is_props_used_to_reset_all_state(ctx, effect_fn_refs, deps_refs, node),
        prop_callback_calls=tuple(prop_callback_calls(ctx, effect_fn_refs)),
    )
