"""Generic queries over the syntax tree and the scope graph."""
from typing import Callable, List, Optional
from tree_sitter import Node

from .context import AnalysisContext
from .scope import Binding, DefinitionType, Reference, Scope
from .syntax import IDENTIFIER_KINDS, NodeKind, field, kind_of, unwrap_parens


def traverse(root: Node, visitor: Callable[[Node], None]) -> None:
    """Depth-first, pre-order, source-order walk calling ``visitor`` on every node."""
    stack = [root]
    while stack:
        node = stack.pop()
        visitor(node)
        stack.extend(reversed(node.children))


def collect_references(scope: Scope) -> List[Reference]:
    """References of ``scope`` followed by those of every descendant scope.

    Order is the scope's own references, then each child scope's collected
    references in declaration order.
    """
    references: List[Reference] = []
    stack = [scope]
    while stack:
        current = stack.pop()
        references.extend(current.references)
        stack.extend(reversed(current.child_scopes))
    return references


def downstream_identifiers(root: Node) -> List[Node]:
    """Every identifier leaf under ``root`` in source order."""
    identifiers: List[Node] = []

    def collect(node: Node):
        if kind_of(node) in IDENTIFIER_KINDS:
            identifiers.append(node)

    traverse(root, collect)
    return identifiers


def _alias_source(binding: Binding) -> Optional[Node]:
    """Identifier a binding was copied from, if its declarator just passes a value along.

    ``const cb = onFetched`` and ``const { onClose } = props`` both alias;
    ``const data = useSomeAPI()`` does not.
    """
    for definition in binding.defs:
        if definition.type is not DefinitionType.VARIABLE:
            continue
        if kind_of(definition.node) is not NodeKind.DECLARATOR:
            continue
        value = unwrap_parens(field(definition.node, 'value'))
        while kind_of(value) is NodeKind.MEMBER:
            value = unwrap_parens(field(value, 'object'))
        if kind_of(value) is NodeKind.IDENTIFIER:
            return value
    return None


def upstream_chain(ctx: AnalysisContext, reference: Reference) -> List[Binding]:
    """Bindings from ``reference``'s own binding back to the value's origin.

    Each step follows a pass-through alias to the binding its initializer
    names. A binding is never visited twice, so the chain is at most as long
    as the number of bindings in the file.
    """
    chain: List[Binding] = []
    binding = reference.resolved
    while binding is not None and all(binding is not seen for seen in chain):
        chain.append(binding)
        source = _alias_source(binding)
        if source is None:
            break
        binding = ctx.scopes.resolve(ctx.scopes.scope_of(source), source)
    return chain
