"""Lexical scope graph and the resolver the analyzer queries it through."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional
from tree_sitter import Node

from .syntax import NodeKey, node_key, node_text


class DefinitionType(Enum):
    """How a binding was introduced."""
    PARAMETER = 'Parameter'
    VARIABLE = 'Variable'
    FUNCTION_NAME = 'FunctionName'
    CLASS_NAME = 'ClassName'
    CATCH_CLAUSE = 'CatchClause'
    IMPORT_BINDING = 'ImportBinding'


@dataclass(eq=False)
class Definition:
    """One declaration site of a binding.

    ``node`` is the declaring construct: the function node for parameters,
    the ``variable_declarator`` for variables, the specifier for imports.
    """
    type: DefinitionType
    name: Node
    node: Node


@dataclass(eq=False)
class Binding:
    """A declared name. Ambient globals carry an empty ``defs`` list."""
    name: str
    scope: 'Scope'
    identifiers: List[Node] = field(default_factory=list)
    defs: List[Definition] = field(default_factory=list)
    references: List['Reference'] = field(default_factory=list)

    def __repr__(self):
        return f"Binding({self.name!r}, defs={[d.type.value for d in self.defs]})"


@dataclass(eq=False)
class Reference:
    """A use of an identifier."""
    identifier: Node
    from_scope: 'Scope'
    resolved: Optional[Binding] = None
    is_write: bool = False
    init: bool = False

    @property
    def name(self) -> str:
        return node_text(self.identifier)

    def __repr__(self):
        line, column = self.identifier.start_point
        return f"Reference({self.name!r} @ {line + 1}:{column})"


@dataclass(eq=False)
class Scope:
    """A node in the scope tree."""
    kind: str  # module, function, block, for, catch, switch, class
    block: Node
    upper: Optional['Scope'] = None
    child_scopes: List['Scope'] = field(default_factory=list)
    variables: Dict[str, Binding] = field(default_factory=dict)
    references: List[Reference] = field(default_factory=list)
    through: List[Reference] = field(default_factory=list)

    @property
    def depth(self) -> int:
        depth, scope = 0, self.upper
        while scope is not None:
            depth += 1
            scope = scope.upper
        return depth

    def variable_scope(self) -> 'Scope':
        """Nearest enclosing scope that receives ``var`` declarations."""
        scope = self
        while scope.kind not in ('function', 'module') and scope.upper is not None:
            scope = scope.upper
        return scope

    def __repr__(self):
        return f"Scope({self.kind}, {self.block.type}@{self.block.start_point[0] + 1})"


class ScopeResolver:
    """Read-only query surface over a built scope graph.

    Both lookups walk strictly outward (node ancestors, then scope ancestors)
    so they terminate after at most tree-depth steps.
    """

    def __init__(self, global_scope: Scope, scopes_by_block: Dict[NodeKey, Scope]):
        self.global_scope = global_scope
        self._scopes_by_block = scopes_by_block

    def scope_of(self, node: Node) -> Scope:
        """Innermost scope enclosing ``node``; a function node maps to its own scope."""
        current = node
        while current is not None:
            scope = self._scopes_by_block.get(node_key(current))
            if scope is not None:
                return scope
            current = current.parent
        return self.global_scope

    def resolve(self, scope: Scope, identifier: Node) -> Optional[Binding]:
        """Nearest binding named like ``identifier``, searching outward from ``scope``."""
        name = node_text(identifier)
        current = scope
        while current is not None:
            binding = current.variables.get(name)
            if binding is not None:
                return binding
            current = current.upper
        return None

    def all_scopes(self) -> List[Scope]:
        """Every scope, parents before children, in source order."""
        ordered = []
        stack = [self.global_scope]
        while stack:
            scope = stack.pop()
            ordered.append(scope)
            stack.extend(reversed(scope.child_scopes))
        return ordered
