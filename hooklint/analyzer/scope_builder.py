"""Builds a scope/reference graph from a tree-sitter JavaScript tree.

The graph mirrors what ESLint's scope manager produces for the constructs the
hook analysis touches: one module scope, a scope per function, and block
scopes for blocks, loops, catch clauses, switch bodies and classes.
Declarations are collected while walking; references are resolved after the
walk so hoisted names are visible from anywhere in their scope.
"""
from typing import Dict, Iterable, List, Optional, Set, Tuple
from tree_sitter import Node

from .scope import Binding, Definition, DefinitionType, Reference, Scope, ScopeResolver
from .syntax import (
    FUNCTION_KINDS,
    NodeKey,
    NodeKind,
    field,
    is_field_of,
    kind_of,
    named_children,
    node_key,
    node_text,
)

# Identifier-shaped nodes that may become references.
_CANDIDATE_KINDS = frozenset({
    NodeKind.IDENTIFIER,
    NodeKind.SHORTHAND_IDENTIFIER,
    NodeKind.SHORTHAND_PATTERN,
})

# Pattern wrappers an assignment target can sit inside.
_PATTERN_KINDS = frozenset({
    NodeKind.ARRAY_PATTERN,
    NodeKind.OBJECT_PATTERN,
    NodeKind.PAIR_PATTERN,
    NodeKind.REST_PATTERN,
    NodeKind.ASSIGNMENT_PATTERN,
    NodeKind.OBJECT_ASSIGNMENT_PATTERN,
})


def pattern_identifiers(pattern: Optional[Node]) -> List[Node]:
    """Binding identifiers introduced by a declaration pattern, in source order."""
    kind = kind_of(pattern)
    if kind in (NodeKind.IDENTIFIER, NodeKind.SHORTHAND_PATTERN):
        return [pattern]
    if kind in (NodeKind.ARRAY_PATTERN, NodeKind.OBJECT_PATTERN, NodeKind.REST_PATTERN,
                NodeKind.FORMAL_PARAMETERS):
        found = []
        for child in named_children(pattern):
            found.extend(pattern_identifiers(child))
        return found
    if kind is NodeKind.PAIR_PATTERN:
        return pattern_identifiers(field(pattern, 'value'))
    if kind in (NodeKind.ASSIGNMENT_PATTERN, NodeKind.OBJECT_ASSIGNMENT_PATTERN):
        return pattern_identifiers(field(pattern, 'left'))
    if kind is NodeKind.TS_PARAMETER:
        return pattern_identifiers(field(pattern, 'pattern'))
    return []


def function_parameters(function: Node) -> List[Node]:
    """Parameter binding identifiers of any function-like node."""
    single = field(function, 'parameter')
    if single is not None:
        return pattern_identifiers(single)
    return pattern_identifiers(field(function, 'parameters'))


class ScopeBuilder:
    """Walks a tree once and returns a ``ScopeResolver`` over the result."""

    def __init__(self, global_names: Iterable[str] = ()):
        """
        Args:
            global_names: Ambient globals (``window``, ``JSON``...) that resolve
                to bindings with no definitions.
        """
        self.global_names = tuple(global_names)
        self._scopes_by_block: Dict[NodeKey, Scope] = {}
        self._declared: Set[NodeKey] = set()
        self._init_writes: Set[NodeKey] = set()
        self._not_references: Set[NodeKey] = set()

    def build(self, root: Node) -> ScopeResolver:
        global_scope = Scope('module', root)
        self._scopes_by_block[node_key(root)] = global_scope
        for name in self.global_names:
            global_scope.variables[name] = Binding(name, global_scope)

        candidates: List[Tuple[Node, Scope]] = []
        stack: List[Tuple[Node, Scope]] = [(root, global_scope)]
        while stack:
            node, scope = stack.pop()
            kind = kind_of(node)
            if kind is NodeKind.TYPE_ONLY:
                continue
            inner = self._enter(node, kind, scope, global_scope)
            if kind in _CANDIDATE_KINDS:
                candidates.append((node, inner))
            stack.extend((child, inner) for child in reversed(node.children))

        resolver = ScopeResolver(global_scope, self._scopes_by_block)
        for identifier, scope in candidates:
            reference = self._make_reference(identifier, scope)
            if reference is None:
                continue
            scope.references.append(reference)
            binding = resolver.resolve(scope, identifier)
            if binding is None:
                global_scope.through.append(reference)
            else:
                reference.resolved = binding
                binding.references.append(reference)
        return resolver

    # ------------------------------------------------------------------
    # Scopes and declarations
    # ------------------------------------------------------------------

    def _open(self, kind: str, block: Node, upper: Scope) -> Scope:
        scope = Scope(kind, block, upper)
        upper.child_scopes.append(scope)
        self._scopes_by_block[node_key(block)] = scope
        return scope

    def _declare(self, scope: Scope, identifier: Node, def_type: DefinitionType, node: Node):
        name = node_text(identifier)
        binding = scope.variables.get(name)
        if binding is None:
            binding = Binding(name, scope)
            scope.variables[name] = binding
        binding.identifiers.append(identifier)
        binding.defs.append(Definition(def_type, identifier, node))
        self._declared.add(node_key(identifier))

    def _declare_function(self, function: Node, scope: Scope) -> Scope:
        function_scope = self._open('function', function, scope)
        for identifier in function_parameters(function):
            self._declare(function_scope, identifier, DefinitionType.PARAMETER, function)
        return function_scope

    def _enter(self, node: Node, kind: NodeKind, scope: Scope, global_scope: Scope) -> Scope:
        """Record what ``node`` declares and return the scope its children live in."""
        if kind is NodeKind.FUNCTION_DECLARATION:
            name = field(node, 'name')
            if name is not None:
                self._declare(scope, name, DefinitionType.FUNCTION_NAME, node)
            return self._declare_function(node, scope)

        if kind in FUNCTION_KINDS:
            function_scope = self._declare_function(node, scope)
            name = field(node, 'name')
            if kind is NodeKind.FUNCTION_EXPRESSION and kind_of(name) is NodeKind.IDENTIFIER:
                self._declare(function_scope, name, DefinitionType.FUNCTION_NAME, node)
            elif kind is NodeKind.METHOD and name is not None:
                self._not_references.add(node_key(name))
            return function_scope

        if kind is NodeKind.CLASS_DECLARATION:
            name = field(node, 'name')
            if kind_of(name) is NodeKind.IDENTIFIER:
                self._declare(scope, name, DefinitionType.CLASS_NAME, node)
            return self._open('class', node, scope)

        if kind is NodeKind.CLASS_EXPRESSION:
            class_scope = self._open('class', node, scope)
            name = field(node, 'name')
            if kind_of(name) is NodeKind.IDENTIFIER:
                self._declare(class_scope, name, DefinitionType.CLASS_NAME, node)
            return class_scope

        if kind is NodeKind.STATEMENT_BLOCK:
            parent = node.parent
            if kind_of(parent) in FUNCTION_KINDS and is_field_of(node, parent, 'body'):
                return scope
            return self._open('block', node, scope)

        if kind is NodeKind.FOR:
            return self._open('for', node, scope)

        if kind is NodeKind.FOR_IN:
            for_scope = self._open('for', node, scope)
            declaration_kind = field(node, 'kind')
            if declaration_kind is not None:
                target = scope.variable_scope() if declaration_kind.type == 'var' else for_scope
                for identifier in pattern_identifiers(field(node, 'left')):
                    self._declare(target, identifier, DefinitionType.VARIABLE, node)
                    self._init_writes.add(node_key(identifier))
            return for_scope

        if kind is NodeKind.CATCH:
            catch_scope = self._open('catch', node, scope)
            for identifier in pattern_identifiers(field(node, 'parameter')):
                self._declare(catch_scope, identifier, DefinitionType.CATCH_CLAUSE, node)
            return catch_scope

        if kind is NodeKind.SWITCH_BODY:
            return self._open('switch', node, scope)

        if kind is NodeKind.DECLARATOR:
            is_var = kind_of(node.parent) is NodeKind.VAR_DECLARATION
            target = scope.variable_scope() if is_var else scope
            has_init = field(node, 'value') is not None
            for identifier in pattern_identifiers(field(node, 'name')):
                self._declare(target, identifier, DefinitionType.VARIABLE, node)
                if has_init:
                    self._init_writes.add(node_key(identifier))
            return scope

        if kind is NodeKind.IMPORT_CLAUSE:
            for child in named_children(node):
                if kind_of(child) is NodeKind.IDENTIFIER:
                    self._declare(global_scope, child, DefinitionType.IMPORT_BINDING, node)
            return scope

        if kind is NodeKind.NAMESPACE_IMPORT:
            for child in named_children(node):
                if kind_of(child) is NodeKind.IDENTIFIER:
                    self._declare(global_scope, child, DefinitionType.IMPORT_BINDING, node)
            return scope

        if kind is NodeKind.IMPORT_SPECIFIER:
            name, alias = field(node, 'name'), field(node, 'alias')
            local = alias if alias is not None else name
            if kind_of(local) is NodeKind.IDENTIFIER:
                self._declare(global_scope, local, DefinitionType.IMPORT_BINDING, node)
            if alias is not None and name is not None:
                self._not_references.add(node_key(name))
            return scope

        if kind is NodeKind.EXPORT_SPECIFIER:
            alias = field(node, 'alias')
            if alias is not None:
                self._not_references.add(node_key(alias))
            return scope

        return scope

    # ------------------------------------------------------------------
    # References
    # ------------------------------------------------------------------

    def _make_reference(self, identifier: Node, scope: Scope) -> Optional[Reference]:
        key = node_key(identifier)
        if key in self._declared:
            if key in self._init_writes:
                return Reference(identifier, scope, is_write=True, init=True)
            return None
        if key in self._not_references or _is_jsx_element_name(identifier):
            return None
        return Reference(identifier, scope, is_write=_is_write_target(identifier))


def _is_jsx_element_name(identifier: Node) -> bool:
    """``<Foo.Bar>`` and ``<div>`` name elements; they are not variable reads."""
    current = identifier
    parent = current.parent
    while kind_of(parent) in (NodeKind.MEMBER, NodeKind.JSX_NAME_PART):
        current, parent = parent, parent.parent
    return kind_of(parent) is NodeKind.JSX_ELEMENT_NAME_HOLDER and is_field_of(current, parent, 'name')


def _is_write_target(identifier: Node) -> bool:
    current = identifier
    parent = current.parent
    while kind_of(parent) in _PATTERN_KINDS:
        if is_field_of(current, parent, 'right'):
            # default value inside a pattern is a read
            return False
        current, parent = parent, parent.parent
    parent_kind = kind_of(parent)
    if parent_kind in (NodeKind.ASSIGNMENT, NodeKind.AUGMENTED_ASSIGNMENT):
        return is_field_of(current, parent, 'left')
    if parent_kind is NodeKind.UPDATE:
        return True
    return kind_of(identifier) is NodeKind.SHORTHAND_PATTERN
