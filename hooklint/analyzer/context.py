"""Per-file analysis context shared by the classifiers and the detector."""
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional
from tree_sitter import Node, Tree

from .parser import LanguageParser
from .scope import ScopeResolver
from .scope_builder import ScopeBuilder


# Names that resolve to ambient bindings without definitions.
DEFAULT_GLOBALS = (
    'window', 'document', 'navigator', 'console', 'localStorage', 'sessionStorage',
    'fetch', 'setTimeout', 'clearTimeout', 'setInterval', 'clearInterval',
    'requestAnimationFrame', 'cancelAnimationFrame', 'JSON', 'Math', 'Date',
    'Promise', 'Object', 'Array', 'Number', 'String', 'Boolean', 'Symbol',
    'Map', 'Set', 'WeakMap', 'WeakSet', 'Error', 'RegExp', 'URL',
    'AbortController', 'undefined', 'NaN', 'Infinity', 'globalThis',
)


@dataclass(frozen=True)
class HookNames:
    """The React primitives recognized by shape."""
    effect_hooks: FrozenSet[str] = frozenset({'useEffect'})
    state_hooks: FrozenSet[str] = frozenset({'useState'})
    namespaces: FrozenSet[str] = frozenset({'React'})
    component_wrappers: FrozenSet[str] = frozenset({'memo', 'forwardRef'})


class AnalysisContext:
    """Everything the analyzer may read while looking at one file.

    The tree and the scope graph are built once and never mutated, so any
    number of classifier calls against the same context give the same
    answers.
    """

    def __init__(self, tree: Tree, source_code: bytes, hooks: Optional[HookNames] = None,
                 global_names: Iterable[str] = DEFAULT_GLOBALS):
        self.tree = tree
        self.source_code = source_code
        self.hooks = hooks or HookNames()
        self.scopes: ScopeResolver = ScopeBuilder(global_names).build(tree.root_node)

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @classmethod
    def from_source(cls, source_code: str | bytes, language: str = 'javascript',
                    hooks: Optional[HookNames] = None,
                    global_names: Iterable[str] = DEFAULT_GLOBALS) -> 'AnalysisContext':
        """Parse ``source_code`` and build a context for it."""
        if isinstance(source_code, str):
            source_code = source_code.encode('utf-8')
        tree = LanguageParser(language).parse_source(source_code)
        return cls(tree, source_code, hooks=hooks, global_names=global_names)
