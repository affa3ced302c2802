"""Rule host: run the effect detector over a file and collect diagnostics."""
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from .context import DEFAULT_GLOBALS, AnalysisContext, HookNames
from .detector import analyze_effect
from .messages import (
    AVOID_INTERNAL_EFFECT,
    AVOID_PARENT_CHILD_COUPLING,
    AVOID_RESETTING_STATE_FROM_PROPS,
    MESSAGES,
)
from .parser import LanguageParser
from .shapes import is_effect_call
from .tree_query import traverse


@dataclass(frozen=True)
class Rule:
    """A named, individually disableable check."""
    name: str
    message_id: str
    description: str


RULES = (
    Rule('no-internal-effect', AVOID_INTERNAL_EFFECT,
         "Effect whose dependencies are all internal state or props"),
    Rule('no-parent-child-coupling', AVOID_PARENT_CHILD_COUPLING,
         "Effect that calls a callback passed in by the parent"),
    Rule('no-reset-all-state-on-prop-change', AVOID_RESETTING_STATE_FROM_PROPS,
         "Effect that resets every state cell to its default when a prop changes"),
)

RULES_BY_MESSAGE = {rule.message_id: rule for rule in RULES}
RULE_NAMES = tuple(rule.name for rule in RULES)
_MESSAGE_ORDER = {rule.message_id: index for index, rule in enumerate(RULES)}


@dataclass(frozen=True)
class Diagnostic:
    """One reported finding. ``line`` is 1-based, ``column`` 0-based."""
    file_path: str
    line: int
    column: int
    rule: str
    message_id: str
    message: str

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> 'Diagnostic':
        return cls(**data)


class RuleRunner:
    """Walks a tree and reports every effect the detector flags."""

    def __init__(self, disabled_rules: Iterable[str] = ()):
        """
        Args:
            disabled_rules: Rule names to suppress

        Raises:
            ValueError: If a rule name is unknown
        """
        self.disabled_rules = frozenset(disabled_rules)
        unknown = self.disabled_rules - set(RULE_NAMES)
        if unknown:
            raise ValueError(
                f"Unknown rule(s): {', '.join(sorted(unknown))}. "
                f"Known rules: {', '.join(RULE_NAMES)}"
            )

    def select(self, diagnostics: Iterable[Diagnostic]) -> List[Diagnostic]:
        """Drop diagnostics produced by disabled rules."""
        return [d for d in diagnostics if d.rule not in self.disabled_rules]

    def run(self, ctx: AnalysisContext, file_path: str = '<source>') -> List[Diagnostic]:
        found: Dict[Tuple[int, int, str], Diagnostic] = {}

        def visit(node):
            if not is_effect_call(node, ctx.hooks):
                return
            verdict = analyze_effect(ctx, node)
            if verdict is None:
                return
            line, column = node.start_point
            for message_id in verdict.message_ids():
                rule = RULES_BY_MESSAGE[message_id]
                if rule.name in self.disabled_rules:
                    continue
                found.setdefault((line, column, message_id), Diagnostic(
                    file_path=file_path,
                    line=line + 1,
                    column=column,
                    rule=rule.name,
                    message_id=message_id,
                    message=MESSAGES[message_id],
                ))

        traverse(ctx.root, visit)
        return sorted(found.values(), key=lambda d: (d.line, d.column, _MESSAGE_ORDER[d.message_id]))


def lint_source(source_code: str | bytes, language: str = 'javascript',
                hooks: Optional[HookNames] = None,
                global_names: Iterable[str] = DEFAULT_GLOBALS,
                disabled_rules: Iterable[str] = (),
                file_path: str = '<source>') -> List[Diagnostic]:
    """Lint in-memory source code."""
    ctx = AnalysisContext.from_source(source_code, language, hooks=hooks, global_names=global_names)
    return RuleRunner(disabled_rules).run(ctx, file_path)


def lint_file(file_path: str | Path, hooks: Optional[HookNames] = None,
              global_names: Iterable[str] = DEFAULT_GLOBALS,
              disabled_rules: Iterable[str] = ()) -> Optional[List[Diagnostic]]:
    """Lint one file on disk.

    Returns:
        Diagnostics, or None if the extension is unsupported or the file
        cannot be read
    """
    file_path = Path(file_path)
    parser = LanguageParser.from_file_extension(file_path)
    if parser is None:
        return None
    try:
        source_code = file_path.read_bytes()
    except OSError:
        return None
    tree = parser.parse_source(source_code)
    ctx = AnalysisContext(tree, source_code, hooks=hooks, global_names=global_names)
    return RuleRunner(disabled_rules).run(ctx, str(file_path))
