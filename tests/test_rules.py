"""Tests for the rule host: diagnostics, ordering and rule filtering."""
from pathlib import Path

import pytest

from hooklint.analyzer.messages import MESSAGES
from hooklint.analyzer.rules import (
    RULE_NAMES,
    Diagnostic,
    RuleRunner,
    lint_file,
    lint_source,
)


FIXTURES_DIR = Path(__file__).parent / 'fixtures' / 'components'


class TestLintSource:

    def test_reports_both_rules_at_effect_position(self):
        diagnostics = lint_source((FIXTURES_DIR / 'internal_state.jsx').read_text())

        assert [(d.line, d.column) for d in diagnostics] == [(4, 2), (4, 2)]
        assert [d.rule for d in diagnostics] == ['no-internal-effect', 'no-parent-child-coupling']
        assert all(d.message == MESSAGES[d.message_id] for d in diagnostics)
        assert all(d.file_path == '<source>' for d in diagnostics)

    def test_sorted_by_position(self):
        code = (
            "function Form({ onClose, onOpen }) {\n"
            "  const [isOpen, setIsOpen] = useState(false);\n"
            "  useEffect(() => { onOpen(); }, []);\n"
            "  useEffect(() => { onClose(); }, [isOpen]);\n"
            "}\n"
        )
        diagnostics = lint_source(code)

        assert [(d.line, d.rule) for d in diagnostics] == [
            (3, 'no-parent-child-coupling'),
            (4, 'no-internal-effect'),
            (4, 'no-parent-child-coupling'),
        ]

    def test_nested_effects_are_all_visited(self):
        code = (
            "const Outer = ({ onA }) => {\n"
            "  const Inner = ({ onB }) => {\n"
            "    useEffect(() => { onB(); }, []);\n"
            "  };\n"
            "  useEffect(() => { onA(); }, []);\n"
            "};\n"
        )
        assert [d.line for d in lint_source(code)] == [3, 5]

    def test_disabled_rules(self):
        diagnostics = lint_source(
            (FIXTURES_DIR / 'internal_state.jsx').read_text(),
            disabled_rules=['no-internal-effect'],
        )
        assert [d.rule for d in diagnostics] == ['no-parent-child-coupling']

    def test_namespaced_hooks(self):
        code = (
            "const Child = ({ onFetched }) => {\n"
            "  const [data, setData] = React.useState();\n"
            "  React.useEffect(() => {\n"
            "    onFetched(data);\n"
            "  }, [onFetched, data]);\n"
            "};\n"
        )
        assert len(lint_source(code)) == 2

    def test_tsx_component(self):
        code = (
            "type Props = { onFetched: (data: string) => void };\n"
            "export const Child = ({ onFetched }: Props) => {\n"
            "  const [data, setData] = useState('');\n"
            "  useEffect(() => {\n"
            "    onFetched(data);\n"
            "  }, [onFetched, data]);\n"
            "  return <span>{data}</span>;\n"
            "};\n"
        )
        diagnostics = lint_source(code, language='tsx')
        assert [d.rule for d in diagnostics] == ['no-internal-effect', 'no-parent-child-coupling']

    def test_clean_source(self):
        assert lint_source((FIXTURES_DIR / 'clock.jsx').read_text()) == []


class TestRuleRunner:

    def test_unknown_rule(self):
        with pytest.raises(ValueError, match="no-such-rule"):
            RuleRunner(['no-such-rule'])

    def test_select_drops_disabled(self):
        diagnostics = lint_source((FIXTURES_DIR / 'reset_all_state.jsx').read_text())
        runner = RuleRunner(['no-reset-all-state-on-prop-change'])

        assert [d.rule for d in diagnostics] == ['no-internal-effect', 'no-reset-all-state-on-prop-change']
        assert [d.rule for d in runner.select(diagnostics)] == ['no-internal-effect']

    def test_rule_catalogue(self):
        assert RULE_NAMES == (
            'no-internal-effect',
            'no-parent-child-coupling',
            'no-reset-all-state-on-prop-change',
        )


class TestLintFile:

    def test_fixture_file(self):
        path = FIXTURES_DIR / 'member_callback.jsx'
        diagnostics = lint_file(path)

        assert {d.file_path for d in diagnostics} == {str(path)}
        assert len(diagnostics) == 2

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / 'notes.md'
        path.write_text("useEffect(() => {}, []);")
        assert lint_file(path) is None

    def test_missing_file(self, tmp_path):
        assert lint_file(tmp_path / 'missing.jsx') is None

    def test_diagnostic_dict_round_trip(self):
        diagnostic = lint_file(FIXTURES_DIR / 'internal_state.jsx')[0]
        assert Diagnostic.from_dict(diagnostic.to_dict()) == diagnostic
