# tests/unit/test_condition_builder.py
"""
Tests for ConditionBuilder

Tests:
- Rule declaration (plain, explicit code, remediation, warnings)
- Strict mode (check_all) aggregation
- Soft mode (check_all_soft) results
- Single-use lifecycle
- Block helpers (conditions, soft_conditions)
"""

import inspect

import pytest
from unittest.mock import MagicMock

from contract_kernel.builder import (
    ConditionBuilder,
    ConditionSetConsumedError,
    conditions,
    soft_conditions,
)
from contract_kernel.failures import AggregateFailure
from contract_kernel.reporters import CallbackReporter
from contract_kernel.validation import GroupingType, ValidationLevel


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def mixed_rules():
    """Declare a fixed rule set on a fresh builder."""
    def declare(builder):
        builder.means("first passes", lambda: True)
        builder.means("second fails", lambda: False)
        builder.may_be("warning fails", lambda: False)
        builder.means("third fails", lambda: False, code="THIRD")
        return builder
    return declare


# =============================================================================
# DECLARATION
# =============================================================================

class TestDeclaration:
    """Tests for the rule declaration surface."""

    def test_predicate_not_called_at_declaration(self):
        """Plain predicates run only when the builder is checked."""
        predicate = MagicMock(return_value=True)
        builder = ConditionBuilder()
        builder.means("lazy rule", predicate)

        predicate.assert_not_called()
        builder.check_all()
        predicate.assert_called_once()

    def test_plain_rule_has_derived_hidden_code(self):
        """A rule without explicit code gets an internal key only."""
        builder = ConditionBuilder().means("amount must be > 0!", lambda: True)
        rule = builder.rules[0]

        assert rule.code == "AMOUNT_MUST_BE_0"
        assert not rule.code_explicit
        assert rule.display_code is None
        assert rule.level is ValidationLevel.ERROR
        assert rule.grouping is GroupingType.NONE

    def test_explicit_code(self):
        """An explicit code is kept verbatim and marked explicit."""
        builder = ConditionBuilder().means("amount", lambda: True, code="ORDER_AMOUNT")
        rule = builder.rules[0]

        assert rule.code == "ORDER_AMOUNT"
        assert rule.display_code == "ORDER_AMOUNT"

    def test_blank_code_is_not_explicit(self):
        """A blank code counts as no code."""
        rule = ConditionBuilder().means("amount", lambda: True, code="  ").rules[0]

        assert not rule.code_explicit
        assert rule.code == "AMOUNT"

    def test_quick_fix_attaches_remediation(self):
        """quick_fix().means() stores the suggested fix."""
        builder = ConditionBuilder()
        builder.quick_fix("email required", "ask for an email").means(lambda: True)
        rule = builder.rules[0]

        assert str(rule.remediation) == "ask for an email"
        assert not rule.code_explicit

    def test_quick_fix_with_code(self):
        """quick_fix() with a code makes the code explicit."""
        builder = ConditionBuilder()
        builder.quick_fix("email required", "ask for an email", code="EMAIL").means(lambda: True)

        assert builder.rules[0].display_code == "EMAIL"

    def test_declarations_chain_in_order(self):
        """Declarations return the builder and keep insertion order."""
        builder = (ConditionBuilder()
                   .means("a", lambda: True)
                   .must_be("b", lambda: True)
                   .may_be("c", lambda: True))

        assert [r.message for r in builder.rules] == ["a", "b", "c"]
        assert builder.rules[2].level is ValidationLevel.WARNING
        assert len(builder) == 3


# =============================================================================
# STRICT MODE
# =============================================================================

class TestCheckAll:
    """Tests for strict check_all()."""

    def test_passes_with_no_rules(self):
        """An empty condition set passes."""
        ConditionBuilder().check_all()

    def test_raises_with_all_failed_errors_in_order(self, mixed_rules):
        """Every failed ERROR rule is reported, warnings excluded."""
        builder = mixed_rules(ConditionBuilder())

        with pytest.raises(AggregateFailure) as exc_info:
            builder.check_all()

        assert [r.message for r in exc_info.value.rules] == ["second fails", "third fails"]

    def test_warnings_never_fail(self):
        """Failed WARNING rules do not raise."""
        builder = ConditionBuilder().may_be("just a warning", lambda: False)
        builder.check_all()

    def test_warnings_not_evaluated(self):
        """Strict mode does not run WARNING predicates."""
        predicate = MagicMock(return_value=False)
        ConditionBuilder().may_be("warning", predicate).check_all()

        predicate.assert_not_called()

    def test_each_predicate_evaluated_once(self):
        """Failed rules are not re-evaluated when the error is rendered."""
        predicate = MagicMock(return_value=False)
        builder = ConditionBuilder().means("fails", predicate)

        with pytest.raises(AggregateFailure) as exc_info:
            builder.check_all()
        str(exc_info.value)

        assert predicate.call_count == 1

    def test_predicate_exception_propagates(self):
        """Errors raised inside predicates are not swallowed."""
        builder = ConditionBuilder().means("boom", lambda: 1 / 0)

        with pytest.raises(ZeroDivisionError):
            builder.check_all()

    def test_context_manager_checks_on_exit(self):
        """Leaving the with-block runs check_all()."""
        with pytest.raises(AggregateFailure):
            with ConditionBuilder() as c:
                c.means("fails", lambda: False)

    def test_context_manager_skips_check_on_error(self):
        """An exception inside the with-block is not masked."""
        with pytest.raises(KeyError):
            with ConditionBuilder() as c:
                c.means("fails", lambda: False)
                raise KeyError("inner")


# =============================================================================
# SOFT MODE
# =============================================================================

class TestCheckAllSoft:
    """Tests for soft check_all_soft()."""

    def test_success_result(self):
        """No failed ERROR rule gives a success result."""
        result = ConditionBuilder().means("ok", lambda: True).check_all_soft()

        assert result.is_success
        assert not result.is_failure
        assert result.error is None
        assert result.failures == []
        result.raise_for_failure()

    def test_failure_result_carries_aggregate(self, mixed_rules):
        """Failures are returned, not raised."""
        result = mixed_rules(ConditionBuilder()).check_all_soft()

        assert result.is_failure
        assert isinstance(result.error, AggregateFailure)
        assert [f.message for f in result.failures] == ["second fails", "third fails"]
        with pytest.raises(AggregateFailure):
            result.raise_for_failure()

    def test_warnings_collected(self, mixed_rules):
        """Failed WARNING rules are carried separately."""
        result = mixed_rules(ConditionBuilder()).check_all_soft()

        assert [w.message for w in result.warnings] == ["warning fails"]
        assert result.warnings[0].level is ValidationLevel.WARNING

    def test_success_with_warnings(self):
        """Warnings alone keep the result successful."""
        result = ConditionBuilder().may_be("warn", lambda: False).check_all_soft()

        assert result.is_success
        assert bool(result)
        assert len(result.warnings) == 1

    def test_broken_warning_predicate_is_failed_warning(self):
        """A WARNING predicate that raises neither throws nor fails the pass."""
        declare = lambda b: b.may_be("optional", lambda: 1 / 0)
        declare(ConditionBuilder()).check_all()

        result = declare(ConditionBuilder()).check_all_soft()

        assert result.is_success
        assert [w.message for w in result.warnings] == ["optional"]

    def test_broken_error_predicate_propagates(self):
        """ERROR predicates raise the same way in both modes."""
        builder = ConditionBuilder().means("boom", lambda: 1 / 0)

        with pytest.raises(ZeroDivisionError):
            builder.check_all_soft()

    def test_matches_strict_decision(self, mixed_rules):
        """Soft discriminant agrees with strict raise/no-raise."""
        soft = mixed_rules(ConditionBuilder()).check_all_soft()

        with pytest.raises(AggregateFailure) as exc_info:
            mixed_rules(ConditionBuilder()).check_all()

        assert soft.is_failure
        assert str(soft.error) == str(exc_info.value)


# =============================================================================
# LIFECYCLE
# =============================================================================

class TestLifecycle:
    """Tests for the single-use condition set."""

    def test_cannot_check_twice(self):
        """A builder is consumed by its first check."""
        builder = ConditionBuilder()
        builder.check_all()

        assert builder.consumed
        with pytest.raises(ConditionSetConsumedError):
            builder.check_all_soft()

    def test_cannot_declare_after_check(self):
        """Declaring on a consumed builder is rejected."""
        builder = ConditionBuilder()
        builder.check_all_soft()

        with pytest.raises(ConditionSetConsumedError):
            builder.means("late", lambda: True)

    def test_group_not_evaluated_after_check(self):
        """A late group declaration is rejected before its block runs."""
        calls = []
        builder = ConditionBuilder()
        builder.check_all()

        with pytest.raises(ConditionSetConsumedError):
            builder.means_any_of(
                "late group",
                lambda g: g.means("sub", lambda: calls.append(1) or True),
            )

        assert calls == []


# =============================================================================
# BLOCK HELPERS
# =============================================================================

class TestBlockHelpers:
    """Tests for conditions() and soft_conditions()."""

    def test_conditions_raises(self):
        """conditions() checks strictly."""
        with pytest.raises(AggregateFailure):
            conditions(lambda c: c.means("fails", lambda: False))

    def test_conditions_passes(self):
        """conditions() returns None when rules hold."""
        assert conditions(lambda c: c.means("ok", lambda: True)) is None

    def test_soft_conditions_reports_errors_and_warnings(self):
        """soft_conditions() hands failures to the reporter in declaration order."""
        sink = MagicMock()

        def declare(c):
            c.may_be("warn first", lambda: False)
            c.means("error second", lambda: False)
            c.means("ok", lambda: True)

        result = soft_conditions(declare, reporter=CallbackReporter(sink))

        assert result.is_failure
        sink.assert_called_once()
        reported = sink.call_args[0][0]
        assert [f.message for f in reported] == ["warn first", "error second"]

    def test_soft_conditions_silent_on_success(self):
        """Nothing is reported when every rule holds."""
        sink = MagicMock()
        result = soft_conditions(lambda c: c.means("ok", lambda: True), reporter=CallbackReporter(sink))

        assert result.is_success
        sink.assert_not_called()

    def test_soft_conditions_uses_default_reporter(self, monkeypatch):
        """Without an injected reporter the configured default is used."""
        reporter = MagicMock()
        monkeypatch.setattr(
            "contract_kernel.builder.get_default_reporter", lambda: reporter
        )

        soft_conditions(lambda c: c.means("fails", lambda: False))

        reporter.report.assert_called_once()

    def test_helpers_do_not_shadow_modules(self):
        """Package-level helpers leave the builder module reachable."""
        import contract_kernel
        import contract_kernel.builder

        assert inspect.ismodule(contract_kernel.builder)
        assert contract_kernel.builder.ConditionBuilder is ConditionBuilder
        assert contract_kernel.conditions is conditions
