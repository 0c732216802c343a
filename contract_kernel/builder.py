# contract_kernel/builder.py
"""
Condition Builder - collects rules for one validation pass and runs them.

A builder is single-use: rules are declared, the builder is checked once
with check_all() (strict, raises) or check_all_soft() (returns a
CheckResult), and it is then discarded. Plain rules are evaluated lazily
at check time; grouped rules evaluate their sub-predicates when declared
and replay the outcome at check time.

Usage:
    builder = ConditionBuilder()
    builder.means("amount must be between 1 and 10000", lambda: 1 <= order.amount <= 10_000)
    builder.means("items must not be empty", lambda: bool(order.items), code="ORDER_ITEMS")
    builder.quick_fix("customer needs an email", "ask for an email address").means(
        lambda: bool(customer.email)
    )
    builder.check_all()

Or as a context manager (checked strictly on a clean exit):
    with ConditionBuilder() as c:
        c.means("amount must be positive", lambda: order.amount > 0)
"""

import logging
from typing import Callable, List, Optional, Tuple

from .failures import AggregateFailure
from .groups import ConditionGroup, SubConditionCollector, T, evaluate_group
from .reporters import ValidationReporter, get_default_reporter
from .validation import (
    CheckResult,
    FailureRecord,
    GroupingType,
    Predicate,
    Remediation,
    Rule,
    ValidationLevel,
)


logger = logging.getLogger(__name__)

GroupBlock = Callable[[SubConditionCollector], object]


class ConditionSetConsumedError(RuntimeError):
    """Raised when a ConditionBuilder is reused after it was checked."""


class QuickFixHolder:
    """
    A rule message plus suggested fix, waiting for its predicate.

    Returned by ConditionBuilder.quick_fix(); finish it with means(),
    means_any_of() or means_all_of().
    """

    def __init__(
        self,
        builder: "ConditionBuilder",
        message: str,
        fix: str,
        code: Optional[str] = None
    ):
        self._builder = builder
        self.message = message
        self.fix = fix
        self.code = code

    def means(self, predicate: Predicate) -> "ConditionBuilder":
        return self._builder.means(self.message, predicate, code=self.code, remediation=self.fix)

    def means_any_of(self, block: GroupBlock) -> "ConditionBuilder":
        return self._builder.declare_group(
            self.message, GroupingType.ANY_OF, block, code=self.code, remediation=self.fix
        )

    def means_all_of(self, block: GroupBlock) -> "ConditionBuilder":
        return self._builder.declare_group(
            self.message, GroupingType.ALL_OF, block, code=self.code, remediation=self.fix
        )


class ConditionBuilder:
    """
    Mutable rule collector for a single validation pass.

    Declaration order is preserved and becomes the order of lines in
    the failure report. Only ERROR-level rules can fail a check.
    """

    def __init__(self):
        self.rules: List[Rule] = []
        self.failed_rules: List[Rule] = []
        self._consumed = False

    # ========================================================================
    # Declaration
    # ========================================================================

    def _ensure_open(self, message: str) -> None:
        if self._consumed:
            raise ConditionSetConsumedError(
                f"Cannot declare '{message}': condition set was already checked"
            )

    def _add(self, rule: Rule) -> "ConditionBuilder":
        self._ensure_open(rule.message)
        self.rules.append(rule)
        logger.debug(f"[CONDITIONS] Declared {rule.level.value} rule: {rule.code}")
        return self

    def means(
        self,
        message: str,
        predicate: Predicate,
        *,
        code: Optional[str] = None,
        remediation: Optional[str] = None,
        level: ValidationLevel = ValidationLevel.ERROR
    ) -> "ConditionBuilder":
        """
        Declare a rule.

        Args:
            message: Human-readable description, shown on failure
            predicate: Zero-argument check, called at check time
            code: Stable identifier; shown as [CODE] only when given here
            remediation: Suggested fix appended to the failure line
            level: ERROR (default) or WARNING
        """
        explicit = bool(code and code.strip())
        return self._add(Rule(
            message=message,
            predicate=predicate,
            code=code.strip() if explicit else "",
            code_explicit=explicit,
            level=level,
            remediation=Remediation(remediation) if remediation else None,
        ))

    def must_be(self, message: str, predicate: Predicate, *, code: Optional[str] = None) -> "ConditionBuilder":
        """Declare an ERROR-level rule."""
        return self.means(message, predicate, code=code, level=ValidationLevel.ERROR)

    def may_be(self, message: str, predicate: Predicate, *, code: Optional[str] = None) -> "ConditionBuilder":
        """Declare a WARNING-level rule; it never fails a check."""
        return self.means(message, predicate, code=code, level=ValidationLevel.WARNING)

    def quick_fix(self, message: str, fix: str, *, code: Optional[str] = None) -> QuickFixHolder:
        """Start a rule that carries a suggested fix."""
        return QuickFixHolder(self, message, fix, code)

    def declare_group(
        self,
        message: str,
        grouping: GroupingType,
        block: GroupBlock,
        *,
        code: Optional[str] = None,
        remediation: Optional[str] = None,
        level: ValidationLevel = ValidationLevel.ERROR
    ) -> "ConditionBuilder":
        """
        Declare an ANY_OF / ALL_OF rule.

        ``block`` receives a SubConditionCollector and declares the
        sub-predicates. They are evaluated right away; the rule itself
        only replays the combined outcome at check time.
        """
        self._ensure_open(message)
        collector = SubConditionCollector()
        block(collector)
        overall, details = evaluate_group(collector.sub_predicates, grouping)

        explicit = bool(code and code.strip())
        return self._add(Rule(
            message=message,
            predicate=lambda: overall,
            code=code.strip() if explicit else "",
            code_explicit=explicit,
            level=level,
            remediation=Remediation(remediation) if remediation else None,
            sub_results=tuple(details),
            grouping=grouping,
        ))

    def means_any_of(
        self,
        message: str,
        block: GroupBlock,
        *,
        code: Optional[str] = None,
        remediation: Optional[str] = None
    ) -> "ConditionBuilder":
        """Declare a rule that holds when at least one sub-predicate holds."""
        return self.declare_group(message, GroupingType.ANY_OF, block, code=code, remediation=remediation)

    def means_all_of(
        self,
        message: str,
        block: GroupBlock,
        *,
        code: Optional[str] = None,
        remediation: Optional[str] = None
    ) -> "ConditionBuilder":
        """Declare a rule that holds when every sub-predicate holds."""
        return self.declare_group(message, GroupingType.ALL_OF, block, code=code, remediation=remediation)

    def apply_group(self, target: T, group: ConditionGroup[T]) -> "ConditionBuilder":
        """Declare a reusable bundle of rules about ``target``."""
        group.apply_to(self, target)
        return self

    # ========================================================================
    # Evaluation
    # ========================================================================

    def _run(self, levels: Tuple[ValidationLevel, ...]) -> List[Rule]:
        """Evaluate each rule of the given levels once; return the failed ones."""
        if self._consumed:
            raise ConditionSetConsumedError("Condition set was already checked")
        self._consumed = True
        self.failed_rules = [r for r in self.rules if r.level in levels and not self._holds(r)]
        return self.failed_rules

    @staticmethod
    def _holds(rule: Rule) -> bool:
        if rule.level is ValidationLevel.ERROR:
            return rule.evaluate()
        # A broken WARNING predicate counts as a failed warning; it must not
        # change the outcome of the pass.
        try:
            return rule.evaluate()
        except Exception as e:
            logger.warning(
                f"[CONDITIONS] Warning rule '{rule.message}' raised {type(e).__name__}: {e}"
            )
            return False

    def check_all(self) -> None:
        """
        Strict mode: raise AggregateFailure if any ERROR-level rule fails.

        WARNING-level rules are not evaluated here.
        """
        failed = self._run((ValidationLevel.ERROR,))
        logger.debug(f"[CONDITIONS] Strict check: {len(failed)}/{len(self.rules)} rule(s) failed")
        if failed:
            raise AggregateFailure(failed)

    def check_all_soft(self) -> CheckResult:
        """Soft mode: never raises, returns a CheckResult."""
        failed = self._run((ValidationLevel.ERROR, ValidationLevel.WARNING))
        errors = [r for r in failed if r.level is ValidationLevel.ERROR]
        warnings: Tuple[FailureRecord, ...] = tuple(
            r.to_record() for r in failed if r.level is ValidationLevel.WARNING
        )
        logger.debug(
            f"[CONDITIONS] Soft check: {len(errors)} error(s), {len(warnings)} warning(s)"
        )
        if errors:
            return CheckResult.failure(AggregateFailure(errors), warnings)
        return CheckResult.success(warnings)

    @property
    def consumed(self) -> bool:
        return self._consumed

    def __len__(self) -> int:
        return len(self.rules)

    def __enter__(self) -> "ConditionBuilder":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            self.check_all()
        return False


# =============================================================================
# Block helpers
# =============================================================================

def conditions(block: Callable[[ConditionBuilder], object]) -> None:
    """Declare rules with ``block`` on a fresh builder and check strictly."""
    builder = ConditionBuilder()
    block(builder)
    builder.check_all()


def soft_conditions(
    block: Callable[[ConditionBuilder], object],
    reporter: Optional[ValidationReporter] = None
) -> CheckResult:
    """
    Declare rules with ``block`` on a fresh builder and check softly.

    Failed ERROR and WARNING rules are handed to ``reporter`` (the
    configured default when omitted) in declaration order.
    """
    builder = ConditionBuilder()
    block(builder)
    result = builder.check_all_soft()

    if builder.failed_rules:
        if reporter is None:
            reporter = get_default_reporter()
        reporter.report(
            [r.to_record() for r in builder.failed_rules]
        )

    return result


__all__ = [
    "ConditionBuilder",
    "ConditionSetConsumedError",
    "QuickFixHolder",
    "conditions",
    "soft_conditions",
]
