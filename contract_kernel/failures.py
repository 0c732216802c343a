# contract_kernel/failures.py
"""
Failure aggregation and report rendering.

A check pass never stops at the first broken rule: every failed
ERROR-level rule is collected into one AggregateFailure whose message
lists them all in declaration order.

Rendered form:

    Validation failed with 2 errors:
    - [ORDER_AMOUNT] amount must be between 1 and 10000
    - at least one contact channel (fix: add an email or a phone number)
      - [FAIL] email present
      - [FAIL] phone present
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .validation import FailureRecord, GroupingType, Rule, SubRuleResult


SUB_RESULT_INDENT = "  "


def _pluralize(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def _render_sub_result(sub: SubRuleResult, grouping: GroupingType) -> str:
    if grouping is GroupingType.ANY_OF:
        mark = "PASS" if sub.success else "FAIL"
        line = f"{SUB_RESULT_INDENT}- [{mark}] {sub.message}"
    else:
        # ALL_OF keeps only failed sub-results, so no mark is needed
        line = f"{SUB_RESULT_INDENT}- {sub.message}"
    if sub.remediation:
        line += f" (fix: {sub.remediation})"
    return line


def render_failures(rules: Sequence[Rule]) -> str:
    """Render failed rules as a deterministic multi-line report."""
    if not rules:
        return "Validation passed with no errors"

    lines: List[str] = [f"Validation failed with {_pluralize(len(rules), 'error')}:"]
    for rule in rules:
        lines.append(f"- {rule.to_record().describe()}")
        for sub in rule.sub_results:
            lines.append(_render_sub_result(sub, rule.grouping))

    return "\n".join(lines).rstrip()


class AggregateFailure(Exception):
    """
    Raised when one or more ERROR-level rules fail in a check pass.

    The message is rendered once here and never recomputed, so predicates
    are not re-evaluated when the error is printed or logged.
    """

    def __init__(self, rules: Iterable[Rule]):
        self.rules: Tuple[Rule, ...] = tuple(rules)
        self.message: str = render_failures(self.rules)
        super().__init__(self.message)

    @property
    def failures(self) -> Tuple[FailureRecord, ...]:
        return tuple(rule.to_record() for rule in self.rules)

    @property
    def codes(self) -> List[str]:
        """Explicitly supplied codes of the failed rules."""
        return [rule.code for rule in self.rules if rule.code_explicit]

    def by_key(self) -> Dict[str, Rule]:
        """Failed rules keyed by their (possibly derived) code."""
        return {rule.code: rule for rule in self.rules}

    def find(self, message: str) -> Optional[Rule]:
        """Return the failed rule declared with ``message``, if any."""
        return next((r for r in self.rules if r.message == message), None)

    def __len__(self) -> int:
        return len(self.rules)

    def __str__(self) -> str:
        return self.message

    def __reduce__(self):
        # args holds the rendered message, so rebuild from the rules instead
        return (self.__class__, (self.rules,))


__all__ = [
    "AggregateFailure",
    "render_failures",
]
