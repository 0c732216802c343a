# contract_kernel/groups.py
"""
Grouped rules - ANY_OF / ALL_OF evaluation and reusable rule bundles.

evaluate_group() is a pure function: it runs every sub-predicate once,
in declaration order, and decides which outcomes are worth reporting.

    ANY_OF, empty      -> False, []
    ANY_OF, non-empty  -> any(success); successes only if passed, else all
    ALL_OF, empty      -> True,  []
    ALL_OF, non-empty  -> all(success); failures only if failed, else []
"""

from abc import ABC, abstractmethod
from typing import (
    TYPE_CHECKING,
    Generic,
    Iterable,
    List,
    NamedTuple,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
    Union,
)

from .validation import GroupingType, Predicate, Remediation, SubRuleResult

if TYPE_CHECKING:
    from .builder import ConditionBuilder


T = TypeVar("T")


class SubPredicate(NamedTuple):
    """A named sub-predicate awaiting evaluation."""
    message: str
    predicate: Predicate
    remediation: Optional[Remediation] = None


def evaluate_group(
    sub_predicates: Sequence[SubPredicate],
    grouping: GroupingType
) -> Tuple[bool, List[SubRuleResult]]:
    """
    Evaluate a group of sub-predicates.

    Returns:
        (overall_success, report_details)
    """
    if grouping is GroupingType.NONE:
        raise ValueError("evaluate_group requires ANY_OF or ALL_OF grouping")

    if not sub_predicates:
        # "At least one" cannot hold over nothing; "all" holds vacuously
        return grouping is GroupingType.ALL_OF, []

    evaluated = [
        SubRuleResult(message=sub.message, success=bool(sub.predicate()), remediation=sub.remediation)
        for sub in sub_predicates
    ]

    if grouping is GroupingType.ANY_OF:
        overall = any(r.success for r in evaluated)
        details = [r for r in evaluated if r.success] if overall else evaluated
    else:
        overall = all(r.success for r in evaluated)
        details = [] if overall else [r for r in evaluated if not r.success]

    return overall, details


class SubConditionCollector:
    """
    Collects the sub-predicates of one grouped rule.

    Usage:
        builder.means_any_of(
            "at least one contact channel",
            lambda group: (group
                .means("email present", lambda: bool(customer.email))
                .means("phone present", lambda: bool(customer.phone))),
        )
    """

    def __init__(self):
        self.sub_predicates: List[SubPredicate] = []

    def means(self, message: str, predicate: Predicate) -> "SubConditionCollector":
        """Add a named sub-predicate."""
        self.sub_predicates.append(SubPredicate(message, predicate))
        return self

    def quick_fix(self, message: str, fix: str) -> "_SubQuickFix":
        """Start a sub-predicate that carries a suggested fix."""
        return _SubQuickFix(self, message, fix)

    def extend(
        self,
        items: Iterable[Union[SubPredicate, Tuple[str, Predicate], Tuple[str, Predicate, Optional[str]]]]
    ) -> "SubConditionCollector":
        """Add (message, predicate[, fix]) tuples in order."""
        for item in items:
            if isinstance(item, SubPredicate):
                self.sub_predicates.append(item)
                continue
            message, predicate, *rest = item
            fix = rest[0] if rest else None
            self.sub_predicates.append(
                SubPredicate(message, predicate, Remediation(fix) if fix else None)
            )
        return self

    def __len__(self) -> int:
        return len(self.sub_predicates)


class _SubQuickFix:
    """Pending sub-predicate with a remediation, completed by means()."""

    def __init__(self, collector: SubConditionCollector, message: str, fix: str):
        self._collector = collector
        self.message = message
        self.fix = fix

    def means(self, predicate: Predicate) -> SubConditionCollector:
        self._collector.sub_predicates.append(
            SubPredicate(self.message, predicate, Remediation(self.fix))
        )
        return self._collector


class ConditionGroup(ABC, Generic[T]):
    """
    A reusable bundle of rules about one kind of target.

    Usage:
        class CustomerConditions(ConditionGroup[Customer]):
            def apply_to(self, builder, target):
                builder.means("email must be valid", lambda: ...)

        builder.apply_group(customer, CustomerConditions())
    """

    @abstractmethod
    def apply_to(self, builder: "ConditionBuilder", target: T) -> None:
        """Declare this bundle's rules on ``builder``."""


__all__ = [
    "SubPredicate",
    "SubConditionCollector",
    "ConditionGroup",
    "evaluate_group",
]
