# contract_kernel/validation.py
"""
Rule data model for the condition engine.

Provides:
- ValidationLevel: Severity of a rule (only ERROR can fail a check pass)
- GroupingType: How a grouped rule combines its sub-predicates
- Rule: A named, leveled, lazily evaluated predicate
- SubRuleResult: Captured outcome of one sub-predicate inside a group
- FailureRecord: Reporter-facing view of a failed rule
- CheckResult: Discriminated result returned by soft-mode checks
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, List, Optional, Tuple

if TYPE_CHECKING:
    from .failures import AggregateFailure


Predicate = Callable[[], bool]


class ValidationLevel(Enum):
    """Severity levels for rules."""
    ERROR = "error"       # Fails the check pass
    WARNING = "warning"   # Informational, only surfaced through a reporter


class GroupingType(Enum):
    """How a rule combines sub-predicates."""
    NONE = "none"
    ANY_OF = "any_of"
    ALL_OF = "all_of"


_CODE_SEPARATOR = re.compile(r"[\W_]+")


def derive_code(message: str) -> str:
    """
    Derive the internal rule key from a message.

    "amount must be > 0!" -> "AMOUNT_MUST_BE_0"
    """
    return _CODE_SEPARATOR.sub("_", message.strip().upper()).rstrip("_")


@dataclass(frozen=True)
class Remediation:
    """Suggested fix attached to a rule."""
    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class SubRuleResult:
    """Outcome of one sub-predicate, evaluated once when its group is declared."""
    message: str
    success: bool
    remediation: Optional[Remediation] = None


@dataclass(frozen=True)
class FailureRecord:
    """A failed rule as handed to reporters."""
    message: str
    code: Optional[str] = None  # Only set when the caller supplied it
    remediation: Optional[Remediation] = None
    level: ValidationLevel = ValidationLevel.ERROR

    def describe(self) -> str:
        """Single-line description: '[CODE] message (fix: ...)'."""
        text = f"[{self.code}] {self.message}" if self.code else self.message
        if self.remediation:
            text += f" (fix: {self.remediation})"
        return text


@dataclass(frozen=True)
class Rule:
    """
    A single declared validation term.

    The predicate is stored, not called; it runs when the owning
    ConditionBuilder is checked. For grouped rules the predicate only
    replays the outcome computed at declaration time.
    """

    message: str
    predicate: Predicate = field(compare=False, repr=False)
    code: str = ""  # Derived from message unless supplied explicitly
    code_explicit: bool = False
    level: ValidationLevel = ValidationLevel.ERROR
    remediation: Optional[Remediation] = None
    sub_results: Tuple[SubRuleResult, ...] = ()
    grouping: GroupingType = GroupingType.NONE

    def __post_init__(self):
        if not self.code:
            object.__setattr__(self, "code", derive_code(self.message))

    @property
    def display_code(self) -> Optional[str]:
        """Code shown to users, None unless it was supplied explicitly."""
        return self.code if self.code_explicit else None

    @property
    def is_group(self) -> bool:
        return self.grouping is not GroupingType.NONE

    def evaluate(self) -> bool:
        return bool(self.predicate())

    def to_record(self) -> FailureRecord:
        return FailureRecord(
            message=self.message,
            code=self.display_code,
            remediation=self.remediation,
            level=self.level,
        )


@dataclass(frozen=True)
class CheckResult:
    """
    Result of a soft-mode check pass.

    Exactly one of success/failure holds; failures carry the
    AggregateFailure that strict mode would have raised.
    """

    error: Optional["AggregateFailure"] = None
    warnings: Tuple[FailureRecord, ...] = ()

    @classmethod
    def success(cls, warnings: Tuple[FailureRecord, ...] = ()) -> "CheckResult":
        return cls(error=None, warnings=tuple(warnings))

    @classmethod
    def failure(
        cls,
        error: "AggregateFailure",
        warnings: Tuple[FailureRecord, ...] = ()
    ) -> "CheckResult":
        return cls(error=error, warnings=tuple(warnings))

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    def __bool__(self) -> bool:
        return self.is_success

    @property
    def failures(self) -> List[FailureRecord]:
        """Failed ERROR-level rules, empty on success."""
        return list(self.error.failures) if self.error else []

    def raise_for_failure(self) -> None:
        """Raise the carried AggregateFailure, if any."""
        if self.error is not None:
            raise self.error


__all__ = [
    "Predicate",
    "ValidationLevel",
    "GroupingType",
    "Remediation",
    "SubRuleResult",
    "FailureRecord",
    "Rule",
    "CheckResult",
    "derive_code",
]
