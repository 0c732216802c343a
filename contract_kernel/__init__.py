# contract_kernel/__init__.py
"""
Contract Kernel - design-by-contract validation for Python callables.

This package provides:
- ConditionBuilder: Named, leveled, groupable rules for one validation pass
- AggregateFailure: Every failed rule of a pass in one structured error
- CheckResult: Non-raising outcome of a soft check
- Reporters: Console (rich), logging and callback sinks for soft checks
- Contract / with_contract: Pre/post-condition lifecycle around an operation
- predicates: Null-tolerant helpers for writing rule predicates
"""

from .validation import (
    CheckResult,
    FailureRecord,
    GroupingType,
    Remediation,
    Rule,
    SubRuleResult,
    ValidationLevel,
    derive_code,
)

from .failures import AggregateFailure, render_failures

from .groups import ConditionGroup, SubConditionCollector, SubPredicate, evaluate_group

from .builder import (
    ConditionBuilder,
    ConditionSetConsumedError,
    QuickFixHolder,
    conditions,
    soft_conditions,
)

from .reporters import (
    CallbackReporter,
    ConsoleReporter,
    LoggingReporter,
    ValidationReporter,
    get_default_reporter,
)

from .contract import (
    Contract,
    ContractInvocation,
    ContractRegistry,
    ContractState,
    ContractStateError,
    bundle_arguments,
    get_registry,
    run_postconditions,
    run_preconditions,
    with_contract,
)

from .config import Settings, configure_logging, settings

__all__ = [
    # Data model
    "CheckResult",
    "FailureRecord",
    "GroupingType",
    "Remediation",
    "Rule",
    "SubRuleResult",
    "ValidationLevel",
    "derive_code",

    # Failures
    "AggregateFailure",
    "render_failures",

    # Groups
    "ConditionGroup",
    "SubConditionCollector",
    "SubPredicate",
    "evaluate_group",

    # Builder
    "ConditionBuilder",
    "ConditionSetConsumedError",
    "QuickFixHolder",
    "conditions",
    "soft_conditions",

    # Reporters
    "CallbackReporter",
    "ConsoleReporter",
    "LoggingReporter",
    "ValidationReporter",
    "get_default_reporter",

    # Contracts
    "Contract",
    "ContractInvocation",
    "ContractRegistry",
    "ContractState",
    "ContractStateError",
    "bundle_arguments",
    "get_registry",
    "run_postconditions",
    "run_preconditions",
    "with_contract",

    # Config
    "Settings",
    "configure_logging",
    "settings",
]
