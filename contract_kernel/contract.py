# contract_kernel/contract.py
"""
Contract Protocol - Pre/Post-Condition Lifecycle

This module wraps a unit of work with a contract's checks:

    Idle --run_preconditions--> PreChecked --run_postconditions--> Accepted
      \\                            \\
       +-- failure --> Rejected      +-- failure --> Rejected

A failed check is final for that invocation; nothing is retried and the
operation is never called after a rejected pre-check.

Usage:
    class ApproveOrderContract(Contract):
        def validate_pre(self, order):
            conditions(lambda c: c.means("amount must be positive", lambda: order.amount > 0))

    @with_contract(ApproveOrderContract)
    def approve(order): ...
"""

import inspect
import logging
import threading
from enum import Enum
from functools import wraps
from typing import Any, Callable, Dict, Generic, Optional, Sequence, Type, TypeVar, Union

from .config import settings
from .failures import AggregateFailure


logger = logging.getLogger(__name__)

I = TypeVar("I")
O = TypeVar("O")

MAX_TUPLE_ARITY = 5


# =============================================================================
# CONTRACT BASE CLASS
# =============================================================================

class Contract(Generic[I, O]):
    """
    Base class for contracts.

    Override the hooks you need; each one declares rules on a fresh
    ConditionBuilder (usually via conditions()) and raises
    AggregateFailure when they do not hold.
    """

    def validate_pre(self, input: I) -> None:
        """Check preconditions before the operation runs."""

    def validate_post(self, input: I, result: O) -> None:
        """Check postconditions against the operation's result."""

    def validate_invariant(self, input: I, result: O) -> None:
        """Check invariants after the postconditions."""

    @property
    def name(self) -> str:
        return self.__class__.__name__


# =============================================================================
# ENTRY POINTS
# =============================================================================

def run_preconditions(contract: Contract, input: Any) -> None:
    """Run a contract's preconditions; raises AggregateFailure on failure."""
    contract.validate_pre(input)


def run_postconditions(contract: Contract, input: Any, result: Any) -> None:
    """Run a contract's postconditions and invariants; raises AggregateFailure on failure."""
    contract.validate_post(input, result)
    contract.validate_invariant(input, result)


# =============================================================================
# INVOCATION STATE MACHINE
# =============================================================================

class ContractState(Enum):
    """Lifecycle states of one contract invocation."""
    IDLE = "idle"
    PRE_CHECKED = "pre_checked"
    ACCEPTED = "accepted"    # post-checked, terminal
    REJECTED = "rejected"    # a check failed, terminal


class ContractStateError(RuntimeError):
    """Raised on an invalid contract lifecycle transition."""


class ContractInvocation(Generic[I, O]):
    """
    One pass of a contract around one call.

    Not reusable: once ACCEPTED or REJECTED, start a new invocation.
    """

    def __init__(self, contract: Contract[I, O]):
        self.contract = contract
        self.state = ContractState.IDLE
        self.input: Optional[I] = None
        self.failure: Optional[AggregateFailure] = None

    def _require(self, expected: ContractState, action: str) -> None:
        if self.state is not expected:
            raise ContractStateError(
                f"Cannot {action} for {self.contract.name}: state is {self.state.value}, "
                f"expected {expected.value}"
            )

    def _reject(self, phase: str, failure: AggregateFailure) -> None:
        self.state = ContractState.REJECTED
        self.failure = failure
        logger.warning(
            f"[CONTRACT] {phase} FAILED: {self.contract.name} - {len(failure)} rule(s) violated"
        )

    def pre_check(self, input: I) -> None:
        """Idle -> PreChecked, or Rejected."""
        self._require(ContractState.IDLE, "run preconditions")
        self.input = input
        try:
            run_preconditions(self.contract, input)
        except AggregateFailure as failure:
            self._reject("Pre-condition", failure)
            raise
        self.state = ContractState.PRE_CHECKED

    def post_check(self, result: O) -> None:
        """PreChecked -> Accepted, or Rejected."""
        self._require(ContractState.PRE_CHECKED, "run postconditions")
        try:
            run_postconditions(self.contract, self.input, result)
        except AggregateFailure as failure:
            self._reject("Post-condition", failure)
            raise
        self.state = ContractState.ACCEPTED

    def invoke(self, operation: Callable[..., O], *args, **kwargs) -> O:
        """Pre-check, call ``operation``, post-check, return its result."""
        self.pre_check(bundle_arguments(args, kwargs, operation))
        result = operation(*args, **kwargs)
        self.post_check(result)
        return result

    @property
    def accepted(self) -> bool:
        return self.state is ContractState.ACCEPTED

    @property
    def rejected(self) -> bool:
        return self.state is ContractState.REJECTED


# =============================================================================
# ARGUMENT ADAPTER
# =============================================================================

def bundle_arguments(
    args: Sequence[Any],
    kwargs: Optional[Dict[str, Any]] = None,
    func: Optional[Callable] = None
) -> Any:
    """
    Adapt call arguments to a contract's single input value.

    One argument is passed as-is, two to five become a tuple, anything
    else becomes a list. With ``func``, keyword arguments and defaults
    are placed in signature order and a leading self/cls is dropped.
    """
    values = list(args)
    if func is not None:
        try:
            signature = inspect.signature(func)
        except (TypeError, ValueError):
            signature = None
        if signature is not None:
            bound = signature.bind(*args, **(kwargs or {}))
            bound.apply_defaults()
            values = []
            for name, value in bound.arguments.items():
                kind = signature.parameters[name].kind
                if kind is inspect.Parameter.VAR_POSITIONAL:
                    values.extend(value)
                elif kind is inspect.Parameter.VAR_KEYWORD:
                    values.extend(value.values())
                else:
                    values.append(value)
            params = list(signature.parameters)
            if params and params[0] in ("self", "cls") and values:
                values = values[1:]
    elif kwargs:
        values.extend(kwargs.values())

    if len(values) == 1:
        return values[0]
    if 2 <= len(values) <= MAX_TUPLE_ARITY:
        return tuple(values)
    return values


# =============================================================================
# CONTRACT REGISTRY
# =============================================================================

C = TypeVar("C", bound=Contract)


class ContractRegistry:
    """Thread-safe cache of one instance per contract class."""

    def __init__(self):
        self._cache: Dict[Type[Contract], Contract] = {}
        self._lock = threading.Lock()

    def get_or_create(self, contract_cls: Type[C]) -> C:
        """Return the shared instance of ``contract_cls``, creating it once."""
        with self._lock:
            instance = self._cache.get(contract_cls)
            if instance is None:
                instance = contract_cls()
                self._cache[contract_cls] = instance
                logger.info(f"[REGISTRY] Contract registered: {contract_cls.__name__}")
            return instance

    def register(self, contract: Contract) -> None:
        """Use a pre-built instance for its class."""
        with self._lock:
            self._cache[type(contract)] = contract
        logger.info(f"[REGISTRY] Contract registered: {contract.name}")

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __contains__(self, contract_cls: Type[Contract]) -> bool:
        with self._lock:
            return contract_cls in self._cache

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)


_global_registry: Optional[ContractRegistry] = None
_global_registry_lock = threading.Lock()


def get_registry() -> ContractRegistry:
    """Get or create the global ContractRegistry instance."""
    global _global_registry

    with _global_registry_lock:
        if _global_registry is None:
            _global_registry = ContractRegistry()
    return _global_registry


# =============================================================================
# DECORATOR
# =============================================================================

def with_contract(
    contract: Union[Contract, Type[Contract]],
    registry: Optional[ContractRegistry] = None
) -> Callable[[Callable[..., O]], Callable[..., O]]:
    """
    Wrap a function or method with a contract's pre/post checks.

    ``contract`` may be an instance or a class; classes are resolved
    through the registry on each call so all callers share one instance.
    Checks are skipped entirely when settings.enabled is False.
    """

    def resolve() -> Contract:
        if isinstance(contract, Contract):
            return contract
        target = registry if registry is not None else get_registry()
        return target.get_or_create(contract)

    def decorator(func: Callable[..., O]) -> Callable[..., O]:
        @wraps(func)
        def wrapped(*args, **kwargs):
            if not settings.enabled:
                return func(*args, **kwargs)
            return ContractInvocation(resolve()).invoke(func, *args, **kwargs)

        wrapped.__contract__ = contract
        return wrapped

    return decorator


__all__ = [
    "Contract",
    "ContractState",
    "ContractStateError",
    "ContractInvocation",
    "ContractRegistry",
    "bundle_arguments",
    "get_registry",
    "run_preconditions",
    "run_postconditions",
    "with_contract",
]
