# contract_kernel/predicates.py
"""
Predicate helpers for use inside rule predicates.

All helpers are pure and tolerate None: a None subject fails positive
checks ("has", "contains_text", ...) unless documented otherwise.

    builder.means("items must contain A and B", lambda: has_all(order.items, ["A", "B"]))
    builder.means("email must be valid", lambda: matches_pattern(customer.email, Patterns.EMAIL))
"""

import math
import re
from datetime import date, datetime
from typing import Any, Callable, Collection, Iterable, Optional, Union


Number = Union[int, float]
Temporal = Union[date, datetime]

_MISSING = object()


class Patterns:
    """Common regular expressions."""
    EMAIL = re.compile(r"^[A-Za-z0-9+_.-]+@[A-Za-z0-9.-]+$")
    URL = re.compile(r"^(https?://)?([\w-]+\.)+[\w-]+(/[\w\-./?%&=]*)?$")
    UUID = re.compile(
        r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[1-5][0-9a-fA-F]{3}-[89ABab][0-9a-fA-F]{3}-[0-9a-fA-F]{12}$"
    )
    PHONE = re.compile(r"^\+?[0-9]{1,3}[- ]?[0-9]{1,4}[- ]?[0-9]{4,10}$")
    DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


# =============================================================================
# Collections
# =============================================================================

def has(items: Optional[Iterable[Any]], element: Any) -> bool:
    return items is not None and element in items


def does_not_have(items: Optional[Iterable[Any]], element: Any) -> bool:
    return not has(items, element)


def has_all(items: Optional[Iterable[Any]], others: Iterable[Any]) -> bool:
    """True if every element of ``others`` is in ``items``; anything has all of nothing."""
    wanted = list(others)
    if not wanted:
        return True
    if items is None:
        return False
    present = list(items)
    return all(element in present for element in wanted)


def does_not_have_all(items: Optional[Iterable[Any]], others: Iterable[Any]) -> bool:
    return not has_all(items, others)


def has_count_in_range(items: Optional[Iterable[Any]], low: int, high: int) -> bool:
    """Inclusive range check on the number of items."""
    return items is not None and low <= sum(1 for _ in items) <= high


def count_is_outside_range(items: Optional[Iterable[Any]], low: int, high: int) -> bool:
    return not has_count_in_range(items, low, high)


def is_empty(items: Optional[Iterable[Any]]) -> bool:
    """None counts as empty."""
    if items is None:
        return True
    return next(iter(items), _MISSING) is _MISSING


def is_not_empty(items: Optional[Iterable[Any]]) -> bool:
    return not is_empty(items)


def contains_duplicates(items: Optional[Collection[Any]]) -> bool:
    if items is None:
        return False
    seen = []
    for element in items:
        if element in seen:
            return True
        seen.append(element)
    return False


def has_unique_elements(items: Optional[Collection[Any]]) -> bool:
    return items is not None and not contains_duplicates(items)


def contains_nones(items: Optional[Collection[Any]]) -> bool:
    return items is not None and any(element is None for element in items)


def all_satisfy(items: Optional[Iterable[Any]], predicate: Callable[[Any], bool]) -> bool:
    """None fails; an empty collection passes."""
    return items is not None and all(predicate(element) for element in items)


def any_satisfies(items: Optional[Iterable[Any]], predicate: Callable[[Any], bool]) -> bool:
    return items is not None and any(predicate(element) for element in items)


def none_satisfy(items: Optional[Iterable[Any]], predicate: Callable[[Any], bool]) -> bool:
    return items is not None and not any(predicate(element) for element in items)


def not_all_satisfy(items: Optional[Iterable[Any]], predicate: Callable[[Any], bool]) -> bool:
    return items is not None and not all(predicate(element) for element in items)


# =============================================================================
# Objects
# =============================================================================

def is_none(value: Any) -> bool:
    return value is None


def is_not_none(value: Any) -> bool:
    return value is not None


def is_one_of(value: Any, options: Collection[Any]) -> bool:
    return value in options


def is_none_of(value: Any, options: Collection[Any]) -> bool:
    return value not in options


def is_instance_of(value: Any, kind: type) -> bool:
    return isinstance(value, kind)


def is_not_instance_of(value: Any, kind: type) -> bool:
    return not isinstance(value, kind)


# =============================================================================
# Strings
# =============================================================================

def is_blank(text: Optional[str]) -> bool:
    """None, empty and whitespace-only strings are blank."""
    return text is None or not text.strip()


def is_not_blank(text: Optional[str]) -> bool:
    return not is_blank(text)


def _fold(text: str, ignore_case: bool) -> str:
    return text.casefold() if ignore_case else text


def contains_text(text: Optional[str], sub: str, ignore_case: bool = False) -> bool:
    return text is not None and _fold(sub, ignore_case) in _fold(text, ignore_case)


def does_not_contain_text(text: Optional[str], sub: str, ignore_case: bool = False) -> bool:
    return not contains_text(text, sub, ignore_case)


def starts_with(text: Optional[str], prefix: str, ignore_case: bool = False) -> bool:
    return text is not None and _fold(text, ignore_case).startswith(_fold(prefix, ignore_case))


def does_not_start_with(text: Optional[str], prefix: str, ignore_case: bool = False) -> bool:
    return not starts_with(text, prefix, ignore_case)


def ends_with(text: Optional[str], suffix: str, ignore_case: bool = False) -> bool:
    return text is not None and _fold(text, ignore_case).endswith(_fold(suffix, ignore_case))


def does_not_end_with(text: Optional[str], suffix: str, ignore_case: bool = False) -> bool:
    return not ends_with(text, suffix, ignore_case)


def has_exact_length(text: Optional[str], length: int) -> bool:
    return text is not None and len(text) == length


def does_not_have_exact_length(text: Optional[str], length: int) -> bool:
    return not has_exact_length(text, length)


def length_in_range(text: Optional[str], low: int, high: int) -> bool:
    return text is not None and low <= len(text) <= high


def length_is_outside_range(text: Optional[str], low: int, high: int) -> bool:
    return not length_in_range(text, low, high)


def matches_pattern(text: Optional[str], pattern: Union[str, "re.Pattern[str]"]) -> bool:
    """Full match of ``text`` against ``pattern``."""
    return text is not None and re.fullmatch(pattern, text) is not None


def does_not_match_pattern(text: Optional[str], pattern: Union[str, "re.Pattern[str]"]) -> bool:
    return not matches_pattern(text, pattern)


def is_all_upper_case(text: Optional[str]) -> bool:
    """Letters are all upper case; text without letters fails."""
    letters = [ch for ch in text or "" if ch.isalpha()]
    return bool(letters) and all(ch.isupper() for ch in letters)


def is_all_lower_case(text: Optional[str]) -> bool:
    letters = [ch for ch in text or "" if ch.isalpha()]
    return bool(letters) and all(ch.islower() for ch in letters)


def is_alphanumeric(text: Optional[str]) -> bool:
    return bool(text) and text.isalnum()


# =============================================================================
# Numbers
# =============================================================================

def between(value: Optional[Number], low: Number, high: Number) -> bool:
    """Inclusive range check."""
    return value is not None and low <= value <= high


def is_outside(value: Optional[Number], low: Number, high: Number) -> bool:
    return not between(value, low, high)


def is_positive(value: Optional[Number]) -> bool:
    return value is not None and value > 0


def is_negative(value: Optional[Number]) -> bool:
    return value is not None and value < 0


def is_zero(value: Optional[Number]) -> bool:
    return value is not None and value == 0


def is_close_to(value: Optional[Number], target: Number, tolerance: float) -> bool:
    return value is not None and math.isclose(value, target, rel_tol=0.0, abs_tol=tolerance)


def is_not_close_to(value: Optional[Number], target: Number, tolerance: float) -> bool:
    return not is_close_to(value, target, tolerance)


# =============================================================================
# Dates and times
# =============================================================================

def date_between(value: Optional[Temporal], start: Temporal, end: Temporal) -> bool:
    """Inclusive date range check."""
    return value is not None and start <= value <= end


def is_outside_date_range(value: Optional[Temporal], start: Temporal, end: Temporal) -> bool:
    return not date_between(value, start, end)


def is_before(value: Optional[Temporal], other: Temporal) -> bool:
    return value is not None and value < other


def is_after(value: Optional[Temporal], other: Temporal) -> bool:
    return value is not None and value > other


def is_not_before(value: Optional[Temporal], other: Temporal) -> bool:
    return value is not None and value >= other


def is_not_after(value: Optional[Temporal], other: Temporal) -> bool:
    return value is not None and value <= other


def _now_like(value: Temporal, now: Optional[Temporal]) -> Temporal:
    if now is not None:
        return now
    if isinstance(value, datetime):
        return datetime.now(value.tzinfo)
    return date.today()


def is_in_the_past(value: Optional[Temporal], now: Optional[Temporal] = None) -> bool:
    return value is not None and value < _now_like(value, now)


def is_in_the_future(value: Optional[Temporal], now: Optional[Temporal] = None) -> bool:
    return value is not None and value > _now_like(value, now)
