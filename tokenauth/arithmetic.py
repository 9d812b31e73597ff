"""Checked integer arithmetic for balances, allowances, nonces and weights."""

from typing import Optional, Type

from .errors import ArithmeticOverflow, ArithmeticUnderflow, InvalidAmount


def require_amount(value: int, name: str = "amount") -> int:
    """Reject anything that is not a non-negative integer."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmount(f"{name} must be an integer", {"field": name})
    if value < 0:
        raise InvalidAmount(f"{name} must be non-negative", {"field": name})
    return value


def checked_add(
    a: int,
    b: int,
    limit: Optional[int] = None,
    error: Type[ArithmeticOverflow] = ArithmeticOverflow,
) -> int:
    """
    Add two non-negative integers, failing instead of exceeding `limit`.

    Without a limit the result is unbounded (Python ints), which is the
    ledger's amount model.
    """
    result = a + b
    if limit is not None and result > limit:
        raise error(f"{a} + {b} exceeds {limit}")
    return result


def checked_sub(a: int, b: int) -> int:
    """Subtract, failing when the result would be negative."""
    if b > a:
        raise ArithmeticUnderflow(f"{a} - {b} is negative")
    return a - b
