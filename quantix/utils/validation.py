"""Boundary checks for amounts, quantities and prices handed to a wallet.

Wallet operations accept whatever callers pass (form input, JSON, websocket
payloads), so every number is coerced and checked here before any state is
touched. Failures raise ValidationError, which the ledger turns into an
InvalidAmount result.
"""
from __future__ import annotations
from typing import Any, Optional
import numpy as np


class ValidationError(ValueError):
    """Raised when parameter validation fails."""
    pass


def _finite(value: Any, name: str) -> float:
    # bool is an int subclass; True is not an amount
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    try:
        val = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    if not np.isfinite(val):
        raise ValidationError(f"{name} must be finite, got {val}")
    return val


def validate_positive(value: Any, name: str, allow_zero: bool = False) -> float:
    """Coerce value to a finite float that is > 0 (>= 0 with allow_zero).

    Raises:
        ValidationError: If value is not numeric, not finite or out of range.
    """
    val = _finite(value, name)
    if val < 0 or (val == 0 and not allow_zero):
        bound = "non-negative" if allow_zero else "positive"
        raise ValidationError(f"{name} must be {bound}, got {val}")
    return val


def validate_range(value: Any, name: str, min_val: Optional[float] = None,
                   max_val: Optional[float] = None) -> float:
    """Coerce value to a finite float within [min_val, max_val].

    Either bound may be None for an open side.

    Raises:
        ValidationError: If value is not numeric, not finite or outside the bounds.
    """
    val = _finite(value, name)
    if min_val is not None and val < min_val:
        raise ValidationError(f"{name} must be >= {min_val}, got {val}")
    if max_val is not None and val > max_val:
        raise ValidationError(f"{name} must be <= {max_val}, got {val}")
    return val


def usable_price(value: Any) -> Optional[float]:
    """Return value as a float if it is a usable market price, else None.

    Missing, non-numeric, non-finite and non-positive quotes are all treated
    as "no price" rather than errors.
    """
    if value is None:
        return None
    try:
        return validate_positive(value, "price")
    except ValidationError:
        return None
