"""Decimal helpers shared by models and engine.

Every monetary amount in loan-coverage is a ``Decimal``. Floats are accepted at
the boundary only through their ``str()`` form, never through binary
conversion.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from loan_coverage.exceptions import InvalidInputError

ZERO = Decimal("0")
DEFAULT_QUANTUM = Decimal("0.01")


def to_decimal(value: Any, field: str = "amount") -> Decimal:
    """Convert a caller-supplied amount to ``Decimal``.

    Parameters
    ----------
    value : Any
        Decimal, int, float or numeric string. ``None`` is treated as zero.
    field : str
        Field name used in the error message.

    Returns
    -------
    Decimal
        The converted, finite amount.

    Raises
    ------
    InvalidInputError
        If the value is a bool, not numeric, or not finite.
    """
    if value is None:
        return ZERO
    if isinstance(value, bool):
        raise InvalidInputError(f"{field} must be numeric, got bool")

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation as exc:
            raise InvalidInputError(f"{field} is not a number: {value!r}") from exc
    else:
        raise InvalidInputError(f"{field} must be numeric, got {type(value).__name__}")

    if not result.is_finite():
        raise InvalidInputError(f"{field} must be finite, got {value!r}")
    return result


def quantize(value: Decimal, quantum: Decimal = DEFAULT_QUANTUM) -> Decimal:
    """Round to the currency unit, half up."""
    return value.quantize(quantum, rounding=ROUND_HALF_UP)
