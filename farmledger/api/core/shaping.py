"""
Numeric coercion for aggregate rows

PostgreSQL NUMERIC columns arrive as ``Decimal`` and any aggregate over an
empty LEFT JOIN arrives as ``None``. Everything that leaves a repository goes
through these helpers so a missing row reads as zero, never as null or NaN.
"""

import math
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping, Optional


def to_number(value: Any) -> float:
    """Coerce a driver value to float, treating None/blank/garbage as 0"""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, Decimal):
        result = float(value)
    elif isinstance(value, (int, float)):
        result = float(value)
    else:
        try:
            result = float(Decimal(str(value).strip()))
        except (InvalidOperation, ValueError):
            return 0.0
    if math.isnan(result) or math.isinf(result):
        return 0.0
    return result


def to_int(value: Any) -> int:
    """Coerce a COUNT(*) style value to int"""
    return int(to_number(value))


def percentage(numerator: Any, denominator: Any, guard: Any = None) -> float:
    """
    numerator / denominator * 100 rounded to 2 places

    Returns 0 when the denominator (or the optional guard value) is not
    positive.
    """
    denom = to_number(denominator)
    check = denom if guard is None else to_number(guard)
    if check <= 0 or denom <= 0:
        return 0.0
    return round(to_number(numerator) / denom * 100, 2)


def shape_row(
    row: Optional[Mapping[str, Any]],
    numeric: Iterable[str] = (),
    integer: Iterable[str] = (),
) -> Optional[dict]:
    """
    Copy a result mapping, coercing the named numeric and integer columns

    Columns not named are passed through untouched.
    """
    if row is None:
        return None
    shaped = dict(row)
    for key in numeric:
        shaped[key] = to_number(shaped.get(key))
    for key in integer:
        shaped[key] = to_int(shaped.get(key))
    return shaped


def shape_rows(
    rows: Iterable[Mapping[str, Any]],
    numeric: Iterable[str] = (),
    integer: Iterable[str] = (),
) -> list[dict]:
    numeric = tuple(numeric)
    integer = tuple(integer)
    return [shape_row(row, numeric, integer) for row in rows]
