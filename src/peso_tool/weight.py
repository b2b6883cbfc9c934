"""Parser y validacion del peso ingresado como texto libre."""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

MAX_WEIGHT = Decimal("1400")
_ONE_DECIMAL = Decimal("0.1")
_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

REASON_EMPTY = "empty"
REASON_NOT_A_NUMBER = "not_a_number"
REASON_OUT_OF_RANGE = "out_of_range"


@dataclass(frozen=True)
class WeightParseResult:
    """Outcome of parsing a weight; exactly one of value/reason is set."""

    value: float | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.value is not None


def parse_weight(raw: str | None) -> WeightParseResult:
    """Turn free text into a weight rounded to one decimal.

    A comma is accepted as decimal separator. Ties round half away from
    zero on the decimal text, so ``"179.95"`` gives ``180.0``.

    Args:
        raw: Text as typed by the user.

    Returns:
        Parse result; never raises.
    """
    normalized = (raw or "").strip().replace(",", ".")
    if not normalized:
        return WeightParseResult(reason=REASON_EMPTY)
    if not _NUMBER_RE.match(normalized):
        return WeightParseResult(reason=REASON_NOT_A_NUMBER)
    try:
        number = Decimal(normalized)
    except InvalidOperation:
        return WeightParseResult(reason=REASON_NOT_A_NUMBER)
    if not number.is_finite():
        return WeightParseResult(reason=REASON_NOT_A_NUMBER)
    if number <= 0 or number > MAX_WEIGHT:
        return WeightParseResult(reason=REASON_OUT_OF_RANGE)
    rounded = number.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP)
    if rounded <= 0:
        return WeightParseResult(reason=REASON_OUT_OF_RANGE)
    return WeightParseResult(value=float(rounded))


def format_weight(value: float) -> str:
    """Format without trailing ``.0`` for whole numbers."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.1f}"
