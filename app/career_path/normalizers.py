"""
Parsers for the free-text duration and salary fields a model returns.

Both parsers answer ``None`` instead of guessing: a career stage measured in
minutes or a salary of "Profile update" is a sign the model answered a
different question, and the caller decides what to do with that.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

SALARY_RANGE_MULTIPLIER = 1.3
MIN_YEARS_EXPERIENCE = 0.25

_LEADING_DURATION_RE = re.compile(
    r"^\D*?(\d+(?:\.\d+)?)"
    r"(?:\s*(?:-|–|—|to)\s*(\d+(?:\.\d+)?))?"
    r"\s*\+?\s*-?\s*([a-z]+)?",
    re.IGNORECASE,
)
_TRAILING_MONTHS_RE = re.compile(r"^\s*(?:,|and|&)?\s*(\d+(?:\.\d+)?)\s*(?:months?|mos?)\b", re.IGNORECASE)
_YEAR_UNITS = {"year", "years", "yr", "yrs", "y"}
_MONTH_UNITS = {"month", "months", "mo", "mos"}
_REJECTED_UNITS = {
    "second", "seconds", "sec", "secs",
    "minute", "minutes", "min", "mins",
    "hour", "hours", "hr", "hrs", "h",
    "day", "days", "d",
    "week", "weeks", "wk", "wks",
}
_SALARY_TOKEN_RE = re.compile(r"(\d+(?:,\d{3})*(?:\.\d+)?)\s*([kKmM])?\b")


@dataclass(frozen=True)
class SalaryRange:
    low: int
    high: int


def parse_years_experience(
    value: str | int | float | None,
    *,
    floor: float = MIN_YEARS_EXPERIENCE,
) -> float | None:
    """Read a career-stage duration as a number of years.

    ``"2 years"`` -> 2.0, ``"3 months"`` -> 0.25, ``"15 minutes"`` -> None.
    A range starting below the floor (``"0-2 years"``) reads as the floor.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        return float(value) if value >= floor else None

    text = str(value).strip()
    match = _LEADING_DURATION_RE.match(text)
    if not match:
        return None

    # Only the unit right after the leading number or range counts, so
    # "5 years in HR" stays five years.
    unit = (match.group(3) or "").lower()
    if unit in _REJECTED_UNITS:
        return None

    lower = float(match.group(1))
    upper = float(match.group(2)) if match.group(2) else None
    if unit in _MONTH_UNITS:
        lower = lower / 12
        upper = upper / 12 if upper is not None else None
    elif upper is None and unit in _YEAR_UNITS:
        extra = _TRAILING_MONTHS_RE.match(text[match.end():])
        if extra:
            lower += float(extra.group(1)) / 12

    lower = round(lower, 2)
    if lower >= floor:
        return lower
    if upper is not None and upper >= floor:
        return floor
    return None


def _salary_amount(number: str, suffix: str | None) -> float:
    amount = float(number.replace(",", ""))
    if suffix in {"k", "K"}:
        amount *= 1_000
    elif suffix in {"m", "M"}:
        amount *= 1_000_000
    return amount


def parse_salary(
    value: str | int | float | None,
    *,
    multiplier: float = SALARY_RANGE_MULTIPLIER,
) -> SalaryRange | None:
    """Read a salary band.

    Two figures are taken as the band. A single figure becomes a band whose
    high/low ratio equals ``multiplier``, centred on the figure; this is an
    approximation of typical band width, not market data.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        amounts = [float(value)] if math.isfinite(value) else []
    else:
        amounts = [
            _salary_amount(number, suffix)
            for number, suffix in _SALARY_TOKEN_RE.findall(str(value))
        ][:2]

    amounts = [amount for amount in amounts if amount > 0]
    if not amounts:
        return None

    if len(amounts) == 2:
        low, high = sorted(amounts)
        return SalaryRange(low=int(round(low)), high=int(round(high)))

    spread = math.sqrt(multiplier) if multiplier > 1 else 1.0
    return SalaryRange(
        low=int(round(amounts[0] / spread)),
        high=int(round(amounts[0] * spread)),
    )
