"""Local numeric cross-check of extracted answer values."""

import re
from dataclasses import dataclass

CONFLICT_THRESHOLD = 0.10

_SCALES = {
    "thousand": 1e3,
    "k": 1e3,
    "million": 1e6,
    "mn": 1e6,
    "m": 1e6,
    "billion": 1e9,
    "bn": 1e9,
    "b": 1e9,
    "trillion": 1e12,
    "tn": 1e12,
    "t": 1e12,
}

_DIGIT_RUN_RE = re.compile(r"\d[\d,]*(?:\.\d+)?")

# The number must stand on its own: "Q3", "FY2023" and "3rd" do not match.
_MAGNITUDE_RE = re.compile(
    r"(?P<sign>-)?\s*(?P<currency>[$€£¥])?\s*"
    r"(?<![\w.])(?P<number>\d[\d,]*(?:\.\d+)?)"
    r"\s*(?P<scale>(?:thousand|million|billion|trillion)s?|mn|bn|tn|k|m|b|t)?(?![A-Za-z])"
    r"\s*(?P<percent>%)?",
    re.IGNORECASE,
)

_YEAR_RANGE = range(1900, 2101)


@dataclass(frozen=True)
class Magnitude:
    amount: float
    percent: bool = False


def parse_magnitude(value: str) -> Magnitude | None:
    """Read the single amount in ``value``, applying scale words and %.

    "$196.63 billion" -> 196.63e9, "15%" -> 15 (percent). Returns None when
    the value holds no number, more than one number ("FY2023: $5 billion",
    "Q3 2024"), a number glued to letters, or a bare year.
    """
    if len(_DIGIT_RUN_RE.findall(value)) != 1:
        return None
    match = _MAGNITUDE_RE.search(value)
    if match is None:
        return None
    number = match.group("number")
    scale = match.group("scale")
    percent = match.group("percent") is not None
    if not (scale or percent or match.group("currency")) and number.isdigit():
        if int(number) in _YEAR_RANGE:
            return None
    amount = float(number.replace(",", ""))
    if scale:
        amount *= _SCALES[scale.lower().rstrip("s")]
    if match.group("sign"):
        amount = -amount
    return Magnitude(amount=amount, percent=percent)


def values_conflict(values: list[str], threshold: float = CONFLICT_THRESHOLD) -> bool | None:
    """Decide whether numeric values differ by more than ``threshold``.

    Returns None when the check cannot decide: fewer than two values, a
    value without exactly one standalone number, a mix of percentages and
    plain amounts, or amounts that are zero or change sign.
    """
    if len(values) < 2:
        return None
    magnitudes = [parse_magnitude(v) for v in values]
    if any(m is None for m in magnitudes):
        return None
    kinds = {m.percent for m in magnitudes if m is not None}
    if len(kinds) > 1:
        return None
    amounts = [abs(m.amount) for m in magnitudes if m is not None]
    signs = {m.amount > 0 for m in magnitudes if m is not None}
    low, high = min(amounts), max(amounts)
    if low == 0 or len(signs) > 1:
        return None
    return high / low - 1 > threshold
