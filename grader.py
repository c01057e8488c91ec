from __future__ import annotations

import math
import re
from typing import Any, Union

# Leading numeric prefix, e.g. "12", "-3.5", ".5", "1e3"; trailing text is ignored.
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?")

Canonical = Union[float, str]


def _num_to_clean_str(x: float) -> str:
    if math.isfinite(x) and abs(x - round(x)) < 1e-12:
        return str(int(round(x)))
    return str(x)


def _parse_number(s: str):
    m = _NUMBER_RE.match(s)
    if m is None:
        return None
    val = float(m.group(0))
    return val if math.isfinite(val) else None


def normalize(answer: Any, expected_has_percent: bool = False) -> Canonical:
    """
    Canonical form used for comparison:
      - trimmed, lowercased, thousands commas removed
      - numbers (with or without "%") become their absolute value,
        re-suffixed with "%" when the expected answer is a percentage
      - anything else stays as text
    """
    if answer is None:
        return ""

    s = str(answer).strip().lower().replace(",", "")
    num = _parse_number(s.replace("%", ""))
    if num is None:
        return s

    if expected_has_percent:
        return f"{_num_to_clean_str(abs(num))}%"
    return abs(num)


def is_correct(user_answer: Any, expected: Any) -> bool:
    # sign is dropped on both sides: "-5" and "5" grade the same
    has_percent = "%" in str(expected) if expected is not None else False
    return normalize(user_answer, has_percent) == normalize(expected, has_percent)
