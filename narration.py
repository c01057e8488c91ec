from __future__ import annotations

import random
from typing import List, Optional

from data_model import Change, PeriodDataset


def _direction(change: Change) -> str:
    return "increased" if change.numerical >= 0 else "decreased"


def _amount(change: Change, rng: random.Random, trim_zeros: bool = False) -> str:
    # half the time the change is told as a percentage
    if rng.random() < 0.5:
        pct = f"{abs(change.percent):.2f}"
        if trim_zeros:
            pct = pct.rstrip("0").rstrip(".")
        return f"{pct}%"
    return str(abs(change.numerical))


def narrate(data: PeriodDataset, rng: Optional[random.Random] = None) -> List[str]:
    """The four sentences describing a period dataset.

    The total line keeps two decimals on a percentage (``100.00%``); the B line
    drops trailing zeros (``100%``, ``12.5%``).
    """
    rng = rng or random.Random()
    total, b = data.changes.total, data.changes.B
    return [
        f"Total data in period 1 was {data.period1.total}",
        f"Total data in period 2 was {_direction(total)} by {_amount(total, rng)}",
        f"Data for A in period 1 is {data.period1.A}",
        f"Data for B in period 2 is {_direction(b)} by "
        f"{_amount(b, rng, trim_zeros=True)} from period 1",
    ]
