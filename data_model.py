from __future__ import annotations

import random
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, model_validator

# --- Randomization settings -------------------------------------------------------
# Narration: totals are STEP_SIZE * steps, steps in 1..MAX_STEPS.
STEP_SIZE = 100
MAX_STEPS = 10
# Narration: A takes SHARE_STEP * k percent of the total, k in 1..MAX_SHARE_STEPS.
SHARE_STEP = 10
MAX_SHARE_STEPS = 8

# Table: numeric columns are drawn from [0, VALUE_LIMIT).
VALUE_LIMIT = 1000

LETTERS: Tuple[str, ...] = ("A", "B")
PERIODS: Tuple[str, ...] = ("1", "2")
ROW_NAMES: Tuple[str, ...] = ("A", "B", "C", "D")
NUMERIC_COLUMNS: Tuple[str, ...] = ("1", "2")
PERCENT_COLUMNS: Tuple[str, ...] = ("x1", "y1", "x2", "y2")


# ---------- Period (narration) dataset ----------


class PeriodValues(BaseModel):
    model_config = ConfigDict(frozen=True)
    total: int
    A: int
    B: int

    @model_validator(mode="after")
    def _parts_sum_to_total(self) -> "PeriodValues":
        if self.A + self.B != self.total:
            raise ValueError(f"A + B must equal total ({self.A} + {self.B} != {self.total})")
        return self


class Change(BaseModel):
    model_config = ConfigDict(frozen=True)
    numerical: int
    percent: float


class PeriodChanges(BaseModel):
    model_config = ConfigDict(frozen=True)
    total: Change
    A: Change
    B: Change


class PeriodDataset(BaseModel):
    model_config = ConfigDict(frozen=True)
    period1: PeriodValues
    period2: PeriodValues
    changes: PeriodChanges


def _change(before: int, after: int) -> Change:
    delta = after - before
    percent = (delta / before) * 100 if before != 0 else 0
    return Change(numerical=delta, percent=percent)


def build_period_dataset(total1: int, a1: int, total2: int, a2: int) -> PeriodDataset:
    """Build a period dataset from the two totals and the two A values.

    B is the remainder of each period; the ``changes`` block is derived.
    """
    p1 = PeriodValues(total=total1, A=a1, B=total1 - a1)
    p2 = PeriodValues(total=total2, A=a2, B=total2 - a2)
    return PeriodDataset(
        period1=p1,
        period2=p2,
        changes=PeriodChanges(
            total=_change(p1.total, p2.total),
            A=_change(p1.A, p2.A),
            B=_change(p1.B, p2.B),
        ),
    )


class PeriodData:
    """Holds the current period dataset and answers keyed lookups."""

    variables: Dict[str, Sequence[str]] = {"letter": LETTERS, "period": PERIODS}

    def __init__(self, data: Optional[PeriodDataset] = None):
        self.data = data

    def randomize(self, rng: Optional[random.Random] = None) -> PeriodDataset:
        rng = rng or random.Random()

        total1_steps = rng.randint(1, MAX_STEPS)
        total2_steps = rng.randint(1, MAX_STEPS)
        while total2_steps == total1_steps:
            total2_steps = rng.randint(1, MAX_STEPS)

        a1_percent = rng.randint(1, MAX_SHARE_STEPS) * SHARE_STEP
        a2_percent = rng.randint(1, MAX_SHARE_STEPS) * SHARE_STEP
        while a2_percent == a1_percent:
            a2_percent = rng.randint(1, MAX_SHARE_STEPS) * SHARE_STEP

        total1 = total1_steps * STEP_SIZE
        total2 = total2_steps * STEP_SIZE
        self.data = build_period_dataset(
            total1, a1_percent * total1 // 100, total2, a2_percent * total2 // 100
        )
        return self.data

    def _period(self, period: str) -> PeriodValues:
        return self.data.period1 if str(period) == "1" else self.data.period2

    def get_value(self, letter: str, period: str) -> int:
        if self.data is None:
            return 0
        return getattr(self._period(period), letter)

    def get_total(self, period: str) -> int:
        if self.data is None:
            return 0
        return self._period(period).total

    def get_change(self, subject: str, kind: str) -> float:
        """``subject`` is total/A/B, ``kind`` is numerical/percent."""
        if self.data is None:
            return 0
        return getattr(getattr(self.data.changes, subject), kind)


# ---------- Table dataset ----------


class TableRow(BaseModel):
    model_config = ConfigDict(frozen=True)
    name: str
    values: Dict[str, int]

    @model_validator(mode="after")
    def _check_columns(self) -> "TableRow":
        missing = [c for c in NUMERIC_COLUMNS + PERCENT_COLUMNS if c not in self.values]
        if missing:
            raise ValueError(f"row {self.name!r} is missing columns {missing}")
        for col in NUMERIC_COLUMNS:
            if not 0 <= self.values[col] < VALUE_LIMIT:
                raise ValueError(f"row {self.name!r} column {col} out of range")
        for x, y in (("x1", "y1"), ("x2", "y2")):
            if self.values[x] + self.values[y] != 100:
                raise ValueError(f"row {self.name!r}: {x} + {y} must equal 100")
        return self


class TableDataset(BaseModel):
    model_config = ConfigDict(frozen=True)
    rows: List[TableRow]

    @model_validator(mode="after")
    def _unique_names(self) -> "TableDataset":
        names = [r.name for r in self.rows]
        if len(set(names)) != len(names):
            raise ValueError(f"duplicate row names: {names}")
        return self


def build_table_dataset(rows: Dict[str, Dict[str, int]]) -> TableDataset:
    """``rows`` maps name -> {"1", "2", "x1", "x2"}; y columns are derived."""
    out = []
    for name, v in rows.items():
        values = {"1": v["1"], "2": v["2"], "x1": v["x1"], "x2": v["x2"]}
        values["y1"] = 100 - v["x1"]
        values["y2"] = 100 - v["x2"]
        out.append(TableRow(name=name, values=values))
    return TableDataset(rows=out)


def base_column(percent_column: str) -> str:
    """x1/y1 are shares of column 1, x2/y2 of column 2."""
    return percent_column[-1]


class TableData:
    """Holds the current table dataset and answers keyed lookups."""

    variables: Dict[str, Sequence[str]] = {
        "letter": ROW_NAMES,
        "letterA": ROW_NAMES,
        "letterB": ROW_NAMES,
        "column": NUMERIC_COLUMNS,
        "percent": PERCENT_COLUMNS,
    }

    def __init__(self, data: Optional[TableDataset] = None):
        self.data = data

    def randomize(self, rng: Optional[random.Random] = None) -> TableDataset:
        rng = rng or random.Random()
        rows = {}
        for name in ROW_NAMES:
            rows[name] = {
                "1": rng.randrange(VALUE_LIMIT),
                "2": rng.randrange(VALUE_LIMIT),
                "x1": rng.randint(1, 99),
                "x2": rng.randint(1, 99),
            }
        self.data = build_table_dataset(rows)
        return self.data

    @property
    def rows(self) -> List[TableRow]:
        return list(self.data.rows) if self.data is not None else []

    def get_value(self, name: str, column: str) -> int:
        if self.data is None:
            return 0
        row = next((r for r in self.data.rows if r.name == name), None)
        if row is None:
            return 0
        return row.values.get(column, 0)

    def column_sum(self, column: str) -> int:
        return sum(r.values[column] for r in self.rows)
