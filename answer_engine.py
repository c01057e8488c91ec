from __future__ import annotations

import logging
import math
import random
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Union

from pydantic import BaseModel

from bank import TemplateModel
from data_model import PeriodData, TableData, base_column

logger = logging.getLogger(__name__)

Answer = Union[int, str]
Variables = Dict[str, str]


class QuestionType(str, Enum):
    # narration (period dataset)
    PERCENT_CONTRIBUTION = "percentContribution"
    NUMERICAL_LETTER_CHANGE = "numericalLetterChange"
    PERCENT_LETTER_CHANGE = "percentLetterChange"
    NUMERICAL_TOTAL_CHANGE = "numericalTotalChange"
    PERCENT_TOTAL_CHANGE = "percentTotalChange"
    PERIOD_BEST_LETTER = "periodBestLetter"
    PERIOD_WORST_LETTER = "periodWorstLetter"
    TOTAL_BEST_LETTER = "totalBestLetter"
    TOTAL_WORST_LETTER = "totalWorstLetter"
    BEST_LETTER_CHANGE = "bestLetterChange"
    WORST_LETTER_CHANGE = "worstLetterChange"
    BEST_PERIOD = "bestPeriod"
    WORST_PERIOD = "worstPeriod"
    # table dataset
    PERCENTAGE_CONTRIBUTION = "percentageContribution"
    VALUE_OF_PERCENT = "valueOfPercent"
    HIGHEST_PERCENT_VALUE = "highestPercentValue"
    LOWEST_PERCENT_VALUE = "lowestPercentValue"
    AVERAGE_OF_NUMBER = "averageOfNumber"
    HIGHEST_TOTAL_SUM = "highestTotalSum"
    LOWEST_TOTAL_SUM = "lowestTotalSum"
    AVERAGE_OF_LETTER = "averageOfLetter"
    NUMERICAL_LETTER_DIFFERENCE = "numericalLetterDifference"


def round_half_away(x: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def _percent(x: float) -> str:
    return f"{round_half_away(x)}%"


def _pick(a_wins: bool, first: str = "A", second: str = "B") -> str:
    # ties go to the second option
    return first if a_wins else second


# --- Narration answers ------------------------------------------------------------


def _percent_contribution(d: PeriodData, v: Variables) -> Answer:
    total = d.get_total(v["period"])
    if total == 0:
        return "0%"
    return _percent(d.get_value(v["letter"], v["period"]) / total * 100)


def _numerical_letter_change(d: PeriodData, v: Variables) -> Answer:
    return d.get_change(v["letter"], "numerical")


def _percent_letter_change(d: PeriodData, v: Variables) -> Answer:
    return _percent(d.get_change(v["letter"], "percent"))


def _numerical_total_change(d: PeriodData, v: Variables) -> Answer:
    return d.get_change("total", "numerical")


def _percent_total_change(d: PeriodData, v: Variables) -> Answer:
    return _percent(d.get_change("total", "percent"))


def _period_best_letter(d: PeriodData, v: Variables) -> Answer:
    return _pick(d.get_value("A", v["period"]) > d.get_value("B", v["period"]))


def _period_worst_letter(d: PeriodData, v: Variables) -> Answer:
    return _pick(d.get_value("A", v["period"]) < d.get_value("B", v["period"]))


def _letter_sums(d: PeriodData):
    return (
        d.get_value("A", "1") + d.get_value("A", "2"),
        d.get_value("B", "1") + d.get_value("B", "2"),
    )


def _total_best_letter(d: PeriodData, v: Variables) -> Answer:
    a, b = _letter_sums(d)
    return _pick(a > b)


def _total_worst_letter(d: PeriodData, v: Variables) -> Answer:
    a, b = _letter_sums(d)
    return _pick(a < b)


def _abs_percent_changes(d: PeriodData):
    return abs(d.get_change("A", "percent")), abs(d.get_change("B", "percent"))


def _best_letter_change(d: PeriodData, v: Variables) -> Answer:
    a, b = _abs_percent_changes(d)
    return _pick(a > b)


def _worst_letter_change(d: PeriodData, v: Variables) -> Answer:
    a, b = _abs_percent_changes(d)
    return _pick(a < b)


def _best_period(d: PeriodData, v: Variables) -> Answer:
    return _pick(d.get_total("1") > d.get_total("2"), "1", "2")


def _worst_period(d: PeriodData, v: Variables) -> Answer:
    return _pick(d.get_total("1") < d.get_total("2"), "1", "2")


# --- Table answers ----------------------------------------------------------------


def _percentage_contribution(d: TableData, v: Variables) -> Answer:
    column_sum = d.column_sum(v["column"])
    if column_sum == 0:
        return "0%"
    return _percent(d.get_value(v["letter"], v["column"]) / column_sum * 100)


def _value_of_percent_for(d: TableData, name: str, percent: str) -> int:
    base = d.get_value(name, base_column(percent))
    return round_half_away(d.get_value(name, percent) / 100 * base)


def _value_of_percent(d: TableData, v: Variables) -> Answer:
    return _value_of_percent_for(d, v["letter"], v["percent"])


def _top_name(d: TableData, key: Callable[[str], float], highest: bool) -> str:
    # sorted() is stable (also with reverse=True): equal keys keep row order
    names = [r.name for r in d.rows]
    return sorted(names, key=key, reverse=highest)[0]


def _highest_percent_value(d: TableData, v: Variables) -> Answer:
    return _top_name(d, lambda n: _value_of_percent_for(d, n, v["percent"]), highest=True)


def _lowest_percent_value(d: TableData, v: Variables) -> Answer:
    return _top_name(d, lambda n: _value_of_percent_for(d, n, v["percent"]), highest=False)


def _average_of_number(d: TableData, v: Variables) -> Answer:
    rows = d.rows
    if not rows:
        return 0
    return round_half_away(d.column_sum(v["column"]) / len(rows))


def _row_total(d: TableData, name: str) -> int:
    return d.get_value(name, "1") + d.get_value(name, "2")


def _highest_total_sum(d: TableData, v: Variables) -> Answer:
    return _top_name(d, lambda n: _row_total(d, n), highest=True)


def _lowest_total_sum(d: TableData, v: Variables) -> Answer:
    return _top_name(d, lambda n: _row_total(d, n), highest=False)


def _average_of_letter(d: TableData, v: Variables) -> Answer:
    return round_half_away(_row_total(d, v["letter"]) / 2)


def _numerical_letter_difference(d: TableData, v: Variables) -> Answer:
    return d.get_value(v["letterA"], v["column"]) - d.get_value(v["letterB"], v["column"])


QT = QuestionType

NARRATION_ANSWERS: Dict[QuestionType, Callable[[PeriodData, Variables], Answer]] = {
    QT.PERCENT_CONTRIBUTION: _percent_contribution,
    QT.NUMERICAL_LETTER_CHANGE: _numerical_letter_change,
    QT.PERCENT_LETTER_CHANGE: _percent_letter_change,
    QT.NUMERICAL_TOTAL_CHANGE: _numerical_total_change,
    QT.PERCENT_TOTAL_CHANGE: _percent_total_change,
    QT.PERIOD_BEST_LETTER: _period_best_letter,
    QT.PERIOD_WORST_LETTER: _period_worst_letter,
    QT.TOTAL_BEST_LETTER: _total_best_letter,
    QT.TOTAL_WORST_LETTER: _total_worst_letter,
    QT.BEST_LETTER_CHANGE: _best_letter_change,
    QT.WORST_LETTER_CHANGE: _worst_letter_change,
    QT.BEST_PERIOD: _best_period,
    QT.WORST_PERIOD: _worst_period,
}

TABLE_ANSWERS: Dict[QuestionType, Callable[[TableData, Variables], Answer]] = {
    QT.PERCENTAGE_CONTRIBUTION: _percentage_contribution,
    QT.VALUE_OF_PERCENT: _value_of_percent,
    QT.HIGHEST_PERCENT_VALUE: _highest_percent_value,
    QT.LOWEST_PERCENT_VALUE: _lowest_percent_value,
    QT.AVERAGE_OF_NUMBER: _average_of_number,
    QT.HIGHEST_TOTAL_SUM: _highest_total_sum,
    QT.LOWEST_TOTAL_SUM: _lowest_total_sum,
    QT.AVERAGE_OF_LETTER: _average_of_letter,
    QT.NUMERICAL_LETTER_DIFFERENCE: _numerical_letter_difference,
}


def _ensure_every_type_has_answer() -> None:
    """Fail at import if a QuestionType member has no (or two) computations."""
    overlap = set(NARRATION_ANSWERS) & set(TABLE_ANSWERS)
    missing = set(QuestionType) - set(NARRATION_ANSWERS) - set(TABLE_ANSWERS)
    if overlap or missing:
        raise RuntimeError(
            f"Question types without exactly one answer function: "
            f"missing={sorted(t.value for t in missing)} "
            f"duplicated={sorted(t.value for t in overlap)}"
        )


_ensure_every_type_has_answer()


# --- Engine -----------------------------------------------------------------------


class GeneratedQuestion(BaseModel):
    type: str
    question: str
    answer: Answer
    variables: Dict[str, str]


class AnswerEngine:
    """Binds template variables and computes expected answers for one dataset."""

    def __init__(self, data: Union[PeriodData, TableData], rng: Optional[random.Random] = None):
        self.data = data
        self.rng = rng or random.Random()

    @property
    def answers(self) -> Dict[QuestionType, Callable]:
        return TABLE_ANSWERS if isinstance(self.data, TableData) else NARRATION_ANSWERS

    def generate_variables(self, names: Sequence[str]) -> Variables:
        domains = self.data.variables
        out: Variables = {}
        for name in names:
            domain = domains.get(name)
            if not domain:
                logger.debug("No domain for template variable %r; left unbound", name)
                continue
            out[name] = self.rng.choice(list(domain))

        if "letterA" in out and "letterB" in out and out["letterA"] == out["letterB"]:
            rest = [n for n in domains["letterB"] if n != out["letterA"]]
            out["letterB"] = self.rng.choice(rest)
        return out

    def calculate_answer(self, qtype: str, variables: Variables) -> Optional[Answer]:
        if self.data.data is None:
            return None
        try:
            fn = self.answers.get(QuestionType(qtype))
        except ValueError:
            fn = None
        if fn is None:
            logger.warning("Unknown question type: %s", qtype)
            return None
        try:
            return fn(self.data, variables)
        except KeyError as e:
            logger.warning("Question type %s is missing variable %s", qtype, e)
            return None

    @staticmethod
    def render(template: str, variables: Variables) -> str:
        text = template
        for key, value in variables.items():
            text = text.replace(f"{{{key}}}", str(value), 1)
        return text

    def generate(self, templates: Sequence[TemplateModel]) -> Optional[GeneratedQuestion]:
        if not templates or self.data.data is None:
            logger.warning("Cannot generate question: missing templates or data")
            return None

        template = self.rng.choice(list(templates))
        variables = self.generate_variables(template.variables)
        answer = self.calculate_answer(template.type, variables)
        if answer is None:
            return None

        return GeneratedQuestion(
            type=template.type,
            question=self.render(template.template, variables),
            answer=answer,
            variables=variables,
        )


def question_types_for(variant: str) -> List[str]:
    table = TABLE_ANSWERS if variant == "table" else NARRATION_ANSWERS
    return [t.value for t in table]
