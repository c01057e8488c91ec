import random

from data_model import build_period_dataset
from narration import narrate


def test_narrate_increasing():
    lines = narrate(build_period_dataset(500, 200, 1000, 600), random.Random(3))
    assert len(lines) == 4
    assert lines[0] == "Total data in period 1 was 500"
    assert lines[1] in (
        "Total data in period 2 was increased by 500",
        "Total data in period 2 was increased by 100.00%",
    )
    assert lines[2] == "Data for A in period 1 is 200"
    assert lines[3] in (
        "Data for B in period 2 is increased by 100 from period 1",
        "Data for B in period 2 is increased by 33.33% from period 1",
    )


def test_narrate_decreasing():
    lines = narrate(build_period_dataset(500, 200, 300, 100), random.Random(5))
    assert lines[1].startswith("Total data in period 2 was decreased by ")
    assert lines[1].endswith(("200", "40.00%"))
    assert lines[3].startswith("Data for B in period 2 is decreased by ")


def test_narrate_is_reproducible_with_seed():
    data = build_period_dataset(700, 350, 200, 60)
    assert narrate(data, random.Random(11)) == narrate(data, random.Random(11))


def test_b_percentage_drops_trailing_zeros():
    # total 500 -> 1000 (+100%), B 300 -> 600 (+100%)
    data = build_period_dataset(500, 200, 1000, 400)
    seen = set()
    for seed in range(40):
        lines = narrate(data, random.Random(seed))
        assert lines[1] in (
            "Total data in period 2 was increased by 500",
            "Total data in period 2 was increased by 100.00%",
        )
        assert lines[3] in (
            "Data for B in period 2 is increased by 300 from period 1",
            "Data for B in period 2 is increased by 100% from period 1",
        )
        seen.add(lines[3])
    assert len(seen) == 2
