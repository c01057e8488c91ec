import pytest
from fastapi.testclient import TestClient

from answer_engine import NARRATION_ANSWERS, TABLE_ANSWERS, QuestionType
from bank import Variant, get_templates, load_error, reload_bank
from data_model import PeriodData, TableData
from main import app

client = TestClient(app)


@pytest.fixture
def templates_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("QUIZ_TEMPLATES_DIR", str(tmp_path))
    yield tmp_path
    monkeypatch.delenv("QUIZ_TEMPLATES_DIR")
    reload_bank()


def test_shipped_templates_are_answerable():
    for variant, answers, data in (
        (Variant.NARRATION, NARRATION_ANSWERS, PeriodData),
        (Variant.TABLE, TABLE_ANSWERS, TableData),
    ):
        templates = get_templates(variant)
        assert templates, variant
        assert load_error(variant) is None
        assert {QuestionType(t.type) for t in templates} == set(answers)
        for t in templates:
            assert set(t.variables) <= set(data.variables)
            for name in t.variables:
                assert "{" + name + "}" in t.template


def test_list_templates_endpoint():
    r = client.get("/templates/narration")
    assert r.status_code == 200
    b = r.json()
    assert b["variant"] == "narration"
    assert b["count"] == len(b["templates"]) == 13
    assert "periodBestLetter" in b["supported_types"]
    assert b["error"] is None

    assert client.get("/templates/pie").status_code == 422


def test_sharded_jsonl_skips_bad_rows(templates_dir):
    shard = templates_dir / "table"
    shard.mkdir()
    (shard / "a.jsonl").write_text(
        "# comment\n"
        '{"type": "highestTotalSum", "template": "Highest?", "variables": []}\n'
        "{not json}\n"
        '{"template": "missing type"}\n',
        encoding="utf-8",
    )
    counts = reload_bank()
    assert counts["table"] == 1
    assert get_templates(Variant.TABLE)[0].type == "highestTotalSum"


def test_broken_catalog_disables_questions(templates_dir):
    (templates_dir / "narration.json").write_text("[{oops", encoding="utf-8")
    reload_bank()
    assert get_templates(Variant.NARRATION) == ()
    assert "narration.json" in load_error(Variant.NARRATION)

    r = client.post("/sessions", json={"variant": "narration"})
    assert r.status_code == 200
    b = r.json()
    assert b["question"] is None
    assert b["dataset"] is not None
    assert b["notice"].startswith("Could not load question templates")

    sub = client.post(f"/sessions/{b['id']}/submit", json={"answer": "A"}).json()
    assert sub["ok"] is False and sub["feedback"] == "no question to answer"


def test_undecodable_catalog_disables_questions(templates_dir):
    (templates_dir / "narration.json").write_bytes(b'[{"type": "bestPeriod"\xff\xfe}]')
    counts = reload_bank()
    assert counts["narration"] == 0
    assert "narration.json" in load_error(Variant.NARRATION)

    r = client.post("/sessions", json={"variant": "narration"})
    assert r.status_code == 200
    assert r.json()["question"] is None
    assert client.get("/templates/narration").status_code == 200
    assert client.get("/health/templates").json()["ok"] is False


def test_undecodable_jsonl_row_is_skipped(templates_dir):
    shard = templates_dir / "table"
    shard.mkdir()
    (shard / "a.jsonl").write_bytes(
        b'{"type": "highestTotalSum", "template": "Highest?", "variables": []}\n'
        b'{"type": "lowestTotalSum", "template": "\xff\xfe", "variables": []}\n'
    )
    assert reload_bank()["table"] == 1
    assert load_error(Variant.TABLE) is None
