from fastapi.testclient import TestClient

from main import app

client = TestClient(app)


def _graded_attempt():
    sid = client.post("/sessions", json={"variant": "narration"}).json()["id"]
    r = client.post(f"/sessions/{sid}/submit", json={"answer": "B"})
    assert r.status_code == 200
    return sid, r.json()["attempt_id"]


def test_get_attempt_roundtrip():
    sid, attempt_id = _graded_attempt()
    assert isinstance(attempt_id, int)

    r = client.get(f"/attempts/{attempt_id}")
    assert r.status_code == 200
    body = r.json()
    assert body["id"] == attempt_id
    assert body["session_id"] == sid
    assert body["answer"] == "B"
    assert body["question"]
    assert "created_at" in body


def test_get_attempt_404():
    assert client.get("/attempts/999999").status_code == 404


def test_recent_list_requires_key(monkeypatch):
    monkeypatch.setenv("QUIZ_API_KEY", "k")
    monkeypatch.delenv("ADMIN_TOKEN", raising=False)
    assert client.get("/attempts/recent-list").status_code == 401


def test_recent_list_by_session(monkeypatch):
    monkeypatch.setenv("QUIZ_API_KEY", "k")
    sid, attempt_id = _graded_attempt()

    r = client.get(
        "/attempts/recent-list", params={"session_id": sid}, headers={"x-api-key": "k"}
    )
    assert r.status_code == 200
    b = r.json()
    assert b["ok"] is True and b["count"] == 1
    assert b["items"][0]["id"] == attempt_id
    assert "answer" not in b["items"][0]


def test_recent_list_admin_token(monkeypatch):
    monkeypatch.setenv("ADMIN_TOKEN", "secret")
    r = client.get("/attempts/recent-list", headers={"x-admin-token": "secret"})
    assert r.status_code == 200
