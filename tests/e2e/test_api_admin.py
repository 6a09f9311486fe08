from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.admin import NO_CONVERSATIONS, router as admin_router
from api.routes import router as interview_router
from config.settings import settings
from storage import conversations, messages, users

PASSWORD = "letmein"
HEADERS = {"X-Admin-Password": PASSWORD}


@pytest.fixture(autouse=True)
def admin_password(monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", PASSWORD)


def _client() -> TestClient:
    app = FastAPI()
    app.include_router(interview_router)
    app.include_router(admin_router)
    return TestClient(app)


def _seed_student(email: str, *lines: str) -> str:
    user, _ = users.get_or_create_user(email)
    if lines:
        conversation = conversations.create_conversation(user.user_id)
        for index, line in enumerate(lines):
            role = "user" if index % 2 == 0 else "assistant"
            messages.append_message(conversation_id=conversation.conversation_id, role=role, content=line)
    return user.user_id


def test_login():
    client = _client()
    assert client.post("/api/admin/login", json={}).status_code == 400
    assert client.post("/api/admin/login", json={"password": "nope"}).status_code == 401
    resp = client.post("/api/admin/login", json={"password": PASSWORD})
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Login successful"}


@pytest.mark.parametrize(
    "method,path",
    [
        ("get", "/api/admin/settings"),
        ("get", "/api/admin/students"),
        ("get", "/api/admin/students/any/report"),
        ("get", "/api/admin/students/any/pdf"),
    ],
)
def test_routes_require_password(method, path):
    client = _client()
    assert getattr(client, method)(path).status_code == 401
    assert getattr(client, method)(path, headers={"X-Admin-Password": "wrong"}).status_code == 401


def test_settings_read_and_update():
    client = _client()
    assert client.get("/api/admin/settings", headers=HEADERS).json() == {
        "question_count": "8",
        "interview_title": "Student Profile Assistant",
    }

    bad = client.put("/api/admin/settings", headers=HEADERS, json={"key": "question_count", "value": "abc"})
    assert bad.status_code == 400
    assert client.put("/api/admin/settings", headers=HEADERS, json={"key": "question_count"}).status_code == 400

    ok = client.put("/api/admin/settings", headers=HEADERS, json={"key": "question_count", "value": 5})
    assert ok.json() == {"success": True, "key": "question_count", "value": "5"}
    assert client.get("/api/settings/public").json()["questionCount"] == 5


def test_students_listing_uses_stored_or_detected_name():
    named = _seed_student("named@school.org", "hello", "hi! what's your name?")
    users.set_user_name(named, "Priya")
    _seed_student("cue@school.org", "you can call me zed", "Nice to meet you, Zed!")
    _seed_student("quiet@school.org")

    listing = _client().get("/api/admin/students", headers=HEADERS).json()
    by_email = {row["email"]: row for row in listing}

    assert by_email["named@school.org"]["name"] == "Priya"
    assert by_email["cue@school.org"]["name"] == "Zed"
    assert by_email["cue@school.org"]["totalConversations"] == 1
    assert by_email["cue@school.org"]["totalMessages"] == 2
    assert by_email["quiet@school.org"]["name"] is None
    assert by_email["quiet@school.org"]["lastActive"] == by_email["quiet@school.org"]["createdAt"]


def test_student_report_json(report_model):
    user_id = _seed_student("kid@school.org", "I'm Aatif", "Great! What do you study?", "Physics")
    resp = _client().get(f"/api/admin/students/{user_id}/report", headers=HEADERS)
    assert resp.status_code == 200
    body = resp.json()
    assert body["totalMessages"] == 3
    assert body["totalConversations"] == 1
    assert body["reportCard"]["overallSummary"] == "A curious learner."
    assert body["reportCard"]["strengths"] == []
    assert len(report_model.calls) == 1


def test_student_report_without_messages(report_model):
    user_id = _seed_student("quiet@school.org")
    body = _client().get(f"/api/admin/students/{user_id}/report", headers=HEADERS).json()
    assert body["reportCard"]["overallSummary"] == NO_CONVERSATIONS
    assert report_model.calls == []


def test_unknown_student_returns_404(report_model):
    client = _client()
    resp = client.get("/api/admin/students/ghost/report", headers=HEADERS)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Student not found"
    assert client.get("/api/admin/students/ghost/pdf", headers=HEADERS).status_code == 404


def test_student_report_pdf(report_model):
    report_model.reply = '{"studentProfile": {"name": "Aatif"}, "overallSummary": "A curious learner."}'
    user_id = _seed_student("kid@school.org", "I'm Aatif", "Welcome!")
    resp = _client().get(f"/api/admin/students/{user_id}/pdf", headers=HEADERS)
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert 'filename="Aatif_Report_Card.pdf"' in resp.headers["content-disposition"]
    assert resp.content.startswith(b"%PDF")


def test_report_upstream_failure_returns_502(report_model):
    report_model.reply = RuntimeError("provider down")
    user_id = _seed_student("kid@school.org", "hello")
    resp = _client().get(f"/api/admin/students/{user_id}/report", headers=HEADERS)
    assert resp.status_code == 502


@pytest.mark.parametrize("name,filename", [("Łukasz", "ukasz_Report_Card.pdf"), ("佐藤", "Student_Report_Card.pdf")])
def test_student_report_pdf_with_non_latin_name(report_model, name, filename):
    report_model.reply = '{"studentProfile": {"name": "%s"}, "overallSummary": "Keen on maths."}' % name
    user_id = _seed_student("intl@school.org", "my name is %s" % name, "Welcome!")
    resp = _client().get(f"/api/admin/students/{user_id}/pdf", headers=HEADERS)
    assert resp.status_code == 200
    assert f'filename="{filename}"' in resp.headers["content-disposition"]
    assert resp.content.startswith(b"%PDF")
