# -*- coding: utf-8 -*-
import pytest
from fastapi.testclient import TestClient

import wellnest.api.server as server
from wellnest.api.server import app


@pytest.fixture()
def client():
    with TestClient(app) as c:
        yield c


def test_healthz(client):
    j = client.get("/healthz").json()
    assert j["status"] == "ok"
    assert "engine" in j


def test_assess_imminent_en(client):
    r = client.post("/api/crisis/assess", json={"text": "I want to kill myself", "language": "en"})
    assert r.status_code == 200
    d = r.json()
    assert d["level"] == "imminent"
    assert d["actions"] == {"call": True, "text": True, "grounding": False, "resources": True}
    assert d["escalate"] is True
    assert d["helplines"][0]["number"] == "988"
    assert d["care_steps"][0] == "Urge emergency services"
    assert "matched_terms" not in d


def test_assess_hindi(client):
    d = client.post("/api/crisis/assess", json={"text": "मुझे मरना है", "language": "hi"}).json()
    assert d["level"] == "imminent"
    assert d["helplines"][0]["name"] == "AASRA"
    assert "सुरक्षा" in d["message"]


def test_assess_defaults(client):
    d = client.post("/api/crisis/assess", json={"text": "I had a wonderful day"}).json()
    assert d["level"] == "low"
    assert d["escalate"] is False
    assert d["actions"]["resources"] is True
    assert d["helplines"]


def test_assess_empty_text_is_low(client):
    d = client.post("/api/crisis/assess", json={"text": "", "language": "xx-unknown"}).json()
    assert d["level"] == "low"
    assert d["helplines"][0]["name"] == "AASRA"


def test_assess_matched_terms_in_debug(client, monkeypatch):
    monkeypatch.setattr(server, "DEBUG", True)
    d = client.post("/api/crisis/assess", json={"text": "I hate my life", "language": "en"}).json()
    assert d["matched_terms"] == ["i hate my life"]


def test_helplines(client):
    d = client.get("/api/crisis/helplines", params={"language": "en-GB"}).json()
    assert d["region"] == "UK"
    assert d["helplines"] == [{"name": "Samaritans", "number": "116 123", "website": "https://www.samaritans.org/"}]
    assert client.get("/api/crisis/helplines", params={"language": "ta"}).json()["region"] == "IN"


def test_escalate_policy(client):
    assert client.post("/api/crisis/escalate", json={"level": "high"}).json() == {"level": "high", "escalate": True}
    assert client.post("/api/crisis/escalate", json={"level": "moderate"}).json()["escalate"] is False
    assert client.post("/api/crisis/escalate", json={"level": "severe"}).status_code == 422


def test_chat_screen_detected(client):
    d = client.post("/api/chat/screen", json={"message": "I can't do this anymore"}).json()
    assert d["crisisDetected"] is True
    assert d["crisisLevel"] == "high"
    assert d["message"].startswith("I'm really concerned")


def test_chat_screen_clear(client):
    d = client.post("/api/chat/screen", json={"message": "hello there"}).json()
    assert d == {"crisisDetected": False, "message": None}


def test_chat_screen_requires_message(client):
    assert client.post("/api/chat/screen", json={"message": ""}).status_code == 422


def test_debug_route_hidden_by_default(client, monkeypatch):
    monkeypatch.setattr(server, "DEBUG", False)
    assert client.get("/api/debug/crisis", params={"q": "x"}).status_code == 404


def test_debug_route_reports_matches(client, monkeypatch):
    monkeypatch.setattr(server, "DEBUG", True)
    d = client.get("/api/debug/crisis", params={"q": "I wish I was dead", "language": "en"}).json()
    assert d["probe"]["level"] == "high"
    assert d["probe"]["matched_terms"] == ["i wish i was dead"]
    assert "hi" in d["languages"]
