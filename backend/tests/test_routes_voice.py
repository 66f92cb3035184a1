"""
Tests for the voice API routes.
"""
import pytest
from fastapi.testclient import TestClient

from conftest import FakeLLM
from lifedesk.api import routes_voice
from lifedesk.db.models import TransactionModel
from lifedesk.db.schema import IntentDirective
from lifedesk.db.session import get_db
from lifedesk.main import app

HEADERS = {"X-User-Id": "user-1"}


@pytest.fixture
def client(db):
    llm = FakeLLM([
        IntentDirective(name="add_transaction", args={"type": "expense", "amount": 5, "description": "Coke"}),
        IntentDirective(name="add_food", args={"food": "Coke"}),
    ])
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[routes_voice.get_llm] = lambda: llm
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"


def test_understand(client, monkeypatch):
    monkeypatch.setattr(routes_voice.get_settings(), "food_lookup_enabled", False)
    response = client.post(
        "/api/voice/understand",
        json={"transcript": "bought a Coke for 5", "today": "2025-06-01"},
        headers=HEADERS,
    )
    assert response.status_code == 200
    actions = response.json()["actions"]
    assert [a["intent"] for a in actions] == ["add_transaction", "add_food"]
    assert actions[0]["category"] == "Food"


def test_understand_rejects_empty_transcript(client):
    response = client.post("/api/voice/understand", json={"transcript": "   "}, headers=HEADERS)
    assert response.status_code == 400


def test_user_header_required(client):
    response = client.post("/api/voice/execute", json={"actions": []})
    assert response.status_code == 422


def test_execute(client, db):
    response = client.post("/api/voice/execute", json={"actions": [
        {"intent": "add_transaction", "type": "expense", "amount": 5, "category": "Food",
         "description": "Coke", "date": "2025-06-01"},
        {"intent": "delete_transaction", "transactionId": "missing"},
        {"intent": "unknown", "message": "Could not understand"},
    ]}, headers=HEADERS)
    assert response.status_code == 200
    assert response.json() == {"results": [
        {"intent": "add_transaction", "success": True},
        {"intent": "delete_transaction", "success": False, "message": "Transaction not found"},
        {"intent": "unknown", "success": False, "message": "Could not understand"},
    ]}
    row = db.query(TransactionModel).one()
    assert (row.user_id, row.amount, row.currency) == ("user-1", 5, "USD")
