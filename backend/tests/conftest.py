"""
Shared fixtures for the LifeDesk tests: an in-memory database and fakes for the
language model, the diagnostics sink and the domain services.
"""
import sys
import uuid
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from lifedesk.db.base_crud import NotFoundError
from lifedesk.db.crud_foods import NutritionCatalog
from lifedesk.db.models import Base
from lifedesk.db.schema import IntentDirective
from lifedesk.services.voice.executor import DomainServices


@pytest.fixture
def db():
    """Fresh in-memory SQLite session per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def catalog(db):
    """Catalog with a few rows, per 100 g / 100 ml."""
    catalog = NutritionCatalog(db)
    catalog.insert_if_absent("White rice, cooked", {"calories": 130, "protein": 2.7, "carbs": 28, "fat": 0.3})
    catalog.insert_if_absent("Rice, uncooked", {
        "calories": 365, "protein": 7.1, "carbs": 80, "fat": 0.7, "preparation": "uncooked",
    })
    catalog.insert_if_absent("Cola", {
        "calories": 42, "protein": 0, "carbs": 10.6, "fat": 0, "is_liquid": True,
        "serving_sizes_ml": {"can": 330, "bottle": 500},
    })
    catalog.insert_if_absent("Banana", {"calories": 89, "protein": 1.1, "carbs": 23, "fat": 0.3})
    return catalog


class FakeLLM:
    """Returns canned directives, or raises the given error."""

    def __init__(self, directives: Optional[List[IntentDirective]] = None, error: Optional[Exception] = None):
        self.directives = directives or []
        self.error = error
        self.calls = []

    async def call_tools(self, transcript, lang, tools, today):
        self.calls.append({"transcript": transcript, "lang": lang, "today": today, "tools": tools})
        if self.error is not None:
            raise self.error
        return list(self.directives)


class FakeDiagnostics:
    def __init__(self):
        self.calls = []

    def log_error(self, message, details=None, user_id=None):
        self.calls.append({"message": message, "details": details, "user_id": user_id})


class FakeService:
    """In-memory user-scoped service with the list/create/update/remove contract."""

    def __init__(self, records: Optional[List[Dict[str, Any]]] = None, error: Optional[Exception] = None):
        self.records = [SimpleNamespace(**record) for record in (records or [])]
        self.error = error
        self.created = []
        self.updated = []
        self.removed = []

    def list(self, user_id):
        return [record for record in self.records if getattr(record, "user_id", user_id) == user_id]

    def create(self, user_id, payload):
        if self.error is not None:
            raise self.error
        record = SimpleNamespace(id=str(uuid.uuid4()), user_id=user_id, **payload)
        self.records.append(record)
        self.created.append(payload)
        return record

    def create_batch(self, user_id, items):
        return [self.create(user_id, item) for item in items]

    def update(self, user_id, id, payload):
        for record in self.records:
            if record.id == id:
                for key, value in payload.items():
                    setattr(record, key, value)
                self.updated.append((id, payload))
                return record
        raise NotFoundError(id)

    def remove(self, user_id, id):
        for record in self.records:
            if record.id == id:
                self.records.remove(record)
                self.removed.append(id)
                return
        raise NotFoundError(id)


def make_services(**overrides) -> DomainServices:
    services = {
        "schedule": FakeService(),
        "transactions": FakeService(),
        "workouts": FakeService(),
        "food_entries": FakeService(),
        "check_ins": FakeService(),
        "goals": FakeService(),
    }
    services.update(overrides)
    return DomainServices(**services)


@pytest.fixture
def services():
    return make_services()


@pytest.fixture
def diagnostics():
    return FakeDiagnostics()
