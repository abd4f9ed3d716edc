"""Shared fixtures: in-memory record store, fixed clock, API client."""

import os
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional

os.environ.setdefault("STORE_BACKEND", "snapshot")

import pytest

from models import WeightEntry
from protocol import ProgressStore, RecordStore, StoreUnavailableError


class FakeClock:
    """Callable clock that tests can move forward."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, days: int = 1) -> None:
        self.now = self.now + timedelta(days=days)


class InMemoryRecordStore(RecordStore):
    """Dict-backed record store; set ``fail = True`` to simulate an outage."""

    def __init__(self):
        self.profiles: Dict[str, dict] = {}
        self.weights: Dict[str, Dict[date, float]] = {}
        self.tasks: Dict[str, Dict[date, Dict[str, bool]]] = {}
        self.fail = False

    def _check(self):
        if self.fail:
            raise StoreUnavailableError("backend down")

    def get_profile(self, owner_id: str) -> Optional[dict]:
        self._check()
        profile = self.profiles.get(owner_id)
        return dict(profile) if profile is not None else None

    def create_profile(self, owner_id: str, profile: dict) -> None:
        self._check()
        self.profiles.setdefault(owner_id, dict(profile))

    def update_profile(self, owner_id: str, fields: dict) -> None:
        self._check()
        self.profiles[owner_id].update(fields)

    def list_weights(self, owner_id: str) -> List[WeightEntry]:
        self._check()
        entries = self.weights.get(owner_id, {})
        return [WeightEntry(date=d, weight=w) for d, w in sorted(entries.items())]

    def upsert_weight(self, owner_id: str, day: date, weight: float) -> None:
        self._check()
        self.weights.setdefault(owner_id, {})[day] = weight

    def delete_weights(self, owner_id: str) -> None:
        self._check()
        self.weights.pop(owner_id, None)

    def list_tasks(self, owner_id: str, day: date) -> Dict[str, bool]:
        self._check()
        return dict(self.tasks.get(owner_id, {}).get(day, {}))

    def upsert_task(self, owner_id: str, task_id: str, day: date, completed: bool) -> None:
        self._check()
        self.tasks.setdefault(owner_id, {}).setdefault(day, {})[task_id] = completed

    def delete_tasks(self, owner_id: str, day: Optional[date] = None) -> None:
        self._check()
        if day is None:
            self.tasks.pop(owner_id, None)
        else:
            self.tasks.get(owner_id, {}).pop(day, None)


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 10, 9, 30))


@pytest.fixture
def backend():
    return InMemoryRecordStore()


@pytest.fixture
def store(backend, clock):
    progress = ProgressStore("owner-1", backend, clock=clock)
    progress.load()
    return progress


@pytest.fixture
def client(backend, clock):
    from fastapi.testclient import TestClient

    from main import app
    from routers.deps import get_clock, get_record_store

    app.dependency_overrides[get_record_store] = lambda: backend
    app.dependency_overrides[get_clock] = lambda: clock
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    from routers.auth import create_token

    return {"Authorization": f"Bearer {create_token('owner-1')}"}
