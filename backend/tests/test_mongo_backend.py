from datetime import date
from unittest.mock import MagicMock

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from protocol import MongoRecordStore, StoreUnavailableError


@pytest.fixture
def collections():
    return MagicMock(), MagicMock(), MagicMock()


@pytest.fixture
def mongo(collections):
    return MongoRecordStore(*collections)


def test_get_profile_converts_dates(mongo, collections):
    profiles, _, _ = collections
    profiles.find_one.return_value = {
        "_id": "x", "user_id": "u1", "name": "Ana", "start_date": "2026-03-01",
        "streak": 2, "last_check_in": "2026-03-09", "ritual_completed_date": None,
    }

    profile = mongo.get_profile("u1")

    profiles.find_one.assert_called_once_with({"user_id": "u1"})
    assert profile["start_date"] == date(2026, 3, 1)
    assert profile["last_check_in"] == date(2026, 3, 9)
    assert profile["ritual_completed_date"] is None
    assert "_id" not in profile


def test_get_profile_missing(mongo, collections):
    collections[0].find_one.return_value = None
    assert mongo.get_profile("u1") is None


def test_update_profile_stores_iso_dates(mongo, collections):
    mongo.update_profile("u1", {"last_check_in": date(2026, 3, 10), "streak": 3})
    collections[0].update_one.assert_called_once_with(
        {"user_id": "u1"}, {"$set": {"last_check_in": "2026-03-10", "streak": 3}}
    )


def test_upsert_weight_is_keyed_by_owner_and_date(mongo, collections):
    mongo.upsert_weight("u1", date(2026, 3, 10), 80.5)
    args, kwargs = collections[1].update_one.call_args
    assert args[0] == {"user_id": "u1", "date": "2026-03-10"}
    assert args[1]["$set"] == {"weight": 80.5}
    assert kwargs == {"upsert": True}


def test_list_weights_sorted_query(mongo, collections):
    cursor = MagicMock()
    cursor.sort.return_value = [{"date": "2026-03-09", "weight": 81}, {"date": "2026-03-10", "weight": "80.5"}]
    collections[1].find.return_value = cursor

    entries = mongo.list_weights("u1")

    cursor.sort.assert_called_once_with("date", 1)
    assert [(e.date, e.weight) for e in entries] == [(date(2026, 3, 9), 81.0), (date(2026, 3, 10), 80.5)]


def test_task_rows_keyed_by_owner_task_and_date(mongo, collections):
    _, _, checks = collections
    checks.find.return_value = [{"check_id": "water", "completed": True}]

    assert mongo.list_tasks("u1", date(2026, 3, 10)) == {"water": True}
    checks.find.assert_called_once_with({"user_id": "u1", "date": "2026-03-10"})

    mongo.upsert_task("u1", "walk", date(2026, 3, 10), False)
    args, kwargs = checks.update_one.call_args
    assert args[0] == {"user_id": "u1", "check_id": "walk", "date": "2026-03-10"}
    assert kwargs == {"upsert": True}


def test_delete_tasks_by_day_or_all(mongo, collections):
    _, _, checks = collections
    mongo.delete_tasks("u1", date(2026, 3, 10))
    checks.delete_many.assert_called_with({"user_id": "u1", "date": "2026-03-10"})
    mongo.delete_tasks("u1")
    checks.delete_many.assert_called_with({"user_id": "u1"})


def test_pymongo_errors_become_store_unavailable(mongo, collections):
    collections[0].find_one.side_effect = ServerSelectionTimeoutError("no servers")
    with pytest.raises(StoreUnavailableError):
        mongo.get_profile("u1")
