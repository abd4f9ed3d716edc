"""记录存储接口与 MongoDB 实现

存储层只负责读写, 不包含任何连续打卡或阶段逻辑。
"""
import functools
from abc import ABC, abstractmethod
from datetime import date
from typing import Dict, List, Optional

from loguru import logger
from pymongo.errors import PyMongoError

from models import WeightEntry
from protocol.dates import to_date
from protocol.errors import StoreUnavailableError

PROFILE_FIELDS = (
    "name", "start_date", "initial_weight", "current_weight", "streak",
    "last_check_in", "ritual_completed", "ritual_completed_date",
)
PROFILE_DATE_FIELDS = ("start_date", "last_check_in", "ritual_completed_date")


def dump_dates(fields: dict) -> dict:
    """date 字段转为 YYYY-MM-DD 字符串"""
    out = dict(fields)
    for key in PROFILE_DATE_FIELDS:
        if isinstance(out.get(key), date):
            out[key] = out[key].isoformat()
    return out


def load_dates(fields: dict) -> dict:
    out = dict(fields)
    for key in PROFILE_DATE_FIELDS:
        if out.get(key):
            out[key] = to_date(out[key])
        else:
            out[key] = None
    return out


class RecordStore(ABC):
    """进度记录的外部存储"""

    @abstractmethod
    def get_profile(self, owner_id: str) -> Optional[dict]:
        ...

    @abstractmethod
    def create_profile(self, owner_id: str, profile: dict) -> None:
        ...

    @abstractmethod
    def update_profile(self, owner_id: str, fields: dict) -> None:
        ...

    @abstractmethod
    def list_weights(self, owner_id: str) -> List[WeightEntry]:
        """按日期升序返回体重记录"""

    @abstractmethod
    def upsert_weight(self, owner_id: str, day: date, weight: float) -> None:
        ...

    @abstractmethod
    def delete_weights(self, owner_id: str) -> None:
        ...

    @abstractmethod
    def list_tasks(self, owner_id: str, day: date) -> Dict[str, bool]:
        """返回某天的打卡状态 {task_id: completed}"""

    @abstractmethod
    def upsert_task(self, owner_id: str, task_id: str, day: date, completed: bool) -> None:
        ...

    @abstractmethod
    def delete_tasks(self, owner_id: str, day: Optional[date] = None) -> None:
        """删除某天的打卡状态, day为None时删除全部"""


def wrap_store_errors(func):
    """把 pymongo 异常转换为 StoreUnavailableError"""
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except PyMongoError as e:
            logger.exception(f"MongoDB operation {func.__name__} failed")
            raise StoreUnavailableError(f"记录存储不可用: {e}") from e
    return wrapper


class MongoRecordStore(RecordStore):
    def __init__(self, profiles, weights, checks):
        self.profiles = profiles
        self.weights = weights
        self.checks = checks

    @wrap_store_errors
    def get_profile(self, owner_id: str) -> Optional[dict]:
        doc = self.profiles.find_one({"user_id": owner_id})
        if not doc:
            return None
        return load_dates({key: doc.get(key) for key in PROFILE_FIELDS})

    @wrap_store_errors
    def create_profile(self, owner_id: str, profile: dict) -> None:
        self.profiles.update_one(
            {"user_id": owner_id},
            {"$setOnInsert": {"user_id": owner_id, **dump_dates(profile)}},
            upsert=True,
        )

    @wrap_store_errors
    def update_profile(self, owner_id: str, fields: dict) -> None:
        self.profiles.update_one({"user_id": owner_id}, {"$set": dump_dates(fields)})

    @wrap_store_errors
    def list_weights(self, owner_id: str) -> List[WeightEntry]:
        cursor = self.weights.find({"user_id": owner_id}).sort("date", 1)
        return [WeightEntry(date=to_date(doc["date"]), weight=float(doc["weight"])) for doc in cursor]

    @wrap_store_errors
    def upsert_weight(self, owner_id: str, day: date, weight: float) -> None:
        self.weights.update_one(
            {"user_id": owner_id, "date": day.isoformat()},
            {
                "$set": {"weight": weight},
                "$setOnInsert": {"user_id": owner_id, "date": day.isoformat()},
            },
            upsert=True,
        )

    @wrap_store_errors
    def delete_weights(self, owner_id: str) -> None:
        self.weights.delete_many({"user_id": owner_id})

    @wrap_store_errors
    def list_tasks(self, owner_id: str, day: date) -> Dict[str, bool]:
        cursor = self.checks.find({"user_id": owner_id, "date": day.isoformat()})
        return {doc["check_id"]: bool(doc.get("completed", False)) for doc in cursor}

    @wrap_store_errors
    def upsert_task(self, owner_id: str, task_id: str, day: date, completed: bool) -> None:
        self.checks.update_one(
            {"user_id": owner_id, "check_id": task_id, "date": day.isoformat()},
            {
                "$set": {"completed": completed},
                "$setOnInsert": {"user_id": owner_id, "check_id": task_id, "date": day.isoformat()},
            },
            upsert=True,
        )

    @wrap_store_errors
    def delete_tasks(self, owner_id: str, day: Optional[date] = None) -> None:
        query = {"user_id": owner_id}
        if day is not None:
            query["date"] = day.isoformat()
        self.checks.delete_many(query)
