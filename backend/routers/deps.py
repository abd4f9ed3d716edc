from fastapi import Depends
from datetime import datetime
from functools import lru_cache
from typing import Callable

from config import STORE_BACKEND, SNAPSHOT_DIR
from protocol import DEFAULT_PROTOCOL, LocalSnapshotStore, MongoRecordStore, ProgressStore, RecordStore
from routers.auth import get_user_id


@lru_cache(maxsize=1)
def get_record_store() -> RecordStore:
    """按配置选择记录存储后端"""
    if STORE_BACKEND == "snapshot":
        return LocalSnapshotStore(SNAPSHOT_DIR, DEFAULT_PROTOCOL.catalog)

    from database import profiles_collection, weight_history_collection, protocol_checks_collection
    return MongoRecordStore(profiles_collection, weight_history_collection, protocol_checks_collection)


def get_clock() -> Callable[[], datetime]:
    return datetime.now


def get_progress_store(
    user_id: str = Depends(get_user_id),
    backend: RecordStore = Depends(get_record_store),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> ProgressStore:
    """每个请求构造一个绑定当前用户的存储实例并加载记录"""
    store = ProgressStore(user_id, backend, DEFAULT_PROTOCOL, clock)
    store.load()
    return store
