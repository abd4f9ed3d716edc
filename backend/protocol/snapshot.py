"""本地快照存储 (简化模式)

每个用户一个 JSON 文件。读取时自动迁移旧版数据结构:
- 旧版 routineChecks (只有开关, 没有描述信息) 且没有 protocolChecks 时,
  按目录重新生成完整打卡项, 保留同ID的完成状态, 然后删除 routineChecks;
- protocolChecks 缺少描述字段时, 同样按目录重建并保留完成状态;
- 缺少 ritualCompleted / ritualCompletedDate 时补默认值。
"""
import hashlib
import json
import os
import re
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from loguru import logger

from models import TaskDefinition, WeightEntry
from protocol.backends import RecordStore, dump_dates, load_dates
from protocol.catalog import PROTOCOL_ITEMS, canonical_task_id, seed_tasks
from protocol.errors import StoreUnavailableError

SCHEMA_VERSION = 2

# 快照字段名 <-> 记录字段名
SNAPSHOT_KEYS = {
    "name": "name",
    "startDate": "start_date",
    "initialWeight": "initial_weight",
    "currentWeight": "current_weight",
    "streak": "streak",
    "lastCheckIn": "last_check_in",
    "ritualCompleted": "ritual_completed",
    "ritualCompletedDate": "ritual_completed_date",
}

CHECK_METADATA = ("label", "pillar", "description", "guidance")


def _legacy_flags(routine_checks) -> Dict[str, bool]:
    """旧版开关可能是 {id: bool} 或 [{id, completed}]"""
    if isinstance(routine_checks, dict):
        return {canonical_task_id(str(k)): bool(v) for k, v in routine_checks.items()}
    return _check_flags(routine_checks or [])


def _check_flags(checks) -> Dict[str, bool]:
    """[{id, completed}] -> {当前ID: completed}, 旧ID按别名映射"""
    flags = {}
    for item in checks:
        if isinstance(item, dict) and "id" in item:
            flags[canonical_task_id(str(item["id"]))] = bool(item.get("completed", False))
    return flags


def _full_checks(catalog: Sequence[TaskDefinition], flags: Dict[str, bool]) -> List[dict]:
    states = seed_tasks(catalog, flags)
    return [
        {**item.model_dump(), "completed": state.completed}
        for item, state in zip(catalog, states)
    ]


def migrate_snapshot(blob: dict, catalog: Sequence[TaskDefinition] = PROTOCOL_ITEMS) -> Tuple[dict, bool]:
    """迁移旧版快照, 返回 (新快照, 是否有改动)"""
    blob = dict(blob)
    changed = False

    if "routineChecks" in blob and not blob.get("protocolChecks"):
        flags = _legacy_flags(blob.pop("routineChecks"))
        blob["protocolChecks"] = _full_checks(catalog, flags)
        logger.warning(f"Migrated legacy routineChecks ({len(flags)} flags) to protocolChecks")
        changed = True
    elif "routineChecks" in blob:
        blob.pop("routineChecks")
        changed = True

    checks = blob.get("protocolChecks")
    if not checks:
        blob["protocolChecks"] = _full_checks(catalog, {})
        changed = True
    elif [c.get("id") for c in checks] != [item.id for item in catalog] or any(
        not all(key in check for key in CHECK_METADATA) for check in checks
    ):
        blob["protocolChecks"] = _full_checks(catalog, _check_flags(checks))
        logger.warning("Re-seeded protocolChecks from catalog")
        changed = True

    if "ritualCompleted" not in blob:
        blob["ritualCompleted"] = False
        changed = True
    if "ritualCompletedDate" not in blob:
        blob["ritualCompletedDate"] = None
        changed = True
    if "weightHistory" not in blob:
        blob["weightHistory"] = []
        changed = True

    if blob.get("schemaVersion") != SCHEMA_VERSION:
        blob["schemaVersion"] = SCHEMA_VERSION
        changed = True

    return blob, changed


class LocalSnapshotStore(RecordStore):
    def __init__(self, directory, catalog: Sequence[TaskDefinition] = PROTOCOL_ITEMS):
        self.directory = Path(directory)
        self.catalog = list(catalog)

    def _path(self, owner_id: str) -> Path:
        # 替换字符后可能重名, 加上原始ID的摘要区分
        safe = re.sub(r"[^A-Za-z0-9_.-]", "_", owner_id)
        digest = hashlib.sha256(owner_id.encode("utf-8")).hexdigest()[:8]
        return self.directory / f"{safe}-{digest}.json"

    def _read(self, owner_id: str) -> Optional[dict]:
        path = self._path(owner_id)
        try:
            if not path.exists():
                return None
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.exception(f"Failed to read snapshot {path}")
            raise StoreUnavailableError(f"本地快照不可读: {e}") from e

        blob, changed = migrate_snapshot(raw, self.catalog)
        if changed:
            self._write(owner_id, blob)
        return blob

    def _write(self, owner_id: str, blob: dict) -> None:
        path = self._path(owner_id)
        tmp = path.with_suffix(".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(blob, ensure_ascii=False, indent=2), encoding="utf-8")
            os.replace(tmp, path)
        except OSError as e:
            logger.exception(f"Failed to write snapshot {path}")
            raise StoreUnavailableError(f"本地快照写入失败: {e}") from e

    def _require(self, owner_id: str) -> dict:
        blob = self._read(owner_id)
        if blob is None:
            raise StoreUnavailableError(f"用户 {owner_id} 没有本地快照")
        return blob

    def get_profile(self, owner_id: str) -> Optional[dict]:
        blob = self._read(owner_id)
        if blob is None:
            return None
        return load_dates({field: blob.get(key) for key, field in SNAPSHOT_KEYS.items()})

    def create_profile(self, owner_id: str, profile: dict) -> None:
        if self._read(owner_id) is not None:
            return
        fields = dump_dates(profile)
        blob = {key: fields.get(field) for key, field in SNAPSHOT_KEYS.items()}
        blob.update({
            "weightHistory": [],
            "protocolChecks": _full_checks(self.catalog, {}),
            "protocolChecksDate": None,
            "schemaVersion": SCHEMA_VERSION,
        })
        self._write(owner_id, blob)

    def update_profile(self, owner_id: str, fields: dict) -> None:
        blob = self._require(owner_id)
        dumped = dump_dates(fields)
        for key, field in SNAPSHOT_KEYS.items():
            if field in dumped:
                blob[key] = dumped[field]
        self._write(owner_id, blob)

    def list_weights(self, owner_id: str) -> List[WeightEntry]:
        blob = self._read(owner_id) or {}
        entries = [WeightEntry(**entry) for entry in blob.get("weightHistory", [])]
        return sorted(entries, key=lambda e: e.date)

    def upsert_weight(self, owner_id: str, day: date, weight: float) -> None:
        blob = self._require(owner_id)
        history = [e for e in blob.get("weightHistory", []) if e["date"] != day.isoformat()]
        history.append({"date": day.isoformat(), "weight": weight})
        blob["weightHistory"] = sorted(history, key=lambda e: e["date"])
        self._write(owner_id, blob)

    def delete_weights(self, owner_id: str) -> None:
        blob = self._require(owner_id)
        blob["weightHistory"] = []
        self._write(owner_id, blob)

    def list_tasks(self, owner_id: str, day: date) -> Dict[str, bool]:
        blob = self._read(owner_id)
        if blob is None:
            return {}
        checks_date = blob.get("protocolChecksDate")
        if checks_date is None:
            # 迁移来的旧数据没有日期: 第一次读取时归属当天并写回, 之后按日期过期
            blob["protocolChecksDate"] = day.isoformat()
            self._write(owner_id, blob)
        elif checks_date != day.isoformat():
            return {}
        return {c["id"]: bool(c.get("completed", False)) for c in blob.get("protocolChecks", [])}

    def upsert_task(self, owner_id: str, task_id: str, day: date, completed: bool) -> None:
        blob = self._require(owner_id)
        flags = self.list_tasks(owner_id, day)
        flags[task_id] = completed
        blob["protocolChecks"] = _full_checks(self.catalog, flags)
        blob["protocolChecksDate"] = day.isoformat()
        self._write(owner_id, blob)

    def delete_tasks(self, owner_id: str, day: Optional[date] = None) -> None:
        blob = self._require(owner_id)
        checks_date = blob.get("protocolChecksDate")
        if day is None or checks_date is None or checks_date == day.isoformat():
            blob["protocolChecks"] = _full_checks(self.catalog, {})
            blob["protocolChecksDate"] = day.isoformat() if day else None
            self._write(owner_id, blob)
