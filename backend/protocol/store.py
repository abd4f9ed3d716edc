"""进度状态存储

每个用户/会话一个 ProgressStore 实例, 负责加载(或创建)记录并执行四类修改操作。
除 toggle_task 外, 每次修改后都会完整地重新加载; 只有重新加载成功才替换内存中的记录。
存储异常 (StoreUnavailableError) 直接抛给调用方, 不自动重试。
"""
import re
from datetime import date, datetime
from typing import Callable, Optional, Union

from loguru import logger

from models import ProgressRecord, WeightKind
from protocol.backends import RecordStore
from protocol.catalog import seed_tasks
from protocol.dates import days_elapsed, is_consecutive, is_same_day
from protocol.definition import DEFAULT_PROTOCOL, ProtocolDefinition
from protocol.views import weight_lost

_NUMBER_PREFIX = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)")


def parse_weight(value: Union[float, int, str, None]) -> Optional[float]:
    """宽松解析体重输入, 无法解析时返回None (即清空该字段)"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _NUMBER_PREFIX.match(str(value).strip().replace(",", "."))
        if not match:
            return None
        number = float(match.group(0))
    if number != number or number in (float("inf"), float("-inf")):
        return None
    return number


class ProgressStore:
    def __init__(
        self,
        owner_id: Optional[str],
        backend: RecordStore,
        definition: ProtocolDefinition = DEFAULT_PROTOCOL,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.owner_id = owner_id
        self.backend = backend
        self.definition = definition
        self.clock = clock
        self.record: Optional[ProgressRecord] = None

    @property
    def is_ready(self) -> bool:
        """没有身份时不可用, 所有修改操作都是空操作"""
        return bool(self.owner_id)

    def today(self) -> date:
        return self.clock().date()

    # ---- 读取 ----

    def _default_profile(self) -> dict:
        return {
            "name": "",
            "start_date": self.today(),
            "initial_weight": None,
            "current_weight": None,
            "streak": 0,
            "last_check_in": None,
            "ritual_completed": False,
            "ritual_completed_date": None,
        }

    def _fetch(self) -> ProgressRecord:
        profile = self.backend.get_profile(self.owner_id)
        if profile is None:
            logger.info(f"Creating progress record for owner {self.owner_id}")
            profile = self._default_profile()
            self.backend.create_profile(self.owner_id, profile)

        profile = {key: value for key, value in profile.items() if value is not None}
        profile.setdefault("start_date", self.today())
        flags = self.backend.list_tasks(self.owner_id, self.today())
        return ProgressRecord(
            **profile,
            weight_history=self.backend.list_weights(self.owner_id),
            daily_tasks=seed_tasks(self.definition.catalog, flags),
        )

    def load(self) -> Optional[ProgressRecord]:
        """加载记录, 不存在时按默认值创建"""
        if not self.is_ready:
            return None
        self.record = self._fetch()
        return self.record

    def _ensure_loaded(self) -> ProgressRecord:
        if self.record is None:
            self.load()
        return self.record

    # ---- 修改 ----

    def update_weight(self, kind: WeightKind, value) -> Optional[ProgressRecord]:
        if not self.is_ready:
            logger.debug("update_weight ignored: no owner")
            return None
        self._ensure_loaded()
        weight = parse_weight(value)
        field = "initial_weight" if WeightKind(kind) == WeightKind.INITIAL else "current_weight"

        self.backend.update_profile(self.owner_id, {field: weight})
        if field == "current_weight" and weight is not None:
            self.backend.upsert_weight(self.owner_id, self.today(), weight)
        logger.info(f"Owner {self.owner_id} set {field}={weight}")
        return self.load()

    def toggle_task(self, task_id: str) -> Optional[ProgressRecord]:
        """切换打卡项; 先更新内存 (乐观更新) 再写入存储, 不重新加载"""
        if not self.is_ready:
            logger.debug("toggle_task ignored: no owner")
            return None
        record = self._ensure_loaded()
        state = record.task(task_id)
        if state is None:
            logger.debug(f"toggle_task ignored: unknown task {task_id}")
            return record

        state.completed = not state.completed
        self.backend.upsert_task(self.owner_id, task_id, self.today(), state.completed)
        return record

    def confirm_day(self) -> Optional[ProgressRecord]:
        """确认今日仪式, 每个自然日最多一次

        确认后当天的打卡项会被重置为未完成, 每天从新的清单开始。
        """
        if not self.is_ready:
            logger.debug("confirm_day ignored: no owner")
            return None
        record = self._ensure_loaded()
        today = self.today()
        if is_same_day(record.last_check_in, today):
            logger.debug(f"confirm_day ignored: owner {self.owner_id} already checked in today")
            return record

        streak = record.streak + 1 if is_consecutive(record.last_check_in, today) else 1
        self.backend.update_profile(self.owner_id, {
            "streak": streak,
            "last_check_in": today,
            "ritual_completed": True,
            "ritual_completed_date": today,
        })
        self.backend.delete_tasks(self.owner_id, today)
        logger.info(f"Owner {self.owner_id} confirmed {today}, streak={streak}")
        return self.load()

    def reset_progress(self) -> Optional[ProgressRecord]:
        """清空进度, 只保留名字"""
        if not self.is_ready:
            logger.debug("reset_progress ignored: no owner")
            return None
        self._ensure_loaded()
        self.backend.update_profile(self.owner_id, {
            "initial_weight": None,
            "current_weight": None,
            "streak": 0,
            "last_check_in": None,
            "start_date": self.today(),
            "ritual_completed": False,
            "ritual_completed_date": None,
        })
        self.backend.delete_weights(self.owner_id)
        self.backend.delete_tasks(self.owner_id)
        logger.info(f"Owner {self.owner_id} reset progress")
        return self.load()

    def update_name(self, name: str) -> Optional[ProgressRecord]:
        if not self.is_ready:
            logger.debug("update_name ignored: no owner")
            return None
        self._ensure_loaded()
        self.backend.update_profile(self.owner_id, {"name": name})
        return self.load()

    # ---- 便捷只读属性 ----

    @property
    def checked_in_today(self) -> bool:
        return self.record is not None and is_same_day(self.record.last_check_in, self.today())

    @property
    def days_elapsed(self) -> int:
        if self.record is None:
            return 1
        return days_elapsed(self.record.start_date, self.clock())

    @property
    def weight_lost(self) -> float:
        if self.record is None:
            return 0.0
        return weight_lost(self.record.initial_weight, self.record.current_weight)
