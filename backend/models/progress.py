from pydantic import BaseModel, Field
from typing import List, Optional, Union
import datetime as dt
from enum import Enum


class WeightKind(str, Enum):
    INITIAL = "initial"
    CURRENT = "current"


class WeightEntry(BaseModel):
    date: dt.date
    weight: float


class TaskState(BaseModel):
    task_id: str
    completed: bool = False


class ProgressRecord(BaseModel):
    name: str = ""
    start_date: dt.date
    initial_weight: Optional[float] = None
    current_weight: Optional[float] = None
    streak: int = Field(default=0, ge=0)
    last_check_in: Optional[dt.date] = None
    ritual_completed: bool = False
    ritual_completed_date: Optional[dt.date] = None
    weight_history: List[WeightEntry] = Field(default_factory=list)
    daily_tasks: List[TaskState] = Field(default_factory=list)

    def task(self, task_id: str) -> Optional[TaskState]:
        for state in self.daily_tasks:
            if state.task_id == task_id:
                return state
        return None


class WeightUpdateRequest(BaseModel):
    kind: WeightKind
    # 允许数字或用户输入的文本, 无法解析时视为清空
    value: Optional[Union[float, str]] = None


class NameUpdateRequest(BaseModel):
    name: str


class ProtocolCheck(BaseModel):
    """今日打卡项 (任务状态 + 目录中的描述信息)"""
    id: str
    label: str
    pillar: str
    description: str
    guidance: str
    completed: bool


class ProgressResponse(BaseModel):
    name: str
    start_date: dt.date
    initial_weight: Optional[float]
    current_weight: Optional[float]
    streak: int
    last_check_in: Optional[dt.date]
    ritual_completed: bool
    ritual_completed_date: Optional[dt.date]
    weight_history: List[WeightEntry]
    protocol_checks: List[ProtocolCheck]
    checked_in_today: bool
    days_elapsed: int
    weight_lost: float
