from pydantic import BaseModel, Field, computed_field
from typing import Optional
from enum import Enum


class Phase(BaseModel):
    id: str
    name: str
    description: str
    objective: str
    start_day: int = Field(ge=1, description="阶段起始天 (含)")
    end_day: Optional[int] = Field(default=None, description="阶段结束天 (含), None表示无上限")

    @computed_field
    @property
    def duration_days(self) -> Optional[int]:
        if self.end_day is None:
            return None
        return self.end_day - self.start_day + 1

    @property
    def is_terminal(self) -> bool:
        return self.end_day is None

    def contains(self, day: int) -> bool:
        if day < self.start_day:
            return False
        return self.end_day is None or day <= self.end_day


class TaskDefinition(BaseModel):
    id: str
    label: str
    pillar: str
    description: str
    guidance: str


class Milestone(BaseModel):
    id: str
    label: str
    description: str
    achieved: bool = False
    day_required: Optional[int] = None
    streak_required: Optional[int] = None
    weight_required: Optional[float] = None


class TrendCategory(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    ENCOURAGING = "encouraging"


class WeightInterpretation(BaseModel):
    category: TrendCategory
    title: str
    message: str


class TimelineEntry(BaseModel):
    period: str
    title: str
    description: str
