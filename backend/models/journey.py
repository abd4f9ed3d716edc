from pydantic import BaseModel
from typing import List, Optional

from .progress import WeightEntry
from .protocol import Milestone, Phase, WeightInterpretation


class PhaseView(BaseModel):
    phase: Phase
    index: int
    total_phases: int
    progress_percent: float
    days_in_phase: int
    days_remaining: Optional[int]  # 终末阶段为None


class JourneyView(BaseModel):
    days_elapsed: int
    weight_lost: float
    checked_in_today: bool
    current_phase: PhaseView
    milestones: List[Milestone]
    achieved_count: int
    interpretation: WeightInterpretation
    status_message: str
    ritual_message: str
    recent_weights: List[WeightEntry]


class MessagesView(BaseModel):
    status_message: str
    ritual_message: str
    confirmation_message: str
    daily_reinforcement: str
    daily_tip: str
    encouraging_message: str
