from fastapi import APIRouter, Depends, Query
from typing import List, Optional
import random

from models import JourneyView, MessagesView, Milestone, TimelineEntry, WeightInterpretation
from protocol import ProgressStore
from protocol import messages, views
from protocol.phases import TIMELINE
from routers.deps import get_progress_store

router = APIRouter(prefix="/journey", tags=["旅程"])


@router.get("", response_model=JourneyView)
async def get_journey(store: ProgressStore = Depends(get_progress_store)):
    """阶段、里程碑、体重解读与文案汇总"""
    return views.build_journey(store.record, store.clock(), store.definition)


@router.get("/milestones", response_model=List[Milestone])
async def get_milestones(store: ProgressStore = Depends(get_progress_store)):
    return views.milestones(store.record, store.days_elapsed, store.weight_lost)


@router.get("/interpretation", response_model=WeightInterpretation)
async def get_interpretation(store: ProgressStore = Depends(get_progress_store)):
    """体重趋势解读"""
    return views.interpret_weight_trend(store.weight_lost, store.days_elapsed, store.record.weight_history)


@router.get("/timeline", response_model=List[TimelineEntry])
async def get_timeline():
    return TIMELINE


@router.get("/messages", response_model=MessagesView)
async def get_messages(
    seed: Optional[int] = Query(default=None, description="随机文案的种子, 不传则随机"),
    store: ProgressStore = Depends(get_progress_store)
):
    """今日文案"""
    today = store.today()
    rng = random.Random(seed)
    return MessagesView(
        status_message=messages.status_message(store.record.streak, store.checked_in_today),
        ritual_message=messages.ritual_message(store.record.streak),
        confirmation_message=messages.confirmation_message(rng),
        daily_reinforcement=messages.daily_reinforcement(today),
        daily_tip=messages.daily_tip(today),
        encouraging_message=messages.encouraging_message(rng),
    )
