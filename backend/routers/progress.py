from fastapi import APIRouter, Depends

from models import (
    NameUpdateRequest, ProgressResponse, ProtocolCheck, WeightUpdateRequest,
)
from protocol import ProgressStore
from routers.deps import get_progress_store

router = APIRouter(prefix="/progress", tags=["进度"])


def render_progress(store: ProgressStore) -> ProgressResponse:
    """记录 + 今日打卡项描述 + 常用派生值"""
    record = store.record
    checks = []
    for state in record.daily_tasks:
        item = store.definition.task_definition(state.task_id)
        checks.append(ProtocolCheck(**item.model_dump(), completed=state.completed))

    return ProgressResponse(
        name=record.name,
        start_date=record.start_date,
        initial_weight=record.initial_weight,
        current_weight=record.current_weight,
        streak=record.streak,
        last_check_in=record.last_check_in,
        ritual_completed=record.ritual_completed,
        ritual_completed_date=record.ritual_completed_date,
        weight_history=record.weight_history,
        protocol_checks=checks,
        checked_in_today=store.checked_in_today,
        days_elapsed=store.days_elapsed,
        weight_lost=store.weight_lost,
    )


@router.get("", response_model=ProgressResponse)
async def get_progress(store: ProgressStore = Depends(get_progress_store)):
    """获取当前进度"""
    return render_progress(store)


@router.put("/weight", response_model=ProgressResponse)
async def update_weight(
    request: WeightUpdateRequest,
    store: ProgressStore = Depends(get_progress_store)
):
    """更新初始或当前体重, 无法解析的输入会清空该字段"""
    store.update_weight(request.kind, request.value)
    return render_progress(store)


@router.post("/tasks/{task_id}/toggle", response_model=ProgressResponse)
async def toggle_task(task_id: str, store: ProgressStore = Depends(get_progress_store)):
    """切换今日打卡项, 未知ID忽略"""
    store.toggle_task(task_id)
    return render_progress(store)


@router.post("/confirm", response_model=ProgressResponse)
async def confirm_day(store: ProgressStore = Depends(get_progress_store)):
    """确认今日仪式"""
    store.confirm_day()
    return render_progress(store)


@router.post("/reset", response_model=ProgressResponse)
async def reset_progress(store: ProgressStore = Depends(get_progress_store)):
    """重置进度 (保留名字)"""
    store.reset_progress()
    return render_progress(store)


@router.put("/name", response_model=ProgressResponse)
async def update_name(
    request: NameUpdateRequest,
    store: ProgressStore = Depends(get_progress_store)
):
    """更新名字"""
    store.update_name(request.name)
    return render_progress(store)
