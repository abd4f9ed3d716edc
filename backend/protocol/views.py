"""派生视图: 阶段、里程碑、体重趋势解读

这里的函数都是纯函数, 只读取记录, 从不修改。
"""
from datetime import date, datetime
from typing import List, NamedTuple, Optional, Sequence, Union

from models import (
    JourneyView, Milestone, Phase, PhaseView, ProgressRecord,
    TrendCategory, WeightEntry, WeightInterpretation,
)
from protocol import messages
from protocol.dates import days_elapsed as compute_days_elapsed, is_same_day, to_date
from protocol.definition import DEFAULT_PROTOCOL, ProtocolDefinition

# 最近三次体重净增超过该值时按"适应期"解读
TREND_RISE_THRESHOLD = 0.5
TREND_WINDOW = 3
RECENT_WEIGHTS_LIMIT = 14


def current_phase(days: int, definition: ProtocolDefinition = DEFAULT_PROTOCOL) -> Phase:
    for phase in definition.phases:
        if phase.contains(days):
            return phase
    return definition.phases[-1]


def phase_index(days: int, definition: ProtocolDefinition = DEFAULT_PROTOCOL) -> int:
    phase = current_phase(days, definition)
    return [p.id for p in definition.phases].index(phase.id)


def phase_progress_percent(days: int, definition: ProtocolDefinition = DEFAULT_PROTOCOL) -> float:
    """当前阶段完成百分比 (0-100)"""
    phase = current_phase(days, definition)
    days_in_phase = days - phase.start_day + 1
    window = definition.terminal_reference_days if phase.is_terminal else phase.duration_days
    return max(0.0, min(100.0, days_in_phase / window * 100))


def weight_lost(initial: Optional[float], current: Optional[float]) -> float:
    """已减重量, 永不为负"""
    if initial is None or current is None:
        return 0.0
    return max(0.0, initial - current)


class MilestoneRule(NamedTuple):
    id: str
    label: str
    description: str
    day_required: Optional[int] = None
    streak_required: Optional[int] = None
    weight_required: Optional[float] = None
    # 有过任何一次打卡也算达成
    any_check_in: bool = False


# 顺序固定: 激活 -> 连续打卡 -> 天数 -> 减重
MILESTONE_RULES: List[MilestoneRule] = [
    MilestoneRule("protocol_activated", "协议已激活", "你已经开始了这段旅程"),
    MilestoneRule("first_ritual", "完成第一次仪式", "第一步最重要", streak_required=1, any_check_in=True),
    MilestoneRule("three_day_streak", "连续3天", "身体开始识别这个模式", streak_required=3),
    MilestoneRule("first_week", "第一周巩固", "协议已融入日常", day_required=7, streak_required=5),
    MilestoneRule("acceleration_phase", "进入加速期", "代谢进入加速节奏", day_required=8),
    MilestoneRule("two_weeks", "协议巩固 (14天)", "你已经建立了新的模式", streak_required=14),
    MilestoneRule("metabolism_stabilized", "代谢稳定", "协议成为你的一部分", day_required=22),
    MilestoneRule("first_kg", "减掉第1公斤", "成果开始显现", weight_required=1),
    MilestoneRule("three_kg", "减掉3公斤", "代谢演变进行中", weight_required=3),
    MilestoneRule("five_kg", "减掉5公斤", "看得见的改变", weight_required=5),
]


def _rule_achieved(rule: MilestoneRule, record: ProgressRecord, days: int, lost: float) -> bool:
    if rule.any_check_in and record.last_check_in is not None:
        return True
    if rule.day_required is not None and days < rule.day_required:
        return False
    if rule.streak_required is not None and record.streak < rule.streak_required:
        return False
    if rule.weight_required is not None and lost < rule.weight_required:
        return False
    return True


def milestones(record: ProgressRecord, days: int, lost: float) -> List[Milestone]:
    return [
        Milestone(
            id=rule.id,
            label=rule.label,
            description=rule.description,
            achieved=_rule_achieved(rule, record, days, lost),
            day_required=rule.day_required,
            streak_required=rule.streak_required,
            weight_required=rule.weight_required,
        )
        for rule in MILESTONE_RULES
    ]


def interpret_weight_trend(
    lost: float,
    days: int,
    recent_entries: Sequence[WeightEntry],
) -> WeightInterpretation:
    """体重趋势解读, 按优先级判断: 近期上升 > 未减重 > 减重幅度"""
    if len(recent_entries) >= TREND_WINDOW:
        window = list(recent_entries)[-TREND_WINDOW:]
        if window[-1].weight - window[0].weight > TREND_RISE_THRESHOLD:
            return WeightInterpretation(
                category=TrendCategory.ENCOURAGING,
                title="适应阶段",
                message="身体正在内部重组, 波动是代谢过程的正常部分, 协议仍在进行。",
            )

    if lost <= 0:
        if days <= 3:
            return WeightInterpretation(
                category=TrendCategory.NEUTRAL,
                title="内部调整中",
                message="最初几天身体在识别新模式, 数字还反映不出内部正在发生的变化。",
            )
        return WeightInterpretation(
            category=TrendCategory.ENCOURAGING,
            title="内部过程进行中",
            message="暂时的水分滞留或代谢适应。即使体重秤没有显示, 身体也在工作, 继续坚持。",
        )

    if lost < 2:
        return WeightInterpretation(
            category=TrendCategory.POSITIVE,
            title="初步进展",
            message=f"协议已帮你减掉{lost:.1f}公斤, 代谢正在回应, 每一天都在巩固成果。",
        )

    if lost < 5:
        return WeightInterpretation(
            category=TrendCategory.POSITIVE,
            title="加速确认",
            message=f"已减掉{lost:.1f}公斤, 身体已经熟悉协议的节奏, 成果正在累积。",
        )

    return WeightInterpretation(
        category=TrendCategory.POSITIVE,
        title="蜕变进行中",
        message=f"已减掉{lost:.1f}公斤, 协议正在带来真实的结果, 你证明了这是可能的。",
    )


def recent_weights(history: Sequence[WeightEntry], limit: int = RECENT_WEIGHTS_LIMIT) -> List[WeightEntry]:
    """最近的体重记录 (按日期升序), 用于图表和历史列表"""
    return list(history)[-limit:]


def build_phase_view(days: int, definition: ProtocolDefinition = DEFAULT_PROTOCOL) -> PhaseView:
    phase = current_phase(days, definition)
    days_in_phase = max(1, days - phase.start_day + 1)
    days_remaining = None if phase.is_terminal else max(0, phase.end_day - days)
    return PhaseView(
        phase=phase,
        index=phase_index(days, definition),
        total_phases=len(definition.phases),
        progress_percent=round(phase_progress_percent(days, definition), 1),
        days_in_phase=days_in_phase,
        days_remaining=days_remaining,
    )


def build_journey(
    record: ProgressRecord,
    now: Union[date, datetime],
    definition: ProtocolDefinition = DEFAULT_PROTOCOL,
) -> JourneyView:
    """汇总旅程视图"""
    days = compute_days_elapsed(record.start_date, now)
    lost = weight_lost(record.initial_weight, record.current_weight)
    checked_in = is_same_day(record.last_check_in, to_date(now))
    achieved = milestones(record, days, lost)

    return JourneyView(
        days_elapsed=days,
        weight_lost=lost,
        checked_in_today=checked_in,
        current_phase=build_phase_view(days, definition),
        milestones=achieved,
        achieved_count=sum(1 for m in achieved if m.achieved),
        interpretation=interpret_weight_trend(lost, days, record.weight_history),
        status_message=messages.status_message(record.streak, checked_in),
        ritual_message=messages.ritual_message(record.streak),
        recent_weights=recent_weights(record.weight_history),
    )
