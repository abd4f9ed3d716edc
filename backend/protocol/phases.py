from typing import List, Sequence

from models import Phase, TimelineEntry
from protocol.errors import PhaseTableError

# 终末阶段无固定时长, 进度按30天参考窗口计算
TERMINAL_REFERENCE_DAYS = 30

PHASES: List[Phase] = [
    Phase(
        id="activation",
        name="激活期",
        description="身体正在识别新的节奏, 这是内部调整的阶段, 代谢开始做出回应。",
        objective="打好协议基础, 建立每日仪式",
        start_day=1,
        end_day=7,
    ),
    Phase(
        id="acceleration",
        name="加速期",
        description="协议全面执行中, 代谢已经熟悉节奏并开始为你工作。",
        objective="以稳定的坚持放大成果",
        start_day=8,
        end_day=21,
    ),
    Phase(
        id="stabilization",
        name="稳定期",
        description="你已到达平衡点, 协议成为你的一部分, 保持比开始更容易。",
        objective="把新的代谢模式固化为长期习惯",
        start_day=22,
        end_day=None,
    ),
]

TIMELINE: List[TimelineEntry] = [
    TimelineEntry(period="第1-3天", title="内部调整", description="身体在为新节奏做准备, 感觉到变化是正常的。"),
    TimelineEntry(period="第4-7天", title="初步消肿", description="协议开始起效, 水肿减少, 身体更轻盈。"),
    TimelineEntry(period="第2周", title="代谢加速", description="代谢识别了新模式, 结果更加明显。"),
    TimelineEntry(period="第3周", title="节奏巩固", description="身体开始顺势而为, 付出减少而成果延续。"),
    TimelineEntry(period="第4周起", title="稳定", description="协议成为你的一部分, 保持比开始更容易。"),
]


def validate_phase_table(phases: Sequence[Phase]) -> None:
    """校验阶段表: 从第1天开始、连续不重叠、仅最后一个阶段无上限"""
    if not phases:
        raise PhaseTableError("阶段表不能为空")

    expected_start = 1
    for i, phase in enumerate(phases):
        if phase.start_day != expected_start:
            raise PhaseTableError(
                f"阶段 {phase.id} 应从第{expected_start}天开始, 实际为第{phase.start_day}天"
            )
        is_last = i == len(phases) - 1
        if phase.end_day is None:
            if not is_last:
                raise PhaseTableError(f"只有最后一个阶段可以无上限, {phase.id} 不是最后一个")
            return
        if phase.end_day < phase.start_day:
            raise PhaseTableError(f"阶段 {phase.id} 结束天早于开始天")
        expected_start = phase.end_day + 1

    raise PhaseTableError("最后一个阶段必须无上限 (end_day=None)")
