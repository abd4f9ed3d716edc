from typing import Dict, List, Optional, Sequence

from models import TaskDefinition, TaskState
from protocol.errors import CatalogError

# 顺序即展示顺序
PROTOCOL_ITEMS: List[TaskDefinition] = [
    TaskDefinition(
        id="water",
        label="激活代谢的补水",
        pillar="补水",
        description="水是身体启动代谢收到的第一个信号, 缺水时整个过程都会放慢。",
        guidance="全天至少喝2升水, 起床后先喝一杯, 再吃任何东西。",
    ),
    TaskDefinition(
        id="method",
        label="可预期的饮食控制",
        pillar="饮食",
        description="身体回应的是信号而不是极端的努力, 规律的饮食让代谢更有效率。",
        guidance="固定用餐时间, 不要跳餐或补偿性进食。坚持比完美更重要。",
    ),
    TaskDefinition(
        id="walk",
        label="轻度活动",
        pillar="运动",
        description="轻度活动让代谢保持活跃又不会带来压力, 重点不是燃烧热量而是给身体发信号。",
        guidance="今天步行20分钟, 绕小区一圈或步行上班都可以。",
    ),
    TaskDefinition(
        id="sleep",
        label="恢复性睡眠",
        pillar="休息",
        description="身体在睡眠中处理并巩固成果, 缺少休息会让协议失去效力。",
        guidance="睡足7到8小时, 睡前30分钟远离屏幕。",
    ),
    TaskDefinition(
        id="ritual",
        label="每日确认仪式",
        pillar="仪式",
        description="每日确认为协议画上句号, 把意图变成真正的承诺。",
        guidance="一天结束时回顾各项支柱并确认今日协议。",
    ),
]


# 旧版本中使用过的打卡项ID -> 当前ID
TASK_ID_ALIASES: Dict[str, str] = {
    "avoid": "ritual",
}


def canonical_task_id(task_id: str) -> str:
    return TASK_ID_ALIASES.get(task_id, task_id)


def validate_catalog(catalog: Sequence[TaskDefinition]) -> None:
    seen = set()
    for item in catalog:
        if item.id in seen:
            raise CatalogError(f"打卡项ID重复: {item.id}")
        seen.add(item.id)


def seed_tasks(
    catalog: Sequence[TaskDefinition],
    completed: Optional[Dict[str, bool]] = None,
) -> List[TaskState]:
    """按目录生成今日打卡状态, 每个项目恰好一条; 目录外的ID被忽略"""
    completed = completed or {}
    return [
        TaskState(task_id=item.id, completed=bool(completed.get(item.id, False)))
        for item in catalog
    ]
