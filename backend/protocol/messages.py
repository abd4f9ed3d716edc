"""叙事文案选择

文案措辞可以随产品调整, 需要保持稳定的是连续天数的分档边界 (0, 1, <7, <14, <21, >=21)。
"""
from datetime import date
from typing import Sequence, Union

CONFIRMATION_MESSAGES = [
    "协议已执行, 今天你强化了这个过程。",
    "今天已经向身体发送了正确的信号。",
    "又一天协议在线, 身体正在认出这个节奏。",
    "承诺已兑现, 你正在建立新的节奏。",
    "今日完成, 坚持才是改变的关键。",
]

REINFORCEMENTS = [
    "坚持胜过强度。今天减了多少并不重要, 重要的是你在这里完成了自己的部分。",
    "身体一直在工作。即使体重没变, 代谢也在适应, 每一天的坚持都在为持久的改变做准备。",
    "进步不是直线。体重有升有降很正常, 要看的是几周的趋势而不是每天的波动。",
]

DAILY_TIPS = [
    "慢慢开始, 不要一次改变所有事情。",
    "有条件的话提前准备好餐食。",
    "每餐前先喝一杯水。",
    "好好睡觉, 睡眠直接影响代谢。",
    "庆祝小胜利, 它们会变成习惯。",
    "某天没做到也别放弃, 第二天继续。",
    "日常多走路, 不一定要去健身房。",
]

ENCOURAGING_MESSAGES = [
    "每一天都算数, 继续保持!",
    "你正在塑造一个新的自己。",
    "记住: 要进步, 不要完美。",
    "重要的是不放弃。",
    "你已经迈出了第一步, 继续!",
]


def pick_message(pool: Sequence[str], selector: Union[int, object]) -> str:
    """从文案池中选一条

    selector 为整数时按下标取 (对池长度取模), 否则视为随机源, 调用其 choice()。
    """
    if not pool:
        raise ValueError("文案池不能为空")
    if isinstance(selector, int):
        return pool[selector % len(pool)]
    return selector.choice(pool)


def day_index(today: date) -> int:
    """星期序号, 周日为0"""
    return today.isoweekday() % 7


def status_message(streak: int, checked_in_today: bool) -> str:
    if checked_in_today:
        return "协议已执行, 今天你强化了这个过程。✓"
    if streak == 0:
        return "你的协议等待激活。从向身体发送正确的信号开始吧。"
    if streak == 1:
        return "协议进行中: 已连续1天。每一天都在强化这个模式。"
    return f"协议进行中: 已连续{streak}天。每一天都在强化这个模式。"


def ritual_message(streak: int) -> str:
    if streak == 0:
        return "今天激活你的协议"
    if streak == 1:
        return "协议已激活, 保持节奏。"
    if streak < 7:
        return f"协议已连续{streak}天, 身体已经感受到不同。"
    if streak < 14:
        return f"{streak}天! 代谢加速进行中。"
    if streak < 21:
        return f"坚持了{streak}天, 协议已经成为你的一部分。"
    return f"{streak}天。代谢已经稳定, 你完成了蜕变。"


def confirmation_message(selector) -> str:
    return pick_message(CONFIRMATION_MESSAGES, selector)


def daily_reinforcement(today: date) -> str:
    return pick_message(REINFORCEMENTS, day_index(today))


def daily_tip(today: date) -> str:
    return pick_message(DAILY_TIPS, day_index(today))


def encouraging_message(selector) -> str:
    return pick_message(ENCOURAGING_MESSAGES, selector)
