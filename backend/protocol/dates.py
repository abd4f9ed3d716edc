"""日期与连续打卡计算

所有日期均为本地时区的无时区日期, 不做时区换算。
"""
import math
from datetime import date, datetime, timedelta
from typing import Optional, Union

DateLike = Union[date, datetime, str]

SECONDS_PER_DAY = 24 * 60 * 60


def to_date(value: Optional[DateLike]) -> Optional[date]:
    """把 date / datetime / YYYY-MM-DD 字符串统一为 date"""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value[:10], "%Y-%m-%d").date()


def days_elapsed(start_date: DateLike, now: Union[date, datetime]) -> int:
    """从开始日期(当天零点)到现在经过的天数, 向上取整, 最少为第1天"""
    start = datetime.combine(to_date(start_date), datetime.min.time())
    if not isinstance(now, datetime):
        now = datetime.combine(now, datetime.min.time())
    elapsed = (now - start).total_seconds() / SECONDS_PER_DAY
    return max(1, math.ceil(elapsed))


def is_consecutive(last_check_in: Optional[DateLike], today: DateLike) -> bool:
    """上次打卡是否恰好是今天的前一天"""
    last = to_date(last_check_in)
    if last is None:
        return False
    return last == to_date(today) - timedelta(days=1)


def is_same_day(a: Optional[DateLike], b: Optional[DateLike]) -> bool:
    if a is None or b is None:
        return False
    return to_date(a) == to_date(b)
