"""
日期工具

两种“加月”语义刻意分开：
- get_due_date: 排期用，日不存在时取目标月最后一天（截断）
- add_months_rollover: 计息用，日不存在时顺延到下个月（溢出）

    起始日        加月  get_due_date  add_months_rollover
    2023-01-31    +1    2023-02-28    2023-03-03
    2024-01-31    +1    2024-02-29    2024-03-02
    2024-01-30    +1    2024-02-29    2024-03-01
    2024-03-31    +1    2024-04-30    2024-05-01
    2024-01-15    +1    2024-02-15    2024-02-15
"""
import calendar
import logging
from datetime import date, datetime, timedelta

import pandas as pd
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)


def normalize_date(d) -> date:
    """解析为日历日期（无时区），无法解析时回退为今天"""
    if d is None or d is pd.NaT:
        logger.warning("Missing date, falling back to today")
        return date.today()
    # pd.Timestamp 也是 datetime
    if isinstance(d, datetime):
        return d.date()
    if isinstance(d, date):
        return d
    if isinstance(d, str) and d.strip():
        text = d.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            pass
        try:
            return date_parser.parse(text).date()
        except (ValueError, OverflowError):
            pass
    logger.warning("Unparseable date %r, falling back to today", d)
    return date.today()


def days_between(d1: date, d2: date) -> int:
    """d1 到 d2 的天数，d2 早于 d1 时为 0"""
    return max(0, (d2 - d1).days)


def add_months_rollover(d: date, months: int) -> date:
    """日期加 N 个月，保留“日”，目标月没有该日时顺延到下个月"""
    total = d.month - 1 + months
    first_of_month = date(d.year + total // 12, total % 12 + 1, 1)
    return first_of_month + timedelta(days=d.day - 1)


def get_due_date(first_payment_date: date, period: int) -> date:
    """计算第 period 期的还款日（第 1 期即首次还款日）"""
    target = first_payment_date + relativedelta(months=period - 1)
    # 还款日不超过当月最大天数
    max_day = calendar.monthrange(target.year, target.month)[1]
    day = min(first_payment_date.day, max_day)
    return target.replace(day=day)
