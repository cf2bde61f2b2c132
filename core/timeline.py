"""
每期事件归并

对第 i 期，收集 (上次交易日, 本期还款日] 区间内的利率变更与提前还款，
再加上本期的计划还款，按日期排序，同日按 调息 < 提前还款 < 计划还款。
不修改任何状态。
"""
from dataclasses import dataclass
from datetime import date
from typing import List, Sequence

import pandas as pd

from config.constants import EventKind
from data_manager.schema import LoanTerms, ExtraRepayment, RateChange
from utils.date_utils import get_due_date, normalize_date


@dataclass(frozen=True)
class TimelineEvent:
    kind: EventKind
    date: date
    value: float = 0.0  # 调息为新年利率，提前还款为金额，计划还款为 0


def _event_sort_key(event: TimelineEvent) -> tuple:
    return (event.date, event.kind.order)


def scheduled_date_for_period(loan: LoanTerms, period: int) -> date:
    """第 period 期计划还款日；末期有到期日时以到期日为准"""
    # 来自 DataFrame 的空到期日是 NaT，与 None 同样视为未设置
    if period == loan.total_periods and pd.notna(loan.maturity_date):
        return normalize_date(loan.maturity_date)
    return get_due_date(normalize_date(loan.first_payment_date), period)


def collect_period_events(
    scheduled_date: date,
    last_transaction_date: date,
    repayments: Sequence[ExtraRepayment],
    rate_changes: Sequence[RateChange],
) -> List[TimelineEvent]:
    """返回本期按处理顺序排列的事件列表，末尾必有一条计划还款"""
    events = [
        TimelineEvent(EventKind.RATE, rc.date, rc.new_annual_rate)
        for rc in rate_changes
        if last_transaction_date < rc.date <= scheduled_date
    ]
    events.extend(
        TimelineEvent(EventKind.EXTRA, er.date, er.amount)
        for er in repayments
        if last_transaction_date < er.date <= scheduled_date
    )
    events.append(TimelineEvent(EventKind.SCHEDULED, scheduled_date))
    # sorted 是稳定排序，同日同类事件保持调用方顺序
    return sorted(events, key=_event_sort_key)
