"""
还款计划生成器

根据贷款基础信息 + 事件历史（利率变更、提前还款）逐期生成还款计划。
每次调用独立维护一份 EngineState，不共享、不落盘，相同输入得到相同输出。
"""
import logging
from dataclasses import dataclass, asdict
from datetime import date
from typing import List, Optional, Sequence

import pandas as pd

from config.constants import (
    EventKind, BALANCE_EPSILON, PAYOFF_SNAP_THRESHOLD,
    STANDARD_MONTH_MIN_DAYS, STANDARD_MONTH_MAX_DAYS,
    MONTHS_PER_YEAR, SCHEDULE_COLUMNS,
)
from core.calculator import (
    round2, calc_pmt, calc_accrued_interest, calc_standard_interest,
)
from core.timeline import TimelineEvent, collect_period_events, scheduled_date_for_period
from data_manager.schema import LoanTerms, ExtraRepayment, RateChange, RepaymentRow
from utils.date_utils import normalize_date, days_between

logger = logging.getLogger(__name__)


@dataclass
class EngineState:
    balance: float
    annual_rate: float
    installment: float
    last_transaction_date: date


def _normalize_repayments(repayments: Optional[Sequence[ExtraRepayment]]) -> List[ExtraRepayment]:
    if not repayments:
        return []
    normalized = [ExtraRepayment(normalize_date(er.date), float(er.amount)) for er in repayments]
    return sorted(normalized, key=lambda er: er.date)


def _normalize_rate_changes(rate_changes: Optional[Sequence[RateChange]]) -> List[RateChange]:
    if not rate_changes:
        return []
    normalized = [RateChange(normalize_date(rc.date), float(rc.new_annual_rate)) for rc in rate_changes]
    return sorted(normalized, key=lambda rc: rc.date)


def _is_standard_month(
    period: int,
    total_periods: int,
    events: List[TimelineEvent],
    gap_days: int,
) -> bool:
    """中间期、本期无其他事件、距上次交易约一个月"""
    return (
        1 < period < total_periods
        and len(events) == 1
        and STANDARD_MONTH_MIN_DAYS <= gap_days <= STANDARD_MONTH_MAX_DAYS
    )


def _apply_rate_change(state: EngineState, event: TimelineEvent, periods_left: int):
    # 调息不产生还款行，也不推进上次交易日
    state.annual_rate = event.value
    state.installment = calc_pmt(state.balance, state.annual_rate / MONTHS_PER_YEAR, periods_left)
    logger.debug("Rate changed to %s on %s, installment now %s",
                 event.value, event.date, state.installment)


def _apply_extra_repayment(
    state: EngineState,
    event: TimelineEvent,
    period: int,
    periods_left: int,
) -> RepaymentRow:
    interest = round2(calc_accrued_interest(
        state.balance, state.annual_rate, state.last_transaction_date, event.date,
    ))
    # 还款不足以覆盖利息时本金为负，余额随之增加
    principal = round2(event.value - interest)
    state.balance = round2(state.balance - principal)
    if principal < 0:
        logger.warning("Extra repayment of %s on %s does not cover interest %s",
                       event.value, event.date, interest)

    row = RepaymentRow(
        period=period,
        date=event.date,
        payment=round2(event.value),
        principal=principal,
        interest=interest,
        remaining_balance=max(0.0, state.balance),
        is_adjusted=True,
        kind=EventKind.EXTRA,
    )
    # 提前还款后立即重算后续月供
    state.installment = calc_pmt(state.balance, state.annual_rate / MONTHS_PER_YEAR, periods_left)
    state.last_transaction_date = event.date
    return row


def _apply_scheduled_payment(
    state: EngineState,
    event: TimelineEvent,
    period: int,
    total_periods: int,
    events: List[TimelineEvent],
) -> RepaymentRow:
    gap_days = days_between(state.last_transaction_date, event.date)
    if _is_standard_month(period, total_periods, events, gap_days):
        interest = round2(calc_standard_interest(state.balance, state.annual_rate))
    else:
        interest = round2(calc_accrued_interest(
            state.balance, state.annual_rate, state.last_transaction_date, event.date,
        ))

    if period == 1:
        # 首期维持摊还节奏：本金 = 月供 - 标准月息
        principal = state.installment - calc_standard_interest(state.balance, state.annual_rate)
    elif period == total_periods or state.balance < state.installment:
        principal = state.balance
    else:
        principal = state.installment - interest

    principal = round2(principal)
    if state.balance - principal < PAYOFF_SNAP_THRESHOLD:
        principal = state.balance

    state.balance = round2(state.balance - principal)
    state.last_transaction_date = event.date

    return RepaymentRow(
        period=period,
        date=event.date,
        payment=round2(principal + interest),
        principal=principal,
        interest=interest,
        remaining_balance=max(0.0, state.balance),
        is_adjusted=len(events) > 1,
        kind=EventKind.SCHEDULED,
    )


def generate_schedule(
    loan: LoanTerms,
    repayments: Optional[Sequence[ExtraRepayment]] = None,
    rate_changes: Optional[Sequence[RateChange]] = None,
) -> List[RepaymentRow]:
    """
    生成完整还款计划

    Args:
        loan: 贷款基础信息
        repayments: 提前还款事件，顺序任意
        rate_changes: 利率变更事件，顺序任意

    Returns:
        按处理顺序排列的还款行；同一期可有多行（提前还款 + 计划还款）
    """
    if not loan.principal or loan.principal <= 0 or loan.total_periods <= 0:
        return []

    total_periods = int(loan.total_periods)
    sorted_repayments = _normalize_repayments(repayments)
    sorted_rate_changes = _normalize_rate_changes(rate_changes)

    state = EngineState(
        balance=float(loan.principal),
        annual_rate=float(loan.annual_rate),
        installment=0.0,
        last_transaction_date=normalize_date(loan.loan_date),
    )
    state.installment = calc_pmt(state.balance, state.annual_rate / MONTHS_PER_YEAR, total_periods)

    schedule = []
    for period in range(1, total_periods + 1):
        if state.balance <= BALANCE_EPSILON:
            break

        scheduled_date = scheduled_date_for_period(loan, period)
        events = collect_period_events(
            scheduled_date, state.last_transaction_date,
            sorted_repayments, sorted_rate_changes,
        )
        periods_left = total_periods - period + 1

        for event in events:
            if state.balance <= BALANCE_EPSILON:
                break
            if event.kind == EventKind.RATE:
                _apply_rate_change(state, event, periods_left)
            elif event.kind == EventKind.EXTRA:
                schedule.append(_apply_extra_repayment(state, event, period, periods_left))
            else:
                schedule.append(_apply_scheduled_payment(state, event, period, total_periods, events))

    logger.debug("Generated %d rows for loan %r", len(schedule), loan.loan_id)
    return schedule


def schedule_to_dataframe(rows: Sequence[RepaymentRow]) -> pd.DataFrame:
    """还款行转 DataFrame，供表格、图表与 CSV 使用"""
    records = []
    for row in rows:
        record = asdict(row)
        record["date"] = row.date.strftime("%Y-%m-%d")
        record["kind"] = row.kind.value
        records.append(record)
    return pd.DataFrame(records, columns=SCHEDULE_COLUMNS)
