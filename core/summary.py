"""还款计划汇总与真实年化率"""
import logging
from typing import Sequence

import numpy as np
from scipy import optimize

from config.constants import EventKind
from core.calculator import round2
from data_manager.schema import LoanTerms, RepaymentRow, ScheduleSummary
from utils.date_utils import normalize_date

logger = logging.getLogger(__name__)


def summarize_schedule(rows: Sequence[RepaymentRow]) -> ScheduleSummary:
    """汇总总利息、总还款、总本金等"""
    if not rows:
        return ScheduleSummary(0.0, 0.0, 0.0, 0, 0, 0.0, None)
    return ScheduleSummary(
        total_interest=round2(sum(r.interest for r in rows)),
        total_payment=round2(sum(r.payment for r in rows)),
        total_principal=round2(sum(r.principal for r in rows)),
        scheduled_rows=sum(1 for r in rows if r.kind == EventKind.SCHEDULED),
        extra_rows=sum(1 for r in rows if r.kind == EventKind.EXTRA),
        final_balance=rows[-1].remaining_balance,
        last_payment_date=rows[-1].date,
    )


def calc_effective_annual_rate(loan: LoanTerms, rows: Sequence[RepaymentRow]) -> float:
    """按实际日期现金流求 IRR（ACT/365），返回小数形式的年化率"""
    if not rows or loan.principal <= 0:
        return 0.0

    start = normalize_date(loan.loan_date)
    years = np.array([(r.date - start).days / 365.0 for r in rows])
    amounts = np.array([r.payment for r in rows])

    def npv(rate):
        return -loan.principal + float(np.sum(amounts / (1 + rate) ** years))

    try:
        return round(optimize.brentq(npv, -0.99, 10.0), 6)
    except (ValueError, RuntimeError) as e:
        logger.warning("Effective rate did not converge for loan %r: %s", loan.loan_id, e)
        return 0.0
