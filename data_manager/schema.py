from dataclasses import dataclass
from datetime import date
from typing import Optional

from config.constants import EventKind


@dataclass(frozen=True)
class LoanTerms:
    principal: float
    annual_rate: float  # 小数形式，0.05 = 5%
    loan_date: date  # 放款日
    first_payment_date: date  # 首次还款日，其“日”即每期还款日
    maturity_date: Optional[date]  # 末期还款日，可为空
    total_periods: int
    loan_id: str = ""


@dataclass(frozen=True)
class ExtraRepayment:
    date: date
    amount: float


@dataclass(frozen=True)
class RateChange:
    date: date
    new_annual_rate: float  # 小数形式


@dataclass(frozen=True)
class RepaymentRow:
    period: int
    date: date
    payment: float
    principal: float
    interest: float
    remaining_balance: float
    is_adjusted: bool
    kind: EventKind


@dataclass(frozen=True)
class ScheduleSummary:
    total_interest: float
    total_payment: float
    total_principal: float
    scheduled_rows: int
    extra_rows: int
    final_balance: float
    last_payment_date: Optional[date] = None
