"""核心计算：金额舍入、等额本息月供、区间计息"""
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from config.constants import MONTHS_PER_YEAR, DAY_COUNT_BASIS
from utils.date_utils import add_months_rollover, days_between

TWO_PLACES = Decimal("0.01")


def round2(value: float) -> float:
    """保留两位小数，四舍五入（远离零）"""
    # numpy 标量的 repr 带类型名，先转成内置 float
    return float(Decimal(repr(float(value))).quantize(TWO_PLACES, ROUND_HALF_UP))


def calc_pmt(balance: float, periodic_rate: float, periods_remaining: int) -> float:
    """等额本息标准月供"""
    if periods_remaining <= 0 or balance <= 0:
        return 0.0
    if periodic_rate <= 0:
        return round2(balance / periods_remaining)
    # M = r * P / (1 - (1 + r)^-n)
    pmt = periodic_rate * balance / (1 - (1 + periodic_rate) ** -periods_remaining)
    return round2(pmt)


def calc_standard_interest(balance: float, annual_rate: float) -> float:
    """标准月息：余额 × 月利率（未舍入）"""
    return balance * (annual_rate / MONTHS_PER_YEAR)


def calc_accrued_interest(
    balance: float,
    annual_rate: float,
    start_date: date,
    end_date: date,
) -> float:
    """
    区间计息：足月部分按月利率，不足月的零头天数按日利率（年 360 天）。

    足月数按 add_months_rollover 逐月试探，因此月末起息时的
    “足月/零头”分界会随月份溢出而变化。返回未舍入的利息。
    """
    if start_date >= end_date:
        return 0.0

    full_months = 0
    while add_months_rollover(start_date, full_months + 1) <= end_date:
        full_months += 1

    after_full_months = add_months_rollover(start_date, full_months)
    extra_days = days_between(after_full_months, end_date)

    monthly_rate = annual_rate / MONTHS_PER_YEAR
    daily_rate = annual_rate / DAY_COUNT_BASIS
    return balance * (full_months * monthly_rate + extra_days * daily_rate)
