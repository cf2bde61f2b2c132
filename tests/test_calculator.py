"""核心计算测试"""
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from datetime import date
import numpy as np
import pytest

from core.calculator import round2, calc_pmt, calc_standard_interest, calc_accrued_interest


class TestRound2:
    @pytest.mark.parametrize("value, expected", [
        (2.675, 2.68),
        (1.005, 1.01),
        (0.125, 0.13),
        (-2.675, -2.68),
        (-0.125, -0.13),
        (10.0, 10.0),
        (3.14159, 3.14),
    ])
    def test_half_away_from_zero(self, value, expected):
        assert round2(value) == expected

    def test_numpy_scalar(self):
        assert round2(np.float64(1.005)) == 1.01
        assert round2(np.float64(-2.675)) == -2.68
        assert round2(np.int64(7)) == 7.0
        assert type(round2(np.float64(1.005))) is float


class TestPMT:
    """等额本息月供"""

    def test_basic_calculation(self):
        """12万, 5%, 12期 -> 月供约 10272.90"""
        monthly = calc_pmt(120000, 0.05 / 12, 12)
        assert monthly == pytest.approx(10272.90, abs=0.02)
        assert round2(monthly) == monthly

    def test_long_term(self):
        """100万, 30年, 3.45% -> 月供约 4462"""
        monthly = calc_pmt(1_000_000, 0.0345 / 12, 360)
        assert 4450 < monthly < 4475

    def test_zero_rate(self):
        assert calc_pmt(120000, 0, 12) == 10000.0

    def test_zero_rate_rounded(self):
        assert calc_pmt(100, 0, 3) == 33.33

    def test_no_periods(self):
        assert calc_pmt(120000, 0.05 / 12, 0) == 0.0
        assert calc_pmt(120000, 0.05 / 12, -3) == 0.0

    def test_no_balance(self):
        assert calc_pmt(0, 0.05 / 12, 12) == 0.0
        assert calc_pmt(-100, 0.05 / 12, 12) == 0.0

    def test_single_period(self):
        """一期：月供 = 本金 + 一个月利息"""
        assert calc_pmt(100, 0.1 / 12, 1) == 100.83

    def test_total_repayment_covers_principal(self):
        principal = 500000
        monthly = calc_pmt(principal, 0.04 / 12, 240)
        assert monthly * 240 > principal


class TestAccruedInterest:
    """区间计息：足月按月利率，零头按 360 天日利率"""

    def test_empty_span(self):
        assert calc_accrued_interest(12000, 0.12, date(2024, 2, 1), date(2024, 2, 1)) == 0.0
        assert calc_accrued_interest(12000, 0.12, date(2024, 2, 1), date(2024, 1, 1)) == 0.0

    def test_one_full_month(self):
        interest = calc_accrued_interest(12000, 0.12, date(2024, 1, 1), date(2024, 2, 1))
        assert interest == pytest.approx(120.0)

    def test_days_only(self):
        interest = calc_accrued_interest(12000, 0.12, date(2024, 1, 1), date(2024, 1, 16))
        assert interest == pytest.approx(60.0)

    def test_months_and_days(self):
        interest = calc_accrued_interest(12000, 0.12, date(2024, 1, 15), date(2024, 3, 20))
        assert interest == pytest.approx(260.0)

    def test_month_end_rollover_counts_days(self):
        """1月31日 -> 2月28日 不足一个“溢出月”（3月3日），按 28 天计"""
        interest = calc_accrued_interest(12000, 0.12, date(2023, 1, 31), date(2023, 2, 28))
        assert interest == pytest.approx(112.0)

    def test_month_end_rollover_full_month(self):
        interest = calc_accrued_interest(12000, 0.12, date(2023, 1, 31), date(2023, 3, 3))
        assert interest == pytest.approx(120.0)

    def test_unrounded(self):
        interest = calc_accrued_interest(1000, 0.05, date(2024, 1, 1), date(2024, 1, 8))
        assert interest == pytest.approx(1000 * 0.05 / 360 * 7)
        assert round2(interest) != interest

    def test_zero_rate(self):
        assert calc_accrued_interest(12000, 0, date(2024, 1, 1), date(2024, 6, 1)) == 0.0


class TestStandardInterest:
    def test_monthly_rate(self):
        assert calc_standard_interest(120000, 0.05) == pytest.approx(500.0)
