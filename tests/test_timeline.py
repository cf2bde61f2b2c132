"""每期事件归并测试"""
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dataclasses import replace
from datetime import date

from config.constants import EventKind
from core.timeline import collect_period_events, scheduled_date_for_period, TimelineEvent
from data_manager.schema import ExtraRepayment, RateChange


class TestScheduledDate:
    def test_regular_period(self, base_loan):
        assert scheduled_date_for_period(base_loan, 1) == date(2024, 2, 1)
        assert scheduled_date_for_period(base_loan, 6) == date(2024, 7, 1)

    def test_maturity_overrides_final_period(self, base_loan):
        loan = replace(base_loan, maturity_date=date(2025, 1, 20))
        assert scheduled_date_for_period(loan, 12) == date(2025, 1, 20)
        assert scheduled_date_for_period(loan, 11) == date(2024, 12, 1)

    def test_no_maturity(self, base_loan):
        loan = replace(base_loan, maturity_date=None)
        assert scheduled_date_for_period(loan, 12) == date(2025, 1, 1)

    def test_month_end_anchor_clamps(self, base_loan):
        loan = replace(base_loan, first_payment_date=date(2024, 1, 31))
        assert scheduled_date_for_period(loan, 2) == date(2024, 2, 29)
        assert scheduled_date_for_period(loan, 3) == date(2024, 3, 31)


class TestCollectPeriodEvents:
    def test_only_scheduled(self):
        events = collect_period_events(date(2024, 3, 1), date(2024, 2, 1), [], [])
        assert events == [TimelineEvent(EventKind.SCHEDULED, date(2024, 3, 1))]

    def test_window_is_open_left_closed_right(self):
        repayments = [
            ExtraRepayment(date(2024, 2, 1), 100),  # 等于上次交易日，不计入
            ExtraRepayment(date(2024, 2, 10), 200),
            ExtraRepayment(date(2024, 3, 1), 300),  # 等于计划还款日，计入
            ExtraRepayment(date(2024, 3, 2), 400),
        ]
        events = collect_period_events(date(2024, 3, 1), date(2024, 2, 1), repayments, [])
        assert [e.value for e in events if e.kind == EventKind.EXTRA] == [200, 300]

    def test_same_day_tie_order(self):
        day = date(2024, 3, 1)
        events = collect_period_events(
            day, date(2024, 2, 1),
            [ExtraRepayment(day, 500)],
            [RateChange(day, 0.06)],
        )
        assert [e.kind for e in events] == [EventKind.RATE, EventKind.EXTRA, EventKind.SCHEDULED]

    def test_sorted_by_date_then_kind(self):
        events = collect_period_events(
            date(2024, 3, 1), date(2024, 2, 1),
            [ExtraRepayment(date(2024, 2, 10), 500), ExtraRepayment(date(2024, 2, 20), 600)],
            [RateChange(date(2024, 2, 20), 0.06), RateChange(date(2024, 2, 5), 0.04)],
        )
        assert [(e.kind, e.date) for e in events] == [
            (EventKind.RATE, date(2024, 2, 5)),
            (EventKind.EXTRA, date(2024, 2, 10)),
            (EventKind.RATE, date(2024, 2, 20)),
            (EventKind.EXTRA, date(2024, 2, 20)),
            (EventKind.SCHEDULED, date(2024, 3, 1)),
        ]

    def test_duplicates_kept_in_caller_order(self):
        day = date(2024, 2, 15)
        events = collect_period_events(
            date(2024, 3, 1), date(2024, 2, 1),
            [ExtraRepayment(day, 100), ExtraRepayment(day, 100), ExtraRepayment(day, 50)],
            [],
        )
        assert [e.value for e in events if e.kind == EventKind.EXTRA] == [100, 100, 50]

    def test_inputs_not_mutated(self):
        repayments = [ExtraRepayment(date(2024, 2, 20), 1), ExtraRepayment(date(2024, 2, 10), 2)]
        snapshot = list(repayments)
        collect_period_events(date(2024, 3, 1), date(2024, 2, 1), repayments, [])
        assert repayments == snapshot
