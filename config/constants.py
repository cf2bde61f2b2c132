from enum import Enum


class EventKind(str, Enum):
    RATE = "rate"  # 利率变更
    EXTRA = "extra"  # 提前还款
    SCHEDULED = "scheduled"  # 计划还款

    @property
    def order(self) -> int:
        """同日事件的处理顺序：先调息，再提前还款，最后计划还款"""
        return {
            "rate": 0,
            "extra": 1,
            "scheduled": 2,
        }[self.value]

    @property
    def label(self) -> str:
        return {
            "rate": "调息",
            "extra": "提前",
            "scheduled": "计划",
        }[self.value]


# 余额低于该值视为已结清
BALANCE_EPSILON = 0.005

# 本期还本后剩余不足该值时，一并结清
PAYOFF_SNAP_THRESHOLD = 0.05

# “标准整月”的天数区间（含端点）
STANDARD_MONTH_MIN_DAYS = 28
STANDARD_MONTH_MAX_DAYS = 31

# 计息基础
MONTHS_PER_YEAR = 12
DAY_COUNT_BASIS = 360

# 输入文件分隔符：半角逗号、全角逗号、制表符
FIELD_SEPARATOR_PATTERN = r"[,，\t]"

# 列定义
SCHEDULE_COLUMNS = [
    "period", "date", "kind", "payment", "principal",
    "interest", "remaining_balance", "is_adjusted",
]

LOAN_FILE_FIELDS = [
    "principal", "annual_rate", "loan_date",
    "first_payment_date", "maturity_date", "total_periods",
]
