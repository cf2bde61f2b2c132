def fmt_amount(value: float, unit: str = "¥") -> str:
    """格式化金额：1234567.89 -> ¥1,234,567.89"""
    return f"{unit}{value:,.2f}"


def fmt_rate(value: float) -> str:
    """格式化小数利率：0.0345 -> 3.45%"""
    return f"{value * 100:.2f}%"


def fmt_periods(periods: int) -> str:
    """格式化期数：36 -> 36期(3年)"""
    years = periods // 12
    remain = periods % 12
    if years == 0:
        return f"{periods}期"
    if remain == 0:
        return f"{periods}期({years}年)"
    return f"{periods}期({years}年{remain}个月)"
