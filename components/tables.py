"""格式化表格"""
import pandas as pd

from config.constants import EventKind

COLUMN_LABELS = {
    "period": "期数",
    "date": "还款日期",
    "kind": "类型",
    "payment": "本期合计还款",
    "principal": "偿还本金",
    "interest": "偿还利息",
    "remaining_balance": "剩余本金",
    "is_adjusted": "调整",
}

MONEY_COLUMNS = ["本期合计还款", "偿还本金", "偿还利息", "剩余本金"]


def format_schedule_table(schedule: pd.DataFrame) -> pd.DataFrame:
    """还款计划 DataFrame 转展示用表格（中文列名、金额千分位）"""
    if schedule.empty:
        return pd.DataFrame(columns=list(COLUMN_LABELS.values()))

    display_cols = [c for c in COLUMN_LABELS if c in schedule.columns]
    display_df = schedule[display_cols].rename(columns=COLUMN_LABELS).copy()

    for col in MONEY_COLUMNS:
        if col in display_df.columns:
            display_df[col] = display_df[col].apply(lambda x: f"{x:,.2f}")

    if "类型" in display_df.columns:
        display_df["类型"] = display_df["类型"].apply(lambda k: EventKind(k).label)

    if "调整" in display_df.columns:
        display_df["调整"] = display_df["调整"].apply(lambda x: "*" if x else "")

    return display_df
