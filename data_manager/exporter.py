"""还款计划书导出：定宽纯文本与 CSV"""
import logging
from datetime import date
from pathlib import Path
from typing import List, Optional, Sequence

from config.settings import REPORT_RULE_WIDTH, DEFAULT_REPORT_NAME
from core.schedule_generator import generate_schedule, schedule_to_dataframe
from core.summary import summarize_schedule
from data_manager.schema import LoanTerms, ExtraRepayment, RateChange, RepaymentRow
from utils.date_utils import normalize_date
from utils.formatters import fmt_amount, fmt_rate, fmt_periods

logger = logging.getLogger(__name__)

HEADER_RULE = "=" * REPORT_RULE_WIDTH
BODY_RULE = "-" * REPORT_RULE_WIDTH


def format_report_row(row: RepaymentRow) -> str:
    """单行：期数 | 日期 | 类型 | 合计 | 本金 | 利息 | 剩余本金"""
    return (
        f"{str(row.period):<4} | {row.date.strftime('%Y-%m-%d')} | {row.kind.label} | "
        f"{row.payment:>12.2f} | {row.principal:>10.2f} | "
        f"{row.interest:>10.2f} | {row.remaining_balance:>12.2f}"
    )


def render_text_report(
    loan: LoanTerms,
    rows: Sequence[RepaymentRow],
    generated_on: Optional[date] = None,
) -> str:
    """渲染还款计划书全文"""
    generated_on = generated_on or date.today()
    summary = summarize_schedule(rows)

    lines = [
        "还款计划书 (Repayment Schedule)",
        f"生成日期: {generated_on.strftime('%Y-%m-%d')}",
        HEADER_RULE,
        f"贷款本金: {fmt_amount(loan.principal)}",
        f"初始年化利率: {fmt_rate(loan.annual_rate)}",
        f"放款日期: {normalize_date(loan.loan_date).strftime('%Y-%m-%d')}",
        f"首次还款日: {normalize_date(loan.first_payment_date).strftime('%Y-%m-%d')}",
        f"贷款期数: {fmt_periods(loan.total_periods)}",
        HEADER_RULE,
        "期数 | 还款日期 | 类型 | 本期合计还款 | 偿还本金 | 偿还利息 | 剩余本金",
        BODY_RULE,
    ]
    lines.extend(format_report_row(row) for row in rows)
    lines.extend([
        BODY_RULE,
        f"总计利息支出: {fmt_amount(summary.total_interest)}",
        f"总计还款总额: {fmt_amount(summary.total_payment)}",
    ])
    return "\n".join(lines) + "\n"


def write_text_report(
    path: Path,
    loan: LoanTerms,
    rows: Sequence[RepaymentRow],
    generated_on: Optional[date] = None,
) -> Path:
    """写出还款计划书，目录不存在时自动创建"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_text_report(loan, rows, generated_on), encoding="utf-8")
    logger.info("Wrote repayment report to %s", path)
    return path


def schedule_to_csv(rows: Sequence[RepaymentRow]) -> str:
    return schedule_to_dataframe(rows).to_csv(index=False)


def write_text_reports(
    loans: Sequence[LoanTerms],
    repayments: Sequence[ExtraRepayment],
    rate_changes: Sequence[RateChange],
    out_dir: Path,
    generated_on: Optional[date] = None,
) -> List[Path]:
    """
    批量导出：每笔贷款一份还款计划书

    所有贷款共用同一组提前还款与调息记录。本金或期数无效的贷款
    仍写出报表，只是没有还款行，不中断整批导出。
    """
    out_dir = Path(out_dir)
    paths = []
    for idx, loan in enumerate(loans):
        rows = generate_schedule(loan, repayments, rate_changes)
        if not rows:
            logger.warning("Loan %r produced an empty schedule", loan.loan_id)
        name = DEFAULT_REPORT_NAME.format(loan_id=loan.loan_id or f"L-{idx + 1}")
        paths.append(write_text_report(out_dir / name, loan, rows, generated_on))
    return paths
