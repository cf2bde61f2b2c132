"""
分隔文本读取

每行一条记录，字段以半角逗号、全角逗号或制表符分隔：
- 贷款：本金, 年利率(%), 放款日, 首次还款日, 到期日, 期数
- 提前还款：日期, 金额
- 利率变更：日期, 新年利率(%)

只做格式解析，不做业务校验；无法解析的行记录警告后跳过。
"""
import logging
import math
import re
from pathlib import Path
from typing import List, Optional

from config.constants import FIELD_SEPARATOR_PATTERN, LOAN_FILE_FIELDS
from data_manager.schema import LoanTerms, ExtraRepayment, RateChange
from utils.date_utils import normalize_date

logger = logging.getLogger(__name__)


def _split_lines(text: str) -> List[List[str]]:
    text = text.lstrip("\ufeff").strip()
    return [
        [part.strip() for part in re.split(FIELD_SEPARATOR_PATTERN, line)]
        for line in text.splitlines()
        if line.strip()
    ]


def _to_float(value: str) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def parse_loan_lines(text: str) -> List[LoanTerms]:
    """解析贷款记录，年利率按百分数读入后换算为小数"""
    loans = []
    for idx, parts in enumerate(_split_lines(text)):
        if len(parts) < len(LOAN_FILE_FIELDS):
            logger.warning("Skipping loan line %d: expected %d fields, got %d",
                           idx + 1, len(LOAN_FILE_FIELDS), len(parts))
            continue
        principal = _to_float(parts[0])
        if principal is None:
            logger.warning("Skipping loan line %d: principal %r is not a number", idx + 1, parts[0])
            continue
        rate = _to_float(parts[1]) or 0.0
        periods = _to_float(parts[5])
        loans.append(LoanTerms(
            principal=principal,
            annual_rate=rate / 100,
            loan_date=normalize_date(parts[2]),
            first_payment_date=normalize_date(parts[3]),
            maturity_date=normalize_date(parts[4]) if parts[4] else None,
            total_periods=int(periods) if periods is not None else 0,
            loan_id=f"L-{idx + 1}",
        ))
    return loans


def parse_repayment_lines(text: str) -> List[ExtraRepayment]:
    """解析提前还款记录，金额缺失或不为正的行丢弃"""
    repayments = []
    for parts in _split_lines(text):
        amount = _to_float(parts[1]) if len(parts) > 1 else None
        if not amount or amount <= 0:
            continue
        repayments.append(ExtraRepayment(normalize_date(parts[0]), amount))
    return sorted(repayments, key=lambda er: er.date)


def parse_rate_lines(text: str) -> List[RateChange]:
    """解析利率变更记录，年利率按百分数读入，不为正的行丢弃"""
    changes = []
    for parts in _split_lines(text):
        rate = _to_float(parts[1]) if len(parts) > 1 else None
        if not rate or rate <= 0:
            continue
        changes.append(RateChange(normalize_date(parts[0]), rate / 100))
    return sorted(changes, key=lambda rc: rc.date)


def read_loan_file(path: Path) -> List[LoanTerms]:
    return parse_loan_lines(Path(path).read_text(encoding="utf-8-sig"))


def read_repayment_file(path: Path) -> List[ExtraRepayment]:
    return parse_repayment_lines(Path(path).read_text(encoding="utf-8-sig"))


def read_rate_file(path: Path) -> List[RateChange]:
    return parse_rate_lines(Path(path).read_text(encoding="utf-8-sig"))
