import sys
import pytest
from datetime import date
from pathlib import Path

# 确保项目根目录在 sys.path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from data_manager.schema import LoanTerms


@pytest.fixture
def base_loan():
    """12万, 5%, 12期, 每月1日还款"""
    return LoanTerms(
        principal=120000,
        annual_rate=0.05,
        loan_date=date(2024, 1, 1),
        first_payment_date=date(2024, 2, 1),
        maturity_date=date(2025, 1, 1),
        total_periods=12,
        loan_id="test",
    )
