import os
from pathlib import Path

# 项目根目录
PROJECT_ROOT = Path(__file__).parent.parent

# 导出文件目录
OUTPUT_DIR = PROJECT_ROOT / "output"
DEFAULT_REPORT_NAME = "Repayment_Plan_{loan_id}.txt"
DEFAULT_CHART_NAME = "Repayment_Chart_{loan_id}.html"

# 日志级别，可用环境变量覆盖
LOG_LEVEL = os.environ.get("LOAN_ENGINE_LOG_LEVEL", "WARNING")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# 图表配色
COLORS = {
    "principal": "#4f46e5",
    "interest": "#f43f5e",
    "extra": "#d62728",
}

# 文本报表列宽
REPORT_RULE_WIDTH = 70
