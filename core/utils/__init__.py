"""
유틸리티 패키지

금액 정규화, 날짜/시각 처리 공통 유틸리티
"""

from core.utils.money import (
    ZERO,
    format_amount,
    from_db,
    to_amount,
    to_db,
)
from core.utils.timezone import (
    now_iso,
    now_utc,
    parse_date,
)

__all__ = [
    "ZERO",
    "format_amount",
    "from_db",
    "to_amount",
    "to_db",
    "now_iso",
    "now_utc",
    "parse_date",
]
