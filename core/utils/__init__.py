"""
유틸리티 패키지

금액(Decimal) 처리, 타임존 처리 등 공통 유틸리티
"""

from core.utils.money import (
    ZERO,
    to_money,
    to_positive_money,
    signed_amount,
    money_equals,
    format_money,
)
from core.utils.timezone import (
    now_utc,
    ensure_utc,
    to_db_ts,
    from_db_ts,
)

__all__ = [
    "ZERO",
    "to_money",
    "to_positive_money",
    "signed_amount",
    "money_equals",
    "format_money",
    "now_utc",
    "ensure_utc",
    "to_db_ts",
    "from_db_ts",
]
