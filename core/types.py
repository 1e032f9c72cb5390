"""
타입 정의 모듈

Enum 등 핵심 타입 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from enum import Enum


class AppMode(str, Enum):
    """실행 모드 (운영 / 개발)"""

    PRODUCTION = "production"
    DEVELOPMENT = "development"


class TransactionType(str, Enum):
    """거래 유형

    부호는 유형에서만 결정됨 (금액은 항상 양수로 저장).
    """

    INCOME = "INCOME"  # +amount
    EXPENSE = "EXPENSE"  # -amount


class RecurringInterval(str, Enum):
    """반복 주기"""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class TransactionStatus(str, Enum):
    """거래 상태"""

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class AccountType(str, Enum):
    """계좌 유형"""

    CHECKING = "CHECKING"
    SAVINGS = "SAVINGS"
    CREDIT = "CREDIT"
    CASH = "CASH"
    INVESTMENT = "INVESTMENT"


class RecurrenceState(str, Enum):
    """반복 템플릿 상태 (Sweep 관점)

    전이 규칙:
    - ACTIVE → ACTIVE: Sweep 1회 처리 (next_recurring_date 전진)
    - ACTIVE → INACTIVE: 사용자가 is_recurring=False로 수정
    - INACTIVE → ACTIVE: 사용자가 is_recurring=True로 수정
    Sweep은 INACTIVE 레코드를 선택하지 않음.
    """

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class SortDirection(str, Enum):
    """목록 정렬 방향 (거래일 기준)"""

    ASC = "asc"
    DESC = "desc"
