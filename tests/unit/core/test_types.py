"""
core/types.py 테스트

모든 Enum이 문자열 직렬화 가능한지 확인
"""

import pytest

from core.types import (
    AccountType,
    AppMode,
    RecurrenceState,
    RecurringInterval,
    SortDirection,
    TransactionStatus,
    TransactionType,
)


class TestTransactionType:
    """TransactionType 테스트"""

    def test_values(self) -> None:
        assert TransactionType.INCOME.value == "INCOME"
        assert TransactionType.EXPENSE.value == "EXPENSE"

    def test_from_string(self) -> None:
        assert TransactionType("EXPENSE") is TransactionType.EXPENSE

    def test_is_str(self) -> None:
        """str 상속 확인 (DB/JSON 직렬화)"""
        assert isinstance(TransactionType.INCOME, str)
        assert TransactionType.INCOME == "INCOME"

    def test_lowercase_rejected(self) -> None:
        with pytest.raises(ValueError):
            TransactionType("income")


class TestRecurringInterval:
    def test_members(self) -> None:
        assert [i.value for i in RecurringInterval] == ["DAILY", "WEEKLY", "MONTHLY", "YEARLY"]


class TestOtherEnums:
    """나머지 Enum 값 확인"""

    def test_transaction_status(self) -> None:
        assert {s.value for s in TransactionStatus} == {"PENDING", "COMPLETED", "FAILED"}

    def test_account_type(self) -> None:
        assert AccountType("CHECKING") is AccountType.CHECKING
        assert "SAVINGS" in {t.value for t in AccountType}

    def test_recurrence_state(self) -> None:
        assert {s.value for s in RecurrenceState} == {"ACTIVE", "INACTIVE"}

    def test_app_mode(self) -> None:
        assert AppMode("production") is AppMode.PRODUCTION
        assert AppMode.DEVELOPMENT.value == "development"

    def test_sort_direction(self) -> None:
        assert SortDirection("asc") is SortDirection.ASC
