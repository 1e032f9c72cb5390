"""
core/domain/models.py 테스트
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from core.domain.models import Account, TransactionRecord, User
from core.types import RecurrenceState, TransactionStatus


def _template(**overrides) -> TransactionRecord:
    values = dict(
        id="tpl-1",
        user_id="user-1",
        account_id="acc-1",
        type="INCOME",
        amount=Decimal("2000.00"),
        date=datetime(2026, 1, 1, tzinfo=timezone.utc),
        category="salary",
        description="월급",
        receipt_url="https://example.com/r/1",
        is_recurring=True,
        recurring_interval="MONTHLY",
        next_recurring_date=datetime(2026, 2, 1, tzinfo=timezone.utc),
        status=TransactionStatus.PENDING.value,
    )
    values.update(overrides)
    return TransactionRecord(**values)


class TestAccount:
    def test_create_sets_balance_to_opening(self) -> None:
        """생성 시 잔액 = 기초 잔액, version 1"""
        account = Account.create("user-1", "Main", "CHECKING", Decimal("1000.00"))

        assert account.balance == Decimal("1000.00")
        assert account.opening_balance == Decimal("1000.00")
        assert account.version == 1
        assert account.is_default is False

    def test_create_rejects_unknown_type(self) -> None:
        with pytest.raises(ValueError):
            Account.create("user-1", "Main", "BITCOIN", Decimal("0"))

    def test_to_dict_formats_money(self) -> None:
        account = Account.create("user-1", "Main", "CASH", Decimal("5"))
        assert account.to_dict()["balance"] == "5.00"


class TestTransactionRecord:
    def test_signed_amount(self) -> None:
        assert _template().signed_amount == Decimal("2000.00")
        assert _template(type="EXPENSE").signed_amount == Decimal("-2000.00")

    def test_recurrence_state(self) -> None:
        assert _template().recurrence_state == RecurrenceState.ACTIVE

        record = _template()
        record.clear_recurrence()

        assert record.recurrence_state == RecurrenceState.INACTIVE
        assert record.recurring_interval is None
        assert record.next_recurring_date is None

    def test_materialize_copies_only_posting_fields(self) -> None:
        """인스턴스는 type/amount/description/category/account/owner만 복사"""
        template = _template()
        posted_at = datetime(2026, 2, 2, 2, 0, tzinfo=timezone.utc)

        instance = template.materialize(posted_at)

        assert instance.id != template.id
        assert instance.user_id == template.user_id
        assert instance.account_id == template.account_id
        assert instance.type == template.type
        assert instance.amount == template.amount
        assert instance.description == template.description
        assert instance.category == template.category
        assert instance.date == posted_at
        assert instance.is_recurring is False
        assert instance.recurring_interval is None
        assert instance.next_recurring_date is None
        assert instance.receipt_url is None
        assert instance.status == TransactionStatus.COMPLETED.value

    def test_to_dict(self) -> None:
        data = _template().to_dict()
        assert data["amount"] == "2000.00"
        assert data["next_recurring_date"] == "2026-02-01T00:00:00+00:00"
        assert data["last_processed"] is None


class TestUser:
    def test_create(self) -> None:
        user = User.create("a@example.com", "A")
        assert user.id
        assert user.to_dict()["email"] == "a@example.com"
