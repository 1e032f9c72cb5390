"""
UserService / AccountService 통합 테스트
"""

from decimal import Decimal

import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.domain.models import Account, TransactionFields, User
from core.errors import NotFoundError, ValidationError
from core.ledger.accounts import AccountService, UserService
from core.ledger.lifecycle import TransactionLifecycleManager


class TestUserService:
    """UserService 테스트"""

    @pytest.mark.asyncio
    async def test_duplicate_email(self, db: SQLiteAdapter, user: User) -> None:
        """대소문자만 다른 이메일도 중복"""
        with pytest.raises(ValidationError):
            await UserService(db).create("OWNER@example.com", "Someone")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("email,name", [("", "A"), ("no-at-sign", "A"), ("a@b.c", "  ")])
    async def test_invalid_input(self, db: SQLiteAdapter, email: str, name: str) -> None:
        with pytest.raises(ValidationError):
            await UserService(db).create(email, name)

    @pytest.mark.asyncio
    async def test_get_missing(self, db: SQLiteAdapter) -> None:
        with pytest.raises(NotFoundError):
            await UserService(db).get("missing")


class TestAccountService:
    """AccountService 테스트"""

    @pytest.mark.asyncio
    async def test_opening_balance_sets_balance(self, account: Account) -> None:
        assert account.balance == Decimal("1000.00")
        assert account.opening_balance == Decimal("1000.00")
        assert account.version == 1

    @pytest.mark.asyncio
    async def test_negative_opening_balance(self, db: SQLiteAdapter, user: User) -> None:
        with pytest.raises(ValidationError):
            await AccountService(db).create(user.id, "Debt", "CREDIT", "-1.00")

    @pytest.mark.asyncio
    async def test_negative_zero_opening_balance(self, db: SQLiteAdapter, user: User) -> None:
        """기초 잔액 "-0"은 0.00으로 저장"""
        created = await AccountService(db).create(user.id, "Wallet", "CASH", "-0")

        saved = await AccountService(db).get(user.id, created.id)
        assert not saved.balance.is_signed()
        assert not saved.opening_balance.is_signed()
        row = await db.fetchone(
            "SELECT balance, opening_balance FROM accounts WHERE id = ?", (created.id,)
        )
        assert tuple(row) == ("0.00", "0.00")

    @pytest.mark.asyncio
    async def test_invalid_type(self, db: SQLiteAdapter, user: User) -> None:
        with pytest.raises(ValidationError):
            await AccountService(db).create(user.id, "Gold", "GOLD")

    @pytest.mark.asyncio
    async def test_unknown_owner(self, db: SQLiteAdapter) -> None:
        with pytest.raises(NotFoundError):
            await AccountService(db).create("nobody", "Main", "CHECKING")

    @pytest.mark.asyncio
    async def test_single_default_per_owner(
        self,
        db: SQLiteAdapter,
        user: User,
        account: Account,
    ) -> None:
        """새 기본 계좌 생성 시 기존 기본 해제"""
        service = AccountService(db)

        savings = await service.create(user.id, "Savings", "SAVINGS", is_default=True)

        assert (await service.get(user.id, account.id)).is_default is False
        assert (await service.get(user.id, savings.id)).is_default is True

    @pytest.mark.asyncio
    async def test_update_default(
        self,
        db: SQLiteAdapter,
        user: User,
        account: Account,
    ) -> None:
        service = AccountService(db)
        cash = await service.create(user.id, "Wallet", "CASH")

        await service.update(user.id, cash.id, is_default=True)

        defaults = [a.id for a in await service.list(user.id) if a.is_default]
        assert defaults == [cash.id]

    @pytest.mark.asyncio
    async def test_update_does_not_touch_balance(
        self,
        db: SQLiteAdapter,
        manager: TransactionLifecycleManager,
        user: User,
        account: Account,
    ) -> None:
        await manager.create(
            user.id,
            account.id,
            TransactionFields(type="EXPENSE", amount="150.00", category="food"),
        )
        service = AccountService(db)

        updated = await service.update(user.id, account.id, name="Renamed", account_type="SAVINGS")

        saved = await service.get(user.id, account.id)
        assert updated.name == saved.name == "Renamed"
        assert saved.account_type == "SAVINGS"
        assert saved.balance == Decimal("850.00")

    @pytest.mark.asyncio
    async def test_other_owner_not_found(
        self,
        db: SQLiteAdapter,
        other_user: User,
        account: Account,
    ) -> None:
        service = AccountService(db)

        with pytest.raises(NotFoundError):
            await service.get(other_user.id, account.id)
        with pytest.raises(NotFoundError):
            await service.update(other_user.id, account.id, name="Hijack")
        with pytest.raises(NotFoundError):
            await service.delete(other_user.id, account.id)

    @pytest.mark.asyncio
    async def test_delete_cascades_transactions(
        self,
        db: SQLiteAdapter,
        manager: TransactionLifecycleManager,
        user: User,
        account: Account,
    ) -> None:
        record = await manager.create(
            user.id,
            account.id,
            TransactionFields(type="INCOME", amount="5.00", category="gift"),
        )

        await AccountService(db).delete(user.id, account.id)

        assert await manager.transactions.get_by_id(record.id) is None
        with pytest.raises(NotFoundError):
            await AccountService(db).get(user.id, account.id)
