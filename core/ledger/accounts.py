"""
Account / User 서비스

계좌와 사용자의 생성/조회/수정/삭제.
계좌 잔액은 생성 시 기초 잔액으로만 설정되고, 이후에는
TransactionLifecycleManager를 통해서만 변경됨.
"""

import logging
from decimal import Decimal

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.domain.models import Account, User
from core.errors import NotFoundError, ValidationError
from core.storage.account_store import AccountStore
from core.storage.user_store import UserStore
from core.types import AccountType
from core.utils.money import ZERO, to_money

logger = logging.getLogger(__name__)


class UserService:
    """사용자 서비스 (소유자 확인용 최소 기능)"""

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.users = UserStore(db)

    async def create(self, email: str, name: str) -> User:
        """사용자 생성

        Raises:
            ValidationError: 이메일/이름 누락 또는 이메일 중복
        """
        email = (email or "").strip().lower()
        name = (name or "").strip()
        if not email or "@" not in email:
            raise ValidationError("Valid email is required")
        if not name:
            raise ValidationError("Name is required")

        async with self.db.transaction():
            if await self.users.get_by_email(email) is not None:
                raise ValidationError(f"Email already registered: {email}")
            user = User.create(email=email, name=name)
            await self.users.insert(user)

        logger.info(f"User created: {user.id}")
        return user

    async def get(self, user_id: str) -> User:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user


class AccountService:
    """계좌 서비스

    소유자당 기본 계좌는 최대 하나.

    Args:
        db: SQLite 어댑터

    사용 예시:
    ```python
    service = AccountService(db)
    account = await service.create(user_id, "Main", AccountType.CHECKING, "1000.00")
    ```
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.users = UserStore(db)
        self.accounts = AccountStore(db)

    async def create(
        self,
        owner_id: str,
        name: str,
        account_type: AccountType | str,
        opening_balance: Decimal | str | int = ZERO,
        is_default: bool = False,
    ) -> Account:
        """계좌 생성 (잔액 = 기초 잔액)

        Raises:
            NotFoundError: 소유자 없음
            ValidationError: 이름 누락, 잘못된 유형, 음수 기초 잔액
        """
        name = _require_name(name)
        account_type = _coerce_account_type(account_type)
        opening = to_money(opening_balance)
        if opening < ZERO:
            raise ValidationError("Opening balance must not be negative")

        async with self.db.transaction():
            if not await self.users.exists(owner_id):
                raise NotFoundError("User", owner_id)

            account = Account.create(
                user_id=owner_id,
                name=name,
                account_type=account_type,
                opening_balance=opening,
                is_default=is_default,
            )
            if is_default:
                await self.accounts.clear_default(owner_id)
            await self.accounts.insert(account)

        logger.info(
            f"Account created: {account.id}",
            extra={"user_id": owner_id, "opening_balance": str(opening)},
        )
        return account

    async def get(self, owner_id: str, account_id: str) -> Account:
        account = await self.accounts.get_by_id_and_owner(account_id, owner_id)
        if account is None:
            raise NotFoundError("Account", account_id)
        return account

    async def list(self, owner_id: str) -> list[Account]:
        return await self.accounts.list_by_owner(owner_id)

    async def update(
        self,
        owner_id: str,
        account_id: str,
        name: str | None = None,
        account_type: AccountType | str | None = None,
        is_default: bool | None = None,
    ) -> Account:
        """계좌 정보 수정 (잔액 제외)

        Raises:
            NotFoundError: 계좌 없음 또는 타인 계좌
            ValidationError: 잘못된 입력
        """
        async with self.db.transaction():
            account = await self.get(owner_id, account_id)

            if name is not None:
                account.name = _require_name(name)
            if account_type is not None:
                account.account_type = _coerce_account_type(account_type).value
            if is_default is not None:
                if is_default and not account.is_default:
                    await self.accounts.clear_default(owner_id, except_account_id=account.id)
                account.is_default = is_default

            await self.accounts.update_details(account)

        logger.info(f"Account updated: {account.id}")
        return account

    async def delete(self, owner_id: str, account_id: str) -> None:
        """계좌 삭제 (거래 함께 삭제, 잔액 되돌림 없음)"""
        async with self.db.transaction():
            account = await self.get(owner_id, account_id)
            await self.accounts.delete(account.id)

        logger.info(f"Account deleted: {account_id}", extra={"user_id": owner_id})


def _require_name(value: str | None) -> str:
    if value is None or not value.strip():
        raise ValidationError("Account name is required")
    return value.strip()


def _coerce_account_type(value: AccountType | str) -> AccountType:
    try:
        return AccountType(value)
    except ValueError as e:
        raise ValidationError(f"Invalid account type: {value!r}") from e
