"""
pytest 공통 fixture 정의

임시 파일 DB, 사용자/계좌, Ledger 서비스 fixture
"""

from decimal import Decimal
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from core.domain.models import Account, User
from core.ledger.accounts import AccountService, UserService
from core.ledger.lifecycle import TransactionLifecycleManager
from core.types import AccountType


@pytest_asyncio.fixture
async def db(tmp_path: Path) -> AsyncGenerator[SQLiteAdapter, None]:
    """스키마가 초기화된 임시 DB"""
    adapter = SQLiteAdapter(tmp_path / "test_ledger.db")
    await adapter.connect()
    await init_schema(adapter)
    yield adapter
    await adapter.close()


@pytest_asyncio.fixture
async def user(db: SQLiteAdapter) -> User:
    """기본 소유자"""
    return await UserService(db).create("owner@example.com", "Owner")


@pytest_asyncio.fixture
async def other_user(db: SQLiteAdapter) -> User:
    """다른 소유자 (접근 제어 확인용)"""
    return await UserService(db).create("other@example.com", "Other")


@pytest_asyncio.fixture
async def account(db: SQLiteAdapter, user: User) -> Account:
    """기초 잔액 1000.00 계좌"""
    return await AccountService(db).create(
        user.id,
        name="Main",
        account_type=AccountType.CHECKING,
        opening_balance=Decimal("1000.00"),
        is_default=True,
    )


@pytest.fixture
def manager(db: SQLiteAdapter) -> TransactionLifecycleManager:
    """거래 생명주기 관리자"""
    return TransactionLifecycleManager(db)


@pytest.fixture
def settings_file(tmp_path: Path):
    """settings.yaml 작성 헬퍼

    사용 예시:
        path = settings_file("mode: production\\n")
    """

    def _write(content: str, name: str = "settings.yaml") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
