"""
UserStore - 사용자(소유자) 저장소

Ledger가 소유자 존재 여부를 확인하는 데 필요한 최소 기능만 제공.
"""

import logging

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.domain.models import User
from core.utils.timezone import from_db_ts, to_db_ts

logger = logging.getLogger(__name__)


class UserStore:
    """사용자 저장소

    Args:
        db: SQLiteAdapter 인스턴스
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def insert(self, user: User) -> None:
        """사용자 저장 (커밋은 호출자 책임)"""
        await self.db.execute(
            """
            INSERT INTO users (id, email, name, created_at)
            VALUES (?, ?, ?, ?)
            """,
            (user.id, user.email, user.name, to_db_ts(user.created_at)),
        )

    async def get_by_id(self, user_id: str) -> User | None:
        row = await self.db.fetchone(
            "SELECT id, email, name, created_at FROM users WHERE id = ?",
            (user_id,),
        )
        return self._row_to_user(row) if row else None

    async def get_by_email(self, email: str) -> User | None:
        row = await self.db.fetchone(
            "SELECT id, email, name, created_at FROM users WHERE email = ?",
            (email,),
        )
        return self._row_to_user(row) if row else None

    async def exists(self, user_id: str) -> bool:
        row = await self.db.fetchone("SELECT 1 FROM users WHERE id = ?", (user_id,))
        return row is not None

    @staticmethod
    def _row_to_user(row: tuple) -> User:
        return User(id=row[0], email=row[1], name=row[2], created_at=from_db_ts(row[3]))
