"""
TransactionStore - 거래 레코드 저장소

일회성 거래와 반복 템플릿을 같은 테이블에 저장.
모든 쓰기 메서드는 커밋하지 않음 (호출자가 트랜잭션 관리).
"""

import logging
from datetime import datetime
from decimal import Decimal

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.domain.models import TransactionRecord
from core.types import SortDirection, TransactionType
from core.utils.money import ZERO, format_money, signed_amount
from core.utils.timezone import from_db_ts, to_db_ts

logger = logging.getLogger(__name__)

_TX_COLUMNS = """
    id, user_id, account_id, type, amount, description, date, category,
    receipt_url, is_recurring, recurring_interval, next_recurring_date,
    last_processed, status, created_at, updated_at
"""


class TransactionStore:
    """거래 저장소

    Args:
        db: SQLiteAdapter 인스턴스

    사용 예시:
    ```python
    store = TransactionStore(db)

    # Sweep 대상 템플릿 조회
    due = await store.find_due_templates(now)

    # 소유자 거래 목록 (최신순)
    items = await store.list_by_owner(user_id, limit=20)
    ```
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    # -------------------------------------------------------------------------
    # 쓰기
    # -------------------------------------------------------------------------

    async def insert(self, record: TransactionRecord) -> None:
        """거래 저장"""
        await self.db.execute(
            f"""
            INSERT INTO transactions ({_TX_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            self._record_to_params(record),
        )

    async def update(self, record: TransactionRecord) -> None:
        """거래 전체 필드 갱신 (id/user_id/account_id/created_at 제외)"""
        await self.db.execute(
            """
            UPDATE transactions SET
                type = ?, amount = ?, description = ?, date = ?, category = ?,
                receipt_url = ?, is_recurring = ?, recurring_interval = ?,
                next_recurring_date = ?, last_processed = ?, status = ?, updated_at = ?
            WHERE id = ?
            """,
            (
                record.type,
                format_money(record.amount),
                record.description,
                to_db_ts(record.date),
                record.category,
                record.receipt_url,
                1 if record.is_recurring else 0,
                record.recurring_interval,
                to_db_ts(record.next_recurring_date),
                to_db_ts(record.last_processed),
                record.status,
                to_db_ts(record.updated_at),
                record.id,
            ),
        )

    async def advance_template(
        self,
        template_id: str,
        expected_next: datetime,
        new_next: datetime,
        processed_at: datetime,
    ) -> bool:
        """템플릿 다음 실행일 전진 (조건부)

        next_recurring_date가 expected_next 그대로이고 아직 반복 중일 때만 갱신.
        다른 프로세스가 이미 처리했으면 0행 갱신 → False.

        Returns:
            True: 전진 성공 (이번 실행이 클레임)
            False: 이미 처리됨 또는 반복 해제됨
        """
        cursor = await self.db.execute(
            """
            UPDATE transactions
            SET next_recurring_date = ?, last_processed = ?, updated_at = ?
            WHERE id = ? AND is_recurring = 1 AND next_recurring_date = ?
            """,
            (
                to_db_ts(new_next),
                to_db_ts(processed_at),
                to_db_ts(processed_at),
                template_id,
                to_db_ts(expected_next),
            ),
        )
        return cursor.rowcount > 0

    async def delete(self, transaction_id: str) -> bool:
        cursor = await self.db.execute(
            "DELETE FROM transactions WHERE id = ?",
            (transaction_id,),
        )
        return cursor.rowcount > 0

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------

    async def get_by_id(self, transaction_id: str) -> TransactionRecord | None:
        row = await self.db.fetchone(
            f"SELECT {_TX_COLUMNS} FROM transactions WHERE id = ?",
            (transaction_id,),
        )
        return self._row_to_record(row) if row else None

    async def get_by_id_and_owner(
        self,
        transaction_id: str,
        user_id: str,
    ) -> TransactionRecord | None:
        row = await self.db.fetchone(
            f"SELECT {_TX_COLUMNS} FROM transactions WHERE id = ? AND user_id = ?",
            (transaction_id, user_id),
        )
        return self._row_to_record(row) if row else None

    async def list_by_owner(
        self,
        user_id: str,
        limit: int = 20,
        offset: int = 0,
        direction: SortDirection | str = SortDirection.DESC,
    ) -> list[TransactionRecord]:
        """소유자 거래 목록 (거래일 정렬)"""
        order = self._order_clause(direction)
        rows = await self.db.fetchall(
            f"""
            SELECT {_TX_COLUMNS} FROM transactions
            WHERE user_id = ?
            ORDER BY {order}
            LIMIT ? OFFSET ?
            """,
            (user_id, limit, offset),
        )
        return [self._row_to_record(row) for row in rows]

    async def list_by_account(
        self,
        account_id: str,
        user_id: str,
        limit: int = 20,
        offset: int = 0,
        direction: SortDirection | str = SortDirection.DESC,
    ) -> list[TransactionRecord]:
        """계좌 거래 목록 (거래일 정렬)"""
        order = self._order_clause(direction)
        rows = await self.db.fetchall(
            f"""
            SELECT {_TX_COLUMNS} FROM transactions
            WHERE account_id = ? AND user_id = ?
            ORDER BY {order}
            LIMIT ? OFFSET ?
            """,
            (account_id, user_id, limit, offset),
        )
        return [self._row_to_record(row) for row in rows]

    async def count_by_owner(self, user_id: str) -> int:
        row = await self.db.fetchone(
            "SELECT COUNT(*) FROM transactions WHERE user_id = ?",
            (user_id,),
        )
        return row[0] if row else 0

    async def count_by_account(self, account_id: str, user_id: str) -> int:
        row = await self.db.fetchone(
            "SELECT COUNT(*) FROM transactions WHERE account_id = ? AND user_id = ?",
            (account_id, user_id),
        )
        return row[0] if row else 0

    async def find_due_templates(
        self,
        now: datetime,
        limit: int | None = None,
    ) -> list[TransactionRecord]:
        """실행 시점이 지난 반복 템플릿 조회

        조건: is_recurring = 1 AND next_recurring_date < now (엄격한 미만)

        Args:
            now: 기준 시각
            limit: 최대 조회 수 (None 또는 0이면 제한 없음)

        Returns:
            next_recurring_date 오름차순 템플릿 목록
        """
        sql = f"""
            SELECT {_TX_COLUMNS} FROM transactions
            WHERE is_recurring = 1 AND next_recurring_date < ?
            ORDER BY next_recurring_date ASC, id ASC
        """
        params: tuple = (to_db_ts(now),)
        if limit:
            sql += " LIMIT ?"
            params = (to_db_ts(now), limit)

        rows = await self.db.fetchall(sql, params)
        return [self._row_to_record(row) for row in rows]

    async def sum_signed_amounts(self, account_id: str) -> Decimal:
        """계좌에 반영된 거래 합계 (INCOME +, EXPENSE -)

        SQLite SUM은 실수 연산이므로 Decimal로 직접 합산.
        """
        rows = await self.db.fetchall(
            "SELECT type, amount FROM transactions WHERE account_id = ?",
            (account_id,),
        )
        total = ZERO
        for tx_type, amount in rows:
            total += signed_amount(Decimal(amount), TransactionType(tx_type))
        return total

    # -------------------------------------------------------------------------
    # 변환
    # -------------------------------------------------------------------------

    @staticmethod
    def _order_clause(direction: SortDirection | str) -> str:
        if SortDirection(direction) == SortDirection.ASC:
            return "date ASC, created_at ASC"
        return "date DESC, created_at DESC"

    @staticmethod
    def _record_to_params(record: TransactionRecord) -> tuple:
        return (
            record.id,
            record.user_id,
            record.account_id,
            record.type,
            format_money(record.amount),
            record.description,
            to_db_ts(record.date),
            record.category,
            record.receipt_url,
            1 if record.is_recurring else 0,
            record.recurring_interval,
            to_db_ts(record.next_recurring_date),
            to_db_ts(record.last_processed),
            record.status,
            to_db_ts(record.created_at),
            to_db_ts(record.updated_at),
        )

    @staticmethod
    def _row_to_record(row: tuple) -> TransactionRecord:
        return TransactionRecord(
            id=row[0],
            user_id=row[1],
            account_id=row[2],
            type=row[3],
            amount=Decimal(row[4]),
            description=row[5],
            date=from_db_ts(row[6]),
            category=row[7],
            receipt_url=row[8],
            is_recurring=bool(row[9]),
            recurring_interval=row[10],
            next_recurring_date=from_db_ts(row[11]),
            last_processed=from_db_ts(row[12]),
            status=row[13],
            created_at=from_db_ts(row[14]),
            updated_at=from_db_ts(row[15]),
        )
