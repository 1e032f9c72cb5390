"""
Ledger 예외 정의

호출자에게 노출되는 실패 유형.
그 외 예외(DB 오류 등)는 그대로 전파되어 내부 오류로 처리됨.
"""


class LedgerError(Exception):
    """Ledger 예외 베이스"""

    pass


class NotFoundError(LedgerError):
    """사용자/계좌/거래가 없거나 호출자 소유가 아님"""

    def __init__(self, resource: str, resource_id: str | None = None):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found")


class InvalidRecurringTransactionError(LedgerError):
    """반복 거래에 날짜 또는 주기가 없음"""

    pass


class ValidationError(LedgerError):
    """입력값 검증 실패 (음수 금액 등)"""

    pass


class ConcurrentModificationError(LedgerError):
    """계좌 잔액 CAS 충돌

    읽은 version과 저장된 version이 다름.
    작업 전체를 재시도해야 함.
    """

    def __init__(self, account_id: str, expected_version: int):
        self.account_id = account_id
        self.expected_version = expected_version
        super().__init__(
            f"Account {account_id} was modified concurrently "
            f"(expected version {expected_version})"
        )
