"""
잔액 정합성 Ledger

계좌 잔액을 거래 집합과 항상 일치시키는 생명주기 관리.

사용 예시:
```python
from core.ledger import AccountService, TransactionLifecycleManager

accounts = AccountService(db)
account = await accounts.create(user_id, "Main", "CHECKING", "1000.00")

manager = TransactionLifecycleManager(db)
record = await manager.create(user_id, account.id, fields)

# 정합성 점검
check = await manager.check_balance(user_id, account.id)
assert check.is_consistent
```
"""

from core.ledger.accounts import AccountService, UserService
from core.ledger.balance import AccountBalanceStore
from core.ledger.interval import advance
from core.ledger.lifecycle import BalanceCheck, TransactionLifecycleManager

__all__ = [
    "AccountBalanceStore",
    "AccountService",
    "UserService",
    "TransactionLifecycleManager",
    "BalanceCheck",
    "advance",
]
