"""
스토리지 모듈

User / Account / Transaction / Config 저장소 제공
"""

from core.storage.user_store import UserStore
from core.storage.account_store import AccountStore
from core.storage.transaction_store import TransactionStore
from core.storage.config_store import ConfigStore, init_default_configs

__all__ = [
    "UserStore",
    "AccountStore",
    "TransactionStore",
    "ConfigStore",
    "init_default_configs",
]
