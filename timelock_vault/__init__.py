"""
Time-Lock Vault - single-owner custody with a mandatory holding period
"""

from .vault import TimeLockVault, VaultPhase
from .errors import (
    VaultError,
    InvalidUnlockTime,
    OnlyOwner,
    CannotReduceLockTime,
    FundsLocked,
    WithdrawalFailed,
)
from .events import EventLog, Deposit, LockExtended, Withdrawal
from .ledger import Ledger
from .clock import SystemClock, ManualClock
from .keys import VaultKey, operation_message
from .config import VaultConfig

__version__ = "0.1.0"
__all__ = [
    "TimeLockVault",
    "VaultPhase",
    "VaultError",
    "InvalidUnlockTime",
    "OnlyOwner",
    "CannotReduceLockTime",
    "FundsLocked",
    "WithdrawalFailed",
    "EventLog",
    "Deposit",
    "LockExtended",
    "Withdrawal",
    "Ledger",
    "SystemClock",
    "ManualClock",
    "VaultKey",
    "operation_message",
    "VaultConfig"
]
