import hashlib
import logging
import threading
from contextlib import contextmanager
from enum import Enum
from typing import Optional

from .clock import SystemClock
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

logger = logging.getLogger(__name__)


class VaultPhase(Enum):
    LOCKED = "locked"
    UNLOCKED = "unlocked"


def _require_int(value, what: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{what} must be an integer, got {value!r}")


def _hash_field(hasher, value) -> None:
    # Length-prefixed decimal, any integer size
    data = str(value).encode()
    hasher.update(len(data).to_bytes(4, 'little'))
    hasher.update(data)


class TimeLockVault:
    """
    Single-owner vault that holds deposits until an unlock time.

    Anyone may deposit. Only the owner may withdraw, and only once the
    unlock time has been reached; withdrawal always releases the whole
    balance. The owner may move the unlock time later, never earlier.

    Every mutating call runs as one transaction: either all of its effects
    (balance, unlock time, events, ledger transfers) apply or none do.
    Calls made back into the vault from inside a withdrawal transfer join
    that withdrawal's transaction.
    """

    def __init__(self, owner: str, unlock_time: int, clock=None,
                 ledger: Optional[Ledger] = None, event_log: Optional[EventLog] = None):
        if not owner:
            raise ValueError("Vault owner identity is required")
        _require_int(unlock_time, "Unlock time")

        self._attach(clock, ledger, event_log)

        now = self._clock.now()
        if unlock_time <= now:
            raise InvalidUnlockTime(unlock_time, now)

        self._owner = owner
        self._unlock_time = unlock_time
        self._balance = 0
        self._created_at = now
        self._vault_id = self._generate_vault_id()

        logger.info("Vault %.16s created for owner %.8s..., unlocks at %d",
                    self._vault_id, owner, unlock_time)

    @classmethod
    def with_lock_duration(cls, owner: str, seconds: int, clock=None,
                           ledger: Optional[Ledger] = None,
                           event_log: Optional[EventLog] = None) -> 'TimeLockVault':
        """Create a vault that unlocks `seconds` from now"""
        _require_int(seconds, "Lock duration")
        clock = clock if clock is not None else SystemClock()
        now = clock.now()
        if seconds <= 0:
            raise InvalidUnlockTime(now + seconds, now)
        return cls(owner, now + seconds, clock=clock, ledger=ledger, event_log=event_log)

    def _attach(self, clock, ledger, event_log) -> None:
        self._clock = clock if clock is not None else SystemClock()
        self.ledger = ledger if ledger is not None else Ledger()
        self.events = event_log if event_log is not None else EventLog()
        self._lock = threading.RLock()
        self._pending = None  # event buffer of the open transaction

    def _generate_vault_id(self) -> str:
        """Generate deterministic vault ID from owner and creation terms"""
        hasher = hashlib.sha256()
        hasher.update(b"TIMELOCK_VAULT_V1")
        for value in (self._owner, self._created_at, self._unlock_time):
            _hash_field(hasher, value)
        return hasher.hexdigest()

    # -- properties ---------------------------------------------------------

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def unlock_time(self) -> int:
        return self._unlock_time

    @property
    def balance(self) -> int:
        return self._balance

    @property
    def created_at(self) -> int:
        return self._created_at

    @property
    def vault_id(self) -> str:
        return self._vault_id

    # -- transactions -------------------------------------------------------

    @contextmanager
    def _transaction(self, operation: str):
        with self._lock:
            snapshot = (self._balance, self._unlock_time)
            outer = self._pending
            self._pending = []
            try:
                yield
            except BaseException as e:
                self._balance, self._unlock_time = snapshot
                self._pending = outer
                if isinstance(e, VaultError):
                    logger.warning("Vault %.16s rejected %s: %s", self._vault_id, operation, e)
                raise

            committed = self._pending
            self._pending = outer
            if outer is None:
                for record in committed:
                    self.events.append(record)
            else:
                outer.extend(committed)

    def _emit(self, record) -> None:
        self._pending.append(record)

    def _require_owner(self, caller: str, operation: str) -> None:
        if caller != self._owner:
            raise OnlyOwner(caller, operation)

    # -- operations ---------------------------------------------------------

    def deposit(self, sender: str, amount: int) -> None:
        """Add value to the vault; open to any sender, zero amounts included"""
        self._accept(sender, amount, "deposit")

    def receive(self, sender: str, amount: int) -> None:
        """Bare value transfer to the vault, same effect as deposit()"""
        self._accept(sender, amount, "receive")

    def _accept(self, sender: str, amount: int, operation: str) -> None:
        _require_int(amount, "Deposit amount")
        if amount < 0:
            raise ValueError(f"Deposit amount must be non-negative, got {amount}")

        with self._transaction(operation):
            self._balance += amount
            self._emit(Deposit(sender, amount))

        logger.info("Vault %.16s received %d from %.8s...", self._vault_id, amount, sender)

    def extend_lock(self, caller: str, new_unlock_time: int) -> None:
        """Move the unlock time later; the only way unlock time ever changes"""
        with self._transaction("extend_lock"):
            self._require_owner(caller, "extend the lock")
            _require_int(new_unlock_time, "Unlock time")

            old_unlock_time = self._unlock_time
            if new_unlock_time <= old_unlock_time:
                raise CannotReduceLockTime(old_unlock_time, new_unlock_time)

            self._unlock_time = new_unlock_time
            self._emit(LockExtended(old_unlock_time, new_unlock_time))

        logger.info("Vault %.16s lock extended from %d to %d",
                    self._vault_id, old_unlock_time, new_unlock_time)

    def withdraw(self, caller: str) -> int:
        """Release the whole balance to the owner once unlocked; returns the amount"""
        with self._transaction("withdraw"):
            self._require_owner(caller, "withdraw")

            now = self._clock.now()
            if now < self._unlock_time:
                raise FundsLocked(self._unlock_time, now)

            amount = self._balance
            # Balance is zeroed before the transfer so a call back into the
            # vault from the recipient sees nothing left to withdraw
            self._emit(Withdrawal(amount, now))
            self._balance = 0

            with self.ledger.journal():
                if not self.ledger.transfer(self._vault_id, self._owner, amount):
                    raise WithdrawalFailed(self._owner, amount)

        logger.info("Vault %.16s released %d to owner", self._vault_id, amount)
        return amount

    # -- queries ------------------------------------------------------------

    def get_balance(self) -> int:
        with self._lock:
            return self._balance

    def get_time_until_unlock(self) -> int:
        """Seconds left until withdrawal is allowed, never negative"""
        with self._lock:
            now = self._clock.now()
            if now < self._unlock_time:
                return self._unlock_time - now
            return 0

    def is_locked(self) -> bool:
        with self._lock:
            return self._clock.now() < self._unlock_time

    def phase(self) -> VaultPhase:
        return VaultPhase.LOCKED if self.is_locked() else VaultPhase.UNLOCKED

    # -- serialization ------------------------------------------------------

    def commitment_hash(self) -> str:
        """Fingerprint of the current vault state for audit snapshots"""
        with self._lock:
            hasher = hashlib.sha256()
            hasher.update(bytes.fromhex(self._vault_id))
            for value in (self._owner, self._unlock_time, self._balance):
                _hash_field(hasher, value)
            return hasher.hexdigest()

    def to_dict(self) -> dict:
        """Serialize vault state to dictionary"""
        with self._lock:
            return {
                'vault_id': self._vault_id,
                'owner': self._owner,
                'unlock_time': self._unlock_time,
                'balance': self._balance,
                'created_at': self._created_at
            }

    @classmethod
    def from_dict(cls, data: dict, clock=None, ledger: Optional[Ledger] = None,
                  event_log: Optional[EventLog] = None) -> 'TimeLockVault':
        """Restore a vault from to_dict() output; restoring does not re-check the unlock time"""
        if data['balance'] < 0:
            raise ValueError(f"Vault balance cannot be negative, got {data['balance']}")

        vault = cls.__new__(cls)
        vault._attach(clock, ledger, event_log)
        vault._owner = data['owner']
        vault._unlock_time = data['unlock_time']
        vault._balance = data['balance']
        vault._created_at = data['created_at']
        vault._vault_id = data['vault_id']
        return vault
