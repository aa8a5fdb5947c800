"""
Vault event records and the append-only event log
"""

import logging
from dataclasses import dataclass, asdict
from typing import Callable, Iterator, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Deposit:
    """Value received from any sender"""
    sender: str
    amount: int

    name = "Deposit"

    def to_dict(self) -> dict:
        return {'event': self.name, **asdict(self)}


@dataclass(frozen=True)
class LockExtended:
    """Owner moved the unlock time later"""
    old_unlock_time: int
    new_unlock_time: int

    name = "LockExtended"

    def to_dict(self) -> dict:
        return {'event': self.name, **asdict(self)}


@dataclass(frozen=True)
class Withdrawal:
    """Whole balance released to the owner"""
    amount: int
    timestamp: int

    name = "Withdrawal"

    def to_dict(self) -> dict:
        return {'event': self.name, **asdict(self)}


class EventLog:
    """Append-only log of committed vault events with observer callbacks"""

    def __init__(self):
        self._records = []
        self._subscribers = []

    def append(self, record) -> None:
        self._records.append(record)

        for callback in list(self._subscribers):
            try:
                callback(record)
            except Exception:
                # The operation is already committed; a broken observer must not undo it
                logger.exception("Event subscriber %r failed on %s", callback, record.name)

    def subscribe(self, callback: Callable) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable) -> None:
        self._subscribers.remove(callback)

    def records(self, name: Optional[str] = None) -> List:
        """Get committed records, optionally only those with the given event name"""
        if name is None:
            return self._records.copy()
        return [r for r in self._records if r.name == name]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator:
        return iter(self._records.copy())
