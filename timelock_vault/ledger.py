"""
External account balances that vault withdrawals pay into
"""

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Dict, List, Any

logger = logging.getLogger(__name__)


class Ledger:
    """
    Balances held outside the vault, keyed by identity.

    A recipient may register a receive hook. The hook is called with
    (sender, amount) before the recipient is credited; returning False or
    raising rejects the transfer. Hooks may call back into a vault, and run
    without the ledger lock held.

    journal() scopes the transfers made by the current thread so that a
    failing operation can undo exactly those, and nothing another thread
    or vault did in the meantime.
    """

    def __init__(self):
        self._balances = {}  # identity -> balance
        self._receive_hooks = {}  # identity -> hook
        self._transfer_history = []
        self._lock = threading.RLock()
        self._local = threading.local()

    def balance_of(self, identity: str) -> int:
        """Get external balance for identity"""
        with self._lock:
            return self._balances.get(identity, 0)

    def credit(self, identity: str, amount: int) -> None:
        """Add funds to an identity outside of any transfer"""
        if amount < 0:
            raise ValueError(f"Credit amount must be non-negative, got {amount}")
        with self._lock:
            self._balances[identity] = self.balance_of(identity) + amount

    def set_receive_hook(self, identity: str, hook: Callable[[str, int], bool]) -> None:
        self._receive_hooks[identity] = hook

    def clear_receive_hook(self, identity: str) -> None:
        self._receive_hooks.pop(identity, None)

    def _journals(self) -> list:
        journals = getattr(self._local, 'journals', None)
        if journals is None:
            journals = self._local.journals = []
        return journals

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        """Send value to recipient; returns False when the recipient cannot accept it"""

        hook = self._receive_hooks.get(recipient)
        if hook is not None:
            try:
                accepted = hook(sender, amount)
            except Exception as e:
                logger.warning("Receive hook for %.8s... raised: %s", recipient, e)
                return False

            if accepted is False:
                logger.warning("Recipient %.8s... rejected transfer of %d", recipient, amount)
                return False

        entry = {
            'from': sender,
            'to': recipient,
            'amount': amount
        }
        with self._lock:
            self._balances[recipient] = self.balance_of(recipient) + amount
            self._transfer_history.append(entry)

        journals = self._journals()
        if journals:
            journals[-1].append(entry)
        return True

    @contextmanager
    def journal(self):
        """Undo this thread's transfers made inside the block if it raises"""
        journals = self._journals()
        entries = []
        journals.append(entries)
        try:
            yield entries
        except BaseException:
            journals.pop()
            self._undo(entries)
            raise

        journals.pop()
        if journals:
            journals[-1].extend(entries)

    def _undo(self, entries: List[Dict[str, Any]]) -> None:
        with self._lock:
            for entry in reversed(entries):
                self._balances[entry['to']] -= entry['amount']
                for i in range(len(self._transfer_history) - 1, -1, -1):
                    if self._transfer_history[i] is entry:
                        del self._transfer_history[i]
                        break

    def get_transfer_history(self) -> List[Dict[str, Any]]:
        """Get completed transfers"""
        with self._lock:
            return self._transfer_history.copy()
