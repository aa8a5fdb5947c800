"""
Vault error taxonomy

Every error rejects the whole operation; the vault state is left exactly as
it was before the call.
"""

class VaultError(ValueError):
    """Base class for rejected vault operations"""


class InvalidUnlockTime(VaultError):
    """Unlock time at construction is not in the future"""

    def __init__(self, unlock_time: int, now: int):
        self.unlock_time = unlock_time
        self.now = now
        super().__init__(f"Unlock time {unlock_time} must be after current time {now}")


class OnlyOwner(VaultError):
    """Restricted operation called by someone other than the owner"""

    def __init__(self, caller: str, operation: str):
        self.caller = caller
        self.operation = operation
        super().__init__(f"Only the owner can {operation}, caller {str(caller)[:8]}... is not the owner")


class CannotReduceLockTime(VaultError):
    """New unlock time is not strictly later than the current one"""

    def __init__(self, current_unlock_time: int, new_unlock_time: int):
        self.current_unlock_time = current_unlock_time
        self.new_unlock_time = new_unlock_time
        super().__init__(
            f"New unlock time {new_unlock_time} must be after current unlock time {current_unlock_time}"
        )


class FundsLocked(VaultError):
    def __init__(self, unlock_time: int, now: int):
        self.unlock_time = unlock_time
        self.now = now
        self.remaining = unlock_time - now
        super().__init__(f"Funds are locked: {self.remaining} seconds remaining")


class WithdrawalFailed(VaultError):
    def __init__(self, recipient: str, amount: int):
        self.recipient = recipient
        self.amount = amount
        super().__init__(f"Transfer of {amount} to {str(recipient)[:8]}... failed")
