#!/usr/bin/env python3
"""
Complete demo of the Time-Lock Vault
"""

from timelock_vault.vault import TimeLockVault
from timelock_vault.errors import VaultError
from timelock_vault.ledger import Ledger
from timelock_vault.clock import ManualClock
from timelock_vault.keys import VaultKey

def attempt(label, action):
    try:
        result = action()
        print(f"   ✅ {label}" + (f": {result}" if result is not None else ""))
    except VaultError as e:
        print(f"   ❌ {label}: {type(e).__name__} - {e}")

def main():
    print("=" * 60)
    print("🔒 TIME-LOCK VAULT - COMPLETE DEMO")
    print("=" * 60)
    print()

    clock = ManualClock()
    ledger = Ledger()

    # Step 1: Setup
    print("🔧 STEP 1: Generating identities")
    print("-" * 40)

    owner = VaultKey()
    depositor = VaultKey()
    print(f"✅ Owner:     {owner.public_key_hex[:16]}...")
    print(f"✅ Depositor: {depositor.public_key_hex[:16]}...")
    print()

    # Step 2: Create Vault
    print("🏗️  STEP 2: Creating vault locked for 300 seconds")
    print("-" * 40)

    vault = TimeLockVault.with_lock_duration(owner.public_key_hex, 300, clock=clock, ledger=ledger)
    vault.events.subscribe(lambda record: print(f"   📣 {record.name}: {record.to_dict()}"))

    print(f"✅ Vault ID: {vault.vault_id}")
    print(f"✅ Unlock time: {vault.unlock_time} ({vault.get_time_until_unlock()}s from now)")
    print()

    # Step 3: Deposits
    print("💰 STEP 3: Deposits")
    print("-" * 40)

    vault.deposit(depositor.public_key_hex, 1_000)
    vault.receive(depositor.public_key_hex, 500)
    print(f"   Balance: {vault.get_balance():,}")
    print()

    # Step 4: Withdrawals
    print("🔓 STEP 4: Withdrawal attempts")
    print("-" * 40)

    attempt("Owner withdraws while locked", lambda: vault.withdraw(owner.public_key_hex))
    attempt("Depositor withdraws", lambda: vault.withdraw(depositor.public_key_hex))

    new_unlock = vault.unlock_time + 600
    attempt("Owner extends lock by 600s", lambda: vault.extend_lock(owner.public_key_hex, new_unlock))
    attempt("Owner shortens lock", lambda: vault.extend_lock(owner.public_key_hex, new_unlock - 1))

    clock.advance(300)
    print(f"   ⏩ Advanced 300s, {vault.get_time_until_unlock()}s remaining")
    attempt("Owner withdraws at original unlock time", lambda: vault.withdraw(owner.public_key_hex))

    clock.set(vault.unlock_time)
    print(f"   ⏩ Reached unlock time, phase is {vault.phase().value}")
    attempt("Owner withdraws", lambda: vault.withdraw(owner.public_key_hex))
    print()

    # Step 5: Summary
    print("📊 STEP 5: Summary")
    print("-" * 40)
    print(f"   Vault balance: {vault.get_balance():,}")
    print(f"   Owner external balance: {ledger.balance_of(owner.public_key_hex):,}")
    print(f"   Events recorded: {len(vault.events)}")
    print(f"   Commitment hash: {vault.commitment_hash()}")
    print()
    print("✅ Demo complete!")

if __name__ == "__main__":
    main()
