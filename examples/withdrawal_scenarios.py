#!/usr/bin/env python3
"""
Example: Walking through withdrawal scenarios with a simulated clock
"""

from timelock_vault.vault import TimeLockVault
from timelock_vault.errors import VaultError
from timelock_vault.ledger import Ledger
from timelock_vault.clock import ManualClock
from timelock_vault.keys import VaultKey

def main():
    print("=== Testing Withdrawal Scenarios ===")
    print()

    clock = ManualClock()
    ledger = Ledger()
    owner = VaultKey().public_key_hex
    stranger = VaultKey().public_key_hex

    vault = TimeLockVault(owner, clock.now() + 300, clock=clock, ledger=ledger)
    vault.deposit(stranger, 1)
    start = clock.now()

    scenarios = [
        {
            'name': 'Owner withdraws immediately - Should fail',
            'at': start,
            'caller': owner,
            'should_pass': False
        },
        {
            'name': 'Stranger withdraws after unlock - Should fail',
            'at': start + 300,
            'caller': stranger,
            'should_pass': False
        },
        {
            'name': 'Owner withdraws at unlock time',
            'at': start + 300,
            'caller': owner,
            'should_pass': True
        },
        {
            'name': 'Owner withdraws again (zero balance)',
            'at': start + 400,
            'caller': owner,
            'should_pass': True
        },
    ]

    passed = 0
    for i, scenario in enumerate(scenarios, 1):
        print(f"Test {i}: {scenario['name']}")
        clock.set(scenario['at'])

        try:
            amount = vault.withdraw(scenario['caller'])
            succeeded = True
            print(f"   Withdrew {amount}, owner now holds {ledger.balance_of(owner)}")
        except VaultError as e:
            succeeded = False
            print(f"   {type(e).__name__}: {e}")

        if succeeded == scenario['should_pass']:
            passed += 1
            print("   ✅ As expected")
        else:
            print("   ❌ Unexpected result")
        print()

    print(f"📊 {passed}/{len(scenarios)} scenarios behaved as expected")

if __name__ == "__main__":
    main()
