#!/usr/bin/env python3
"""
Example: Deploying a time-lock vault from environment configuration
"""

from timelock_vault.vault import TimeLockVault
from timelock_vault.keys import VaultKey
from timelock_vault.config import VaultConfig, configure_logging

def main():
    config = VaultConfig.from_env()
    configure_logging(config.log_level)

    print("=== Creating Time-Lock Vault ===")
    print()

    print("🔑 Generating owner key...")
    owner = VaultKey()
    print(f"   Public key:  {owner.public_key_hex}")
    print(f"   Private key: {owner.private_key_hex}")
    print()

    vault = TimeLockVault.with_lock_duration(owner.public_key_hex, config.lock_duration_seconds)

    print("🏗️  Vault Created Successfully!")
    print(f"   Vault ID: {vault.vault_id}")
    print(f"   Created at: {vault.created_at}")
    print(f"   Unlock time: {vault.unlock_time}")
    print(f"   Time until unlock: {vault.get_time_until_unlock()}s")
    print(f"   Commitment Hash: {vault.commitment_hash()}")

if __name__ == "__main__":
    main()
