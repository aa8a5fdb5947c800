import unittest
from timelock_vault.clock import ManualClock
from timelock_vault.config import VaultConfig
from timelock_vault.keys import VaultKey, operation_message
from web_interface.app import create_app

class TestWebInterface(unittest.TestCase):

    def setUp(self):
        """Set up test fixtures"""
        self.clock = ManualClock(1_700_000_000)
        self.config = VaultConfig(lock_duration_seconds=300, require_signatures=True)
        self.app = create_app(self.config, clock=self.clock)
        self.client = self.app.test_client()

        self.owner_key = VaultKey()
        response = self.client.post('/api/create_vault', json={'owner_pubkey': self.owner_key.public_key_hex})
        self.assertEqual(response.status_code, 200)
        self.vault_id = response.get_json()['vault_id']

    def sign(self, operation, *fields, key=None):
        key = key or self.owner_key
        return key.sign(operation_message(self.vault_id, operation, *fields))

    def test_create_vault_generates_owner_key(self):
        """Test vault creation without an owner key returns a fresh one"""
        response = self.client.post('/api/create_vault', json={'lock_seconds': 60})
        data = response.get_json()

        self.assertTrue(data['success'])
        self.assertEqual(data['owner'], data['owner_key']['public_key'])
        self.assertEqual(data['unlock_time'], self.clock.now() + 60)
        self.assertEqual(data['phase'], 'locked')

    def test_create_vault_rejects_bad_duration(self):
        """Test non-positive and non-numeric lock durations"""
        response = self.client.post('/api/create_vault', json={'lock_seconds': 0})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['error_type'], 'InvalidUnlockTime')

        response = self.client.post('/api/create_vault', json={'lock_seconds': 'later'})
        self.assertEqual(response.status_code, 400)

    def test_duplicate_vault(self):
        """Test same owner and terms in the same second conflict"""
        response = self.client.post('/api/create_vault', json={'owner_pubkey': self.owner_key.public_key_hex})
        self.assertEqual(response.status_code, 409)

    def test_get_vault(self):
        """Test vault information"""
        data = self.client.get(f'/api/vault/{self.vault_id}').get_json()
        self.assertEqual(data['balance'], 0)
        self.assertEqual(data['time_until_unlock'], 300)
        self.assertEqual(data['owner'], self.owner_key.public_key_hex)
        self.assertIn('commitment_hash', data)

        self.assertEqual(self.client.get('/api/vault/unknown').status_code, 404)

    def test_deposit(self):
        """Test deposits from any sender"""
        response = self.client.post(f'/api/vault/{self.vault_id}/deposit', json={'sender': 'bob', 'amount': 25})
        self.assertEqual(response.get_json()['balance'], 25)

        response = self.client.post(f'/api/vault/{self.vault_id}/deposit', json={'sender': 'bob', 'amount': -5})
        self.assertEqual(response.status_code, 400)

        response = self.client.post(f'/api/vault/{self.vault_id}/deposit', json={'amount': 5})
        self.assertEqual(response.status_code, 400)

    def test_withdraw_flow(self):
        """Test locked withdrawal fails and unlocked withdrawal pays the owner"""
        owner = self.owner_key.public_key_hex
        self.client.post(f'/api/vault/{self.vault_id}/deposit', json={'sender': 'bob', 'amount': 10})

        payload = {'caller': owner, 'signature': self.sign('withdraw')}
        response = self.client.post(f'/api/vault/{self.vault_id}/withdraw', json=payload)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['error_type'], 'FundsLocked')

        self.clock.advance(300)
        response = self.client.post(f'/api/vault/{self.vault_id}/withdraw', json=payload)
        data = response.get_json()
        self.assertTrue(data['success'])
        self.assertEqual(data['withdrawal_amount'], 10)
        self.assertEqual(data['remaining_balance'], 0)

        ledger = self.client.get(f'/api/ledger/{owner}').get_json()
        self.assertEqual(ledger['balance'], 10)

    def test_withdraw_requires_signature(self):
        """Test missing or foreign signatures are refused"""
        owner = self.owner_key.public_key_hex
        self.clock.advance(300)

        response = self.client.post(f'/api/vault/{self.vault_id}/withdraw', json={'caller': owner})
        self.assertEqual(response.status_code, 403)

        forged = self.sign('withdraw', key=VaultKey())
        response = self.client.post(f'/api/vault/{self.vault_id}/withdraw',
                                    json={'caller': owner, 'signature': forged})
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.get_json()['error_type'], 'InvalidSignature')

    def test_non_string_caller_or_signature(self):
        """Test malformed identity fields are refused, not server errors"""
        owner = self.owner_key.public_key_hex
        self.clock.advance(300)

        for payload in ({'caller': 12345, 'signature': self.sign('withdraw')},
                        {'caller': owner, 'signature': [1, 2, 3]}):
            response = self.client.post(f'/api/vault/{self.vault_id}/withdraw', json=payload)
            self.assertEqual(response.status_code, 403)
            self.assertEqual(response.get_json()['error_type'], 'InvalidSignature')

        response = self.client.post(f'/api/vault/{self.vault_id}/extend', json={
            'caller': {'key': owner},
            'new_unlock_time': self.clock.now() + 1000,
            'signature': 42
        })
        self.assertEqual(response.status_code, 403)

    def test_huge_deposit_keeps_vault_readable(self):
        """Test a deposit beyond 128 bits does not break vault information"""
        amount = 2 ** 128
        response = self.client.post(f'/api/vault/{self.vault_id}/deposit', json={'sender': 'bob', 'amount': amount})
        self.assertEqual(response.status_code, 200)

        response = self.client.get(f'/api/vault/{self.vault_id}')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['balance'], amount)

    def test_non_owner_withdraw(self):
        """Test a correctly signed non-owner request gets OnlyOwner"""
        stranger = VaultKey()
        self.clock.advance(300)
        payload = {'caller': stranger.public_key_hex, 'signature': self.sign('withdraw', key=stranger)}

        response = self.client.post(f'/api/vault/{self.vault_id}/withdraw', json=payload)
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.get_json()['error_type'], 'OnlyOwner')

    def test_extend_lock(self):
        """Test extension and rejection of non-increasing times"""
        owner = self.owner_key.public_key_hex
        unlock = self.client.get(f'/api/vault/{self.vault_id}').get_json()['unlock_time']

        new_time = unlock + 600
        response = self.client.post(f'/api/vault/{self.vault_id}/extend', json={
            'caller': owner,
            'new_unlock_time': new_time,
            'signature': self.sign('extend_lock', new_time)
        })
        self.assertEqual(response.get_json()['unlock_time'], new_time)

        response = self.client.post(f'/api/vault/{self.vault_id}/extend', json={
            'caller': owner,
            'new_unlock_time': unlock,
            'signature': self.sign('extend_lock', unlock)
        })
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['error_type'], 'CannotReduceLockTime')

        events = self.client.get(f'/api/vault/{self.vault_id}/events?name=LockExtended').get_json()['events']
        self.assertEqual(events, [{'event': 'LockExtended', 'old_unlock_time': unlock, 'new_unlock_time': new_time}])

    def test_unsigned_mode(self):
        """Test signatures can be disabled by configuration"""
        app = create_app(VaultConfig.development(), clock=self.clock)
        client = app.test_client()

        data = client.post('/api/create_vault', json={}).get_json()
        vault_id, owner = data['vault_id'], data['owner']

        self.clock.advance(60)
        response = client.post(f'/api/vault/{vault_id}/withdraw', json={'caller': owner})
        self.assertEqual(response.get_json()['withdrawal_amount'], 0)

if __name__ == '__main__':
    unittest.main()
