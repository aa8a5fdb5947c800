import unittest
from timelock_vault.config import VaultConfig

class TestVaultConfig(unittest.TestCase):

    def test_defaults(self):
        """Test empty environment gives defaults"""
        config = VaultConfig.from_env({})
        self.assertEqual(config.lock_duration_seconds, 300)
        self.assertEqual(config.port, 10000)
        self.assertTrue(config.require_signatures)
        self.assertEqual(config.log_level, "INFO")

    def test_from_env(self):
        """Test environment overrides"""
        config = VaultConfig.from_env({
            'VAULT_LOCK_DURATION': '3600',
            'PORT': '8080',
            'HOST': '127.0.0.1',
            'VAULT_REQUIRE_SIGNATURES': 'false',
            'VAULT_LOG_LEVEL': 'debug'
        })
        self.assertEqual(config.lock_duration_seconds, 3600)
        self.assertEqual(config.port, 8080)
        self.assertEqual(config.host, '127.0.0.1')
        self.assertFalse(config.require_signatures)
        self.assertEqual(config.log_level, 'DEBUG')

    def test_invalid_values(self):
        """Test bad numbers are rejected"""
        for env in ({'VAULT_LOCK_DURATION': 'soon'}, {'VAULT_LOCK_DURATION': '0'}, {'PORT': '-1'}):
            with self.assertRaises(ValueError):
                VaultConfig.from_env(env)

    def test_development_preset(self):
        """Test development preset parameters"""
        config = VaultConfig.development()
        self.assertEqual(config.lock_duration_seconds, 60)
        self.assertFalse(config.require_signatures)

if __name__ == '__main__':
    unittest.main()
