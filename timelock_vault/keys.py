"""
secp256k1 identities for vault owners and callers
"""

import hashlib
from ecdsa import SigningKey, SECP256k1, VerifyingKey, BadSignatureError, MalformedPointError
from typing import Tuple

class VaultKey:
    """Key pair whose compressed public key hex is used as an identity"""
    
    def __init__(self, private_key: bytes = None):
        if private_key:
            self.private_key = SigningKey.from_string(private_key, curve=SECP256k1)
        else:
            self.private_key = SigningKey.generate(curve=SECP256k1)
        
        self.public_key = self.private_key.get_verifying_key()
    
    @classmethod
    def from_private_hex(cls, private_hex: str) -> 'VaultKey':
        return cls(bytes.fromhex(private_hex))
    
    @property
    def public_key_hex(self) -> str:
        """Compressed public key in hex format"""
        return self.public_key.to_string("compressed").hex()
    
    @property
    def private_key_hex(self) -> str:
        return self.private_key.to_string().hex()
    
    def sign(self, message: bytes) -> str:
        """Sign message and return signature in hex"""
        signature = self.private_key.sign(message, hashfunc=hashlib.sha256)
        return signature.hex()
    
    @staticmethod
    def verify(message: bytes, signature_hex: str, pubkey_hex: str) -> bool:
        """Verify signature against message and public key (compressed or uncompressed)"""
        try:
            vk = VerifyingKey.from_string(bytes.fromhex(pubkey_hex), curve=SECP256k1)
            return vk.verify(bytes.fromhex(signature_hex), message, hashfunc=hashlib.sha256)
        except (BadSignatureError, MalformedPointError, ValueError, TypeError):
            return False
    
    @staticmethod
    def generate_key_pair() -> Tuple[str, str]:
        """Generate new key pair and return (private_key_hex, public_key_hex)"""
        key = VaultKey()
        return key.private_key_hex, key.public_key_hex

def operation_message(vault_id: str, operation: str, *fields) -> bytes:
    """Canonical message a caller signs to authorize a restricted vault operation"""
    hasher = hashlib.sha256()
    hasher.update(b"TIMELOCK_VAULT_OP_V1")
    hasher.update(vault_id.encode())
    hasher.update(operation.encode())
    for field in fields:
        hasher.update(b"|")
        hasher.update(str(field).encode())
    return hasher.digest()
