"""
Runtime configuration read from environment variables
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

_FALSE_VALUES = {"0", "false", "no", "off"}


def _positive_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


@dataclass
class VaultConfig:
    """Settings for deploying vaults and serving the web API"""

    lock_duration_seconds: int = 300
    port: int = 10000
    host: str = "0.0.0.0"
    secret_key: str = "dev_secret_key_change_in_production"
    require_signatures: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'VaultConfig':
        """Load settings from VAULT_* / PORT / HOST environment variables"""
        environ = os.environ if environ is None else environ
        defaults = cls()

        return cls(
            lock_duration_seconds=_positive_int(environ, "VAULT_LOCK_DURATION", defaults.lock_duration_seconds),
            port=_positive_int(environ, "PORT", defaults.port),
            host=environ.get("HOST", defaults.host),
            secret_key=environ.get("VAULT_SECRET_KEY", defaults.secret_key),
            require_signatures=environ.get("VAULT_REQUIRE_SIGNATURES", "1").strip().lower() not in _FALSE_VALUES,
            log_level=environ.get("VAULT_LOG_LEVEL", defaults.log_level).upper()
        )

    @classmethod
    def development(cls) -> 'VaultConfig':
        """Short locks and unsigned requests for local experiments"""
        return cls(
            lock_duration_seconds=60,
            port=5000,
            host="127.0.0.1",
            require_signatures=False,
            log_level="DEBUG"
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
