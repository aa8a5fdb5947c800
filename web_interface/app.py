#!/usr/bin/env python3
"""
Web interface for Time-Lock Vaults
"""

from flask import Flask, request, jsonify

from timelock_vault.vault import TimeLockVault
from timelock_vault.errors import VaultError, OnlyOwner
from timelock_vault.ledger import Ledger
from timelock_vault.keys import VaultKey, operation_message
from timelock_vault.config import VaultConfig, configure_logging


def _error(message: str, error_type: str, status: int):
    return jsonify({'success': False, 'error': message, 'error_type': error_type}), status


def create_app(config: VaultConfig = None, clock=None) -> Flask:
    """Build the API with its own vault registry and external ledger"""
    config = config if config is not None else VaultConfig.from_env()

    app = Flask(__name__)
    app.secret_key = config.secret_key
    app.config['VAULT_CONFIG'] = config

    # In-memory storage (in production, use proper database)
    vaults = {}
    ledger = Ledger()

    @app.errorhandler(VaultError)
    def handle_vault_error(e):
        status = 403 if isinstance(e, OnlyOwner) else 400
        return _error(str(e), type(e).__name__, status)

    def get_vault_or_none(vault_id):
        vault = vaults.get(vault_id)
        if vault is None:
            app.logger.info("Unknown vault %s", vault_id)
        return vault

    def signature_ok(vault_id: str, caller: str, signature, operation: str, *fields) -> bool:
        if not config.require_signatures:
            return True
        if not signature:
            return False
        return VaultKey.verify(operation_message(vault_id, operation, *fields), signature, caller)

    def vault_info(vault: TimeLockVault) -> dict:
        info = vault.to_dict()
        info.update({
            'time_until_unlock': vault.get_time_until_unlock(),
            'phase': vault.phase().value,
            'commitment_hash': vault.commitment_hash()
        })
        return info

    @app.route('/')
    def index():
        """Service information"""
        return jsonify({
            'service': 'timelock-vault',
            'vaults': len(vaults),
            'default_lock_seconds': config.lock_duration_seconds,
            'require_signatures': config.require_signatures
        })

    @app.route('/api/create_vault', methods=['POST'])
    def create_vault():
        """Create new time-lock vault"""
        data = request.get_json(silent=True) or {}

        key_info = None
        owner = data.get('owner_pubkey')
        if not owner:
            private_hex, owner = VaultKey.generate_key_pair()
            key_info = {'public_key': owner, 'private_key': private_hex}

        try:
            lock_seconds = int(data.get('lock_seconds', config.lock_duration_seconds))
            vault = TimeLockVault.with_lock_duration(owner, lock_seconds, clock=clock, ledger=ledger)
        except VaultError:
            raise
        except (TypeError, ValueError) as e:
            return _error(str(e), 'ValueError', 400)

        if vault.vault_id in vaults:
            return _error("Vault with these terms already exists", 'DuplicateVault', 409)
        vaults[vault.vault_id] = vault

        app.logger.info("Created vault %s unlocking at %d", vault.vault_id, vault.unlock_time)

        response = {'success': True, **vault_info(vault)}
        if key_info is not None:
            response['owner_key'] = key_info
        return jsonify(response)

    @app.route('/api/vault/<vault_id>')
    def get_vault(vault_id):
        """Get vault information"""
        vault = get_vault_or_none(vault_id)
        if vault is None:
            return _error('Vault not found', 'NotFound', 404)
        return jsonify(vault_info(vault))

    @app.route('/api/vault/<vault_id>/deposit', methods=['POST'])
    def deposit(vault_id):
        """Deposit into vault from any sender"""
        vault = get_vault_or_none(vault_id)
        if vault is None:
            return _error('Vault not found', 'NotFound', 404)

        data = request.get_json(silent=True) or {}
        sender = data.get('sender')
        if not sender or 'amount' not in data:
            return _error("Fields 'sender' and 'amount' are required", 'ValueError', 400)

        try:
            vault.deposit(sender, data['amount'])
        except VaultError:
            raise
        except ValueError as e:
            return _error(str(e), 'ValueError', 400)

        return jsonify({'success': True, 'balance': vault.get_balance()})

    @app.route('/api/vault/<vault_id>/extend', methods=['POST'])
    def extend_lock(vault_id):
        """Move the unlock time later (owner only)"""
        vault = get_vault_or_none(vault_id)
        if vault is None:
            return _error('Vault not found', 'NotFound', 404)

        data = request.get_json(silent=True) or {}
        caller = data.get('caller', '')
        new_unlock_time = data.get('new_unlock_time')
        if new_unlock_time is None:
            return _error("Field 'new_unlock_time' is required", 'ValueError', 400)

        if not signature_ok(vault_id, caller, data.get('signature'), 'extend_lock', new_unlock_time):
            app.logger.warning("Bad signature for extend on vault %s", vault_id)
            return _error('Invalid signature', 'InvalidSignature', 403)

        try:
            vault.extend_lock(caller, new_unlock_time)
        except VaultError:
            raise
        except ValueError as e:
            return _error(str(e), 'ValueError', 400)

        return jsonify({
            'success': True,
            'unlock_time': vault.unlock_time,
            'time_until_unlock': vault.get_time_until_unlock()
        })

    @app.route('/api/vault/<vault_id>/withdraw', methods=['POST'])
    def withdraw(vault_id):
        """Withdraw entire balance to owner once unlocked"""
        vault = get_vault_or_none(vault_id)
        if vault is None:
            return _error('Vault not found', 'NotFound', 404)

        data = request.get_json(silent=True) or {}
        caller = data.get('caller', '')

        if not signature_ok(vault_id, caller, data.get('signature'), 'withdraw'):
            app.logger.warning("Bad signature for withdraw on vault %s", vault_id)
            return _error('Invalid signature', 'InvalidSignature', 403)

        amount = vault.withdraw(caller)

        return jsonify({
            'success': True,
            'withdrawal_amount': amount,
            'remaining_balance': vault.get_balance(),
            'owner_balance': ledger.balance_of(vault.owner)
        })

    @app.route('/api/vault/<vault_id>/events')
    def get_events(vault_id):
        """Get committed vault events"""
        vault = get_vault_or_none(vault_id)
        if vault is None:
            return _error('Vault not found', 'NotFound', 404)

        name = request.args.get('name')
        return jsonify({'events': [r.to_dict() for r in vault.events.records(name)]})

    @app.route('/api/ledger/<identity>')
    def get_ledger_balance(identity):
        """Get external balance of an identity"""
        return jsonify({'identity': identity, 'balance': ledger.balance_of(identity)})

    return app


app = create_app()

if __name__ == "__main__":
    config = app.config['VAULT_CONFIG']
    configure_logging(config.log_level)
    app.run(
        host=config.host,
        port=config.port,
        debug=False
    )
