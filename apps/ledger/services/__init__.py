"""Ledger services: accounts, balance-changing operations and reconciliation."""

from .account_store import (
    open_account,
    get_account,
    change_community,
    deactivate_account,
)
from .ledger_engine import (
    calculate_points,
    earn,
    redeem,
    transfer,
    get_balance,
    list_entries,
)
from .reconciliation import reconcile_account, reconcile_all
from .retry import run_with_retries

__all__ = [
    # Accounts
    'open_account',
    'get_account',
    'change_community',
    'deactivate_account',
    # Operations
    'calculate_points',
    'earn',
    'redeem',
    'transfer',
    'get_balance',
    'list_entries',
    # Reconciliation
    'reconcile_account',
    'reconcile_all',
    'run_with_retries',
]
