"""
Reconciliation of stored balances against the ledger.

Replays an account's entries in version order and compares the result with
the stored balance and with each entry's ``balance_after``.
"""

import logging

from apps.ledger.models import Account, LedgerEntry

from .account_store import get_account

logger = logging.getLogger(__name__)


def reconcile_account(*, account_id) -> dict:
    """
    Replay an account's ledger and compare it with the stored balance.

    Returns:
        dict: {
            'account': Account,
            'balance': int,               # stored balance
            'replayed_balance': int,      # sum of signed entry amounts
            'entry_count': int,
            'is_consistent': bool,
            'mismatched_entries': list,   # ids whose balance_after disagrees
        }

    Raises:
        NotFoundError: If the account does not exist
    """
    account = get_account(user_id=account_id, active_only=False)
    entries = (
        LedgerEntry.objects
        .filter(account=account)
        .order_by('account_version')
        .only('id', 'kind', 'amount', 'balance_after', 'account_version')
    )

    running = 0
    count = 0
    mismatched = []
    for entry in entries.iterator():
        running += entry.signed_amount
        count += 1
        if entry.balance_after != running:
            mismatched.append(entry.pk)

    is_consistent = running == account.balance and not mismatched
    if not is_consistent:
        logger.error(
            "Ledger mismatch on account %s: stored=%d replayed=%d bad_entries=%d",
            account.pk, account.balance, running, len(mismatched),
        )

    return {
        'account': account,
        'balance': account.balance,
        'replayed_balance': running,
        'entry_count': count,
        'is_consistent': is_consistent,
        'mismatched_entries': mismatched,
    }


def reconcile_all() -> list:
    """Reconcile every account, active or not. Returns the reports of inconsistent ones."""
    reports = []
    for account_id in Account.objects.order_by('pk').values_list('pk', flat=True).iterator():
        report = reconcile_account(account_id=account_id)
        if not report['is_consistent']:
            reports.append(report)
    return reports
