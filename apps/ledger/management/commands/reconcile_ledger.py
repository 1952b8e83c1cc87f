"""
Management command to check stored balances against the ledger.

Replays each account's entries and reports accounts whose stored balance or
per-entry ``balance_after`` disagrees with the replay. Exits non-zero when a
mismatch is found, so it can run from cron or CI.

Usage:
    python manage.py reconcile_ledger
    python manage.py reconcile_ledger --account <user-uuid>
"""

from django.core.management.base import BaseCommand, CommandError

from apps.ledger.models import Account
from apps.ledger.services import reconcile_account, reconcile_all


class Command(BaseCommand):
    help = 'Replay ledger entries and report balance mismatches'

    def add_arguments(self, parser):
        parser.add_argument(
            '--account',
            help='Only reconcile this account (user id)',
        )

    def handle(self, *args, **options):
        account_id = options.get('account')

        if account_id:
            report = reconcile_account(account_id=account_id)
            reports = [] if report['is_consistent'] else [report]
            checked = 1
        else:
            checked = Account.objects.count()
            reports = reconcile_all()

        if not reports:
            self.stdout.write(
                self.style.SUCCESS(f'Checked {checked} account(s): ledger is consistent.')
            )
            return

        self.stdout.write(f'\nFound {len(reports)} inconsistent account(s):\n')
        for report in reports:
            self.stdout.write(
                f"  - {report['account'].pk} | stored {report['balance']} | "
                f"replayed {report['replayed_balance']} | "
                f"{len(report['mismatched_entries'])} bad entr(ies) of {report['entry_count']}"
            )

        raise CommandError(f'{len(reports)} account(s) do not match their ledger')
