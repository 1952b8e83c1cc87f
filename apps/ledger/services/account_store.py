"""
Account store.

Creates, looks up and deactivates points accounts. Balances are never
touched here; only the ledger engine changes them.
"""

import logging
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from apps.communities.services import get_community
from apps.core.exceptions import NotFoundError
from apps.ledger.models import Account

logger = logging.getLogger(__name__)


def open_account(*, user, community_id: str) -> Account:
    """
    Open a zero-balance account for a newly registered user.

    Raises:
        NotFoundError: If the community does not exist
    """
    community = get_community(community_id=community_id)
    account = Account.objects.create(user=user, community=community, balance=0, version=0)
    logger.info("Opened account %s in community %s", user.pk, community.pk)
    return account


def get_account(*, user_id, active_only: bool = True) -> Account:
    """
    Get an account by its user id.

    Raises:
        NotFoundError: If the account does not exist or is deactivated
    """
    queryset = Account.objects.select_related('user', 'community')
    if active_only:
        queryset = queryset.filter(is_active=True)
    try:
        return queryset.get(pk=user_id)
    except (Account.DoesNotExist, ValidationError, ValueError):
        raise NotFoundError(f"Account {user_id} not found")


@transaction.atomic
def change_community(*, user, community_id: str) -> Account:
    """Move an active account to another community."""
    community = get_community(community_id=community_id)
    account = _lock_active_account(user.pk)

    Account.objects.filter(pk=account.pk).update(
        community=community,
        version=F('version') + 1,
        updated_at=timezone.now(),
    )
    account.refresh_from_db()
    logger.info("Account %s moved to community %s", account.pk, community.pk)
    return account


@transaction.atomic
def deactivate_account(*, user) -> Account:
    """
    Deactivate an account and its user. Entries and balance are kept.

    Raises:
        NotFoundError: If the account does not exist or is already inactive
    """
    account = _lock_active_account(user.pk)

    Account.objects.filter(pk=account.pk).update(
        is_active=False,
        version=F('version') + 1,
        updated_at=timezone.now(),
    )
    user.is_active = False
    user.save(update_fields=['is_active'])

    account.refresh_from_db()
    logger.info("Account %s deactivated with balance %d", account.pk, account.balance)
    return account


def _lock_active_account(user_id: UUID) -> Account:
    try:
        return (
            Account.objects
            .select_for_update()
            .get(pk=user_id, is_active=True)
        )
    except Account.DoesNotExist:
        raise NotFoundError(f"Account {user_id} not found")
