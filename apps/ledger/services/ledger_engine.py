"""
Ledger Engine
=============

Applies every balance-changing operation: earning points on a purchase,
redeeming points at a shop, and transferring points between members.

Each operation:
    1. Returns the original entry if the caller's idempotency key was
       already used by this account for the same operation (a retried
       request never applies twice). A key bound to another operation is
       rejected.
    2. Validates the amount and the parties.
    3. Inside one ``transaction.atomic()`` block, locks the touched accounts
       with ``select_for_update()`` in ascending id order, writes the new
       balance with a check-and-set on ``version``, and appends the entries.
    4. Re-runs the whole transaction on version conflicts or transient
       database errors (see ``retry.run_with_retries``).

Example:
    Earning and spending points::

        from apps.ledger.services import earn, redeem

        entry, replayed = earn(
            account_id=user.id,
            coffee_shop_id=shop.id,
            purchase_amount=Decimal('4.50'),
            idempotency_key='purchase-7f3a',
        )
        # Shop gives 15% back: 4.50 * 15 = 67 points
        print(entry.amount, entry.balance_after)

        redeem(account_id=user.id, coffee_shop_id=shop.id, amount=50,
               idempotency_key='redeem-19c2')
"""

import logging
import uuid
from decimal import Decimal, InvalidOperation, ROUND_DOWN
from uuid import UUID

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction, IntegrityError
from django.db.models import QuerySet
from django.utils import timezone

from apps.communities.services import get_coffee_shop
from apps.core.exceptions import (
    ConflictError,
    InsufficientBalanceError,
    InvalidAmountError,
    InvalidRequestError,
    NotFoundError,
    SelfTransferError,
    UnauthorizedError,
)
from apps.ledger.models import Account, EntryKind, LedgerEntry, INITIATOR_KINDS

from .retry import run_with_retries

logger = logging.getLogger(__name__)

MAX_IDEMPOTENCY_KEY_LENGTH = 64


def calculate_points(purchase_amount: Decimal, points_back_percentage: int) -> int:
    """
    Points awarded for a purchase.

    ``purchase_amount * points_back_percentage``, rounded down. With two
    decimal places on the amount this is one point per cent of cash back:
    a 4.50 purchase at a 15% shop earns 67 points.
    """
    points = Decimal(purchase_amount) * Decimal(points_back_percentage)
    return int(points.to_integral_value(rounding=ROUND_DOWN))


def earn(
    *,
    account_id,
    coffee_shop_id,
    purchase_amount,
    idempotency_key: str,
    description: str = '',
):
    """
    Credit points for a purchase at a coffee shop.

    Args:
        account_id (UUID): Account (user id) earning the points.
        coffee_shop_id (UUID): Shop where the purchase was made.
        purchase_amount (Decimal | str): Purchase total in currency units.
        idempotency_key (str): Client-supplied key, unique per request.
        description (str, optional): Entry description. Defaults to
            "Purchase at <shop name>".

    Returns:
        tuple: ``(LedgerEntry, replayed)``. ``entry.amount`` is the number of
        points awarded, ``entry.balance_after`` the new balance. ``replayed``
        is True when the key had already been used.

    Raises:
        InvalidAmountError: If the purchase amount is not positive or earns
            no points.
        NotFoundError: If the account or the shop does not exist.
        InvalidRequestError: If the key was already used by a redeem or
            a transfer.
        UnavailableError: If the write kept conflicting.
    """
    _validate_idempotency_key(idempotency_key)
    replay = _find_replay(account_id, idempotency_key, EntryKind.EARN)
    if replay is not None:
        return replay, True

    purchase_amount = _to_decimal(purchase_amount)
    if purchase_amount <= 0:
        raise InvalidAmountError("Purchase amount must be greater than zero")

    shop = get_coffee_shop(shop_id=coffee_shop_id)
    points = calculate_points(purchase_amount, shop.points_back_percentage)
    if points <= 0:
        raise InvalidAmountError("Purchase amount is too small to earn points")

    description = description or f"Purchase at {shop.name}"

    def operation():
        with transaction.atomic():
            (account,) = _lock_accounts(account_id)
            _apply_delta(account, points)
            return _append_entry(
                account,
                kind=EntryKind.EARN,
                amount=points,
                coffee_shop=shop,
                description=description,
                idempotency_key=idempotency_key,
            )

    entry, replayed = _execute(
        label='earn',
        kind=EntryKind.EARN,
        account_id=account_id,
        idempotency_key=idempotency_key,
        operation=operation,
    )
    if not replayed:
        logger.info(
            "earn: account=%s shop=%s purchase=%s points=%d balance=%d",
            account_id, shop.pk, purchase_amount, points, entry.balance_after,
        )
    return entry, replayed


def redeem(
    *,
    account_id,
    coffee_shop_id,
    amount,
    idempotency_key: str,
    description: str = '',
):
    """
    Spend points at a coffee shop.

    Returns:
        tuple: ``(LedgerEntry, replayed)``.

    Raises:
        InvalidAmountError: If amount is not a positive integer.
        InsufficientBalanceError: If amount exceeds the balance.
        NotFoundError: If the account or the shop does not exist.
        UnavailableError: If the write kept conflicting.
    """
    _validate_idempotency_key(idempotency_key)
    replay = _find_replay(account_id, idempotency_key, EntryKind.REDEEM)
    if replay is not None:
        return replay, True

    amount = _to_points(amount)
    shop = get_coffee_shop(shop_id=coffee_shop_id)
    description = description or f"Redeemed at {shop.name}"

    def operation():
        with transaction.atomic():
            (account,) = _lock_accounts(account_id)
            _apply_delta(account, -amount)
            return _append_entry(
                account,
                kind=EntryKind.REDEEM,
                amount=amount,
                coffee_shop=shop,
                description=description,
                idempotency_key=idempotency_key,
            )

    entry, replayed = _execute(
        label='redeem',
        kind=EntryKind.REDEEM,
        account_id=account_id,
        idempotency_key=idempotency_key,
        operation=operation,
    )
    if not replayed:
        logger.info(
            "redeem: account=%s shop=%s points=%d balance=%d",
            account_id, shop.pk, amount, entry.balance_after,
        )
    return entry, replayed


def transfer(
    *,
    sender_id,
    receiver_id,
    amount,
    idempotency_key: str,
    description: str = '',
):
    """
    Move points from one member to another.

    The sender's Send entry and the receiver's Receive entry share a
    correlation id and are committed in the same transaction. Both accounts
    are locked in ascending id order, so two opposite transfers between the
    same pair cannot deadlock.

    Returns:
        tuple: ``(LedgerEntry, replayed)`` where the entry is the sender's
        Send entry.

    Raises:
        InvalidAmountError: If amount is not a positive integer.
        SelfTransferError: If sender and receiver are the same account.
        NotFoundError: If either account does not exist or is inactive.
        UnauthorizedError: If transfers require friendship and the two
            members are not friends.
        InsufficientBalanceError: If amount exceeds the sender's balance.
        UnavailableError: If the write kept conflicting.
    """
    _validate_idempotency_key(idempotency_key)
    replay = _find_replay(sender_id, idempotency_key, EntryKind.SEND)
    if replay is not None:
        return replay, True

    amount = _to_points(amount)
    sender_id = _to_uuid(sender_id)
    receiver_id = _to_uuid(receiver_id)
    if sender_id == receiver_id:
        raise SelfTransferError("Cannot transfer points to yourself")

    _get_active_account(receiver_id)
    if settings.LEDGER_REQUIRE_FRIENDSHIP:
        from apps.friends.services import are_friends

        if not are_friends(user_id=sender_id, other_id=receiver_id):
            raise UnauthorizedError("Points can only be sent to friends")

    correlation_id = uuid.uuid4()

    def operation():
        with transaction.atomic():
            accounts = {a.pk: a for a in _lock_accounts(sender_id, receiver_id)}
            sender, receiver = accounts[sender_id], accounts[receiver_id]

            _apply_delta(sender, -amount)
            _apply_delta(receiver, amount)

            sent = _append_entry(
                sender,
                kind=EntryKind.SEND,
                amount=amount,
                counterparty=receiver,
                correlation_id=correlation_id,
                description=description or f"Sent to {receiver.user.get_display_name()}",
                idempotency_key=idempotency_key,
            )
            _append_entry(
                receiver,
                kind=EntryKind.RECEIVE,
                amount=amount,
                counterparty=sender,
                correlation_id=correlation_id,
                description=description or f"Received from {sender.user.get_display_name()}",
                idempotency_key=idempotency_key,
            )
            return sent

    entry, replayed = _execute(
        label='transfer',
        kind=EntryKind.SEND,
        account_id=sender_id,
        idempotency_key=idempotency_key,
        operation=operation,
    )
    if not replayed:
        logger.info(
            "transfer: sender=%s receiver=%s points=%d correlation=%s",
            sender_id, receiver_id, amount, entry.correlation_id,
        )
    return entry, replayed


def get_balance(*, account_id) -> Account:
    """Current account state (balance and version)."""
    return _get_active_account(account_id)


def list_entries(*, account_id) -> QuerySet[LedgerEntry]:
    """Transaction history of an account, newest first."""
    account = _get_active_account(account_id, active_only=False)
    return (
        LedgerEntry.objects
        .filter(account=account)
        .select_related('coffee_shop', 'counterparty__user')
        .order_by('-created_at', '-account_version')
    )


# =============================================================================
# Internals
# =============================================================================

def _execute(*, label, kind, account_id, idempotency_key, operation):
    """
    Run ``operation`` with retries, resolving idempotency races.

    When a concurrent request with the same key commits first, the unique
    constraint rejects our insert; the winner's entry is returned instead.
    """
    def attempt():
        try:
            return operation(), False
        except IntegrityError:
            replay = _find_replay(account_id, idempotency_key, kind)
            if replay is None:
                raise
            return replay, True

    return run_with_retries(attempt, label=label)


def _find_replay(account_id, idempotency_key, kind):
    """
    Entry previously written by ``account_id`` under ``idempotency_key``.

    Raises:
        InvalidRequestError: If the key belongs to an operation of another kind.
    """
    try:
        entry = (
            LedgerEntry.objects
            .select_related('coffee_shop', 'counterparty__user')
            .filter(
                account_id=account_id,
                idempotency_key=idempotency_key,
                kind__in=INITIATOR_KINDS,
            )
            .first()
        )
    except (ValidationError, ValueError, TypeError):
        return None
    if entry is not None and entry.kind != kind:
        logger.warning(
            "Key %s of account %s is bound to %s %s, refusing %s",
            idempotency_key, account_id, entry.kind, entry.pk, kind,
        )
        raise InvalidRequestError("idempotency_key already used by another operation")
    if entry is not None:
        logger.info(
            "Replaying %s %s for account %s (key %s)",
            entry.kind, entry.pk, account_id, idempotency_key,
        )
    return entry


def _lock_accounts(*account_ids):
    """
    Lock the given active accounts in ascending id order.

    Returns the accounts in the order the ids were given.
    """
    ids = [_to_uuid(account_id) for account_id in account_ids]
    locked = {}
    for account_id in sorted(set(ids)):
        try:
            locked[account_id] = (
                Account.objects
                .select_for_update()
                .select_related('user')
                .get(pk=account_id, is_active=True)
            )
        except Account.DoesNotExist:
            raise NotFoundError(f"Account {account_id} not found")
    return [locked[account_id] for account_id in ids]


def _apply_delta(account: Account, delta: int) -> None:
    """
    Check-and-set the balance on ``account.version``.

    Raises:
        InsufficientBalanceError: If the new balance would be negative.
        ConflictError: If the row changed since it was read.
    """
    new_balance = account.balance + delta
    if new_balance < 0:
        raise InsufficientBalanceError(
            f"Insufficient balance: have {account.balance}, need {-delta}"
        )

    updated = (
        Account.objects
        .filter(pk=account.pk, version=account.version, is_active=True)
        .update(
            balance=new_balance,
            version=account.version + 1,
            updated_at=timezone.now(),
        )
    )
    if updated != 1:
        raise ConflictError(f"Account {account.pk} was modified concurrently")

    account.balance = new_balance
    account.version += 1


def _append_entry(account: Account, *, kind, amount, idempotency_key, description='',
                  coffee_shop=None, counterparty=None, correlation_id=None) -> LedgerEntry:
    return LedgerEntry.objects.create(
        account=account,
        counterparty=counterparty,
        coffee_shop=coffee_shop,
        correlation_id=correlation_id or uuid.uuid4(),
        kind=kind,
        amount=amount,
        balance_after=account.balance,
        account_version=account.version,
        description=description[:255],
        idempotency_key=idempotency_key,
    )


def _get_active_account(account_id, active_only=True) -> Account:
    queryset = Account.objects.select_related('user')
    if active_only:
        queryset = queryset.filter(is_active=True)
    try:
        return queryset.get(pk=_to_uuid(account_id))
    except Account.DoesNotExist:
        raise NotFoundError(f"Account {account_id} not found")


def _validate_idempotency_key(idempotency_key):
    if not idempotency_key or not isinstance(idempotency_key, str):
        raise InvalidRequestError("idempotency_key is required")
    if len(idempotency_key) > MAX_IDEMPOTENCY_KEY_LENGTH:
        raise InvalidRequestError(
            f"idempotency_key must be at most {MAX_IDEMPOTENCY_KEY_LENGTH} characters"
        )


def _to_uuid(value) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (ValueError, TypeError, AttributeError):
        raise NotFoundError(f"Account {value} not found")


def _to_decimal(value) -> Decimal:
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmountError("Purchase amount must be a number")
    if not amount.is_finite():
        raise InvalidAmountError("Purchase amount must be a number")
    return amount


def _to_points(value) -> int:
    """Validate a point amount: a positive whole number."""
    if isinstance(value, bool):
        raise InvalidAmountError("Amount must be a whole number of points")
    if isinstance(value, int):
        amount = value
    else:
        try:
            decimal_value = Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise InvalidAmountError("Amount must be a whole number of points")
        if not decimal_value.is_finite() or decimal_value != decimal_value.to_integral_value():
            raise InvalidAmountError("Amount must be a whole number of points")
        amount = int(decimal_value)
    if amount <= 0:
        raise InvalidAmountError("Amount must be greater than zero")
    return amount
