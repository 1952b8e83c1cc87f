"""
Friend graph.

Friend requests move Pending -> Accepted | Declined exactly once. Accepting
writes the friendship in both directions in the same transaction.
"""

import logging

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction, IntegrityError
from django.db.models import QuerySet, Q
from django.utils import timezone

from apps.core.exceptions import (
    DuplicateRequestError,
    InvalidRequestError,
    NotFoundError,
)
from apps.friends.models import FriendRequest, FriendRequestStatus, Friendship
from apps.ledger.services import get_account

logger = logging.getLogger(__name__)

User = get_user_model()

DIRECTIONS = ('all', 'incoming', 'outgoing')


def send_request(*, from_user: User, to_user_id, idempotency_key: str):
    """
    Ask another member to become friends.

    Args:
        from_user: Member sending the request
        to_user_id (UUID): Recipient's user id
        idempotency_key: Client key; resending with the same key returns
            the original request

    Returns:
        tuple: ``(FriendRequest, replayed)``

    Raises:
        InvalidRequestError: If the recipient is the sender
        NotFoundError: If the recipient does not exist or is inactive
        DuplicateRequestError: If a pending request exists between the pair
            in either direction, or they are already friends
    """
    replay = _find_sent_request(from_user, idempotency_key)
    if replay is not None:
        return replay, True

    if str(to_user_id) == str(from_user.pk):
        raise InvalidRequestError("You cannot send a friend request to yourself")

    recipient = get_account(user_id=to_user_id).user

    try:
        with transaction.atomic():
            if are_friends(user_id=from_user.pk, other_id=recipient.pk):
                raise DuplicateRequestError("You are already friends")

            pair_key = FriendRequest.make_pair_key(from_user.pk, recipient.pk)
            if FriendRequest.objects.filter(
                pair_key=pair_key,
                status=FriendRequestStatus.PENDING,
            ).exists():
                raise DuplicateRequestError()

            friend_request = FriendRequest.objects.create(
                from_user=from_user,
                to_user=recipient,
                pair_key=pair_key,
                idempotency_key=idempotency_key,
            )
    except IntegrityError:
        replay = _find_sent_request(from_user, idempotency_key)
        if replay is not None:
            return replay, True
        raise DuplicateRequestError()

    logger.info("Friend request %s: %s -> %s", friend_request.pk, from_user.pk, recipient.pk)
    return friend_request, False


def respond_to_request(*, request_id, user: User, accept: bool, idempotency_key: str):
    """
    Accept or decline a pending request addressed to ``user``.

    Returns:
        tuple: ``(FriendRequest, replayed)``. A retry with the key that
        resolved the request returns it unchanged.

    Raises:
        NotFoundError: If the request does not exist, is not addressed to
            ``user``, or was already resolved
    """
    with transaction.atomic():
        try:
            friend_request = (
                FriendRequest.objects
                .select_for_update()
                .select_related('from_user', 'to_user')
                .get(pk=request_id, to_user=user)
            )
        except (FriendRequest.DoesNotExist, ValidationError, ValueError):
            raise NotFoundError("Friend request not found")

        if friend_request.status != FriendRequestStatus.PENDING:
            if friend_request.response_idempotency_key == idempotency_key:
                return friend_request, True
            raise NotFoundError("Friend request not found")

        friend_request.status = (
            FriendRequestStatus.ACCEPTED if accept else FriendRequestStatus.DECLINED
        )
        friend_request.responded_at = timezone.now()
        friend_request.response_idempotency_key = idempotency_key
        friend_request.save(update_fields=['status', 'responded_at', 'response_idempotency_key'])

        if accept:
            _create_friendship(friend_request.from_user, friend_request.to_user)

    logger.info(
        "Friend request %s %s by %s",
        friend_request.pk, friend_request.status, user.pk,
    )
    return friend_request, False


def list_friends(*, user: User) -> QuerySet:
    """Active friends of ``user`` with their accounts, highest balance first."""
    return (
        User.objects
        .filter(
            pk__in=Friendship.objects.filter(user=user).values('friend_id'),
            account__is_active=True,
        )
        .select_related('account')
        .order_by('-account__balance', 'display_name')
    )


def list_pending_requests(*, user: User, direction: str = 'all') -> QuerySet:
    """
    Pending requests involving ``user``.

    Args:
        direction: ``incoming``, ``outgoing`` or ``all``

    Raises:
        InvalidRequestError: If direction is not one of the above
    """
    if direction not in DIRECTIONS:
        raise InvalidRequestError(f"direction must be one of: {', '.join(DIRECTIONS)}")

    queryset = (
        FriendRequest.objects
        .filter(status=FriendRequestStatus.PENDING)
        .select_related('from_user', 'to_user')
    )
    if direction == 'incoming':
        return queryset.filter(to_user=user)
    if direction == 'outgoing':
        return queryset.filter(from_user=user)
    return queryset.filter(Q(to_user=user) | Q(from_user=user))


def are_friends(*, user_id, other_id) -> bool:
    return Friendship.objects.filter(user_id=user_id, friend_id=other_id).exists()


def _find_sent_request(from_user, idempotency_key):
    friend_request = (
        FriendRequest.objects
        .select_related('from_user', 'to_user')
        .filter(from_user=from_user, idempotency_key=idempotency_key)
        .first()
    )
    if friend_request is not None:
        logger.info("Replaying friend request %s (key %s)", friend_request.pk, idempotency_key)
    return friend_request


def _create_friendship(user, friend):
    Friendship.objects.get_or_create(user=user, friend=friend)
    Friendship.objects.get_or_create(user=friend, friend=user)
