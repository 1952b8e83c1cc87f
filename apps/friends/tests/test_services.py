"""
Service layer tests for the friend graph.

Tests:
- Sending requests (duplicates in both directions, self, unknown recipient)
- Responding (accept, decline, wrong recipient, already resolved)
- Idempotent sends and responses
- Listing friends and pending requests
"""

import pytest
from uuid import uuid4

from apps.core.exceptions import DuplicateRequestError, InvalidRequestError, NotFoundError
from apps.friends.models import FriendRequest, FriendRequestStatus, Friendship
from apps.friends.services import (
    send_request,
    respond_to_request,
    list_friends,
    list_pending_requests,
    are_friends,
)
from apps.ledger.models import Account
from apps.ledger.services import deactivate_account


def befriend(a, b):
    friend_request, _ = send_request(from_user=a, to_user_id=b.id, idempotency_key=f'req-{b.id}')
    respond_to_request(request_id=friend_request.id, user=b, accept=True, idempotency_key=f'ok-{a.id}')
    return friend_request


@pytest.mark.django_db
class TestSendRequest:
    """Tests for send_request."""

    def test_send_request(self, alice, bob):
        friend_request, replayed = send_request(from_user=alice, to_user_id=bob.id, idempotency_key='k1')

        assert replayed is False
        assert friend_request.status == FriendRequestStatus.PENDING
        assert friend_request.from_user == alice
        assert friend_request.to_user == bob
        assert friend_request.responded_at is None

    def test_send_request_replay(self, alice, bob):
        """Resending with the same key returns the original request."""
        first, _ = send_request(from_user=alice, to_user_id=bob.id, idempotency_key='k1')
        second, replayed = send_request(from_user=alice, to_user_id=bob.id, idempotency_key='k1')

        assert replayed is True
        assert second.pk == first.pk
        assert FriendRequest.objects.count() == 1

    def test_duplicate_pending_same_direction(self, alice, bob):
        send_request(from_user=alice, to_user_id=bob.id, idempotency_key='k1')

        with pytest.raises(DuplicateRequestError):
            send_request(from_user=alice, to_user_id=bob.id, idempotency_key='k2')

    def test_duplicate_pending_reverse_direction(self, alice, bob):
        """A pending request blocks one in the other direction too."""
        send_request(from_user=alice, to_user_id=bob.id, idempotency_key='k1')

        with pytest.raises(DuplicateRequestError):
            send_request(from_user=bob, to_user_id=alice.id, idempotency_key='k1')

    def test_already_friends(self, alice, bob):
        befriend(alice, bob)

        with pytest.raises(DuplicateRequestError):
            send_request(from_user=bob, to_user_id=alice.id, idempotency_key='again')

    def test_request_after_decline_allowed(self, alice, bob):
        """Declined requests do not block a new one."""
        first, _ = send_request(from_user=alice, to_user_id=bob.id, idempotency_key='k1')
        respond_to_request(request_id=first.id, user=bob, accept=False, idempotency_key='no')

        second, replayed = send_request(from_user=alice, to_user_id=bob.id, idempotency_key='k2')

        assert replayed is False
        assert second.pk != first.pk

    def test_request_to_self(self, alice):
        with pytest.raises(InvalidRequestError):
            send_request(from_user=alice, to_user_id=alice.id, idempotency_key='me')

    def test_request_to_unknown_user(self, alice):
        with pytest.raises(NotFoundError):
            send_request(from_user=alice, to_user_id=uuid4(), idempotency_key='ghost')

    def test_request_to_deactivated_user(self, alice, bob):
        deactivate_account(user=bob)

        with pytest.raises(NotFoundError):
            send_request(from_user=alice, to_user_id=bob.id, idempotency_key='gone')


@pytest.mark.django_db
class TestRespondToRequest:
    """Tests for respond_to_request."""

    def test_accept_creates_friendship_both_ways(self, alice, bob):
        friend_request, _ = send_request(from_user=alice, to_user_id=bob.id, idempotency_key='k1')

        updated, replayed = respond_to_request(
            request_id=friend_request.id, user=bob, accept=True, idempotency_key='yes'
        )

        assert replayed is False
        assert updated.status == FriendRequestStatus.ACCEPTED
        assert updated.responded_at is not None
        assert are_friends(user_id=alice.id, other_id=bob.id)
        assert are_friends(user_id=bob.id, other_id=alice.id)
        assert Friendship.objects.count() == 2

    def test_decline_creates_no_friendship(self, alice, bob):
        friend_request, _ = send_request(from_user=alice, to_user_id=bob.id, idempotency_key='k1')

        updated, _ = respond_to_request(
            request_id=friend_request.id, user=bob, accept=False, idempotency_key='no'
        )

        assert updated.status == FriendRequestStatus.DECLINED
        assert not are_friends(user_id=alice.id, other_id=bob.id)

    def test_sender_cannot_respond(self, alice, bob):
        """Only the addressee can respond; others see NotFound."""
        friend_request, _ = send_request(from_user=alice, to_user_id=bob.id, idempotency_key='k1')

        with pytest.raises(NotFoundError):
            respond_to_request(request_id=friend_request.id, user=alice, accept=True, idempotency_key='x')

    def test_stranger_cannot_respond(self, alice, bob, carol):
        friend_request, _ = send_request(from_user=alice, to_user_id=bob.id, idempotency_key='k1')

        with pytest.raises(NotFoundError):
            respond_to_request(request_id=friend_request.id, user=carol, accept=True, idempotency_key='x')

    def test_already_resolved(self, alice, bob):
        friend_request, _ = send_request(from_user=alice, to_user_id=bob.id, idempotency_key='k1')
        respond_to_request(request_id=friend_request.id, user=bob, accept=False, idempotency_key='no')

        with pytest.raises(NotFoundError):
            respond_to_request(request_id=friend_request.id, user=bob, accept=True, idempotency_key='changed-mind')

    def test_response_replay(self, alice, bob):
        """Retrying a response with its key returns the resolved request."""
        friend_request, _ = send_request(from_user=alice, to_user_id=bob.id, idempotency_key='k1')
        respond_to_request(request_id=friend_request.id, user=bob, accept=True, idempotency_key='yes')

        updated, replayed = respond_to_request(
            request_id=friend_request.id, user=bob, accept=True, idempotency_key='yes'
        )

        assert replayed is True
        assert updated.status == FriendRequestStatus.ACCEPTED
        assert Friendship.objects.count() == 2

    def test_unknown_request(self, bob):
        with pytest.raises(NotFoundError):
            respond_to_request(request_id=uuid4(), user=bob, accept=True, idempotency_key='x')


@pytest.mark.django_db
class TestListing:
    """Tests for list_friends, list_pending_requests and are_friends."""

    def test_list_friends_by_balance(self, alice, bob, carol):
        """Friends come back as a leaderboard, richest first."""
        befriend(alice, bob)
        befriend(alice, carol)
        Account.objects.filter(pk=bob.pk).update(balance=10)
        Account.objects.filter(pk=carol.pk).update(balance=500)

        friends = list(list_friends(user=alice))

        assert friends == [carol, bob]
        assert friends[0].account.balance == 500

    def test_list_friends_skips_deactivated(self, alice, bob, carol):
        befriend(alice, bob)
        befriend(alice, carol)
        deactivate_account(user=carol)

        assert list(list_friends(user=alice)) == [bob]

    def test_list_friends_empty(self, alice):
        assert list(list_friends(user=alice)) == []

    def test_pending_directions(self, alice, bob, carol):
        outgoing, _ = send_request(from_user=alice, to_user_id=bob.id, idempotency_key='k1')
        incoming, _ = send_request(from_user=carol, to_user_id=alice.id, idempotency_key='k2')

        assert list(list_pending_requests(user=alice, direction='outgoing')) == [outgoing]
        assert list(list_pending_requests(user=alice, direction='incoming')) == [incoming]
        assert set(list_pending_requests(user=alice)) == {outgoing, incoming}

    def test_resolved_requests_not_pending(self, alice, bob):
        befriend(alice, bob)

        assert list(list_pending_requests(user=bob)) == []

    def test_invalid_direction(self, alice):
        with pytest.raises(InvalidRequestError):
            list_pending_requests(user=alice, direction='sideways')

    def test_are_friends_false_for_strangers(self, alice, bob):
        assert are_friends(user_id=alice.id, other_id=bob.id) is False
