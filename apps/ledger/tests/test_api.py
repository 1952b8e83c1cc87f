import pytest
from uuid import uuid4
from django.urls import reverse
from rest_framework import status
from rest_framework_simplejwt.tokens import RefreshToken

from apps.ledger.models import Account, LedgerEntry


def auth(client, user):
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


# =============================================================================
# Earn Tests
# =============================================================================

@pytest.mark.django_db
class TestEarnAPI:
    """Tests for POST /api/ledger/earn/"""

    def test_earn_success(self, authenticated_client, member, blue_bottle):
        """Earning returns points awarded, new balance and the entry."""
        url = reverse('ledger:earn')
        data = {
            'coffee_shop_id': str(blue_bottle.id),
            'purchase_amount': '4.50',
            'idempotency_key': 'purchase-1',
        }
        response = authenticated_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['points_awarded'] == 67
        assert response.data['balance'] == 67
        assert response.data['replayed'] is False
        assert response.data['entry']['kind'] == 'earn'
        assert response.data['entry']['coffee_shop_name'] == 'Blue Bottle Coffee'

    def test_earn_replay_returns_200(self, authenticated_client, member, blue_bottle):
        """Retrying with the same key returns the original body."""
        url = reverse('ledger:earn')
        data = {
            'coffee_shop_id': str(blue_bottle.id),
            'purchase_amount': '4.50',
            'idempotency_key': 'purchase-retry',
        }
        first = authenticated_client.post(url, data, format='json')
        second = authenticated_client.post(url, data, format='json')

        assert second.status_code == status.HTTP_200_OK
        assert second.data['replayed'] is True
        assert second.data['entry']['id'] == first.data['entry']['id']
        assert second.data['balance'] == 67
        assert Account.objects.get(pk=member.pk).balance == 67

    def test_earn_requires_authentication(self, api_client, blue_bottle):
        url = reverse('ledger:earn')
        response = api_client.post(url, {
            'coffee_shop_id': str(blue_bottle.id),
            'purchase_amount': '4.50',
            'idempotency_key': 'anon',
        }, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_earn_requires_idempotency_key(self, authenticated_client, blue_bottle):
        url = reverse('ledger:earn')
        response = authenticated_client.post(url, {
            'coffee_shop_id': str(blue_bottle.id),
            'purchase_amount': '4.50',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'idempotency_key' in response.data

    def test_earn_zero_amount(self, authenticated_client, blue_bottle):
        url = reverse('ledger:earn')
        response = authenticated_client.post(url, {
            'coffee_shop_id': str(blue_bottle.id),
            'purchase_amount': '0.00',
            'idempotency_key': 'zero',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'invalid_amount'

    def test_earn_for_another_account_rejected(self, authenticated_client, other_member, blue_bottle):
        """Naming a different acting account is forbidden."""
        url = reverse('ledger:earn')
        response = authenticated_client.post(url, {
            'account_id': str(other_member.id),
            'coffee_shop_id': str(blue_bottle.id),
            'purchase_amount': '4.50',
            'idempotency_key': 'spoof',
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['error'] == 'unauthorized'
        assert Account.objects.get(pk=other_member.pk).balance == 0

    def test_earn_own_account_id_allowed(self, authenticated_client, member, blue_bottle):
        url = reverse('ledger:earn')
        response = authenticated_client.post(url, {
            'account_id': str(member.id),
            'coffee_shop_id': str(blue_bottle.id),
            'purchase_amount': '4.50',
            'idempotency_key': 'own',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED

    def test_earn_unknown_shop(self, authenticated_client):
        url = reverse('ledger:earn')
        response = authenticated_client.post(url, {
            'coffee_shop_id': str(uuid4()),
            'purchase_amount': '4.50',
            'idempotency_key': 'ghost-shop',
        }, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error'] == 'not_found'

    def test_earn_with_key_of_a_redeem_rejected(self, authenticated_client, member, blue_bottle, fund):
        """Reusing a redeem's key for an earn awards nothing and is refused."""
        fund(member, 100)
        authenticated_client.post(reverse('ledger:redeem'), {
            'coffee_shop_id': str(blue_bottle.id),
            'amount': 40,
            'idempotency_key': 'k1',
        }, format='json')

        response = authenticated_client.post(reverse('ledger:earn'), {
            'coffee_shop_id': str(blue_bottle.id),
            'purchase_amount': '5.00',
            'idempotency_key': 'k1',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'invalid_request'
        assert Account.objects.get(pk=member.pk).balance == 60


# =============================================================================
# Redeem Tests
# =============================================================================

@pytest.mark.django_db
class TestRedeemAPI:
    """Tests for POST /api/ledger/redeem/"""

    def test_redeem_success(self, authenticated_client, member, coffee_shop, fund):
        fund(member, 100)
        url = reverse('ledger:redeem')
        response = authenticated_client.post(url, {
            'coffee_shop_id': str(coffee_shop.id),
            'amount': 40,
            'idempotency_key': 'redeem-1',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['balance'] == 60
        assert response.data['entry']['signed_amount'] == -40

    def test_redeem_insufficient_balance(self, authenticated_client, member, coffee_shop, fund):
        fund(member, 100)
        url = reverse('ledger:redeem')
        response = authenticated_client.post(url, {
            'coffee_shop_id': str(coffee_shop.id),
            'amount': 150,
            'idempotency_key': 'too-much',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'insufficient_balance'
        assert Account.objects.get(pk=member.pk).balance == 100

    def test_redeem_negative_amount(self, authenticated_client, member, coffee_shop, fund):
        fund(member, 100)
        url = reverse('ledger:redeem')
        response = authenticated_client.post(url, {
            'coffee_shop_id': str(coffee_shop.id),
            'amount': -10,
            'idempotency_key': 'negative',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'invalid_amount'


# =============================================================================
# Transfer Tests
# =============================================================================

@pytest.mark.django_db
class TestTransferAPI:
    """Tests for POST /api/ledger/transfer/"""

    def test_transfer_success(self, authenticated_client, member, other_member, fund):
        fund(member, 100)
        url = reverse('ledger:transfer')
        response = authenticated_client.post(url, {
            'receiver_id': str(other_member.id),
            'amount': 30,
            'idempotency_key': 'gift-1',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['balance'] == 70
        assert response.data['entry']['kind'] == 'send'
        assert response.data['entry']['counterparty']['id'] == str(other_member.id)
        assert Account.objects.get(pk=other_member.pk).balance == 30

    def test_transfer_replay(self, authenticated_client, member, other_member, fund):
        fund(member, 100)
        url = reverse('ledger:transfer')
        data = {
            'receiver_id': str(other_member.id),
            'amount': 30,
            'idempotency_key': 'gift-retry',
        }
        authenticated_client.post(url, data, format='json')
        response = authenticated_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['replayed'] is True
        assert Account.objects.get(pk=other_member.pk).balance == 30

    def test_transfer_to_self(self, authenticated_client, member, fund):
        fund(member, 100)
        url = reverse('ledger:transfer')
        response = authenticated_client.post(url, {
            'receiver_id': str(member.id),
            'amount': 10,
            'idempotency_key': 'self',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'self_transfer'

    def test_transfer_unknown_receiver(self, authenticated_client, member, fund):
        fund(member, 100)
        url = reverse('ledger:transfer')
        response = authenticated_client.post(url, {
            'receiver_id': str(uuid4()),
            'amount': 10,
            'idempotency_key': 'nobody',
        }, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_transfer_as_someone_else_rejected(self, authenticated_client, member, other_member, fund):
        """A sender_id other than the caller is forbidden."""
        fund(other_member, 100)
        url = reverse('ledger:transfer')
        response = authenticated_client.post(url, {
            'sender_id': str(other_member.id),
            'receiver_id': str(member.id),
            'amount': 50,
            'idempotency_key': 'heist',
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert Account.objects.get(pk=other_member.pk).balance == 100


# =============================================================================
# Balance and History Tests
# =============================================================================

@pytest.mark.django_db
class TestBalanceAPI:
    """Tests for GET /api/ledger/balance/"""

    def test_balance(self, authenticated_client, member, fund):
        fund(member, 100)
        response = authenticated_client.get(reverse('ledger:balance'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'balance': 100, 'version': 1}


@pytest.mark.django_db
class TestTransactionHistoryAPI:
    """Tests for GET /api/users/{id}/transactions/"""

    def test_history_newest_first(self, authenticated_client, member, other_member, coffee_shop, fund):
        fund(member, 100)
        authenticated_client.post(reverse('ledger:transfer'), {
            'receiver_id': str(other_member.id),
            'amount': 10,
            'idempotency_key': 'gift',
        }, format='json')

        url = reverse('users:transactions', kwargs={'pk': member.id})
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 2
        assert [e['kind'] for e in response.data['results']] == ['send', 'earn']

    def test_history_filter_by_kind(self, authenticated_client, member, fund):
        fund(member, 100)
        fund(member, 50)

        url = reverse('users:transactions', kwargs={'pk': member.id})
        response = authenticated_client.get(url, {'kind': 'redeem'})

        assert response.data['count'] == 0

    def test_history_of_other_user_forbidden(self, authenticated_client, other_member):
        url = reverse('users:transactions', kwargs={'pk': other_member.id})
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['error'] == 'unauthorized'

    def test_received_points_show_in_receiver_history(self, api_client, member, other_member, fund):
        fund(member, 100)
        auth(api_client, member).post(reverse('ledger:transfer'), {
            'receiver_id': str(other_member.id),
            'amount': 25,
            'idempotency_key': 'gift',
        }, format='json')

        url = reverse('users:transactions', kwargs={'pk': other_member.id})
        response = auth(api_client, other_member).get(url)

        assert response.data['results'][0]['kind'] == 'receive'
        assert response.data['results'][0]['counterparty']['display_name'] == 'Alice'
        assert LedgerEntry.objects.filter(account_id=other_member.id).count() == 1
