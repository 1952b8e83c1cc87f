import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.communities.models import Community
from apps.ledger.services import open_account


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def community(db):
    """Create and return the NYC community."""
    return Community.objects.create(id='nyc', name='New York City', city='New York', country='USA')


@pytest.fixture
def make_member(community):
    """Factory for members with an open account."""
    def _make(email, display_name=''):
        user = User.objects.create_user(
            email=email,
            password='TestPass123!',
            display_name=display_name,
        )
        open_account(user=user, community_id=community.id)
        return user
    return _make


@pytest.fixture
def alice(make_member):
    return make_member('alice@example.com', 'Alice')


@pytest.fixture
def bob(make_member):
    return make_member('bob@example.com', 'Bob')


@pytest.fixture
def carol(make_member):
    return make_member('carol@example.com', 'Carol')


@pytest.fixture
def client_for(api_client):
    """Return a factory that authenticates the API client as a user."""
    def _client_for(user):
        refresh = RefreshToken.for_user(user)
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return api_client
    return _client_for
