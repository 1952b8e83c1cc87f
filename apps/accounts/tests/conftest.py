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
def other_community(db):
    """Create and return a second community."""
    return Community.objects.create(id='london', name='London Coffee Circle', city='London', country='UK')


@pytest.fixture
def user(community):
    """Create and return a test member with an open account."""
    user = User.objects.create_user(
        email='testuser@example.com',
        password='TestPass123!',
        display_name='Test User',
    )
    open_account(user=user, community_id=community.id)
    return user


@pytest.fixture
def user_inactive(community):
    """Create and return an inactive user."""
    user = User.objects.create_user(
        email='inactive@example.com',
        password='TestPass123!',
        display_name='Inactive User',
        is_active=False,
    )
    open_account(user=user, community_id=community.id)
    return user


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an authenticated API client using JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client
