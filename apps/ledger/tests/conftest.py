import pytest
from decimal import Decimal
from uuid import uuid4
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.communities.models import Community, CoffeeShop
from apps.ledger.services import open_account, earn


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def community(db):
    """Create and return the NYC community."""
    return Community.objects.create(id='nyc', name='New York City', city='New York', country='USA')


@pytest.fixture
def coffee_shop(community):
    """Shop giving 10% back, so 10.00 spent earns 100 points."""
    return CoffeeShop.objects.create(
        community=community,
        name='Stumptown Coffee',
        address='456 Coffee Ave, NYC',
        points_back_percentage=10,
    )


@pytest.fixture
def blue_bottle(community):
    """Shop giving 15% back."""
    return CoffeeShop.objects.create(
        community=community,
        name='Blue Bottle Coffee',
        address='123 Main St, NYC',
        points_back_percentage=15,
    )


@pytest.fixture
def make_member(community):
    """Factory for members with an open, zero-balance account."""
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
def member(make_member):
    """Create and return a member (Alice)."""
    return make_member('alice@example.com', 'Alice')


@pytest.fixture
def other_member(make_member):
    """Create and return another member (Bob)."""
    return make_member('bob@example.com', 'Bob')


@pytest.fixture
def fund(coffee_shop):
    """Give a member exactly ``points`` points through a regular earn."""
    def _fund(user, points):
        entry, _ = earn(
            account_id=user.id,
            coffee_shop_id=coffee_shop.id,
            purchase_amount=Decimal(points) / Decimal(10),
            idempotency_key=f'fund-{uuid4()}',
        )
        return entry
    return _fund


@pytest.fixture
def authenticated_client(api_client, member):
    """Return an API client authenticated as ``member`` using JWT."""
    refresh = RefreshToken.for_user(member)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client
