import pytest
from decimal import Decimal
from django.core.cache import cache
from rest_framework.test import APIClient
from apps.communities.models import Community, CoffeeShop, Beverage, BeverageCategory


@pytest.fixture(autouse=True)
def clear_cache():
    """Catalogue views are cached; start every test cold."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def community(db):
    """Create and return the NYC community."""
    return Community.objects.create(
        id='nyc',
        name='New York City',
        city='New York',
        country='USA',
    )


@pytest.fixture
def other_community(db):
    """Create and return a second community."""
    return Community.objects.create(
        id='sf',
        name='San Francisco',
        city='San Francisco',
        country='USA',
    )


@pytest.fixture
def coffee_shop(community):
    """Create and return a shop with two beverages."""
    shop = CoffeeShop.objects.create(
        community=community,
        name='Blue Bottle Coffee',
        address='123 Main St, New York, NY',
        points_back_percentage=15,
        current_crowdedness=65,
        is_quiet_friendly=True,
        opening_hours='7:00 AM - 7:00 PM',
    )
    Beverage.objects.create(
        coffee_shop=shop,
        name='Cappuccino',
        price=Decimal('4.50'),
        description='Rich espresso with steamed milk foam',
        category=BeverageCategory.COFFEE,
    )
    Beverage.objects.create(
        coffee_shop=shop,
        name='Earl Grey',
        price=Decimal('3.25'),
        category=BeverageCategory.TEA,
    )
    return shop


@pytest.fixture
def inactive_shop(community):
    """Create and return a shop that left the programme."""
    return CoffeeShop.objects.create(
        community=community,
        name='Closed Cafe',
        address='1 Gone St',
        points_back_percentage=10,
        is_active=False,
    )
