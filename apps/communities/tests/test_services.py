"""
Service layer tests for the communities catalogue and its seed command.
"""

import pytest
from io import StringIO
from uuid import uuid4
from django.core.management import call_command

from apps.communities.models import Community, CoffeeShop, Beverage
from apps.communities.services import (
    list_communities,
    get_community,
    list_coffee_shops,
    get_coffee_shop,
)
from apps.core.exceptions import NotFoundError


@pytest.mark.django_db
class TestCatalogue:
    """Tests for catalogue read services."""

    def test_list_communities_ordered_by_name(self, community, other_community):
        """Communities come back sorted by name."""
        names = [c.name for c in list_communities()]

        assert names == ['New York City', 'San Francisco']

    def test_get_community_not_found(self, db):
        """Unknown slug raises NotFoundError."""
        with pytest.raises(NotFoundError):
            get_community(community_id='atlantis')

    def test_list_coffee_shops_only_active(self, coffee_shop, inactive_shop):
        """Inactive shops are not listed."""
        shops = list(list_coffee_shops(community_id='nyc'))

        assert shops == [coffee_shop]

    def test_get_coffee_shop_inactive_allowed_when_asked(self, inactive_shop):
        """active_only=False returns inactive shops."""
        with pytest.raises(NotFoundError):
            get_coffee_shop(shop_id=inactive_shop.id)

        assert get_coffee_shop(shop_id=inactive_shop.id, active_only=False) == inactive_shop

    def test_get_coffee_shop_malformed_id(self, db):
        """A malformed id is reported as not found."""
        with pytest.raises(NotFoundError):
            get_coffee_shop(shop_id='not-a-uuid')

    def test_get_coffee_shop_unknown(self, db):
        """Unknown id raises NotFoundError."""
        with pytest.raises(NotFoundError):
            get_coffee_shop(shop_id=uuid4())


@pytest.mark.django_db
class TestSeedCatalogue:
    """Tests for the seed_catalogue management command."""

    def test_seed_creates_catalogue(self):
        """Seeding loads communities, shops and menus."""
        out = StringIO()
        call_command('seed_catalogue', stdout=out)

        assert Community.objects.count() == 5
        assert CoffeeShop.objects.filter(community_id='nyc').count() == 3
        assert Beverage.objects.count() == 9
        assert 'Seeded 5 communities and 3 coffee shops' in out.getvalue()

    def test_seed_is_idempotent(self):
        """Running twice does not duplicate anything."""
        call_command('seed_catalogue', stdout=StringIO())
        call_command('seed_catalogue', stdout=StringIO())

        assert Community.objects.count() == 5
        assert CoffeeShop.objects.count() == 3
        assert Beverage.objects.count() == 9

    def test_seed_dry_run_writes_nothing(self):
        """--dry-run only prints."""
        out = StringIO()
        call_command('seed_catalogue', '--dry-run', stdout=out)

        assert Community.objects.count() == 0
        assert 'Blue Bottle Coffee' in out.getvalue()
