"""
Catalogue read service.

Read-only queries over communities and coffee shops. Nothing here mutates
state, so views built on it are safe to cache.
"""

from uuid import UUID

from django.core.exceptions import ValidationError
from django.db.models import QuerySet

from apps.communities.models import Community, CoffeeShop
from apps.core.exceptions import NotFoundError


def list_communities() -> QuerySet[Community]:
    """All communities ordered by name."""
    return Community.objects.order_by('name')


def get_community(*, community_id: str) -> Community:
    """
    Get a community by its slug.

    Raises:
        NotFoundError: If the community does not exist
    """
    try:
        return Community.objects.get(id=community_id)
    except Community.DoesNotExist:
        raise NotFoundError(f"Community '{community_id}' not found")


def list_coffee_shops(*, community_id: str) -> QuerySet[CoffeeShop]:
    """
    Active coffee shops of a community, beverages prefetched.

    Raises:
        NotFoundError: If the community does not exist
    """
    community = get_community(community_id=community_id)
    return (
        CoffeeShop.objects
        .filter(community=community, is_active=True)
        .prefetch_related('beverages')
        .order_by('name')
    )


def get_coffee_shop(*, shop_id: UUID, active_only: bool = True) -> CoffeeShop:
    """
    Get a single coffee shop.

    Raises:
        NotFoundError: If the shop does not exist (or is inactive)
    """
    queryset = CoffeeShop.objects.select_related('community').prefetch_related('beverages')
    if active_only:
        queryset = queryset.filter(is_active=True)
    try:
        return queryset.get(id=shop_id)
    except (CoffeeShop.DoesNotExist, ValidationError, ValueError):
        raise NotFoundError(f"Coffee shop {shop_id} not found")
