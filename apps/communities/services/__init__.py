"""Catalogue services: communities, coffee shops and their menus."""

from .catalogue import (
    list_communities,
    get_community,
    list_coffee_shops,
    get_coffee_shop,
)

__all__ = [
    'list_communities',
    'get_community',
    'list_coffee_shops',
    'get_coffee_shop',
]
