"""
Management command to load the starter communities and coffee shops.

Idempotent: existing communities are updated in place and shops are matched
by (community, name), so the command can be re-run after edits.

Usage:
    python manage.py seed_catalogue
    python manage.py seed_catalogue --dry-run
"""

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.communities.models import Community, CoffeeShop, Beverage, BeverageCategory


COMMUNITIES = [
    ('nyc', 'NYC Coffee Community', 'New York', 'USA'),
    ('la', 'LA Coffee Hub', 'Los Angeles', 'USA'),
    ('sf', 'SF Bay Area Coffee', 'San Francisco', 'USA'),
    ('london', 'London Coffee Circle', 'London', 'UK'),
    ('paris', 'Paris Café Community', 'Paris', 'France'),
]

COFFEE_SHOPS = [
    {
        'community': 'nyc',
        'name': 'Blue Bottle Coffee',
        'address': '123 Main St, NYC',
        'points_back_percentage': 15,
        'current_crowdedness': 75,
        'is_quiet_friendly': True,
        'opening_hours': '6:00 AM - 8:00 PM',
        'beverages': [
            ('Espresso', '3.50', 'Rich and bold', BeverageCategory.COFFEE),
            ('Cappuccino', '4.50', 'Creamy and smooth', BeverageCategory.COFFEE),
            ('Croissant', '3.00', 'Buttery and flaky', BeverageCategory.FOOD),
        ],
    },
    {
        'community': 'nyc',
        'name': 'Stumptown Coffee',
        'address': '456 Coffee Ave, NYC',
        'points_back_percentage': 12,
        'current_crowdedness': 45,
        'is_quiet_friendly': False,
        'opening_hours': '7:00 AM - 9:00 PM',
        'beverages': [
            ('Cold Brew', '4.00', 'Smooth and refreshing', BeverageCategory.COLD_DRINKS),
            ('Latte', '5.00', 'Perfect milk foam', BeverageCategory.COFFEE),
            ('Green Tea', '3.00', 'Organic and fresh', BeverageCategory.TEA),
        ],
    },
    {
        'community': 'nyc',
        'name': 'Joe Coffee',
        'address': '789 Brew St, NYC',
        'points_back_percentage': 18,
        'current_crowdedness': 90,
        'is_quiet_friendly': True,
        'opening_hours': '6:30 AM - 7:30 PM',
        'beverages': [
            ('Americano', '3.75', 'Classic and strong', BeverageCategory.COFFEE),
            ('Matcha Latte', '5.50', 'Creamy matcha goodness', BeverageCategory.TEA),
            ('Blueberry Muffin', '3.50', 'Fresh baked daily', BeverageCategory.FOOD),
        ],
    },
]


class Command(BaseCommand):
    help = 'Load starter communities, coffee shops and menus'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be created without making changes',
        )

    def handle(self, *args, **options):
        if options['dry_run']:
            for slug, name, city, country in COMMUNITIES:
                self.stdout.write(f'  community {slug}: {name} ({city}, {country})')
            for shop in COFFEE_SHOPS:
                self.stdout.write(
                    f"  shop {shop['name']} [{shop['community']}] "
                    f"{shop['points_back_percentage']}% back, {len(shop['beverages'])} beverages"
                )
            self.stdout.write(self.style.WARNING('\n--dry-run mode: No changes made.'))
            return

        with transaction.atomic():
            for slug, name, city, country in COMMUNITIES:
                Community.objects.update_or_create(
                    id=slug,
                    defaults={'name': name, 'city': city, 'country': country},
                )

            shop_count = 0
            for data in COFFEE_SHOPS:
                data = dict(data)
                beverages = data.pop('beverages')
                community_id = data.pop('community')
                shop, _ = CoffeeShop.objects.update_or_create(
                    community_id=community_id,
                    name=data.pop('name'),
                    defaults=data,
                )
                for bev_name, price, description, category in beverages:
                    Beverage.objects.update_or_create(
                        coffee_shop=shop,
                        name=bev_name,
                        defaults={
                            'price': Decimal(price),
                            'description': description,
                            'category': category,
                        },
                    )
                shop_count += 1

        self.stdout.write(
            self.style.SUCCESS(
                f'Seeded {len(COMMUNITIES)} communities and {shop_count} coffee shops.'
            )
        )
