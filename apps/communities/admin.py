# ==========================================
# apps/communities/admin.py
# ==========================================

from django.contrib import admin
from .models import Community, CoffeeShop, Beverage


class BeverageInline(admin.TabularInline):
    """Inline menu editing within a coffee shop."""
    model = Beverage
    extra = 0
    fields = ['name', 'category', 'price', 'description']


@admin.register(Community)
class CommunityAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'city', 'country', 'created_at']
    search_fields = ['id', 'name', 'city', 'country']
    ordering = ['name']


@admin.register(CoffeeShop)
class CoffeeShopAdmin(admin.ModelAdmin):
    """
    Admin interface for coffee shops.

    The points-back percentage drives point awards on every earn, so changes
    here take effect on the next purchase.
    """

    list_display = [
        'name',
        'community',
        'points_back_percentage',
        'current_crowdedness',
        'is_quiet_friendly',
        'is_active',
    ]
    list_filter = ['community', 'is_active', 'is_quiet_friendly']
    search_fields = ['name', 'address']
    inlines = [BeverageInline]
