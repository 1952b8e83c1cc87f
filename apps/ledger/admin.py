# ==========================================
# apps/ledger/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from .models import Account, LedgerEntry, EntryKind


class ReadOnlyAdminMixin:
    """Balances and entries change only through the ledger engine."""

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class LedgerEntryInline(ReadOnlyAdminMixin, admin.TabularInline):
    """Most recent entries of an account."""
    model = LedgerEntry
    fk_name = 'account'
    extra = 0
    fields = ['created_at', 'kind', 'amount', 'balance_after', 'description']
    readonly_fields = fields
    ordering = ['-account_version']
    show_change_link = True


@admin.register(Account)
class AccountAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Read-only view of member balances."""

    list_display = ['user', 'community', 'balance', 'version', 'is_active', 'updated_at']
    list_filter = ['is_active', 'community']
    search_fields = ['user__email', 'user__display_name']
    readonly_fields = ['user', 'community', 'balance', 'version', 'is_active', 'created_at', 'updated_at']
    inlines = [LedgerEntryInline]

    def get_queryset(self, request):
        """Optimize query."""
        return super().get_queryset(request).select_related('user', 'community')


@admin.register(LedgerEntry)
class LedgerEntryAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Read-only, append-only ledger."""

    list_display = [
        'created_at',
        'account',
        'kind_badge',
        'amount',
        'balance_after',
        'coffee_shop',
        'counterparty',
    ]
    list_filter = ['kind', 'created_at']
    search_fields = ['account__user__email', 'idempotency_key', 'correlation_id']
    date_hierarchy = 'created_at'
    readonly_fields = [
        'id',
        'account',
        'counterparty',
        'coffee_shop',
        'correlation_id',
        'kind',
        'amount',
        'balance_after',
        'account_version',
        'description',
        'idempotency_key',
        'created_at',
    ]

    def kind_badge(self, obj):
        """Display entry kind as colored badge."""
        colors = {
            EntryKind.EARN: '#6B8E5E',
            EntryKind.RECEIVE: '#6B8E5E',
            EntryKind.REDEEM: '#A47449',
            EntryKind.SEND: '#B85C5C',
        }
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            colors.get(obj.kind, '#ccc'), obj.get_kind_display()
        )
    kind_badge.short_description = 'Kind'
    kind_badge.admin_order_field = 'kind'

    def get_queryset(self, request):
        """Optimize query."""
        return super().get_queryset(request).select_related(
            'account__user', 'counterparty__user', 'coffee_shop'
        )
