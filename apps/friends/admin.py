from django.contrib import admin
from .models import FriendRequest, Friendship


@admin.register(FriendRequest)
class FriendRequestAdmin(admin.ModelAdmin):
    list_display = ['from_user', 'to_user', 'status', 'created_at', 'responded_at']
    list_filter = ['status', 'created_at']
    search_fields = ['from_user__email', 'to_user__email']
    readonly_fields = [
        'from_user',
        'to_user',
        'pair_key',
        'idempotency_key',
        'response_idempotency_key',
        'created_at',
        'responded_at',
    ]

    def get_queryset(self, request):
        """Optimize query."""
        return super().get_queryset(request).select_related('from_user', 'to_user')


@admin.register(Friendship)
class FriendshipAdmin(admin.ModelAdmin):
    list_display = ['user', 'friend', 'created_at']
    search_fields = ['user__email', 'friend__email']
    readonly_fields = ['user', 'friend', 'created_at']
