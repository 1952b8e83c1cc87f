from rest_framework import serializers

from apps.accounts.models import User
from .models import FriendRequest


# =============================================================================
# Input Serializers
# =============================================================================

class FriendRequestCreateSerializer(serializers.Serializer):
    """
    Validate input for sending a friend request.

    Fields:
        to_user_id (UUID): Recipient
        idempotency_key (str): Client-generated key, 1..64 chars
    """

    to_user_id = serializers.UUIDField()
    idempotency_key = serializers.CharField(min_length=1, max_length=64)


class FriendRequestRespondSerializer(serializers.Serializer):
    """Validate input for accepting or declining a request."""

    action = serializers.ChoiceField(choices=['accept', 'decline'])
    idempotency_key = serializers.CharField(min_length=1, max_length=64)


class PendingRequestFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for pending requests.

    Query Parameters:
        direction (str): incoming, outgoing or all (default)
    """

    direction = serializers.ChoiceField(
        choices=['all', 'incoming', 'outgoing'],
        required=False,
        default='all'
    )


# =============================================================================
# Output Serializers
# =============================================================================

class UserMinimalSerializer(serializers.ModelSerializer):
    """Minimal user info for nested serialization."""

    display_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'display_name', 'profile_image_url']
        read_only_fields = fields

    def get_display_name(self, obj):
        return obj.get_display_name()


class FriendRequestSerializer(serializers.ModelSerializer):
    """Friend request with both parties."""

    from_user = UserMinimalSerializer(read_only=True)
    to_user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = FriendRequest
        fields = ['id', 'from_user', 'to_user', 'status', 'created_at', 'responded_at']
        read_only_fields = fields


class FriendSerializer(UserMinimalSerializer):
    """Friend with their points, for the leaderboard."""

    balance = serializers.IntegerField(source='account.balance', read_only=True)
    community_id = serializers.CharField(source='account.community_id', read_only=True)

    class Meta(UserMinimalSerializer.Meta):
        fields = UserMinimalSerializer.Meta.fields + ['balance', 'community_id']
        read_only_fields = fields
