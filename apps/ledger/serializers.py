from rest_framework import serializers

from apps.accounts.models import User
from apps.core.exceptions import UnauthorizedError
from .models import LedgerEntry, EntryKind


# =============================================================================
# Input Serializers
# =============================================================================

class ActingAccountMixin:
    """
    Reject bodies that name an acting account other than the caller.

    Ledger endpoints always act on ``request.user``; ``account_id`` and
    ``sender_id`` are accepted only when they match it.
    """

    acting_account_fields = ('account_id', 'sender_id')

    def validate(self, attrs):
        request = self.context.get('request')
        for field in self.acting_account_fields:
            value = self.initial_data.get(field)
            if value is not None and request is not None and str(value) != str(request.user.pk):
                raise UnauthorizedError("You can only act on your own account")
        return super().validate(attrs)


class EarnInputSerializer(ActingAccountMixin, serializers.Serializer):
    """
    Validate input for earning points on a purchase.

    Fields:
        coffee_shop_id (UUID): Shop where the purchase was made
        purchase_amount (Decimal): Purchase total, two decimals
        idempotency_key (str): Client-generated key, 1..64 chars
        description (str): Optional entry description
    """

    coffee_shop_id = serializers.UUIDField()
    purchase_amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    idempotency_key = serializers.CharField(min_length=1, max_length=64)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


class RedeemInputSerializer(ActingAccountMixin, serializers.Serializer):
    """
    Validate input for redeeming points at a shop.

    Amount sign is checked by the ledger engine so the error carries the
    ``invalid_amount`` code.
    """

    coffee_shop_id = serializers.UUIDField()
    amount = serializers.IntegerField()
    idempotency_key = serializers.CharField(min_length=1, max_length=64)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


class TransferInputSerializer(ActingAccountMixin, serializers.Serializer):
    """Validate input for sending points to another member."""

    receiver_id = serializers.UUIDField()
    amount = serializers.IntegerField()
    idempotency_key = serializers.CharField(min_length=1, max_length=64)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


class EntryFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for transaction history.

    Query Parameters:
        kind (str): Only entries of this kind
    """

    kind = serializers.ChoiceField(choices=EntryKind.choices, required=False)


# =============================================================================
# Output Serializers
# =============================================================================

class MemberMinimalSerializer(serializers.ModelSerializer):
    """Minimal member info for nested serialization."""

    display_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'display_name']
        read_only_fields = fields

    def get_display_name(self, obj):
        return obj.get_display_name()


class LedgerEntrySerializer(serializers.ModelSerializer):
    """A single ledger entry as shown in transaction history."""

    account_id = serializers.UUIDField(read_only=True)
    coffee_shop_id = serializers.UUIDField(read_only=True, allow_null=True)
    coffee_shop_name = serializers.SerializerMethodField()
    counterparty = serializers.SerializerMethodField()

    class Meta:
        model = LedgerEntry
        fields = [
            'id',
            'account_id',
            'kind',
            'amount',
            'signed_amount',
            'balance_after',
            'description',
            'coffee_shop_id',
            'coffee_shop_name',
            'counterparty',
            'correlation_id',
            'idempotency_key',
            'created_at',
        ]
        read_only_fields = fields

    def get_coffee_shop_name(self, obj):
        return obj.coffee_shop.name if obj.coffee_shop_id else None

    def get_counterparty(self, obj):
        if obj.counterparty_id is None:
            return None
        return MemberMinimalSerializer(obj.counterparty.user).data


class LedgerResultSerializer(serializers.Serializer):
    """Response body of redeem and transfer."""

    balance = serializers.IntegerField()
    entry = LedgerEntrySerializer()
    replayed = serializers.BooleanField()


class EarnResultSerializer(LedgerResultSerializer):
    """Response body of earn."""

    points_awarded = serializers.IntegerField()


class BalanceSerializer(serializers.Serializer):
    """Current balance and version of the caller's account."""

    balance = serializers.IntegerField()
    version = serializers.IntegerField()
