from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q
import uuid


class EntryKind(models.TextChoices):
    EARN = 'earn', 'Earned'
    REDEEM = 'redeem', 'Redeemed'
    SEND = 'send', 'Sent'
    RECEIVE = 'receive', 'Received'


# Kinds that add to the balance when replayed; the rest subtract
CREDIT_KINDS = (EntryKind.EARN, EntryKind.RECEIVE)
# Kinds written on the account that initiated the operation
INITIATOR_KINDS = (EntryKind.EARN, EntryKind.REDEEM, EntryKind.SEND)


class Account(models.Model):
    """
    Points balance of a member.

    Mutated only by the ledger engine. ``version`` is bumped on every balance
    change and used as a check-and-set token. Accounts are never deleted.
    """
    
    user = models.OneToOneField(
        'accounts.User',
        on_delete=models.PROTECT,
        primary_key=True,
        related_name='account'
    )
    community = models.ForeignKey(
        'communities.Community',
        on_delete=models.PROTECT,
        related_name='accounts'
    )
    balance = models.BigIntegerField(default=0)
    version = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    
    class Meta:
        db_table = 'accounts'
        constraints = [
            models.CheckConstraint(
                condition=Q(balance__gte=0),
                name='account_balance_non_negative',
            ),
        ]
        indexes = [
            models.Index(fields=['community', 'is_active'], name='account_community_active_idx'),
        ]
    
    def __str__(self):
        return f"{self.user_id}: {self.balance} pts (v{self.version})"
    
    def delete(self, *args, **kwargs):
        raise TypeError("Accounts are never deleted; deactivate them instead")


class LedgerEntry(models.Model):
    """
    Immutable, append-only record of a balance change on one account.

    Replaying an account's entries in order reproduces its balance.
    Both sides of a transfer share a ``correlation_id``.
    """
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name='entries'
    )
    counterparty = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='counterparty_entries'
    )
    coffee_shop = models.ForeignKey(
        'communities.CoffeeShop',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='ledger_entries'
    )
    correlation_id = models.UUIDField(default=uuid.uuid4, db_index=True)
    
    kind = models.CharField(max_length=10, choices=EntryKind.choices)
    amount = models.PositiveBigIntegerField(validators=[MinValueValidator(1)])
    balance_after = models.BigIntegerField()
    # Account version produced by this entry; strictly increasing per account
    account_version = models.PositiveIntegerField()
    description = models.CharField(max_length=255, blank=True)
    idempotency_key = models.CharField(max_length=64)
    
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    
    class Meta:
        db_table = 'ledger_entries'
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name='ledger_entry_amount_positive',
            ),
            models.CheckConstraint(
                condition=Q(balance_after__gte=0),
                name='ledger_entry_balance_after_non_negative',
            ),
            models.UniqueConstraint(
                fields=['account', 'account_version'],
                name='ledger_entry_unique_account_version',
            ),
            # One initiated operation per (account, key); receive entries
            # carry the sender's key and are excluded.
            models.UniqueConstraint(
                fields=['account', 'idempotency_key'],
                condition=Q(kind__in=['earn', 'redeem', 'send']),
                name='ledger_entry_unique_idempotency_key',
            ),
        ]
        indexes = [
            models.Index(fields=['account', 'created_at'], name='ledger_account_created_idx'),
            models.Index(fields=['account', 'idempotency_key'], name='ledger_account_idem_idx'),
        ]
        ordering = ['-created_at', '-account_version']
        verbose_name_plural = 'ledger entries'
    
    def __str__(self):
        return f"{self.kind} {self.amount} on {self.account_id} -> {self.balance_after}"
    
    @property
    def signed_amount(self):
        """Amount with the sign it has on the balance."""
        return self.amount if self.kind in CREDIT_KINDS else -self.amount
    
    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise TypeError("Ledger entries are immutable")
        super().save(*args, **kwargs)
    
    def delete(self, *args, **kwargs):
        raise TypeError("Ledger entries are immutable")
