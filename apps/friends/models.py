from django.db import models
from django.db.models import F, Q
import uuid


class FriendRequestStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    ACCEPTED = 'accepted', 'Accepted'
    DECLINED = 'declined', 'Declined'


class FriendRequest(models.Model):
    """
    Request from one member to another to become friends.

    ``pair_key`` is the same for both directions of a pair, so the database
    allows at most one pending request per pair.
    """
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    from_user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='sent_friend_requests'
    )
    to_user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='received_friend_requests'
    )
    status = models.CharField(
        max_length=10,
        choices=FriendRequestStatus.choices,
        default=FriendRequestStatus.PENDING
    )
    pair_key = models.CharField(max_length=73, editable=False)
    
    idempotency_key = models.CharField(max_length=64)
    response_idempotency_key = models.CharField(max_length=64, blank=True)
    
    created_at = models.DateTimeField(auto_now_add=True)
    responded_at = models.DateTimeField(null=True, blank=True)
    
    class Meta:
        db_table = 'friend_requests'
        constraints = [
            models.CheckConstraint(
                condition=~Q(from_user=F('to_user')),
                name='friend_request_not_self',
            ),
            models.UniqueConstraint(
                fields=['pair_key'],
                condition=Q(status='pending'),
                name='friend_request_unique_pending_pair',
            ),
            models.UniqueConstraint(
                fields=['from_user', 'idempotency_key'],
                name='friend_request_unique_idempotency_key',
            ),
        ]
        indexes = [
            models.Index(fields=['to_user', 'status'], name='friend_req_to_status_idx'),
            models.Index(fields=['from_user', 'status'], name='friend_req_from_status_idx'),
        ]
        ordering = ['-created_at']
    
    def __str__(self):
        return f"{self.from_user_id} -> {self.to_user_id} ({self.status})"
    
    @staticmethod
    def make_pair_key(user_id, other_id):
        return ':'.join(sorted([str(user_id), str(other_id)]))
    
    def save(self, *args, **kwargs):
        if not self.pair_key:
            self.pair_key = self.make_pair_key(self.from_user_id, self.to_user_id)
        super().save(*args, **kwargs)


class Friendship(models.Model):
    """
    One direction of a friendship.

    Friendships are symmetric: accepting a request writes both
    ``(user, friend)`` and ``(friend, user)``.
    """
    
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='friendships'
    )
    friend = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    
    class Meta:
        db_table = 'user_friends'
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'friend'],
                name='friendship_unique_pair',
            ),
        ]
    
    def __str__(self):
        return f"{self.user_id} <-> {self.friend_id}"
