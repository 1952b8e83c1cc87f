# Generated manually for the friend graph

import uuid
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='FriendRequest',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('accepted', 'Accepted'), ('declined', 'Declined')], default='pending', max_length=10)),
                ('pair_key', models.CharField(editable=False, max_length=73)),
                ('idempotency_key', models.CharField(max_length=64)),
                ('response_idempotency_key', models.CharField(blank=True, max_length=64)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('responded_at', models.DateTimeField(blank=True, null=True)),
                ('from_user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='sent_friend_requests', to=settings.AUTH_USER_MODEL)),
                ('to_user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='received_friend_requests', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'friend_requests',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['to_user', 'status'], name='friend_req_to_status_idx'),
                    models.Index(fields=['from_user', 'status'], name='friend_req_from_status_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('from_user', models.F('to_user')), _negated=True), name='friend_request_not_self'),
                    models.UniqueConstraint(condition=models.Q(('status', 'pending')), fields=('pair_key',), name='friend_request_unique_pending_pair'),
                    models.UniqueConstraint(fields=('from_user', 'idempotency_key'), name='friend_request_unique_idempotency_key'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Friendship',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('friend', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='friendships', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'user_friends',
                'constraints': [
                    models.UniqueConstraint(fields=('user', 'friend'), name='friendship_unique_pair'),
                ],
            },
        ),
    ]
