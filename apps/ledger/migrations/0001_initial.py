# Generated manually for the points ledger

import uuid
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('communities', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Account',
            fields=[
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, primary_key=True, related_name='account', serialize=False, to=settings.AUTH_USER_MODEL)),
                ('balance', models.BigIntegerField(default=0)),
                ('version', models.PositiveIntegerField(default=0)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('community', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='accounts', to='communities.community')),
            ],
            options={
                'db_table': 'accounts',
                'indexes': [models.Index(fields=['community', 'is_active'], name='account_community_active_idx')],
                'constraints': [models.CheckConstraint(condition=models.Q(('balance__gte', 0)), name='account_balance_non_negative')],
            },
        ),
        migrations.CreateModel(
            name='LedgerEntry',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('correlation_id', models.UUIDField(db_index=True, default=uuid.uuid4)),
                ('kind', models.CharField(choices=[('earn', 'Earned'), ('redeem', 'Redeemed'), ('send', 'Sent'), ('receive', 'Received')], max_length=10)),
                ('amount', models.PositiveBigIntegerField(validators=[MinValueValidator(1)])),
                ('balance_after', models.BigIntegerField()),
                ('account_version', models.PositiveIntegerField()),
                ('description', models.CharField(blank=True, max_length=255)),
                ('idempotency_key', models.CharField(max_length=64)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('account', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='entries', to='ledger.account')),
                ('coffee_shop', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='ledger_entries', to='communities.coffeeshop')),
                ('counterparty', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='counterparty_entries', to='ledger.account')),
            ],
            options={
                'db_table': 'ledger_entries',
                'ordering': ['-created_at', '-account_version'],
                'verbose_name_plural': 'ledger entries',
                'indexes': [
                    models.Index(fields=['account', 'created_at'], name='ledger_account_created_idx'),
                    models.Index(fields=['account', 'idempotency_key'], name='ledger_account_idem_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('amount__gt', 0)), name='ledger_entry_amount_positive'),
                    models.CheckConstraint(condition=models.Q(('balance_after__gte', 0)), name='ledger_entry_balance_after_non_negative'),
                    models.UniqueConstraint(fields=('account', 'account_version'), name='ledger_entry_unique_account_version'),
                    models.UniqueConstraint(condition=models.Q(('kind__in', ['earn', 'redeem', 'send'])), fields=('account', 'idempotency_key'), name='ledger_entry_unique_idempotency_key'),
                ],
            },
        ),
    ]
