# Generated manually for the communities catalogue

import uuid
from decimal import Decimal
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Community',
            fields=[
                ('id', models.SlugField(primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('city', models.CharField(max_length=100)),
                ('country', models.CharField(max_length=100)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'communities',
                'verbose_name_plural': 'communities',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='CoffeeShop',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('address', models.CharField(max_length=300)),
                ('image_url', models.URLField(blank=True, max_length=500)),
                ('points_back_percentage', models.PositiveSmallIntegerField(validators=[MaxValueValidator(100)])),
                ('current_crowdedness', models.PositiveSmallIntegerField(default=0, validators=[MaxValueValidator(100)])),
                ('is_quiet_friendly', models.BooleanField(default=False)),
                ('opening_hours', models.CharField(blank=True, max_length=100)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('community', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='coffee_shops', to='communities.community')),
            ],
            options={
                'db_table': 'coffee_shops',
                'ordering': ['name'],
                'indexes': [models.Index(fields=['community', 'is_active'], name='coffee_shop_community_idx')],
            },
        ),
        migrations.CreateModel(
            name='Beverage',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('price', models.DecimalField(decimal_places=2, max_digits=8, validators=[MinValueValidator(Decimal('0.00'))])),
                ('description', models.TextField(blank=True)),
                ('category', models.CharField(choices=[('coffee', 'Coffee'), ('tea', 'Tea'), ('cold_drinks', 'Cold Drinks'), ('food', 'Food')], default='coffee', max_length=20)),
                ('coffee_shop', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='beverages', to='communities.coffeeshop')),
            ],
            options={
                'db_table': 'beverages',
                'ordering': ['category', 'name'],
            },
        ),
    ]
