# ==========================================
# apps/communities/models.py
# ==========================================

from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from decimal import Decimal
import uuid


class BeverageCategory(models.TextChoices):
    COFFEE = 'coffee', 'Coffee'
    TEA = 'tea', 'Tea'
    COLD_DRINKS = 'cold_drinks', 'Cold Drinks'
    FOOD = 'food', 'Food'


class Community(models.Model):
    """Geographic community members join (e.g. "nyc")."""
    
    id = models.SlugField(primary_key=True, max_length=50)
    name = models.CharField(max_length=200)
    city = models.CharField(max_length=100)
    country = models.CharField(max_length=100)
    created_at = models.DateTimeField(auto_now_add=True)
    
    class Meta:
        db_table = 'communities'
        verbose_name_plural = 'communities'
        ordering = ['name']
    
    def __str__(self):
        return self.name


class CoffeeShop(models.Model):
    """Participating coffee shop with its own points-back rate."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    community = models.ForeignKey(Community, on_delete=models.PROTECT, related_name='coffee_shops')
    name = models.CharField(max_length=200)
    address = models.CharField(max_length=300)
    image_url = models.URLField(max_length=500, blank=True)
    
    # Points awarded per currency unit spent, as a percentage
    points_back_percentage = models.PositiveSmallIntegerField(
        validators=[MaxValueValidator(100)]
    )
    current_crowdedness = models.PositiveSmallIntegerField(
        default=0,
        validators=[MaxValueValidator(100)]
    )
    is_quiet_friendly = models.BooleanField(default=False)
    opening_hours = models.CharField(max_length=100, blank=True)
    is_active = models.BooleanField(default=True)
    
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    
    class Meta:
        db_table = 'coffee_shops'
        indexes = [
            models.Index(fields=['community', 'is_active'], name='coffee_shop_community_idx'),
        ]
        ordering = ['name']
    
    def __str__(self):
        return f"{self.name} ({self.community_id})"


class Beverage(models.Model):
    """Menu item of a coffee shop."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    coffee_shop = models.ForeignKey(CoffeeShop, on_delete=models.CASCADE, related_name='beverages')
    name = models.CharField(max_length=200)
    price = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    description = models.TextField(blank=True)
    category = models.CharField(max_length=20, choices=BeverageCategory.choices, default=BeverageCategory.COFFEE)
    
    class Meta:
        db_table = 'beverages'
        ordering = ['category', 'name']
    
    def __str__(self):
        return f"{self.name} - {self.price}"
