from rest_framework import serializers
from .models import Community, CoffeeShop, Beverage


class CommunitySerializer(serializers.ModelSerializer):
    """Community list/detail."""
    
    class Meta:
        model = Community
        fields = ['id', 'name', 'city', 'country']
        read_only_fields = fields


class BeverageSerializer(serializers.ModelSerializer):
    """Menu item nested inside a coffee shop."""
    
    class Meta:
        model = Beverage
        fields = ['id', 'name', 'price', 'description', 'category', 'coffee_shop']
        read_only_fields = fields


class CoffeeShopSerializer(serializers.ModelSerializer):
    """Coffee shop with nested beverages."""
    
    community_id = serializers.CharField(read_only=True)
    beverages = BeverageSerializer(many=True, read_only=True)
    
    class Meta:
        model = CoffeeShop
        fields = [
            'id',
            'name',
            'address',
            'image_url',
            'points_back_percentage',
            'current_crowdedness',
            'is_quiet_friendly',
            'opening_hours',
            'community_id',
            'beverages',
        ]
        read_only_fields = fields


class CoffeeShopFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for coffee shop listing.

    Query Parameters:
        community_id (str): Community slug (required)
    """
    
    community_id = serializers.SlugField(max_length=50, required=True)
