from django.conf import settings
from django.views.decorators.cache import cache_page
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from .serializers import (
    CommunitySerializer,
    CoffeeShopSerializer,
    CoffeeShopFilterSerializer,
)
from .services import list_communities, list_coffee_shops, get_coffee_shop


# Catalogue endpoints are public and side-effect free, so whole responses
# are cached and marked cacheable for clients.

@extend_schema(
    responses={200: CommunitySerializer(many=True)},
    description="List all communities, ordered by name.",
    tags=['catalogue'],
)
@cache_page(settings.CATALOGUE_CACHE_SECONDS)
@api_view(['GET'])
@permission_classes([AllowAny])
def community_list(request):
    """GET /api/communities/"""
    communities = list_communities()
    return Response(CommunitySerializer(communities, many=True).data)


@extend_schema(
    parameters=[
        OpenApiParameter('community_id', OpenApiTypes.STR, required=True, description='Community slug'),
    ],
    responses={200: CoffeeShopSerializer(many=True)},
    description="List active coffee shops of a community with their beverages.",
    tags=['catalogue'],
)
@cache_page(settings.CATALOGUE_CACHE_SECONDS)
@api_view(['GET'])
@permission_classes([AllowAny])
def coffee_shop_list(request):
    """GET /api/coffee-shops/?community_id=nyc"""
    filter_serializer = CoffeeShopFilterSerializer(data=request.query_params)
    filter_serializer.is_valid(raise_exception=True)

    shops = list_coffee_shops(community_id=filter_serializer.validated_data['community_id'])
    return Response(CoffeeShopSerializer(shops, many=True).data)


@extend_schema(
    responses={200: CoffeeShopSerializer},
    description="Get a single coffee shop with its beverages.",
    tags=['catalogue'],
)
@cache_page(settings.CATALOGUE_CACHE_SECONDS)
@api_view(['GET'])
@permission_classes([AllowAny])
def coffee_shop_detail(request, pk):
    """GET /api/coffee-shops/{id}/"""
    shop = get_coffee_shop(shop_id=pk)
    return Response(CoffeeShopSerializer(shop).data)
