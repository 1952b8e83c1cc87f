from django.urls import path
from . import views

app_name = 'communities'

urlpatterns = [
    # GET /api/communities/                  - List communities
    path('communities/', views.community_list, name='community-list'),

    # GET /api/coffee-shops/?community_id=   - Shops with nested beverages
    # GET /api/coffee-shops/{id}/            - Shop detail
    path('coffee-shops/', views.coffee_shop_list, name='coffee-shop-list'),
    path('coffee-shops/<uuid:pk>/', views.coffee_shop_detail, name='coffee-shop-detail'),
]
