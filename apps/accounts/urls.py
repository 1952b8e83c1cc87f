from django.urls import path
from apps.ledger import views as ledger_views
from . import views

app_name = 'users'

urlpatterns = [
    # Registration and authentication
    path('', views.register, name='register'),
    path('login/', views.login, name='login'),

    # Current member
    path('me/', views.me, name='me'),
    path('me/deactivate/', views.deactivate, name='deactivate'),

    # GET /api/users/{id}/transactions/ - Own transaction history
    path('<uuid:pk>/transactions/', ledger_views.user_transactions, name='transactions'),
]
