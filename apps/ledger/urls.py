from django.urls import path
from . import views

app_name = 'ledger'

urlpatterns = [
    # POST /api/ledger/earn/       - Earn points for a purchase
    # POST /api/ledger/redeem/     - Redeem points at a shop
    # POST /api/ledger/transfer/   - Send points to another member
    # GET  /api/ledger/balance/    - Caller's balance and version
    path('earn/', views.earn_points, name='earn'),
    path('redeem/', views.redeem_points, name='redeem'),
    path('transfer/', views.transfer_points, name='transfer'),
    path('balance/', views.balance, name='balance'),
]
