from django.urls import path
from . import views

app_name = 'friends'

urlpatterns = [
    # GET   /api/friend-requests/?direction=   - Pending requests
    # POST  /api/friend-requests/              - Send request
    # PATCH /api/friend-requests/{id}/         - Accept / decline
    path('friend-requests/', views.friend_requests, name='friend-request-list'),
    path('friend-requests/<uuid:pk>/', views.friend_request_respond, name='friend-request-detail'),

    # GET   /api/friends/                      - Friend leaderboard
    path('friends/', views.friend_list, name='friend-list'),
]
