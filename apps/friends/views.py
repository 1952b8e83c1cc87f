from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from .serializers import (
    FriendRequestCreateSerializer,
    FriendRequestRespondSerializer,
    PendingRequestFilterSerializer,
    FriendRequestSerializer,
    FriendSerializer,
)
from .services import send_request, respond_to_request, list_friends, list_pending_requests


@extend_schema(
    methods=['GET'],
    parameters=[
        OpenApiParameter('direction', OpenApiTypes.STR, required=False, description='incoming, outgoing or all'),
    ],
    responses={200: FriendRequestSerializer(many=True)},
    description="List pending friend requests involving the caller.",
    tags=['friends'],
)
@extend_schema(
    methods=['POST'],
    request=FriendRequestCreateSerializer,
    responses={201: FriendRequestSerializer, 200: FriendRequestSerializer},
    description="Send a friend request. Resending with the same idempotency_key returns the original request.",
    tags=['friends'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def friend_requests(request):
    """
    GET  /api/friend-requests/?direction=incoming
    POST /api/friend-requests/
    """
    if request.method == 'GET':
        filter_serializer = PendingRequestFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        pending = list_pending_requests(
            user=request.user,
            direction=filter_serializer.validated_data['direction'],
        )
        return Response(FriendRequestSerializer(pending, many=True).data)

    serializer = FriendRequestCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    friend_request, replayed = send_request(
        from_user=request.user,
        to_user_id=serializer.validated_data['to_user_id'],
        idempotency_key=serializer.validated_data['idempotency_key'],
    )
    return Response(
        FriendRequestSerializer(friend_request).data,
        status=status.HTTP_200_OK if replayed else status.HTTP_201_CREATED
    )


@extend_schema(
    request=FriendRequestRespondSerializer,
    responses={200: FriendRequestSerializer},
    description="Accept or decline a pending friend request addressed to the caller.",
    tags=['friends'],
)
@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def friend_request_respond(request, pk):
    """PATCH /api/friend-requests/{id}/"""
    serializer = FriendRequestRespondSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    friend_request, _ = respond_to_request(
        request_id=pk,
        user=request.user,
        accept=serializer.validated_data['action'] == 'accept',
        idempotency_key=serializer.validated_data['idempotency_key'],
    )
    return Response(FriendRequestSerializer(friend_request).data)


@extend_schema(
    responses={200: FriendSerializer(many=True)},
    description="Friends of the caller with their balances, highest first.",
    tags=['friends'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def friend_list(request):
    """GET /api/friends/"""
    friends = list_friends(user=request.user)
    return Response(FriendSerializer(friends, many=True).data)
