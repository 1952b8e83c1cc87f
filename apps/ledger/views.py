from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.core.exceptions import UnauthorizedError
from .serializers import (
    EarnInputSerializer,
    RedeemInputSerializer,
    TransferInputSerializer,
    EntryFilterSerializer,
    LedgerEntrySerializer,
    LedgerResultSerializer,
    EarnResultSerializer,
    BalanceSerializer,
)
from .services import earn, redeem, transfer, get_balance, list_entries


class EntryPagination(PageNumberPagination):
    """Pagination for transaction history."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


def _result_response(entry, replayed, **extra):
    body = {
        'balance': entry.balance_after,
        'entry': LedgerEntrySerializer(entry).data,
        'replayed': replayed,
        **extra,
    }
    return Response(body, status=status.HTTP_200_OK if replayed else status.HTTP_201_CREATED)


@extend_schema(
    request=EarnInputSerializer,
    responses={201: EarnResultSerializer, 200: EarnResultSerializer},
    description=(
        "Earn points for a purchase at a coffee shop. Points are the purchase "
        "amount times the shop's points-back percentage, rounded down. "
        "Retrying with the same idempotency_key returns the original result."
    ),
    tags=['ledger'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def earn_points(request):
    """POST /api/ledger/earn/"""
    serializer = EarnInputSerializer(data=request.data, context={'request': request})
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    entry, replayed = earn(
        account_id=request.user.id,
        coffee_shop_id=data['coffee_shop_id'],
        purchase_amount=data['purchase_amount'],
        idempotency_key=data['idempotency_key'],
        description=data['description'],
    )
    return _result_response(entry, replayed, points_awarded=entry.amount)


@extend_schema(
    request=RedeemInputSerializer,
    responses={201: LedgerResultSerializer, 200: LedgerResultSerializer},
    description="Redeem points at a coffee shop.",
    tags=['ledger'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def redeem_points(request):
    """POST /api/ledger/redeem/"""
    serializer = RedeemInputSerializer(data=request.data, context={'request': request})
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    entry, replayed = redeem(
        account_id=request.user.id,
        coffee_shop_id=data['coffee_shop_id'],
        amount=data['amount'],
        idempotency_key=data['idempotency_key'],
        description=data['description'],
    )
    return _result_response(entry, replayed)


@extend_schema(
    request=TransferInputSerializer,
    responses={201: LedgerResultSerializer, 200: LedgerResultSerializer},
    description="Send points to another member. The response shows the sender's side.",
    tags=['ledger'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def transfer_points(request):
    """POST /api/ledger/transfer/"""
    serializer = TransferInputSerializer(data=request.data, context={'request': request})
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    entry, replayed = transfer(
        sender_id=request.user.id,
        receiver_id=data['receiver_id'],
        amount=data['amount'],
        idempotency_key=data['idempotency_key'],
        description=data['description'],
    )
    return _result_response(entry, replayed)


@extend_schema(
    responses={200: BalanceSerializer},
    description="Current points balance and version of the caller's account.",
    tags=['ledger'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def balance(request):
    """GET /api/ledger/balance/"""
    account = get_balance(account_id=request.user.id)
    return Response(BalanceSerializer({
        'balance': account.balance,
        'version': account.version,
    }).data)


@extend_schema(
    parameters=[
        OpenApiParameter('kind', OpenApiTypes.STR, required=False, description='earn, redeem, send or receive'),
    ],
    responses={200: LedgerEntrySerializer(many=True)},
    description="Transaction history of a member, newest first. Members can only read their own.",
    tags=['ledger'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_transactions(request, pk):
    """GET /api/users/{id}/transactions/"""
    if pk != request.user.id:
        raise UnauthorizedError("You can only view your own transactions")

    filter_serializer = EntryFilterSerializer(data=request.query_params)
    filter_serializer.is_valid(raise_exception=True)

    entries = list_entries(account_id=pk)
    kind = filter_serializer.validated_data.get('kind')
    if kind:
        entries = entries.filter(kind=kind)

    paginator = EntryPagination()
    page = paginator.paginate_queryset(entries, request)
    return paginator.get_paginated_response(LedgerEntrySerializer(page, many=True).data)
