from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema

from .serializers import (
    UserRegistrationSerializer,
    UserLoginSerializer,
    UserSerializer,
    ProfileUpdateSerializer,
    DeactivateAccountSerializer,
)
from .services import (
    register_user,
    authenticate_user,
    update_profile,
    deactivate_user_account,
)


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()
    detail = serializers.CharField()


def _tokens_for(user):
    refresh = RefreshToken.for_user(user)
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


@extend_schema(
    request=UserRegistrationSerializer,
    responses={
        201: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Register a new member in a community. The points account starts at zero.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """POST /api/users/"""
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    # Remove password_confirm before passing to service
    data = serializer.validated_data.copy()
    data.pop('password_confirm', None)

    user = register_user(**data)

    return Response({
        'message': 'Registration successful',
        'user': UserSerializer(user).data,
        'tokens': _tokens_for(user),
    }, status=status.HTTP_201_CREATED)


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Authenticate with email and password to receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """POST /api/users/login/"""
    serializer = UserLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = authenticate_user(
        email=serializer.validated_data['email'],
        password=serializer.validated_data['password'],
    )

    return Response({
        'message': 'Login successful',
        'user': UserSerializer(user).data,
        'tokens': _tokens_for(user),
    })


@extend_schema(
    methods=['GET'],
    responses={200: UserSerializer},
    description="Get the current member's profile, including points balance.",
    tags=['auth'],
)
@extend_schema(
    methods=['PATCH'],
    request=ProfileUpdateSerializer,
    responses={200: UserSerializer, 400: ErrorResponseSerializer},
    description="Update display name, avatar or community.",
    tags=['auth'],
)
@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def me(request):
    """GET/PATCH /api/users/me/"""
    if request.method == 'GET':
        return Response(UserSerializer(request.user).data)

    serializer = ProfileUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = update_profile(user=request.user, **serializer.validated_data)
    # Community changes are written by the account store
    user.refresh_from_db()
    return Response(UserSerializer(user).data)


@extend_schema(
    request=DeactivateAccountSerializer,
    responses={
        200: MessageResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Deactivate the current member. Balance and history are kept but frozen.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def deactivate(request):
    """POST /api/users/me/deactivate/"""
    serializer = DeactivateAccountSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    deactivate_user_account(user=request.user, password=serializer.validated_data['password'])

    return Response({'message': 'Account deactivated'})
