# accounts/views.py
import logging
from datetime import timedelta

from django.contrib.auth import authenticate, get_user_model
from django.db import transaction
from django.db.models import Count, Q
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from common.notifier import notify_change
from common.pagination import paginated_list
from common.permissions import IsAdminRole
from .filters import ACCOUNT_FILTERS
from .serializers import (
    AdminUserSerializer,
    ChangePasswordSerializer,
    LoginSerializer,
    ProfileSerializer,
    RegisterSerializer,
    RoleSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)

User = get_user_model()

TOPIC = 'users'


def _issue_token(user):
    # One active token per account
    Token.objects.filter(user=user).delete()
    return Token.objects.create(user=user)


# ============================================================================
# Auth Endpoints
# ============================================================================

@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """
    API Endpoint: POST /api/auth/register/
    Creates a regular account and returns it with an auth token.
    Expects: username, email, password
    """
    serializer = RegisterSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    with transaction.atomic():
        user = serializer.save()
        token = _issue_token(user)

    logger.info(f"Registered account {user.pk}")
    return Response({
        "success": True,
        "message": "User registered successfully",
        "data": {"user": UserSerializer(user).data, "token": token.key},
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """
    API Endpoint: POST /api/auth/login/
    Authenticates by email and password and returns a fresh token.
    """
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = authenticate(
        request,
        email=serializer.validated_data['email'],
        password=serializer.validated_data['password'],
    )
    if not user:
        return Response({
            "success": False,
            "message": "Invalid email or password"
        }, status=status.HTTP_401_UNAUTHORIZED)

    token = _issue_token(user)
    return Response({
        "success": True,
        "message": "Login successful",
        "data": {"user": UserSerializer(user).data, "token": token.key},
    }, status=status.HTTP_200_OK)


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated])
def profile(request):
    """
    API Endpoint: GET|PUT /api/auth/profile/
    Returns or updates (username, email) the authenticated account.
    """
    if request.method == 'GET':
        return Response({"success": True, "data": {"user": UserSerializer(request.user).data}})

    serializer = ProfileSerializer(request.user, data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    with transaction.atomic():
        user = serializer.save()

    return Response({
        "success": True,
        "message": "Profile updated successfully",
        "data": {"user": UserSerializer(user).data},
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def change_password(request):
    serializer = ChangePasswordSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = request.user
    if not user.check_password(serializer.validated_data['current_password']):
        return Response({
            "success": False,
            "message": "Current password is incorrect"
        }, status=status.HTTP_400_BAD_REQUEST)

    user.set_password(serializer.validated_data['new_password'])
    user.save(update_fields=['password', 'updated_at'])
    return Response({"success": True, "message": "Password changed successfully"})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def refresh_token(request):
    """Rotate the caller's token; the old one stops working immediately."""
    token = _issue_token(request.user)
    return Response({
        "success": True,
        "message": "Token refreshed successfully",
        "data": {"token": token.key},
    })


# ============================================================================
# Account Management (admin)
# ============================================================================

@api_view(['GET', 'POST'])
@permission_classes([IsAdminRole])
def user_list(request):
    """GET: filtered, paginated accounts. POST: create an account."""
    if request.method == 'GET':
        data = paginated_list(request, User.objects.all(), ACCOUNT_FILTERS, UserSerializer, key='users')
        return Response({"success": True, "message": "Users retrieved successfully", "data": data})

    serializer = AdminUserSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    with transaction.atomic():
        user = serializer.save()
        payload = UserSerializer(user).data
        notify_change(TOPIC, 'user_created', {"user": payload, "message": "New user created"})

    logger.info(f"Account {user.pk} created by {request.user.pk}")
    return Response({
        "success": True,
        "message": "User created successfully",
        "data": {"user": payload},
    }, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminRole])
def user_detail(request, user_id):
    user = get_object_or_404(User, id=user_id)

    if request.method == 'GET':
        return Response({"success": True, "data": {"user": UserSerializer(user).data}})

    if request.method == 'DELETE':
        with transaction.atomic():
            user.delete()
            notify_change(TOPIC, 'user_deleted', {"userId": user_id, "message": "User deleted"})
        logger.info(f"Account {user_id} deleted by {request.user.pk}")
        return Response({"success": True, "message": "User deleted successfully"})

    serializer = AdminUserSerializer(user, data=request.data, partial=request.method == 'PATCH')
    serializer.is_valid(raise_exception=True)
    with transaction.atomic():
        user = serializer.save()
        payload = UserSerializer(user).data
        notify_change(TOPIC, 'user_updated', {"user": payload, "message": "User updated"})

    return Response({
        "success": True,
        "message": "User updated successfully",
        "data": {"user": payload},
    })


@api_view(['PATCH'])
@permission_classes([IsAdminRole])
def user_role(request, user_id):
    serializer = RoleSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({
            "success": False,
            "message": "Invalid role. Must be either admin or user"
        }, status=status.HTTP_400_BAD_REQUEST)

    user = get_object_or_404(User, id=user_id)
    with transaction.atomic():
        user.role = serializer.validated_data['role']
        user.save(update_fields=['role', 'updated_at'])
        payload = UserSerializer(user).data
        notify_change(TOPIC, 'user_role_updated', {"user": payload, "message": "User role updated"})

    return Response({
        "success": True,
        "message": "User role updated successfully",
        "data": {"user": payload},
    })


@api_view(['GET'])
@permission_classes([IsAdminRole])
def user_stats(request):
    since = timezone.now() - timedelta(days=30)
    stats = User.objects.aggregate(
        totalUsers=Count('id'),
        adminUsers=Count('id', filter=Q(role='admin')),
        regularUsers=Count('id', filter=Q(role='user')),
        recentUsers=Count('id', filter=Q(date_joined__gte=since)),
    )
    return Response({
        "success": True,
        "message": "User statistics retrieved successfully",
        "data": stats,
    })
