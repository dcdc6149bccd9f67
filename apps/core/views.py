"""
Health check and authentication views.
"""

import logging

from django.contrib.auth import get_user_model
from django.http import JsonResponse
from django.views import View
from django.views.decorators.csrf import csrf_exempt
from django.utils.decorators import method_decorator

from rest_framework import status
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from rest_framework_simplejwt.tokens import RefreshToken

from apps.core.exceptions import DuplicateError, ValidationError
from apps.core.observability import health_checker, HealthStatus
from apps.core.serializers import (
    CustomTokenObtainPairSerializer,
    SignupSerializer,
    UserSerializer,
    UserUpdateSerializer,
)
from apps.core.throttling import SubscribeThrottle

logger = logging.getLogger(__name__)

User = get_user_model()


@method_decorator(csrf_exempt, name='dispatch')
class HealthCheckView(View):
    """
    Health check endpoint.

    GET /health/ - Run all health checks
    GET /health/<check_name>/ - Run specific health check
    """

    def get(self, request, check_name=None):
        if check_name:
            result = health_checker.check(check_name)
            status_code = 200 if result.status == HealthStatus.HEALTHY else 503
            return JsonResponse({
                "status": result.status.value,
                "message": result.message,
                "details": result.details,
                "duration_ms": result.duration_ms,
            }, status=status_code)

        results = health_checker.check_all()
        # A degraded cache still serves traffic
        status_code = 503 if results["status"] == HealthStatus.UNHEALTHY.value else 200
        return JsonResponse(results, status=status_code)


@method_decorator(csrf_exempt, name='dispatch')
class LivenessView(View):
    """
    Liveness probe endpoint.

    Returns 200 if the application is running.
    """

    def get(self, request):
        return JsonResponse({"status": "alive"})


@method_decorator(csrf_exempt, name='dispatch')
class ReadinessView(View):
    """
    Readiness probe endpoint.

    Returns 200 once the database answers.
    """

    def get(self, request):
        db_check = health_checker.check("database")

        if db_check.status == HealthStatus.HEALTHY:
            return JsonResponse({"status": "ready"})
        return JsonResponse({
            "status": "not_ready",
            "reason": db_check.message,
        }, status=503)


# =============================================================================
# JWT Authentication Views
# =============================================================================

class CustomTokenObtainPairView(TokenObtainPairView):
    """
    Login endpoint that returns JWT tokens.

    POST /api/auth/login/
    Body: {"username": "...", "password": "..."}
    Returns: {"access": "...", "refresh": "...", "user": {...}}
    """
    serializer_class = CustomTokenObtainPairSerializer
    permission_classes = [AllowAny]


class CustomTokenRefreshView(TokenRefreshView):
    """
    Token refresh endpoint.

    POST /api/auth/refresh/
    Body: {"refresh": "..."}
    Returns: {"access": "..."}
    """
    permission_classes = [AllowAny]


class SignupView(APIView):
    """
    Create a staff account.

    POST /api/auth/signup/
    Body: {"name": "...", "email": "...", "password": "..."}
    Returns: 201 with the user and a token pair, 409 if the email is taken.
    """
    permission_classes = [AllowAny]
    throttle_classes = [SubscribeThrottle]

    def post(self, request):
        serializer = SignupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        email = serializer.validated_data['email']
        if User.objects.filter(email__iexact=email).exists():
            raise DuplicateError(
                message="An account with this email already exists.",
                field="email",
            )

        user = serializer.save()
        refresh = RefreshToken.for_user(user)
        logger.info("Staff account created for %s", email)

        return Response({
            "user": UserSerializer(user).data,
            "access": str(refresh.access_token),
            "refresh": str(refresh),
        }, status=status.HTTP_201_CREATED)


class CurrentUserView(APIView):
    """
    Get or update the current authenticated user.

    GET /api/auth/me/ - Get current user info
    PATCH /api/auth/me/ - Update name or email
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        serializer = UserSerializer(request.user)
        return Response(serializer.data)

    def patch(self, request):
        serializer = UserUpdateSerializer(
            request.user,
            data=request.data,
            partial=True
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(UserSerializer(request.user).data)


class LogoutView(APIView):
    """
    Logout endpoint - blacklist refresh token.

    POST /api/auth/logout/
    Body: {"refresh": "..."}
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        refresh_token = request.data.get('refresh')
        if not refresh_token:
            raise ValidationError(message="Refresh token required", field="refresh")

        try:
            token = RefreshToken(refresh_token)
            token.blacklist()
        except TokenError as e:
            raise ValidationError(message=str(e), field="refresh")

        return Response({"message": "Successfully logged out"})
