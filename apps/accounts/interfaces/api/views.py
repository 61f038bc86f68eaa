from __future__ import annotations

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import AccessToken

from apps.accounts.application.use_cases.admin_login import AdminLoginCommand, AdminLoginUseCase
from apps.accounts.domain.errors import (
    AccountInactiveError,
    AccountLockedError,
    AccountValidationError,
    AdminPrivilegesRequiredError,
    InvalidCredentialsError,
)
from apps.accounts.infrastructure.authentication import OptionalJWTAuthentication
from apps.accounts.interfaces.api.request_context import client_ip, user_agent
from apps.accounts.interfaces.api.serializers import AdminLoginSerializer
from apps.accounts.services.audit_service import AccountAuditService
from apps.accounts.services.profile_service import AccountProfileService
from bondex.api_responses import api_error, api_success


def _cookie_name() -> str:
    return getattr(settings, "ADMIN_TOKEN_COOKIE", "adminToken")


class AdminLoginAPI(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = AdminLoginSerializer(data=request.data)
        if not serializer.is_valid():
            return api_error(message="Please provide email and password")

        try:
            result = AdminLoginUseCase.execute(
                AdminLoginCommand(
                    email=serializer.validated_data.get("email", ""),
                    password=serializer.validated_data.get("password", ""),
                    ip_address=client_ip(request),
                    user_agent=user_agent(request),
                )
            )
        except AccountValidationError as exc:
            return api_error(message=str(exc), field=exc.field, http_status=status.HTTP_400_BAD_REQUEST)
        except InvalidCredentialsError as exc:
            return api_error(message=str(exc), http_status=status.HTTP_401_UNAUTHORIZED)
        except AdminPrivilegesRequiredError as exc:
            return api_error(message=str(exc), http_status=status.HTTP_403_FORBIDDEN)
        except AccountLockedError as exc:
            return api_error(message=str(exc), http_status=status.HTTP_423_LOCKED)
        except AccountInactiveError as exc:
            return api_error(message=str(exc), http_status=status.HTTP_401_UNAUTHORIZED)

        token = str(AccessToken.for_user(result.user))
        response = api_success(
            message="Admin login successful",
            data={
                "user": AccountProfileService.safe_user_data(result.profile),
                "token": token,
            },
        )
        lifetime = settings.SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"]
        response.set_cookie(
            _cookie_name(),
            token,
            max_age=int(lifetime.total_seconds()),
            httponly=True,
            secure=not settings.DEBUG,
            samesite="Lax",
        )
        return response


class AdminLogoutAPI(APIView):
    permission_classes = [AllowAny]
    authentication_classes = [OptionalJWTAuthentication]

    def post(self, request):
        if request.user and request.user.is_authenticated:
            AccountAuditService.record_action(
                user=request.user,
                action=AccountAuditService.ACTION_LOGOUT,
                ip_address=client_ip(request),
                user_agent=user_agent(request),
            )
        response = api_success(message="Admin logged out successfully")
        response.delete_cookie(_cookie_name())
        return response


class AdminProfileAPI(APIView):
    def get(self, request):
        profile = AccountProfileService.profile_for(request.user)
        return api_success(data=AccountProfileService.safe_user_data(profile))
