from __future__ import annotations

from django.contrib.auth import get_user_model
from django.db.models import Count, Q

from apps.accounts.domain.types import ANONYMOUS, AuthContext
from apps.accounts.models import AccountProfile


class AccountProfileService:
    @staticmethod
    def profile_for(user) -> AccountProfile:
        profile = AccountProfile.objects.filter(user=user).first()
        if profile is None:
            profile = AccountProfile.objects.create(
                user=user,
                full_name=user.get_full_name() or user.get_username(),
            )
        return profile

    @staticmethod
    def auth_context_for(user) -> AuthContext:
        if user is None or not getattr(user, "is_authenticated", False):
            return ANONYMOUS
        profile = AccountProfile.objects.filter(user=user).only("role").first()
        return AuthContext(
            user_id=user.id,
            email=user.email or "",
            role=profile.role if profile else AccountProfile.ROLE_CUSTOMER,
        )

    @staticmethod
    def safe_user_data(profile: AccountProfile) -> dict:
        user = profile.user
        return {
            "id": user.id,
            "name": profile.full_name,
            "email": user.email,
            "role": profile.role,
            "status": profile.status,
            "phone": profile.phone,
            "address": {
                "street": profile.street,
                "city": profile.city,
                "county": profile.county,
                "postalCode": profile.postal_code,
                "country": profile.country,
            },
            "lastLogin": profile.last_login_at,
            "totalOrders": profile.total_orders,
            "totalSpent": profile.total_spent,
            "averageOrderValue": profile.average_order_value,
            "createdAt": profile.created_at,
        }

    @staticmethod
    def user_stats() -> dict:
        UserModel = get_user_model()
        total_users = UserModel.objects.count()
        profile_stats = AccountProfile.objects.aggregate(
            active_users=Count("id", filter=Q(status=AccountProfile.STATUS_ACTIVE)),
            admin_users=Count("id", filter=Q(role=AccountProfile.ROLE_ADMIN)),
        )
        return {
            "totalUsers": total_users,
            "activeUsers": profile_stats["active_users"] or 0,
            "adminUsers": profile_stats["admin_users"] or 0,
        }
