from __future__ import annotations

from datetime import timedelta

from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework.test import APIClient

from apps.accounts.domain.policies import next_failed_attempt_state
from apps.accounts.models import AccountAuditLog, AccountProfile
from apps.accounts.testing import bearer_for, create_user_with_profile


class FailedAttemptPolicyTests(TestCase):
    def test_counter_increments_until_lock(self):
        now = timezone.now()
        state = next_failed_attempt_state(attempts=3, lock_until=None, now=now, max_attempts=5, lock_minutes=120)
        self.assertEqual(state.attempts, 4)
        self.assertIsNone(state.lock_until)

        state = next_failed_attempt_state(attempts=4, lock_until=None, now=now, max_attempts=5, lock_minutes=120)
        self.assertEqual(state.attempts, 5)
        self.assertEqual(state.lock_until, now + timedelta(minutes=120))

    def test_expired_lock_restarts_count(self):
        now = timezone.now()
        state = next_failed_attempt_state(
            attempts=7,
            lock_until=now - timedelta(minutes=1),
            now=now,
            max_attempts=5,
            lock_minutes=120,
        )
        self.assertEqual(state.attempts, 1)
        self.assertIsNone(state.lock_until)


class AdminLoginApiTests(TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.client = APIClient()
        self.admin = create_user_with_profile(email="admin@bondex.test", password="StrongPass12345!")

    def test_login_returns_token_and_sets_cookie(self):
        response = self.client.post(
            "/api/admin/login/",
            data={"email": "ADMIN@bondex.test", "password": "StrongPass12345!"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertTrue(payload["success"])
        self.assertIn("token", payload["data"])
        self.assertEqual(payload["data"]["user"]["role"], "admin")
        self.assertIn("adminToken", response.cookies)
        self.assertTrue(AccountAuditLog.objects.filter(user=self.admin, action="login_succeeded").exists())

    def test_missing_fields_rejected(self):
        response = self.client.post("/api/admin/login/", data={"email": "admin@bondex.test"}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()["success"])

    def test_wrong_password_is_401(self):
        response = self.client.post(
            "/api/admin/login/",
            data={"email": "admin@bondex.test", "password": "nope"},
            format="json",
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Invalid credentials")
        profile = AccountProfile.objects.get(user=self.admin)
        self.assertEqual(profile.login_attempts, 1)

    def test_customer_cannot_login_as_admin(self):
        create_user_with_profile(email="shopper@bondex.test", role=AccountProfile.ROLE_CUSTOMER)
        response = self.client.post(
            "/api/admin/login/",
            data={"email": "shopper@bondex.test", "password": "StrongPass12345!"},
            format="json",
        )
        self.assertEqual(response.status_code, 403)

    @override_settings(ACCOUNT_MAX_LOGIN_ATTEMPTS=3)
    def test_account_locks_after_repeated_failures(self):
        for _ in range(3):
            self.client.post(
                "/api/admin/login/",
                data={"email": "admin@bondex.test", "password": "wrong"},
                format="json",
            )
        profile = AccountProfile.objects.get(user=self.admin)
        self.assertIsNotNone(profile.lock_until)

        response = self.client.post(
            "/api/admin/login/",
            data={"email": "admin@bondex.test", "password": "StrongPass12345!"},
            format="json",
        )
        self.assertEqual(response.status_code, 423)

    def test_successful_login_resets_attempts(self):
        AccountProfile.objects.filter(user=self.admin).update(login_attempts=3)
        response = self.client.post(
            "/api/admin/login/",
            data={"email": "admin@bondex.test", "password": "StrongPass12345!"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        profile = AccountProfile.objects.get(user=self.admin)
        self.assertEqual(profile.login_attempts, 0)
        self.assertIsNotNone(profile.last_login_at)


class AdminAuthenticationTests(TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.client = APIClient()
        self.admin = create_user_with_profile()

    def test_profile_requires_token(self):
        response = self.client.get("/api/admin/profile/")
        self.assertEqual(response.status_code, 401)
        self.assertFalse(response.json()["success"])

    def test_profile_with_bearer_token(self):
        response = self.client.get("/api/admin/profile/", HTTP_AUTHORIZATION=bearer_for(self.admin))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["email"], "admin@bondex.test")

    def test_profile_with_cookie_token(self):
        token = bearer_for(self.admin).split(" ", 1)[1]
        self.client.cookies["adminToken"] = token
        response = self.client.get("/api/admin/profile/")
        self.assertEqual(response.status_code, 200)

    def test_invalid_token_rejected(self):
        response = self.client.get("/api/admin/profile/", HTTP_AUTHORIZATION="Bearer not-a-token")
        self.assertEqual(response.status_code, 401)

    def test_inactive_admin_rejected(self):
        AccountProfile.objects.filter(user=self.admin).update(status=AccountProfile.STATUS_SUSPENDED)
        response = self.client.get("/api/admin/profile/", HTTP_AUTHORIZATION=bearer_for(self.admin))
        self.assertEqual(response.status_code, 401)

    def test_customer_token_forbidden(self):
        customer = create_user_with_profile(email="c@bondex.test", role=AccountProfile.ROLE_CUSTOMER)
        response = self.client.get("/api/admin/profile/", HTTP_AUTHORIZATION=bearer_for(customer))
        self.assertEqual(response.status_code, 403)

    def test_logout_clears_cookie(self):
        response = self.client.post("/api/admin/logout/", HTTP_AUTHORIZATION=bearer_for(self.admin))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.cookies["adminToken"].value, "")
