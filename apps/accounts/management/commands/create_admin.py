from __future__ import annotations

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from apps.accounts.domain.errors import AccountValidationError
from apps.accounts.domain.policies import validate_email
from apps.accounts.models import AccountProfile


class Command(BaseCommand):
    help = "Create an admin account, or promote and reset an existing one."

    def add_arguments(self, parser):
        parser.add_argument("--email", required=True)
        parser.add_argument("--password", required=True)
        parser.add_argument("--name", default="Administrator")

    @transaction.atomic
    def handle(self, *args, **options):
        try:
            email = validate_email(options["email"])
        except AccountValidationError as exc:
            raise CommandError(str(exc)) from exc

        password = options["password"]
        if len(password) < 6:
            raise CommandError("Password must be at least 6 characters")

        UserModel = get_user_model()
        user = UserModel.objects.filter(email__iexact=email).first()
        created = user is None
        if created:
            user = UserModel.objects.create_user(username=email, email=email, password=password)
        else:
            user.set_password(password)
            user.is_active = True
            user.save(update_fields=["password", "is_active"])

        AccountProfile.objects.update_or_create(
            user=user,
            defaults={
                "full_name": options["name"],
                "role": AccountProfile.ROLE_ADMIN,
                "status": AccountProfile.STATUS_ACTIVE,
                "login_attempts": 0,
                "lock_until": None,
                "registration_source": "admin",
            },
        )

        verb = "Created" if created else "Updated"
        self.stdout.write(self.style.SUCCESS(f"{verb} admin {email}"))
