"""Create an API admin account, or reset an existing one's password."""

import getpass
import os

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError
from django.core.validators import validate_email

from apps.accounts.models import Admin
from apps.accounts.validators import validate_admin_password


class Command(BaseCommand):
    help = "Create an admin for the contact management API (or reset one with --reset)."

    def add_arguments(self, parser):
        parser.add_argument("email", type=str, help="Admin email address.")
        parser.add_argument(
            "--password",
            type=str,
            help="Plain-text password (falls back to ADMIN_PASSWORD, then an interactive prompt).",
        )
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Reset the password of an existing admin, re-activate it and clear any lockout.",
        )

    def handle(self, *args, **options):
        email = options["email"].strip().lower()
        try:
            validate_email(email)
        except ValidationError as exc:
            raise CommandError(f"Invalid email address: {email}") from exc

        existing = Admin.objects.filter(email=email).first()
        if existing and not options["reset"]:
            raise CommandError(f"Admin {email} already exists. Use --reset to change its password.")
        if not existing and options["reset"]:
            raise CommandError(f"No admin with email {email} to reset.")

        password = options.get("password") or os.environ.get("ADMIN_PASSWORD")
        if not password:
            password = getpass.getpass("Password: ")
            if password != getpass.getpass("Confirm password: "):
                raise CommandError("Passwords do not match.")

        try:
            validate_admin_password(password)
        except ValidationError as exc:
            raise CommandError(" ".join(exc.messages)) from exc

        if existing:
            existing.set_password(password)
            existing.is_active = True
            existing.login_attempts = 0
            existing.lock_until = None
            existing.save()
            self.stdout.write(self.style.SUCCESS(f"Password for admin {email} reset."))
            return

        Admin.objects.create_admin(email, password)
        self.stdout.write(self.style.SUCCESS(f"Admin {email} created."))
