"""Create the first ADMIN account.

Usage: python manage.py seed_admin --email admin@example.com --password secret
Values fall back to SEED_ADMIN_EMAIL / SEED_ADMIN_PASSWORD / SEED_ADMIN_NAME.
"""
from __future__ import annotations

import os

from django.contrib.auth.models import User
from django.core.management.base import BaseCommand, CommandError

from accounts.models import Role
from accounts.utils import create_user, normalise_email


class Command(BaseCommand):
    help = "Create an ADMIN user if it does not exist yet."

    def add_arguments(self, parser):
        parser.add_argument("--email", default=os.environ.get("SEED_ADMIN_EMAIL", "admin@example.com"))
        parser.add_argument("--password", default=os.environ.get("SEED_ADMIN_PASSWORD"))
        parser.add_argument("--name", default=os.environ.get("SEED_ADMIN_NAME", "Administrator"))

    def handle(self, *args, **options):
        email = normalise_email(options["email"])
        if User.objects.filter(username=email).exists():
            self.stdout.write(f"Admin {email} already exists; nothing to do.")
            return
        password = options["password"]
        if not password:
            raise CommandError("A password is required (--password or SEED_ADMIN_PASSWORD).")
        create_user(email=email, password=password, name=options["name"], role=Role.ADMIN)
        self.stdout.write(self.style.SUCCESS(f"Admin {email} created."))
