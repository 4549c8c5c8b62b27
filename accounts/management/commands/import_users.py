"""Bulk-create users from a CSV file with columns name,email,password,role.

Rows whose e-mail already exists are skipped; a missing role means STUDENT.
"""
from __future__ import annotations

import csv

from django.core.management.base import BaseCommand, CommandError

from accounts.models import Role
from accounts.utils import create_user
from api.exceptions import ConflictError, ValidationError


class Command(BaseCommand):
    help = "Import users from a CSV file (name,email,password,role)."

    def add_arguments(self, parser):
        parser.add_argument("csv_path")

    def handle(self, *args, **options):
        path = options["csv_path"]
        created = skipped = 0
        try:
            fh = open(path, newline="", encoding="utf-8")
        except OSError as exc:
            raise CommandError(f"Cannot read {path}: {exc}") from exc
        with fh:
            for line_no, row in enumerate(csv.DictReader(fh), start=2):
                role = (row.get("role") or Role.STUDENT).strip().upper()
                try:
                    create_user(
                        email=row.get("email", ""),
                        password=row.get("password", ""),
                        name=(row.get("name") or "").strip(),
                        role=role,
                    )
                except ConflictError:
                    skipped += 1
                    continue
                except ValidationError as exc:
                    self.stderr.write(f"Line {line_no}: {exc.detail}")
                    skipped += 1
                    continue
                created += 1
        self.stdout.write(self.style.SUCCESS(f"Imported {created} user(s), skipped {skipped}."))
