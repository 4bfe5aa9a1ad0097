# clinic/management/commands/ensure_test_users.py
from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand

from clinic.models import User

TEST_SET = [
    ("doctor1", User.ROLE_DOCTOR),
    ("doctor2", User.ROLE_DOCTOR),
    ("patient1", User.ROLE_PATIENT),
    ("patient2", User.ROLE_PATIENT),
]


class Command(BaseCommand):
    help = "Ensure test users exist with a known password (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default="123456")

    def handle(self, *args, **opts):
        password = make_password(opts["password"])
        for username, role in TEST_SET:
            u, created = User.objects.get_or_create(
                username=username,
                defaults={"role": role, "password": password, "is_active": True,
                          "full_name": username.capitalize()},
            )
            if not created:
                # reset password, activation and role
                u.password = password
                u.role = role
                u.is_active = True
                u.save(update_fields=["password", "role", "is_active"])
            self.stdout.write(self.style.SUCCESS(f"ok: {username} ({role})"))
        self.stdout.write(self.style.SUCCESS("All test users ensured."))
