from django.core.management.base import BaseCommand

from erp.models import User

# (username, role, display name)
TEST_SET = [
    ("admin", "admin", "System Administrator"),
    ("drjohn", "doctor", "Dr. John Doe"),
    ("nurse1", "nurse", "Jane Smith"),
]


class Command(BaseCommand):
    help = "Ensure the demo accounts exist with a known password (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default="password123")

    def handle(self, *args, **opts):
        for username, role, name in TEST_SET:
            u, created = User.objects.get_or_create(username=username, defaults={"role": role, "name": name})
            u.set_password(opts["password"])
            u.role = role
            u.is_active = True
            u.save(update_fields=["password", "role", "is_active"])
            self.stdout.write(self.style.SUCCESS(f"ok: {username} ({role})"))
        self.stdout.write(self.style.SUCCESS("All test users ensured."))
