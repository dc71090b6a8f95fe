from django.core.management.base import BaseCommand
from django.utils import timezone

from erp.services.dashboard import refresh


class Command(BaseCommand):
    help = "Recompute the cached dashboard aggregates."

    def handle(self, *args, **options):
        keys_refreshed = refresh()
        self.stdout.write(self.style.SUCCESS(f"Refreshed {len(keys_refreshed)} keys at {timezone.now()}"))
