from django.core.management.base import BaseCommand

from apps.catalog.services.category_service import CategoryService


class Command(BaseCommand):
    help = "Insert the default protection-type and industry categories that are missing."

    def handle(self, *args, **options):
        created = CategoryService.seed_defaults()
        for category in created:
            self.stdout.write(f"  + {category.name} ({category.type})")
        self.stdout.write(self.style.SUCCESS(f"Seeded {len(created)} categories."))
