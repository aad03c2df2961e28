from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from apps.catalog.services import CatalogService
from apps.utils.exceptions import ShopError


class Command(BaseCommand):
    help = 'Seed the products table from a JSON file (only when it is empty)'

    def add_arguments(self, parser):
        parser.add_argument(
            'file_path', nargs='?', type=str, default=None,
            help='Path to products JSON (defaults to CATALOG_SEED_FILE)',
        )

    def handle(self, *args, **kwargs):
        file_path = kwargs['file_path'] or settings.CATALOG_SEED_FILE

        try:
            count = CatalogService.seed_from_file(file_path)
        except ShopError as e:
            raise CommandError(f'Seeding failed: {e.message}') from e

        if count:
            self.stdout.write(self.style.SUCCESS(f'Database seeded with {count} products from {file_path}'))
        else:
            self.stdout.write(self.style.WARNING('Products table is not empty, nothing seeded.'))
