"""
Management command to prepare the active storage backend.

Shows which backend the environment selects, creates relational tables
and columns up front (instead of on first request), and can seed the
default salesperson and a set of categories.

Usage:
    python manage.py setup_storage
    python manage.py setup_storage --seed-sales --category Snacks --category Drinks
"""
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from apps.catalog.repositories import CategoryRepository, SalespersonRepository
from apps.core.exceptions import StorefrontError
from apps.core.storage import SqlStorage, StorageConfig, get_storage_backend
from apps.core.storage.schema import ALL_COLLECTIONS


class Command(BaseCommand):
    help = 'Prepare the configured storage backend and optionally seed data'

    def add_arguments(self, parser):
        parser.add_argument(
            '--seed-sales',
            action='store_true',
            help='Add the default salesperson from STOREFRONT_SALES_NAME/PHONE',
        )
        parser.add_argument(
            '--category',
            action='append',
            default=[],
            help='Category name to create (repeatable)',
        )

    def handle(self, *args, **options):
        config = StorageConfig.from_settings()
        storage = get_storage_backend()

        self.stdout.write(f'Storage backend: {config.backend}')
        if config.read_only:
            self.stdout.write(self.style.WARNING(
                'Running on a managed host without DATABASE_URL or KV_URL: storage is read-only.'
            ))

        try:
            storage.check()
        except Exception as e:
            raise CommandError(f'Storage backend is not reachable: {e}')

        if isinstance(storage, SqlStorage):
            for collection in ALL_COLLECTIONS:
                storage.ensure_schema(collection)
                self.stdout.write(f'  table ready: {collection.table}')

        try:
            if options['seed_sales']:
                person = SalespersonRepository(storage).add(
                    settings.STOREFRONT_SALES_NAME,
                    settings.STOREFRONT_SALES_PHONE,
                )
                self.stdout.write(self.style.SUCCESS(f'Salesperson: {person}'))

            categories = CategoryRepository(storage)
            for name in options['category']:
                category = categories.add(name)
                self.stdout.write(self.style.SUCCESS(f'Category: {category.name} ({category.id})'))
        except StorefrontError as e:
            raise CommandError(str(e))

        self.stdout.write(self.style.SUCCESS('\nDone!'))
