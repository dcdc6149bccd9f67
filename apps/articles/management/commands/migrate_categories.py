"""
Convert legacy article categories to the list format.

Older rows store a single category as a bare string ("Politics"). This
rewrites them as one-element lists (["Politics"]) and tidies lists that
carry duplicate or blank labels. Running it twice changes nothing.

Usage:
    python manage.py migrate_categories
    python manage.py migrate_categories --dry-run
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.articles.models import Article
from apps.articles.services import clean_categories


class Command(BaseCommand):
    help = 'Rewrite string categories as lists of labels'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Report what would change without writing'
        )
        parser.add_argument(
            '--batch-size',
            type=int,
            default=500,
            help='Rows read per query (default: 500)'
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        if dry_run:
            self.stdout.write(self.style.NOTICE('DRY RUN - no rows will be written'))

        rows = Article.objects.values_list('id', 'categories').iterator(
            chunk_size=options['batch_size']
        )

        converted = 0
        unchanged = 0
        empty = []

        with transaction.atomic():
            for pk, categories in rows:
                cleaned = clean_categories(categories)
                if not cleaned:
                    empty.append(pk)
                    continue
                if cleaned == categories:
                    unchanged += 1
                    continue

                converted += 1
                self.stdout.write(f"  {pk}: {categories!r} -> {cleaned!r}")
                if not dry_run:
                    # update() leaves updated_at alone
                    Article.objects.filter(id=pk).update(categories=cleaned)

        verb = 'Would convert' if dry_run else 'Converted'
        self.stdout.write(self.style.SUCCESS(
            f"{verb} {converted} article(s); {unchanged} already up to date."
        ))
        if empty:
            self.stdout.write(self.style.WARNING(
                f"{len(empty)} article(s) have no usable category and were left as is:"
            ))
            for pk in empty:
                self.stdout.write(f"  - {pk}")
