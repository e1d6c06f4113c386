"""
Management command to rebuild media descriptors and rendered HTML.

Re-runs embed normalization, media extraction, metrics and rendering for
stored articles. Useful after changing embed patterns or the sanitizer
allow-list.
"""

from django.core.management.base import BaseCommand

from journal.models import Article
from journal.tasks import rebuild_article_media


class Command(BaseCommand):
    help = "Rebuild media descriptors, metrics and cached HTML for articles"

    def add_arguments(self, parser):
        parser.add_argument(
            "--article-id",
            type=int,
            action="append",
            dest="article_ids",
            help="Rebuild a specific article by ID (repeatable)",
        )
        parser.add_argument(
            "--slug",
            type=str,
            help="Rebuild a specific article by slug",
        )
        parser.add_argument(
            "--status",
            type=str,
            choices=["draft", "published"],
            help="Only rebuild articles with this status",
        )

    def handle(self, *args, **options):
        article_ids = options.get("article_ids")
        slug = options.get("slug")
        status = options.get("status")

        queryset = Article.objects.all()
        if article_ids:
            queryset = queryset.filter(pk__in=article_ids)
        if slug:
            queryset = queryset.filter(slug=slug)
        if status:
            queryset = queryset.filter(status=status)

        ids = list(queryset.values_list("pk", flat=True))
        if not ids:
            self.stdout.write(self.style.WARNING("No articles matched"))
            return

        self.stdout.write(f"Rebuilding {len(ids)} article(s)...")
        results = rebuild_article_media(ids)

        self.stdout.write(
            self.style.SUCCESS(
                f"Rebuilt {results['successful']} article(s), "
                f"{results['media_items']} media item(s)"
            )
        )
        if results["failed"]:
            self.stdout.write(self.style.ERROR(f"{results['failed']} article(s) failed:"))
            for error in results["errors"]:
                self.stdout.write(f"  - {error}")
