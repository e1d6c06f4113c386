"""
Article models.

Includes Article (with queryset/manager), Tag, Like and Comment.
"""

import logging

from django.conf import settings
from django.core.validators import MinLengthValidator
from django.db import models, transaction
from django.db.models import F
from django.template.defaultfilters import slugify
from django.utils import timezone

from journal.markdown import (
    AUTHORED_HTML_CONFIG,
    derive_html_metrics,
    derive_metrics,
    extract_media,
    normalize_embeds,
    render_markdown,
)
from journal.markdown.postprocessors.sanitizer import clean_html

from .base import TimeStampedModel, UniqueSlugMixin

logger = logging.getLogger(__name__)


class Tag(models.Model):
    name = models.CharField(max_length=50, unique=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name

    def save(self, *args, **kwargs):
        self.name = self.name.strip().lower()
        super().save(*args, **kwargs)


class ArticleQuerySet(models.QuerySet):
    def published(self):
        return self.filter(status=Article.Status.PUBLISHED)

    def public(self):
        return self.filter(visibility=Article.Visibility.PUBLIC)

    def drafts(self):
        return self.filter(status=Article.Status.DRAFT)

    def listed(self):
        """Articles anyone may read: published and public."""
        return self.published().public()

    def by_author(self, user):
        return self.filter(author=user)


class ArticleManager(models.Manager.from_queryset(ArticleQuerySet)):
    pass


class Article(TimeStampedModel, UniqueSlugMixin):
    """
    Authoring is Markdown (or sanitized HTML).

    Markdown content is stored with embed tokens in place of raw YouTube and
    Google Drive links; ``media`` holds the descriptors used to expand them.
    Both are regenerated wholesale whenever the content changes.
    """

    class ContentType(models.TextChoices):
        MARKDOWN = "markdown", "Markdown"
        HTML = "html", "HTML"

    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        PUBLISHED = "published", "Published"

    class Visibility(models.TextChoices):
        PUBLIC = "public", "Public"
        PRIVATE = "private", "Private"

    # --- Core fields ---
    title = models.CharField(max_length=200, validators=[MinLengthValidator(5)])
    slug = models.SlugField(
        max_length=220,
        unique=True,
        blank=True,
        help_text="Auto-generated from title.",
    )
    content = models.TextField(validators=[MinLengthValidator(10)])
    content_type = models.CharField(
        max_length=10, choices=ContentType.choices, default=ContentType.MARKDOWN
    )
    excerpt = models.CharField(
        max_length=300, blank=True, help_text="Generated from content if blank."
    )

    # --- Featured image ---
    featured_image_url = models.URLField(max_length=500, blank=True)
    featured_image_alt = models.CharField(max_length=200, blank=True)
    featured_image_caption = models.CharField(max_length=300, blank=True)

    # Media descriptors derived from content
    media = models.JSONField(default=list, blank=True)

    # Optional cached HTML (filled by the render task)
    content_html_cached = models.TextField(
        blank=True, help_text="Cache of rendered+sanitized HTML."
    )
    table_of_contents = models.JSONField(default=list, blank=True)

    # --- Publication ---
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="articles"
    )
    status = models.CharField(
        max_length=12, choices=Status.choices, default=Status.DRAFT, db_index=True
    )
    visibility = models.CharField(
        max_length=12,
        choices=Visibility.choices,
        default=Visibility.PUBLIC,
        db_index=True,
    )
    published_at = models.DateTimeField(null=True, blank=True, db_index=True)

    tags = models.ManyToManyField(Tag, blank=True, related_name="articles")
    category = models.CharField(max_length=50, blank=True, db_index=True)

    # --- Derived stats ---
    word_count = models.PositiveIntegerField(default=0)
    read_time = models.PositiveSmallIntegerField(
        default=1, help_text="Approximate reading time in minutes."
    )
    views = models.PositiveIntegerField(default=0)

    objects = ArticleManager()

    class Meta:
        ordering = ["-published_at", "-created_at"]
        indexes = [
            models.Index(fields=["status", "visibility"], name="journal_article_status_vis_idx"),
            models.Index(fields=["author", "status"], name="journal_article_author_st_idx"),
        ]

    def __str__(self) -> str:
        return self.title

    # ---------------------------
    # Lifecycle
    # ---------------------------

    def save(self, *args, **kwargs):
        update_fields = kwargs.get("update_fields")
        is_new = self.pk is None
        original = None if is_new else Article.objects.filter(pk=self.pk).first()

        if not self.slug or (original and original.title != self.title):
            self.slug = self._unique_slug(slugify(self.title)[:200] or "article")

        content_changed = is_new or original is None or (
            original.content != self.content or original.content_type != self.content_type
        )
        if content_changed and (update_fields is None or "content" in update_fields):
            self.refresh_derived_content()
        else:
            content_changed = False

        if self.status == self.Status.PUBLISHED and not self.published_at:
            self.published_at = timezone.now()

        super().save(*args, **kwargs)

        # --- Schedule slow rendering after the transaction commits ---
        if content_changed and self.content_type == self.ContentType.MARKDOWN:
            from journal.tasks import refresh_article_render

            pk = self.pk
            transaction.on_commit(lambda: refresh_article_render.delay(pk))

    def refresh_derived_content(self):
        """
        Normalize content and rebuild everything derived from it.

        Markdown gets its raw media links rewritten into embed tokens before
        descriptors are extracted, so stored content never holds raw links.
        """
        if self.content_type == self.ContentType.MARKDOWN:
            self.content = normalize_embeds(self.content or "")
            self.media = extract_media(self.content)
            metrics = derive_metrics(self.content)
        else:
            self.content = clean_html(self.content or "", AUTHORED_HTML_CONFIG)
            self.media = []
            metrics = derive_html_metrics(self.content)

        self.word_count = metrics.word_count
        self.read_time = metrics.reading_minutes
        if not self.excerpt:
            self.excerpt = metrics.excerpt

        # Stale until the render task fills them again
        self.content_html_cached = ""
        self.table_of_contents = []

    # ---------------------------
    # Helpers
    # ---------------------------

    @property
    def is_published(self) -> bool:
        return self.status == self.Status.PUBLISHED

    @property
    def is_listed(self) -> bool:
        return self.is_published and self.visibility == self.Visibility.PUBLIC

    def can_view(self, user) -> bool:
        if self.is_listed:
            return True
        if user is None or not user.is_authenticated:
            return False
        return self.author_id == user.pk or user.is_admin

    def render(self) -> str:
        """Return display HTML, preferring the cached rendering."""
        if self.content_type == self.ContentType.HTML:
            return self.content
        if self.content_html_cached:
            return self.content_html_cached
        return render_markdown(self.content, self.media)

    def set_tags(self, names):
        tags = []
        for name in names:
            name = (name or "").strip().lower()
            if name:
                tag, _ = Tag.objects.get_or_create(name=name)
                tags.append(tag)
        self.tags.set(tags)

    def record_view(self):
        Article.objects.filter(pk=self.pk).update(views=F("views") + 1)
        self.views += 1

    def toggle_like(self, user) -> bool:
        """Like or unlike the article; returns True when it is now liked."""
        deleted, _ = Like.objects.filter(article=self, user=user).delete()
        if deleted:
            return False
        Like.objects.create(article=self, user=user)
        return True


class Like(models.Model):
    article = models.ForeignKey(Article, on_delete=models.CASCADE, related_name="likes")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="likes"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["article", "user"], name="unique_like_per_user"),
        ]

    def __str__(self) -> str:
        return f"{self.user} ♥ {self.article}"


class Comment(models.Model):
    article = models.ForeignKey(
        Article, on_delete=models.CASCADE, related_name="comments"
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="comments"
    )
    content = models.TextField(max_length=1000)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self) -> str:
        return f"{self.user} on {self.article}"
