"""
Django admin for users, articles and their engagement records.
"""

from django.contrib import admin, messages
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html

from journal.models import Article, Comment, Like, Tag, User

admin.site.site_header = "Inkwell Administration"
admin.site.site_title = "Inkwell admin"


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("username", "email", "name", "role", "is_verified", "is_active", "created_at")
    list_filter = ("role", "is_verified", "is_active", "is_staff")
    search_fields = ("username", "email", "name")
    ordering = ("-created_at",)
    filter_horizontal = ("following", "groups", "user_permissions")
    readonly_fields = ("created_at", "updated_at", "last_login")

    fieldsets = (
        (None, {"fields": ("email", "username", "password")}),
        ("Profile", {"fields": ("name", "bio", "avatar", "twitter", "linkedin", "website")}),
        ("Social", {"fields": ("following",)}),
        (
            "Permissions",
            {"fields": ("role", "is_verified", "is_active", "is_staff", "is_superuser", "groups", "user_permissions")},
        ),
        ("Dates", {"fields": ("last_login", "created_at", "updated_at")}),
    )
    add_fieldsets = (
        (None, {"classes": ("wide",), "fields": ("email", "name", "password1", "password2")}),
    )


class CommentInline(admin.TabularInline):
    model = Comment
    extra = 0
    fields = ("user", "content", "created_at")
    readonly_fields = ("created_at",)
    autocomplete_fields = ("user",)


@admin.register(Article)
class ArticleAdmin(admin.ModelAdmin):
    inlines = [CommentInline]
    save_on_top = True
    date_hierarchy = "published_at"

    list_display = (
        "title",
        "author",
        "status_badge",
        "visibility",
        "content_type",
        "media_count",
        "read_time",
        "views",
        "published_at",
    )
    list_filter = ("status", "visibility", "content_type", "category", "tags", "created_at")
    search_fields = ("title", "slug", "content", "excerpt")
    autocomplete_fields = ("author",)
    filter_horizontal = ("tags",)

    readonly_fields = (
        "slug",
        "media",
        "word_count",
        "read_time",
        "views",
        "table_of_contents",
        "content_html_cached",
        "created_at",
        "updated_at",
    )

    actions = ("publish_selected", "unpublish_selected", "rebuild_media_for_selected")

    @admin.display(description="Status", ordering="status")
    def status_badge(self, obj):
        colors = {"draft": "#fff3cd", "published": "#d4edda"}
        return format_html(
            '<span style="background: {}; padding: 4px 8px; border-radius: 4px; font-size: 11px;">{}</span>',
            colors.get(obj.status, "#e2e3e5"),
            obj.get_status_display(),
        )

    @admin.display(description="Media")
    def media_count(self, obj):
        return len(obj.media or [])

    @admin.action(description="Publish selected articles")
    def publish_selected(self, request, queryset):
        count = 0
        for article in queryset:
            article.status = Article.Status.PUBLISHED
            article.save()
            count += 1
        self.message_user(request, f"Published {count} article(s).")

    @admin.action(description="Unpublish selected articles")
    def unpublish_selected(self, request, queryset):
        count = queryset.update(status=Article.Status.DRAFT)
        self.message_user(request, f"Unpublished {count} article(s).")

    @admin.action(description="Rebuild media and rendering for selected articles")
    def rebuild_media_for_selected(self, request, queryset):
        from journal.tasks import rebuild_article_media

        results = rebuild_article_media(list(queryset.values_list("pk", flat=True)))
        self.message_user(
            request,
            f"Rebuilt {results['successful']} article(s) with {results['media_items']} media item(s).",
            level=messages.SUCCESS,
        )
        for error in results["errors"]:
            self.message_user(request, error, level=messages.ERROR)


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    list_display = ("name", "article_count")
    search_fields = ("name",)

    @admin.display(description="Articles")
    def article_count(self, obj):
        return obj.articles.count()


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ("user", "article", "created_at")
    search_fields = ("content", "user__username", "article__title")
    autocomplete_fields = ("user", "article")


@admin.register(Like)
class LikeAdmin(admin.ModelAdmin):
    list_display = ("user", "article", "created_at")
    autocomplete_fields = ("user", "article")
