"""
Article endpoints: listing, CRUD, rendering, preview, likes and comments.

Articles are addressed by slug, or by primary key when the reference is
numeric and no slug matches.
"""

import logging

from django.db import transaction
from django.db.models import Count, Q
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from journal.markdown import (
    AUTHORED_HTML_CONFIG,
    derive_html_metrics,
    derive_metrics,
    extract_media,
    normalize_embeds,
    render_markdown,
    validate_embeds,
)
from journal.markdown.postprocessors.sanitizer import clean_html
from journal.markdown.syntax import check_markdown_syntax, extract_links
from journal.markdown.toc import extract_toc_from_html
from journal.models import Article, Comment

from ..auth import api_auth_optional, api_auth_required
from ..forms import ArticleForm, CommentForm, form_data
from ..responses import (
    create_pagination,
    error_response,
    form_error_response,
    ordering_from_request,
    parse_json_body,
    success_response,
)
from ..serializers import serialize_article, serialize_comment

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "publishedAt": "published_at",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "title": "title",
    "views": "views",
    "readTime": "read_time",
}


def _with_counts(queryset):
    return (
        queryset.select_related("author")
        .prefetch_related("tags")
        .annotate(
            like_count=Count("likes", distinct=True),
            comment_count=Count("comments", distinct=True),
        )
    )


def _find_article(ref):
    article = Article.objects.select_related("author").filter(slug=ref).first()
    if article is None and ref.isdigit():
        article = Article.objects.select_related("author").filter(pk=int(ref)).first()
    return article


def _denied(article, user):
    """Error response when ``user`` may not read ``article``, else None."""
    if article is None:
        return error_response("Article not found", status=404)
    if article.can_view(user):
        return None
    if user is None:
        return error_response("Article not found", status=404)
    return error_response("Access denied", status=403)


def _paginated(request, queryset, message, viewer=None):
    pagination = create_pagination(
        request.GET.get("page"), request.GET.get("limit"), queryset.count()
    )
    articles = [
        serialize_article(article, viewer=viewer)
        for article in pagination.slice(queryset)
    ]
    return success_response(
        request, message, data={"articles": articles}, meta=pagination.as_meta()
    )


def _embed_errors(content_type, content):
    if content_type != Article.ContentType.MARKDOWN:
        return None
    validation = validate_embeds(content)
    if validation.is_valid:
        return None
    return error_response(
        "Invalid markdown content", status=400, errors=validation.errors
    )


# ---------------------------
# Collection
# ---------------------------


@csrf_exempt
@require_http_methods(["GET", "POST"])
@api_auth_optional
def article_collection(request):
    if request.method == "POST":
        if request.api_user is None:
            return error_response("Authentication required", status=401)
        return _create_article(request)
    return _list_articles(request)


def _list_articles(request):
    queryset = Article.objects.listed()

    tag = request.GET.get("tag")
    if tag:
        queryset = queryset.filter(tags__name=tag.strip().lower())
    category = request.GET.get("category")
    if category:
        queryset = queryset.filter(category__icontains=category)
    author = request.GET.get("author")
    if author:
        queryset = queryset.filter(
            Q(author__name__icontains=author) | Q(author__username=author.lower())
        )
    search = request.GET.get("search")
    if search:
        queryset = queryset.filter(
            Q(title__icontains=search)
            | Q(content__icontains=search)
            | Q(excerpt__icontains=search)
            | Q(tags__name__icontains=search)
        )

    queryset = _with_counts(queryset.distinct()).order_by(
        ordering_from_request(request, SORT_FIELDS, "publishedAt")
    )
    return _paginated(request, queryset, "Articles retrieved successfully")


def _create_article(request):
    payload = parse_json_body(request)
    if payload is None:
        return error_response("Invalid JSON", status=400)

    form = ArticleForm(form_data(payload))
    if not form.is_valid():
        return form_error_response(form)

    data = form.cleaned_data
    content_type = data["content_type"] or Article.ContentType.MARKDOWN
    invalid = _embed_errors(content_type, data["content"])
    if invalid:
        return invalid

    article = Article(
        title=data["title"],
        content=data["content"],
        content_type=content_type,
        excerpt=data["excerpt"],
        status=data["status"] or Article.Status.DRAFT,
        visibility=data["visibility"] or Article.Visibility.PUBLIC,
        category=data["category"],
        featured_image_url=data["featured_image_url"],
        featured_image_alt=data["featured_image_alt"],
        featured_image_caption=data["featured_image_caption"],
        author=request.api_user,
    )
    with transaction.atomic():
        article.save()
        article.set_tags(data["tags"])
    logger.info(f"Article '{article.slug}' created by user {request.api_user.pk}")

    return success_response(
        request,
        "Article created successfully",
        data={"article": serialize_article(article, detail=True, viewer=request.api_user)},
        status=201,
    )


@require_http_methods(["GET"])
@api_auth_required
def my_articles(request):
    queryset = Article.objects.by_author(request.api_user)
    status = request.GET.get("status")
    if status in Article.Status.values:
        queryset = queryset.filter(status=status)
    visibility = request.GET.get("visibility")
    if visibility in Article.Visibility.values:
        queryset = queryset.filter(visibility=visibility)

    queryset = _with_counts(queryset).order_by(
        ordering_from_request(request, SORT_FIELDS, "updatedAt")
    )
    return _paginated(
        request, queryset, "Your articles retrieved successfully", viewer=request.api_user
    )


@csrf_exempt
@require_http_methods(["POST"])
@api_auth_required
def preview(request):
    """Render unsaved content with its metrics and validation results."""
    payload = parse_json_body(request)
    if payload is None:
        return error_response("Invalid JSON", status=400)

    content = payload.get("content")
    if not isinstance(content, str) or not content.strip():
        return error_response(
            "Validation failed",
            status=400,
            errors=[{"field": "content", "message": "Content is required"}],
        )

    if payload.get("contentType") == Article.ContentType.HTML:
        html = clean_html(content, AUTHORED_HTML_CONFIG)
        metrics = derive_html_metrics(html)
        media = []
        validation = {"isValid": True, "errors": [], "warnings": []}
    else:
        normalized = normalize_embeds(content)
        media = extract_media(normalized)
        html = render_markdown(normalized, media)
        metrics = derive_metrics(normalized)
        embeds = validate_embeds(content)
        syntax = check_markdown_syntax(content)
        errors = embeds.errors + syntax["errors"]
        validation = {
            "isValid": not errors,
            "errors": errors,
            "warnings": syntax["warnings"],
        }

    return success_response(
        request,
        "Preview generated successfully",
        data={
            "renderedContent": html,
            "tableOfContents": extract_toc_from_html(html),
            "media": media,
            "links": extract_links(content),
            "wordCount": metrics.word_count,
            "readTime": metrics.reading_minutes,
            "excerpt": metrics.excerpt,
            "validation": validation,
        },
    )


# ---------------------------
# Single article
# ---------------------------


@csrf_exempt
@require_http_methods(["GET", "PUT", "DELETE"])
@api_auth_optional
def article_detail(request, ref):
    if request.method == "GET":
        return _get_article(request, ref)
    if request.api_user is None:
        return error_response("Authentication required", status=401)

    article = _find_article(ref)
    if article is None:
        return error_response("Article not found", status=404)
    if article.author_id != request.api_user.pk:
        return error_response("Only the author can modify this article", status=403)

    if request.method == "PUT":
        return _update_article(request, article)

    slug = article.slug
    article.delete()
    logger.info(f"Article '{slug}' deleted by user {request.api_user.pk}")
    return success_response(request, "Article deleted successfully")


def _get_article(request, ref):
    article = _find_article(ref)
    denied = _denied(article, request.api_user)
    if denied:
        return denied

    if article.is_published:
        article.record_view()

    return success_response(
        request,
        "Article retrieved successfully",
        data={"article": serialize_article(article, detail=True, viewer=request.api_user)},
    )


def _update_article(request, article):
    payload = parse_json_body(request)
    if payload is None:
        return error_response("Invalid JSON", status=400)

    form = ArticleForm(form_data(payload), partial=True)
    if not form.is_valid():
        return form_error_response(form)

    data = form.cleaned_data
    provided = form.provided_fields()

    for name in provided:
        if name == "tags":
            continue
        value = data[name]
        if name in ("content_type", "status", "visibility") and not value:
            continue
        setattr(article, name, value)

    invalid = _embed_errors(article.content_type, article.content)
    if invalid and ("content" in provided or "content_type" in provided):
        return invalid

    with transaction.atomic():
        article.save()
        if "tags" in provided:
            article.set_tags(data["tags"])
    logger.info(f"Article '{article.slug}' updated by user {request.api_user.pk}")

    return success_response(
        request,
        "Article updated successfully",
        data={"article": serialize_article(article, detail=True, viewer=request.api_user)},
    )


@require_http_methods(["GET"])
@api_auth_optional
def render_article(request, ref):
    """Article with its rendered HTML and table of contents."""
    article = _find_article(ref)
    denied = _denied(article, request.api_user)
    if denied:
        return denied

    if article.is_published:
        article.record_view()

    html = article.render()
    toc = article.table_of_contents or extract_toc_from_html(html)

    data = serialize_article(article, detail=True, viewer=request.api_user)
    data.update({"renderedContent": html, "tableOfContents": toc})
    return success_response(
        request, "Article rendered successfully", data={"article": data}
    )


# ---------------------------
# Likes and comments
# ---------------------------


@csrf_exempt
@require_http_methods(["POST"])
@api_auth_required
def toggle_like(request, ref):
    article = _find_article(ref)
    if article is None:
        return error_response("Article not found", status=404)
    if not article.is_listed:
        return error_response("Cannot like this article", status=403)

    liked = article.toggle_like(request.api_user)
    return success_response(
        request,
        "Article liked" if liked else "Article unliked",
        data={"liked": liked, "likeCount": article.likes.count()},
    )


@csrf_exempt
@require_http_methods(["POST"])
@api_auth_required
def add_comment(request, ref):
    payload = parse_json_body(request)
    if payload is None:
        return error_response("Invalid JSON", status=400)

    form = CommentForm(form_data(payload))
    if not form.is_valid():
        return form_error_response(form)

    article = _find_article(ref)
    if article is None:
        return error_response("Article not found", status=404)
    if not article.is_listed:
        return error_response("Cannot comment on this article", status=403)

    comment = Comment.objects.create(
        article=article, user=request.api_user, content=form.cleaned_data["content"]
    )
    return success_response(
        request,
        "Comment added successfully",
        data={"comment": serialize_comment(comment)},
        status=201,
    )


@csrf_exempt
@require_http_methods(["DELETE"])
@api_auth_required
def delete_comment(request, ref, comment_id):
    article = _find_article(ref)
    if article is None:
        return error_response("Article not found", status=404)

    comment = Comment.objects.filter(pk=comment_id, article=article).first()
    if comment is None:
        return error_response("Comment not found", status=404)

    user = request.api_user
    if user.pk not in (comment.user_id, article.author_id):
        return error_response("Not authorized to delete this comment", status=403)

    comment.delete()
    return success_response(request, "Comment deleted successfully")
