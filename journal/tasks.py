"""
Celery tasks for article rendering.

These tasks handle:
- Rendering article Markdown to cached HTML and extracting its TOC
- Re-deriving media descriptors and metrics for stored articles

Run a worker with: celery -A inkwell worker -l info
"""

import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    autoretry_for=(Exception,),
    retry_backoff=5,
    retry_kwargs={"max_retries": 3},
)
def refresh_article_render(self, article_id: int):
    """
    Render an article's Markdown and store the HTML and TOC.

    Called after an Article's content changes. Fields are written with
    ``update()`` so ``Article.save()`` is not re-triggered.
    """
    from .markdown.renderer import render_markdown
    from .markdown.toc import extract_toc_from_html
    from .models import Article

    try:
        article = Article.objects.get(pk=article_id)
    except Article.DoesNotExist:
        return {"success": False, "error": f"Article {article_id} not found."}

    if article.content_type != Article.ContentType.MARKDOWN:
        return {"success": True, "article_id": article_id, "message": "Nothing to render."}

    html = render_markdown(article.content, article.media)
    toc = extract_toc_from_html(html)

    Article.objects.filter(pk=article_id, content=article.content).update(
        content_html_cached=html,
        table_of_contents=toc,
    )
    logger.info(f"Rendered article '{article.slug}' ({len(toc)} top-level headings)")

    return {
        "success": True,
        "article_id": article_id,
        "message": "Rendered HTML and TOC updated.",
    }


@shared_task
def rebuild_article_media(article_ids=None):
    """
    Re-derive media descriptors, metrics and rendered HTML for articles.

    Useful after changing the embed patterns or the renderer configuration.

    Args:
        article_ids: Primary keys to process; every article when None

    Returns:
        Dict with rebuild results
    """
    from .models import Article

    queryset = Article.objects.all()
    if article_ids is not None:
        queryset = queryset.filter(pk__in=article_ids)

    results = {
        "total": queryset.count(),
        "successful": 0,
        "failed": 0,
        "media_items": 0,
        "errors": [],
    }

    for article in queryset.iterator():
        try:
            article.refresh_derived_content()
            article.save()
            if article.content_type == Article.ContentType.MARKDOWN:
                refresh_article_render(article.pk)
            results["successful"] += 1
            results["media_items"] += len(article.media)
        except Exception as e:
            logger.error(f"Failed to rebuild article {article.pk}: {e}", exc_info=True)
            results["failed"] += 1
            results["errors"].append(f"Article {article.pk}: {str(e)}")

    return results
