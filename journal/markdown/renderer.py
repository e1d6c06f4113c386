# journal/markdown/renderer.py

import logging

import pypandoc

from .config import DEFAULT_CONFIG, RenderConfig
from .postprocessors import apply_postprocessors
from .preprocessors import apply_preprocessors

logger = logging.getLogger(__name__)


def convert_markdown(text: str, config: RenderConfig = DEFAULT_CONFIG) -> str:
    """Run Pandoc over ``text`` with the configured extensions."""
    return pypandoc.convert_text(
        text,
        to=config.pandoc_to,
        format=config.pandoc_from,
        extra_args=list(config.pandoc_extra_args),
    )


def render_markdown(text, media=None, config: RenderConfig = DEFAULT_CONFIG, context=None):
    """
    Main rendering function with pre/post processing pipeline using pypandoc

    Args:
        text: Stored markdown (embed tokens already normalized)
        media: Stored media descriptors used to expand embed tokens
        config: Immutable renderer configuration
        context: Optional dict for processors that need additional data

    Returns:
        Sanitized HTML. If conversion fails the token-expanded markdown is
        returned unchanged (the original text when expansion itself fails)
        so content is never lost.
    """
    context = dict(context or {})
    context["media"] = list(media or [])
    context["config"] = config

    text = text or ""
    try:
        # Pre-processing: Before markdown conversion
        text = apply_preprocessors(text, context)

        html = convert_markdown(text, config)

        # Post-processing: After markdown conversion
        return apply_postprocessors(html, context)
    except Exception as e:
        logger.error(f"Markdown rendering failed: {e}", exc_info=True)
        return text
