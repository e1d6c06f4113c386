"""
Rich-content Markdown pipeline for articles.

- embeds: detect media, rewrite raw links into embed tokens, validate tokens
- renderer: expand tokens, convert with Pandoc, sanitize with bleach
- metrics: plain text, reading time and excerpt
- toc / syntax: table of contents and advisory lint checks
"""

from .config import AUTHORED_HTML_CONFIG, DEFAULT_CONFIG, RenderConfig
from .embeds import (
    EmbedValidation,
    MediaDescriptor,
    extract_media,
    normalize_embeds,
    validate_embeds,
)
from .metrics import ContentMetrics, derive_html_metrics, derive_metrics
from .renderer import render_markdown

__all__ = [
    "AUTHORED_HTML_CONFIG",
    "DEFAULT_CONFIG",
    "RenderConfig",
    "EmbedValidation",
    "MediaDescriptor",
    "extract_media",
    "normalize_embeds",
    "validate_embeds",
    "ContentMetrics",
    "derive_metrics",
    "derive_html_metrics",
    "render_markdown",
]
