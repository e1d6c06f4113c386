# journal/markdown/postprocessors/sanitizer.py

import logging

import bleach

from ..config import DEFAULT_CONFIG, RenderConfig

logger = logging.getLogger(__name__)


def _attribute_filter(config: RenderConfig):
    """Build a bleach attribute callable honouring ``data-*`` attributes."""

    def allow(tag, name, value):
        if name in config.allowed_attributes:
            return True
        return config.allow_data_attributes and name.startswith("data-")

    return allow


def clean_html(html: str, config: RenderConfig = DEFAULT_CONFIG) -> str:
    """
    Strip every tag and attribute outside the allow-list.

    Disallowed tags are removed rather than escaped, so ``<script>`` never
    survives as an element.
    """
    return bleach.clean(
        html,
        tags=config.allowed_tags,
        attributes=_attribute_filter(config),
        protocols=config.allowed_protocols,
        strip=True,
        strip_comments=True,
    )


def sanitize_html(html, context):
    """
    Sanitize HTML output using bleach.
    This is the FIRST post-processor and should run before any other HTML modifications.
    """
    config = context.get("config", DEFAULT_CONFIG)
    return clean_html(html, config)
