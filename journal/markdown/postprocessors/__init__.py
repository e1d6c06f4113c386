# journal/markdown/postprocessors/__init__.py

from .modify_external_links import modify_external_links
from .sanitizer import sanitize_html

POSTPROCESSORS = [
    sanitize_html,  # Must stay first: everything after works on trusted HTML
    modify_external_links,
    # Order matters - they run sequentially
]


def apply_postprocessors(html, context):
    """Apply all postprocessors in order"""
    for processor in POSTPROCESSORS:
        html = processor(html, context)
    return html
