# journal/markdown/preprocessors/__init__.py

from .embed_expander import expand_embeds

PREPROCESSORS = [
    expand_embeds,  # Must run before Pandoc so iframes pass through as raw HTML
    # Order matters - they run sequentially
]


def apply_preprocessors(text, context):
    """Apply all preprocessors in order"""
    for processor in PREPROCESSORS:
        text = processor(text, context)
    return text
