"""
Lightweight Markdown linting used by the editor preview.

These checks are advisory: they never block saving an article, which is only
gated on ``validate_embeds``.
"""

import re

_LINK_RE = re.compile(r"\[([^\]]*)\]\(([^)]*)\)")
_NAMED_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_BARE_URL_RE = re.compile(r"https?://[^\s<>\"{}|\\^`\[\]()]+")
_FENCE_RE = re.compile(r"```")


def check_markdown_syntax(markdown: str) -> dict:
    """
    Report structural problems in Markdown.

    Returns:
        Dict with keys 'is_valid', 'errors' and 'warnings'
    """
    text = markdown or ""
    errors = []
    warnings = []

    if text.count("[") != text.count("]"):
        errors.append("Unmatched square brackets in markdown links")

    for match in _LINK_RE.finditer(text):
        if not match.group(2).strip():
            warnings.append(f"Empty URL in link: {match.group(0)}")

    if len(_FENCE_RE.findall(text)) % 2:
        errors.append("Unmatched code block delimiters (```)")

    return {
        "is_valid": not errors,
        "errors": errors,
        "warnings": warnings,
    }


def extract_links(markdown: str) -> list[dict]:
    """
    List links found in Markdown.

    Example:
        >>> extract_links("see https://foo.dev")
        [{'text': 'https://foo.dev', 'url': 'https://foo.dev', 'type': 'plain'}]
    """
    text = markdown or ""
    links = []

    for match in _NAMED_LINK_RE.finditer(text):
        links.append({"text": match.group(1), "url": match.group(2), "type": "markdown"})

    seen = {link["url"] for link in links}
    for url in _BARE_URL_RE.findall(text):
        if url in seen:
            continue
        seen.add(url)
        links.append({"text": url, "url": url, "type": "plain"})

    return links
