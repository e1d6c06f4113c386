"""
Derived text metrics: plain text, word count, reading time and excerpt.

Reading time assumes 200 words per minute plus thirty seconds for every
embedded media token.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

WORDS_PER_MINUTE = 200
MEDIA_MINUTES = 0.5
EXCERPT_LENGTH = 297

_FENCED_CODE_RE = re.compile(r"```[\s\S]*?```")
_INLINE_CODE_RE = re.compile(r"`[^`]+`")
_IMAGE_RE = re.compile(r"!\[([^\]]*)\]\([^)]+\)")
_LINK_RE = re.compile(r"\[([^\]]+)\]\([^)]+\)")
_HEADING_RE = re.compile(r"#{1,6}\s+")
_EMPHASIS_RE = re.compile(r"[*_]{1,2}([^*_]+)[*_]{1,2}")
_TOKEN_RE = re.compile(r"\{\{[^}]+\}\}")
_HTML_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class ContentMetrics:
    plain_text: str
    word_count: int
    reading_minutes: int
    excerpt: str


def markdown_to_plain_text(markdown: str) -> str:
    """
    Reduce Markdown to readable text.

    Order matters: code is dropped before images and links so their brackets
    inside code spans are not mistaken for syntax.
    """
    text = markdown or ""
    text = _FENCED_CODE_RE.sub("", text)
    text = _INLINE_CODE_RE.sub("", text)
    text = _IMAGE_RE.sub("", text)
    text = _LINK_RE.sub(r"\1", text)
    text = _HEADING_RE.sub("", text)
    text = _EMPHASIS_RE.sub(r"\1", text)
    text = _TOKEN_RE.sub("", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def html_to_plain_text(html: str) -> str:
    text = _HTML_TAG_RE.sub("", html or "")
    return _WHITESPACE_RE.sub(" ", text).strip()


def count_words(text: str) -> int:
    return len([word for word in text.split() if word])


def count_media_tokens(markdown: str) -> int:
    return len(_TOKEN_RE.findall(markdown or ""))


def make_excerpt(plain_text: str, length: int = EXCERPT_LENGTH) -> str:
    if len(plain_text) <= length:
        return plain_text
    return plain_text[:length] + "..."


def reading_minutes(word_count: int, media_count: int = 0) -> int:
    minutes = word_count / WORDS_PER_MINUTE + media_count * MEDIA_MINUTES
    return max(1, math.ceil(minutes))


def derive_metrics(markdown: str) -> ContentMetrics:
    """Compute plain text, word count, reading time and excerpt for Markdown."""
    plain_text = markdown_to_plain_text(markdown)
    words = count_words(plain_text)
    return ContentMetrics(
        plain_text=plain_text,
        word_count=words,
        reading_minutes=reading_minutes(words, count_media_tokens(markdown)),
        excerpt=make_excerpt(plain_text),
    )


def derive_html_metrics(html: str) -> ContentMetrics:
    """Same as ``derive_metrics`` for authored HTML; tags are simply dropped."""
    plain_text = html_to_plain_text(html)
    words = count_words(plain_text)
    return ContentMetrics(
        plain_text=plain_text,
        word_count=words,
        reading_minutes=reading_minutes(words),
        excerpt=make_excerpt(plain_text),
    )
