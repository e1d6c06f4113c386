"""
Embed detection and rewriting for article Markdown.

Authors paste YouTube and Google Drive links straight into their Markdown.
Before an article is stored, every recognised link is rewritten into an embed
token (``{{youtube:<id>}}`` / ``{{googledrive:<id>}}``) and a list of media
descriptors is derived from the content. The renderer later swaps the tokens
for iframe markup.

Examples:
    >>> normalize_embeds("Check this https://youtu.be/dQw4w9WgXcQ out")
    'Check this \\n\\n{{youtube:dQw4w9WgXcQ}}\\n\\n out'
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TypedDict

from .config import EmbedDefaults

logger = logging.getLogger(__name__)


class MediaMetadata(TypedDict, total=False):
    videoId: str
    fileId: str
    width: int
    height: int
    duration: int
    size: int
    format: str


class MediaDescriptor(TypedDict, total=False):
    type: str  # image | video | youtube | googledrive | embed
    url: str
    embedCode: str
    thumbnail: str
    title: str
    position: int
    metadata: MediaMetadata


MEDIA_TYPES = ("image", "video", "youtube", "googledrive", "embed")

# Trailing query/fragment of a pasted URL (``&t=42s``, ``?usp=sharing``)
_URL_TAIL = r"(?:[?&#][^\s<>()\[\]]*)?"

YOUTUBE_URL = (
    r"(?<![\w.-])(?:https?://)?(?:www\.|m\.)?"
    r"(?:youtube\.com/(?:[^/\s]+/\S+/|(?:v|e(?:mbed)?)/|\S*?[?&]v=)|youtu\.be/)"
    r"(?P<id>[a-zA-Z0-9_-]{11})" + _URL_TAIL
)

GOOGLE_DRIVE_URL = (
    r"(?<![\w.-])(?:https?://)?"
    r"drive\.google\.com/(?:file/d/|open\?id=)"
    r"(?P<id>[a-zA-Z0-9_-]+)(?:/(?:view|preview|edit))?" + _URL_TAIL
)

YOUTUBE_URL_RE = re.compile(YOUTUBE_URL)
GOOGLE_DRIVE_URL_RE = re.compile(GOOGLE_DRIVE_URL)

YOUTUBE_TOKEN_RE = re.compile(r"\{\{youtube:([a-zA-Z0-9_-]{11})\}\}")
GOOGLE_DRIVE_TOKEN_RE = re.compile(r"\{\{googledrive:([a-zA-Z0-9_-]+)\}\}")

# Loose variants used to flag malformed tokens
_ANY_YOUTUBE_TOKEN_RE = re.compile(r"\{\{youtube:([^}]*)\}\}")
_ANY_DRIVE_TOKEN_RE = re.compile(r"\{\{googledrive:([^}]*)\}\}")

IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")

# Fenced blocks and inline code spans render literally
_CODE_RE = re.compile(r"```[\s\S]*?```|`[^`\n]+`")


def _linkable(url_pattern: str) -> re.Pattern:
    """
    Wrap a URL pattern so Markdown links and autolinks around it are consumed.

    ``[watch](URL)``, ``[watch](URL "Title")``, ``![thumb](URL)`` and ``<URL>``
    are replaced as a whole; the closing bracket (and a link title) is only
    eaten when its opener was matched.
    """
    return re.compile(
        r"(?P<link>!?\[[^\]\n]*\]\(\s*)?(?P<angle><)?"
        + url_pattern
        + r"(?(angle)>)"
        + r"""(?(link)(?:\s+(?:"[^"\n]*"|'[^'\n]*'))?\s*\))"""
    )


_YOUTUBE_REWRITE_RE = _linkable(YOUTUBE_URL)
_GOOGLE_DRIVE_REWRITE_RE = _linkable(GOOGLE_DRIVE_URL)


@dataclass(frozen=True)
class Embed:
    type: str
    url: str
    embed_code: str
    thumbnail: str = ""


@dataclass
class EmbedValidation:
    is_valid: bool
    errors: list[str] = field(default_factory=list)


# ---------------------------
# Identifier helpers
# ---------------------------


def extract_youtube_id(url: str) -> str | None:
    match = YOUTUBE_URL_RE.search(url or "")
    return match.group("id") if match else None


def extract_google_drive_id(url: str) -> str | None:
    match = GOOGLE_DRIVE_URL_RE.search(url or "")
    return match.group("id") if match else None


def youtube_thumbnail(video_id: str) -> str:
    return f"https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"


# ---------------------------
# Embed markup
# ---------------------------


def youtube_embed(
    video_id: str,
    *,
    width: int | None = None,
    height: int | None = None,
    autoplay: bool = False,
    start: int = 0,
    defaults: EmbedDefaults = EmbedDefaults(),
) -> Embed:
    """Build the iframe markup for a YouTube video."""
    width = width or defaults.youtube_width
    height = height or defaults.youtube_height

    embed_url = f"https://www.youtube.com/embed/{video_id}"
    params = []
    if autoplay:
        params.append("autoplay=1")
    if start > 0:
        params.append(f"start={start}")
    if params:
        embed_url += "?" + "&".join(params)

    embed_code = (
        f'<iframe width="{width}" height="{height}" src="{embed_url}" frameborder="0" '
        'allow="accelerometer; autoplay; clipboard-write; encrypted-media; gyroscope; picture-in-picture" '
        "allowfullscreen></iframe>"
    )
    return Embed(
        type="youtube",
        url=embed_url,
        embed_code=embed_code,
        thumbnail=youtube_thumbnail(video_id),
    )


def google_drive_embed(
    file_id: str,
    *,
    width: int | None = None,
    height: int | None = None,
    defaults: EmbedDefaults = EmbedDefaults(),
) -> Embed:
    """Build the iframe markup for a Google Drive file preview."""
    width = width or defaults.drive_width
    height = height or defaults.drive_height

    embed_url = f"https://drive.google.com/file/d/{file_id}/preview"
    embed_code = f'<iframe src="{embed_url}" width="{width}" height="{height}" allow="autoplay"></iframe>'
    return Embed(type="googledrive", url=embed_url, embed_code=embed_code)


# ---------------------------
# Extraction
# ---------------------------


def _youtube_descriptor(url: str, video_id: str, position: int) -> MediaDescriptor:
    embed = youtube_embed(video_id)
    return {
        "type": "youtube",
        "url": url,
        "embedCode": embed.embed_code,
        "thumbnail": embed.thumbnail,
        "position": position,
        "metadata": {"videoId": video_id},
    }


def _drive_descriptor(url: str, file_id: str, position: int) -> MediaDescriptor:
    embed = google_drive_embed(file_id)
    return {
        "type": "googledrive",
        "url": url,
        "embedCode": embed.embed_code,
        "position": position,
        "metadata": {"fileId": file_id},
    }


def extract_media(markdown: str) -> list[MediaDescriptor]:
    """
    Collect media descriptors from Markdown content.

    Sources are scanned in a fixed order: raw YouTube URLs, YouTube tokens,
    raw Google Drive URLs, Google Drive tokens, then Markdown images outside
    code spans and fenced blocks. A video or file id is only recorded once
    (first occurrence wins) and ``position`` is the descriptor's index in the
    returned list.

    Args:
        markdown: Raw or normalized Markdown

    Returns:
        Ordered list of MediaDescriptor dicts
    """
    if not markdown:
        return []

    media: list[MediaDescriptor] = []
    video_ids: set[str] = set()
    file_ids: set[str] = set()

    for match in YOUTUBE_URL_RE.finditer(markdown):
        video_id = match.group("id")
        if video_id in video_ids:
            continue
        video_ids.add(video_id)
        media.append(_youtube_descriptor(match.group(0), video_id, len(media)))

    for match in YOUTUBE_TOKEN_RE.finditer(markdown):
        video_id = match.group(1)
        if video_id in video_ids:
            continue
        video_ids.add(video_id)
        media.append(
            _youtube_descriptor(
                f"https://www.youtube.com/watch?v={video_id}", video_id, len(media)
            )
        )

    for match in GOOGLE_DRIVE_URL_RE.finditer(markdown):
        file_id = match.group("id")
        if file_id in file_ids:
            continue
        file_ids.add(file_id)
        media.append(_drive_descriptor(match.group(0), file_id, len(media)))

    for match in GOOGLE_DRIVE_TOKEN_RE.finditer(markdown):
        file_id = match.group(1)
        if file_id in file_ids:
            continue
        file_ids.add(file_id)
        media.append(
            _drive_descriptor(
                f"https://drive.google.com/file/d/{file_id}/view", file_id, len(media)
            )
        )

    for match in IMAGE_RE.finditer(_CODE_RE.sub("", markdown)):
        alt, target = match.group(1), match.group(2).strip()
        if not target:
            continue
        # ![alt](url "title") -> url
        src = target.split()[0]
        media.append(
            {
                "type": "image",
                "url": src,
                "title": alt,
                "position": len(media),
                "metadata": {},
            }
        )

    logger.debug(f"Extracted {len(media)} media descriptors from markdown content")
    return media


# ---------------------------
# Rewriting
# ---------------------------


def normalize_embeds(markdown: str) -> str:
    """
    Replace raw YouTube and Google Drive URLs with embed tokens.

    Each token is surrounded by blank lines so it ends up in its own block.
    Tokens are never matched by the URL patterns, so running this twice is a
    no-op.
    """
    if not markdown:
        return markdown or ""

    content = _YOUTUBE_REWRITE_RE.sub(
        lambda m: f"\n\n{{{{youtube:{m.group('id')}}}}}\n\n", markdown
    )
    content = _GOOGLE_DRIVE_REWRITE_RE.sub(
        lambda m: f"\n\n{{{{googledrive:{m.group('id')}}}}}\n\n", content
    )
    return content


# ---------------------------
# Validation
# ---------------------------


def validate_embeds(markdown: str) -> EmbedValidation:
    """
    Flag embed tokens whose identifiers cannot be valid.

    YouTube ids are exactly 11 characters; Google Drive ids are at least 10.
    The content itself is never modified.
    """
    errors: list[str] = []

    for match in _ANY_YOUTUBE_TOKEN_RE.finditer(markdown or ""):
        video_id = match.group(1)
        if len(video_id) != 11:
            errors.append(f"Invalid YouTube video ID in: {match.group(0)}")

    for match in _ANY_DRIVE_TOKEN_RE.finditer(markdown or ""):
        file_id = match.group(1)
        if len(file_id) < 10:
            errors.append(f"Invalid Google Drive file ID in: {match.group(0)}")

    return EmbedValidation(is_valid=not errors, errors=errors)
