"""
Preprocessor that expands embed tokens into iframe markup.

Converts:
    {{youtube:dQw4w9WgXcQ}}        → <iframe ... src="https://www.youtube.com/embed/dQw4w9WgXcQ" ...>
    {{googledrive:1AbCdEfGhIjK}}   → <iframe src="https://drive.google.com/file/d/1AbCdEfGhIjK/preview" ...>

Stored media descriptors win; tokens without a descriptor (older articles
whose media list is stale or missing) get their markup regenerated.
"""

import logging

from ..config import DEFAULT_CONFIG
from ..embeds import (
    GOOGLE_DRIVE_TOKEN_RE,
    YOUTUBE_TOKEN_RE,
    google_drive_embed,
    youtube_embed,
)

logger = logging.getLogger(__name__)


def _descriptor_token(item) -> str | None:
    if not isinstance(item, dict):
        return None
    metadata = item.get("metadata")
    if not isinstance(metadata, dict):
        return None
    if item.get("type") == "youtube" and metadata.get("videoId"):
        return f"{{{{youtube:{metadata['videoId']}}}}}"
    if item.get("type") == "googledrive" and metadata.get("fileId"):
        return f"{{{{googledrive:{metadata['fileId']}}}}}"
    return None


def expand_embeds(text: str, context: dict) -> str:
    """
    Replace embed tokens with iframe markup.

    Args:
        text: Markdown content containing embed tokens
        context: May contain 'media' (stored descriptors) and 'config'

    Returns:
        Markdown with every valid token replaced
    """
    config = context.get("config", DEFAULT_CONFIG)
    media = context.get("media") or []

    # Step 1: precomputed embed code from the stored descriptors
    for item in media:
        token = _descriptor_token(item)
        if token and isinstance(item.get("embedCode"), str):
            text = text.replace(token, item["embedCode"])

    # Step 2: anything left over is regenerated from the token itself
    leftovers = 0

    def replace_youtube(match):
        nonlocal leftovers
        leftovers += 1
        return youtube_embed(match.group(1), defaults=config.embeds).embed_code

    def replace_drive(match):
        nonlocal leftovers
        leftovers += 1
        return google_drive_embed(match.group(1), defaults=config.embeds).embed_code

    text = YOUTUBE_TOKEN_RE.sub(replace_youtube, text)
    text = GOOGLE_DRIVE_TOKEN_RE.sub(replace_drive, text)

    if leftovers:
        logger.debug(f"Regenerated {leftovers} embed(s) without stored media descriptors")

    return text
