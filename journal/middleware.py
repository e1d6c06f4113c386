"""
Request timezone detection.

API responses render datetimes in the caller's timezone, taken from the
``X-Timezone`` header, then the ``timezone`` query parameter, then
``settings.API_DEFAULT_TIMEZONE``.
"""

import logging
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.conf import settings

logger = logging.getLogger(__name__)


def resolve_timezone(name):
    """Return a ZoneInfo for ``name``, falling back to the configured default."""
    default = getattr(settings, "API_DEFAULT_TIMEZONE", "UTC")
    try:
        return ZoneInfo(name or default)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        logger.debug(f"Unknown timezone '{name}', using {default}")
        return ZoneInfo(default)


class RequestTimezoneMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        name = request.headers.get("X-Timezone") or request.GET.get("timezone")
        request.timezone = resolve_timezone(name)
        return self.get_response(request)
