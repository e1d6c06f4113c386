"""
Response envelope, pagination and request parsing helpers.

Success:
    {"success": true, "message": "...", "data": ..., "meta": {...}}
Error:
    {"success": false, "message": "...", "statusCode": 400, "errors": [...]}
"""

import json
import math
from dataclasses import dataclass
from datetime import date, datetime
from datetime import timezone as dt_timezone

from django.conf import settings
from django.http import JsonResponse
from django.utils import timezone

from journal.middleware import resolve_timezone


def localize(value, tz):
    """Recursively render datetimes as ISO 8601 strings in ``tz``."""
    if isinstance(value, datetime):
        if timezone.is_naive(value):
            value = value.replace(tzinfo=dt_timezone.utc)
        return value.astimezone(tz).isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: localize(item, tz) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [localize(item, tz) for item in value]
    return value


def success_response(request, message, data=None, meta=None, status=200):
    tz = getattr(request, "timezone", None) or resolve_timezone(None)
    body = {"success": True, "message": message}
    if data is not None:
        body["data"] = localize(data, tz)
    if meta:
        body["meta"] = meta
    return JsonResponse(body, status=status)


def error_response(message, status=500, errors=None):
    body = {"success": False, "message": message, "statusCode": status}
    if errors:
        body["errors"] = errors
    return JsonResponse(body, status=status)


def form_error_response(form):
    """400 response listing every field error of a bound Django form."""
    errors = [
        {"field": field, "message": message}
        for field, messages in form.errors.items()
        for message in messages
    ]
    return error_response("Validation failed", status=400, errors=errors)


def parse_json_body(request):
    """Return the decoded JSON object body, or None when it is not a JSON object."""
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return data if isinstance(data, dict) else None


def _positive_int(value, default):
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int
    total: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def slice(self, queryset):
        return queryset[self.offset : self.offset + self.limit]

    def as_meta(self) -> dict:
        return {
            "currentPage": self.page,
            "totalPages": self.total_pages,
            "totalItems": self.total,
            "itemsPerPage": self.limit,
            "hasNextPage": self.page < self.total_pages,
            "hasPrevPage": self.page > 1,
        }


def create_pagination(page, limit, total, default_limit=10) -> Pagination:
    max_limit = getattr(settings, "API_MAX_PAGE_SIZE", 100)
    return Pagination(
        page=_positive_int(page, 1),
        limit=min(_positive_int(limit, default_limit), max_limit),
        total=total,
    )


def ordering_from_request(request, fields: dict, default: str, default_order: str = "desc") -> str:
    """
    Translate ``sortBy``/``sortOrder`` query params into an ORM ordering.

    Unknown sort keys fall back to ``default`` so arbitrary columns cannot be
    requested.
    """
    field = fields.get(request.GET.get("sortBy"), fields[default])
    order = request.GET.get("sortOrder", default_order)
    return field if order == "asc" else f"-{field}"
