"""
Authentication utilities for the API.

Provides token issuing plus two decorators:
- @api_auth_required: 401 unless the request is authenticated
- @api_auth_optional: attaches the user when present, None otherwise

Both accept a Django session or an ``Authorization: Bearer <token>`` header.
Tokens are signed with ``django.core.signing`` and expire after
``settings.API_TOKEN_MAX_AGE`` seconds.
"""

import logging
from functools import wraps

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core import signing

from .responses import error_response

logger = logging.getLogger(__name__)

TOKEN_SALT = "journal.api.token"


def issue_token(user) -> str:
    """Return a signed bearer token identifying ``user``."""
    return signing.dumps({"id": user.pk}, salt=TOKEN_SALT)


def user_from_token(token: str):
    """Resolve a bearer token to an active user, or None."""
    try:
        payload = signing.loads(
            token,
            salt=TOKEN_SALT,
            max_age=getattr(settings, "API_TOKEN_MAX_AGE", None),
        )
    except signing.SignatureExpired:
        logger.debug("Rejected expired API token")
        return None
    except signing.BadSignature:
        logger.debug("Rejected API token with bad signature")
        return None

    User = get_user_model()
    return User.objects.filter(pk=payload.get("id"), is_active=True).first()


def authenticate_request(request):
    """Return the authenticated user for ``request`` or None."""
    # Method 1: Django session authentication
    user = getattr(request, "user", None)
    if user is not None and user.is_authenticated:
        return user

    # Method 2: Bearer token authentication
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return user_from_token(auth_header[7:].strip())  # Strip "Bearer " prefix

    return None


def api_auth_required(view_func):
    """
    Decorator that requires authentication via session or Bearer token.

    Usage:
        @api_auth_required
        def my_view(request):
            # request.api_user is guaranteed to be an active user
            pass
    """

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        user = authenticate_request(request)
        if user is None:
            return error_response("Authentication required", status=401)

        request.api_user = user
        return view_func(request, *args, **kwargs)

    return wrapper


def api_auth_optional(view_func):
    """Like api_auth_required, but anonymous requests get ``api_user = None``."""

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        request.api_user = authenticate_request(request)
        return view_func(request, *args, **kwargs)

    return wrapper
