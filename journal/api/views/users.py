"""
User directory and follower graph endpoints.
"""

import logging

from django.contrib.auth import get_user_model
from django.db.models import Count, Q
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from journal.models import Article

from ..auth import api_auth_optional, api_auth_required
from ..responses import (
    create_pagination,
    error_response,
    ordering_from_request,
    success_response,
)
from ..serializers import serialize_article, serialize_user, serialize_user_summary

logger = logging.getLogger(__name__)

User = get_user_model()

SORT_FIELDS = {
    "createdAt": "created_at",
    "name": "name",
    "username": "username",
}


def _active_users():
    return User.objects.filter(is_active=True)


def _profile(user, viewer):
    data = serialize_user(user)
    data.update(
        {
            "articlesCount": Article.objects.by_author(user).listed().count(),
            "followers": [serialize_user_summary(u) for u in user.followers.all()],
            "following": [serialize_user_summary(u) for u in user.following.all()],
        }
    )
    if viewer is not None and viewer.pk != user.pk:
        data["isFollowing"] = viewer.is_following(user)
    return data


def _user_list(request, queryset, message):
    pagination = create_pagination(
        request.GET.get("page"), request.GET.get("limit"), queryset.count()
    )
    users = [serialize_user_summary(user) for user in pagination.slice(queryset)]
    return success_response(
        request, message, data={"users": users}, meta=pagination.as_meta()
    )


@require_http_methods(["GET"])
def user_list(request):
    queryset = _active_users().order_by(
        ordering_from_request(request, SORT_FIELDS, "createdAt")
    )
    return _user_list(request, queryset, "Users retrieved successfully")


@require_http_methods(["GET"])
def user_search(request):
    query = (request.GET.get("q") or "").strip()
    if len(query) < 2:
        return error_response(
            "Search query must be at least 2 characters long", status=400
        )

    queryset = (
        _active_users()
        .filter(
            Q(name__icontains=query)
            | Q(username__icontains=query)
            | Q(email__icontains=query)
        )
        .order_by("name")
    )
    return _user_list(request, queryset, "Users found successfully")


@require_http_methods(["GET"])
@api_auth_optional
def user_detail(request, user_id):
    user = _active_users().filter(pk=user_id).first()
    if user is None:
        return error_response("User not found", status=404)
    return success_response(
        request,
        "User profile retrieved successfully",
        data={"user": _profile(user, request.api_user)},
    )


@require_http_methods(["GET"])
@api_auth_optional
def user_by_username(request, username):
    user = _active_users().filter(username=username.lower()).first()
    if user is None:
        return error_response("User not found", status=404)
    return success_response(
        request,
        "User profile retrieved successfully",
        data={"user": _profile(user, request.api_user)},
    )


def _articles_of(request, user):
    queryset = (
        Article.objects.by_author(user)
        .listed()
        .select_related("author")
        .prefetch_related("tags")
        .annotate(
            like_count=Count("likes", distinct=True),
            comment_count=Count("comments", distinct=True),
        )
        .order_by("-published_at")
    )
    pagination = create_pagination(
        request.GET.get("page"), request.GET.get("limit"), queryset.count()
    )
    return success_response(
        request,
        "User articles retrieved successfully",
        data={
            "user": serialize_user_summary(user),
            "articles": [serialize_article(a) for a in pagination.slice(queryset)],
        },
        meta=pagination.as_meta(),
    )


@require_http_methods(["GET"])
def user_articles(request, user_id):
    user = _active_users().filter(pk=user_id).first()
    if user is None:
        return error_response("User not found", status=404)
    return _articles_of(request, user)


@require_http_methods(["GET"])
def user_articles_by_username(request, username):
    user = _active_users().filter(username=username.lower()).first()
    if user is None:
        return error_response("User not found", status=404)
    return _articles_of(request, user)


@csrf_exempt
@require_http_methods(["POST", "DELETE"])
@api_auth_required
def follow(request, user_id):
    """POST follows the user, DELETE unfollows."""
    viewer = request.api_user
    if viewer.pk == user_id:
        return error_response("You cannot follow yourself", status=400)

    target = _active_users().filter(pk=user_id).first()
    if target is None:
        return error_response("User not found", status=404)

    following = viewer.is_following(target)
    if request.method == "POST":
        if following:
            return error_response("You are already following this user", status=400)
        viewer.following.add(target)
        message = f"You are now following {target.name}"
    else:
        if not following:
            return error_response("You are not following this user", status=400)
        viewer.following.remove(target)
        message = f"You have unfollowed {target.name}"

    logger.info(f"User {viewer.pk} {request.method.lower()} follow of user {target.pk}")
    return success_response(
        request,
        message,
        data={
            "isFollowing": request.method == "POST",
            "followersCount": target.followers.count(),
        },
    )


@require_http_methods(["GET"])
def followers(request, user_id):
    user = _active_users().filter(pk=user_id).first()
    if user is None:
        return error_response("User not found", status=404)
    queryset = user.followers.filter(is_active=True).order_by("name")
    return _user_list(request, queryset, "Followers retrieved successfully")


@require_http_methods(["GET"])
def following(request, user_id):
    user = _active_users().filter(pk=user_id).first()
    if user is None:
        return error_response("User not found", status=404)
    queryset = user.following.filter(is_active=True).order_by("name")
    return _user_list(request, queryset, "Following retrieved successfully")


@require_http_methods(["GET"])
@api_auth_required
def follow_status(request, user_id):
    target = _active_users().filter(pk=user_id).first()
    if target is None:
        return error_response("User not found", status=404)
    return success_response(
        request,
        "Follow status retrieved successfully",
        data={
            "isFollowing": request.api_user.is_following(target),
            "isFollowedBy": target.is_following(request.api_user),
        },
    )
