"""
Account endpoints: registration, login, profile and password changes.
"""

import logging

from django.contrib.auth import authenticate, get_user_model
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from ..auth import api_auth_required, issue_token
from ..forms import ChangePasswordForm, LoginForm, ProfileForm, RegisterForm, form_data
from ..responses import error_response, form_error_response, parse_json_body, success_response
from ..serializers import serialize_user

logger = logging.getLogger(__name__)

User = get_user_model()


@require_http_methods(["GET"])
def health(request):
    return success_response(
        request, "Blog API is running!", data={"timestamp": timezone.now()}
    )


@csrf_exempt
@require_http_methods(["POST"])
def register(request):
    payload = parse_json_body(request)
    if payload is None:
        return error_response("Invalid JSON", status=400)

    form = RegisterForm(form_data(payload))
    if not form.is_valid():
        return form_error_response(form)

    data = form.cleaned_data
    if User.objects.filter(email=data["email"]).exists():
        return error_response("User with this email already exists", status=400)

    user = User.objects.create_user(
        email=data["email"], password=data["password"], name=data["name"]
    )
    logger.info(f"Registered user {user.pk} ({user.username})")

    return success_response(
        request,
        "User registered successfully",
        data={"user": serialize_user(user, include_email=True), "token": issue_token(user)},
        status=201,
    )


@csrf_exempt
@require_http_methods(["POST"])
def login(request):
    payload = parse_json_body(request)
    if payload is None:
        return error_response("Invalid JSON", status=400)

    form = LoginForm(form_data(payload))
    if not form.is_valid():
        return form_error_response(form)

    user = authenticate(
        request, email=form.cleaned_data["email"], password=form.cleaned_data["password"]
    )
    if user is None:
        return error_response("Invalid email or password", status=401)

    user.last_login = timezone.now()
    user.save(update_fields=["last_login"])

    return success_response(
        request,
        "Login successful",
        data={"user": serialize_user(user, include_email=True), "token": issue_token(user)},
    )


@require_http_methods(["GET"])
@api_auth_required
def me(request):
    return success_response(
        request,
        "User profile retrieved successfully",
        data={"user": serialize_user(request.api_user, include_email=True)},
    )


@csrf_exempt
@require_http_methods(["PUT"])
@api_auth_required
def update_profile(request):
    payload = parse_json_body(request)
    if payload is None:
        return error_response("Invalid JSON", status=400)

    form = ProfileForm(form_data(payload))
    if not form.is_valid():
        return form_error_response(form)

    user = request.api_user
    changed = [name for name in form.fields if name in form.data]
    for name in changed:
        value = form.cleaned_data[name]
        if name == "name" and not value:
            continue
        setattr(user, name, value)
    if changed:
        user.save()

    return success_response(
        request,
        "Profile updated successfully",
        data={"user": serialize_user(user, include_email=True)},
    )


@csrf_exempt
@require_http_methods(["POST"])
@api_auth_required
def change_password(request):
    payload = parse_json_body(request)
    if payload is None:
        return error_response("Invalid JSON", status=400)

    form = ChangePasswordForm(form_data(payload))
    if not form.is_valid():
        return form_error_response(form)

    user = request.api_user
    if not user.check_password(form.cleaned_data["current_password"]):
        return error_response("Current password is incorrect", status=400)

    user.set_password(form.cleaned_data["new_password"])
    user.save(update_fields=["password"])
    logger.info(f"Password changed for user {user.pk}")

    return success_response(request, "Password changed successfully")
