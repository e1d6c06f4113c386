"""
Request validation for the JSON API.

Request bodies use camelCase keys; ``form_data`` maps them onto the
snake_case form fields before binding.
"""

import re

from django import forms
from django.contrib.auth import password_validation

from journal.models import Article

FIELD_ALIASES = {
    "contentType": "content_type",
    "currentPassword": "current_password",
    "newPassword": "new_password",
}

PASSWORD_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


def form_data(payload: dict) -> dict:
    data = {FIELD_ALIASES.get(key, key): value for key, value in payload.items()}

    # Nested objects are flattened onto plain fields
    featured = data.pop("featuredImage", None)
    if isinstance(featured, str):
        featured = {"url": featured}
    if isinstance(featured, dict):
        data["featured_image_url"] = featured.get("url") or ""
        data["featured_image_alt"] = featured.get("alt") or ""
        data["featured_image_caption"] = featured.get("caption") or ""

    social = data.pop("socialLinks", None)
    if isinstance(social, dict):
        for key in ("twitter", "linkedin", "website"):
            if key in social:
                data[key] = social[key] or ""
    return data


class TagListField(forms.Field):
    """A JSON array of tag names, normalized to lowercase."""

    def to_python(self, value):
        if value in (None, ""):
            return []
        if not isinstance(value, list):
            raise forms.ValidationError("Tags must be an array")

        tags = []
        for item in value:
            if not isinstance(item, str):
                raise forms.ValidationError("Each tag must be a string")
            tag = item.strip().lower()
            if len(tag) > 50:
                raise forms.ValidationError("Each tag cannot exceed 50 characters")
            if tag and tag not in tags:
                tags.append(tag)
        return tags


class RegisterForm(forms.Form):
    name = forms.CharField(min_length=2, max_length=50)
    email = forms.EmailField()
    password = forms.CharField(min_length=6, strip=False)

    def clean_email(self):
        return self.cleaned_data["email"].lower()

    def clean_password(self):
        password = self.cleaned_data["password"]
        if not PASSWORD_RE.match(password):
            raise forms.ValidationError(
                "Password must contain at least one lowercase letter, "
                "one uppercase letter, and one number"
            )
        password_validation.validate_password(password)
        return password


class LoginForm(forms.Form):
    email = forms.EmailField()
    password = forms.CharField(strip=False)

    def clean_email(self):
        return self.cleaned_data["email"].lower()


class ProfileForm(forms.Form):
    name = forms.CharField(min_length=2, max_length=50, required=False)
    bio = forms.CharField(max_length=500, required=False)
    avatar = forms.URLField(required=False)
    twitter = forms.URLField(required=False)
    linkedin = forms.URLField(required=False)
    website = forms.URLField(required=False)


class ChangePasswordForm(forms.Form):
    current_password = forms.CharField(strip=False)
    new_password = forms.CharField(min_length=6, strip=False)

    def clean_new_password(self):
        password = self.cleaned_data["new_password"]
        password_validation.validate_password(password)
        return password


class ArticleForm(forms.Form):
    """
    Create/update payload. With ``partial=True`` every field is optional and
    only the keys present in the payload are applied by the view.
    """

    title = forms.CharField(min_length=5, max_length=200)
    content = forms.CharField(strip=False)
    content_type = forms.ChoiceField(choices=Article.ContentType.choices, required=False)
    excerpt = forms.CharField(max_length=300, required=False)
    status = forms.ChoiceField(choices=Article.Status.choices, required=False)
    visibility = forms.ChoiceField(choices=Article.Visibility.choices, required=False)
    category = forms.CharField(max_length=50, required=False)
    tags = TagListField(required=False)
    featured_image_url = forms.URLField(max_length=500, required=False)
    featured_image_alt = forms.CharField(max_length=200, required=False)
    featured_image_caption = forms.CharField(max_length=300, required=False)

    def __init__(self, *args, partial=False, **kwargs):
        super().__init__(*args, **kwargs)
        if partial:
            for field in self.fields.values():
                field.required = False

    def clean_title(self):
        title = self.cleaned_data["title"].strip()
        if "title" in self.data and len(title) < 5:
            raise forms.ValidationError("Title must be between 5 and 200 characters")
        return title

    def clean_content(self):
        content = self.cleaned_data["content"]
        if "content" in self.data and len(content.strip()) < 10:
            raise forms.ValidationError("Content must be at least 10 characters long")
        return content

    def provided_fields(self) -> list[str]:
        """Cleaned field names that were present in the submitted payload."""
        return [name for name in self.fields if name in self.data]


class CommentForm(forms.Form):
    content = forms.CharField(max_length=1000)
