import json

import pytest
from django.test import Client

from inkwell import celery_app
from journal.api.auth import issue_token
from journal.models import Article, User

PASSWORD = "Secret123"


@pytest.fixture(autouse=True, scope="session")
def eager_celery():
    """Run tasks inline; deployments leave CELERY_TASK_ALWAYS_EAGER off."""
    celery_app.conf.CELERY_TASK_ALWAYS_EAGER = True
    yield


@pytest.fixture
def author(db):
    return User.objects.create_user(email="ada@example.com", password=PASSWORD, name="Ada Lovelace")


@pytest.fixture
def reader(db):
    return User.objects.create_user(email="grace@example.com", password=PASSWORD, name="Grace Hopper")


class ApiClient:
    """Thin JSON wrapper over Django's test client."""

    def __init__(self, user=None):
        self.client = Client()
        self.headers = {}
        if user is not None:
            self.headers["HTTP_AUTHORIZATION"] = f"Bearer {issue_token(user)}"

    def _send(self, method, path, payload=None, **extra):
        kwargs = {**self.headers, **extra}
        if payload is not None:
            kwargs["data"] = json.dumps(payload)
            kwargs["content_type"] = "application/json"
        return getattr(self.client, method)(path, **kwargs)

    def get(self, path, params=None, **extra):
        return self.client.get(path, params or {}, **{**self.headers, **extra})

    def post(self, path, payload=None, **extra):
        return self._send("post", path, payload if payload is not None else {}, **extra)

    def put(self, path, payload=None, **extra):
        return self._send("put", path, payload if payload is not None else {}, **extra)

    def delete(self, path, **extra):
        return self._send("delete", path, **extra)


@pytest.fixture
def anon_api(db):
    return ApiClient()


@pytest.fixture
def author_api(author):
    return ApiClient(author)


@pytest.fixture
def reader_api(reader):
    return ApiClient(reader)


@pytest.fixture
def make_article(author):
    def make(**fields):
        fields.setdefault("title", "A published article")
        fields.setdefault("content", "Some **markdown** content for readers.")
        fields.setdefault("status", Article.Status.PUBLISHED)
        fields.setdefault("author", author)
        return Article.objects.create(**fields)

    return make
