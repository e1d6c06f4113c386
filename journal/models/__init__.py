"""
Models for the journal app.

- base: TimeStampedModel and UniqueSlugMixin
- user: User (profile fields and follower graph)
- article: Article, Tag, Like, Comment
"""

from .base import TimeStampedModel, UniqueSlugMixin
from .user import User, UserManager
from .article import (
    Article,
    ArticleManager,
    ArticleQuerySet,
    Comment,
    Like,
    Tag,
)

__all__ = [
    # Base
    "TimeStampedModel",
    "UniqueSlugMixin",
    # Users
    "User",
    "UserManager",
    # Articles
    "Article",
    "ArticleQuerySet",
    "ArticleManager",
    "Tag",
    "Like",
    "Comment",
]
