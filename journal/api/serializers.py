"""
Plain-dict serializers for API responses.

Keys are camelCase. Datetimes are left as datetime objects and localized by
``responses.success_response``.
"""


def serialize_user_summary(user) -> dict:
    return {
        "id": user.pk,
        "name": user.name,
        "username": user.username,
        "avatar": user.avatar,
        "bio": user.bio,
    }


def serialize_user(user, *, include_email=False) -> dict:
    data = {
        **serialize_user_summary(user),
        "role": user.role,
        "isVerified": user.is_verified,
        "socialLinks": user.social_links,
        "followersCount": user.followers.count(),
        "followingCount": user.following.count(),
        "createdAt": user.created_at,
        "updatedAt": user.updated_at,
    }
    if include_email:
        data["email"] = user.email
    return data


def serialize_comment(comment) -> dict:
    return {
        "id": comment.pk,
        "content": comment.content,
        "user": serialize_user_summary(comment.user),
        "createdAt": comment.created_at,
    }


def _count(article, annotation, relation):
    value = getattr(article, annotation, None)
    return value if value is not None else getattr(article, relation).count()


def serialize_article(article, *, detail=False, viewer=None) -> dict:
    """
    List views get the summary; ``detail=True`` adds content, media, comments
    and the viewer's like state.
    """
    data = {
        "id": article.pk,
        "title": article.title,
        "slug": article.slug,
        "excerpt": article.excerpt,
        "featuredImage": {
            "url": article.featured_image_url,
            "alt": article.featured_image_alt,
            "caption": article.featured_image_caption,
        },
        "author": serialize_user_summary(article.author),
        "status": article.status,
        "visibility": article.visibility,
        "tags": [tag.name for tag in article.tags.all()],
        "category": article.category,
        "readTime": article.read_time,
        "wordCount": article.word_count,
        "views": article.views,
        "likeCount": _count(article, "like_count", "likes"),
        "commentCount": _count(article, "comment_count", "comments"),
        "publishedAt": article.published_at,
        "createdAt": article.created_at,
        "updatedAt": article.updated_at,
    }
    if detail:
        data.update(
            {
                "content": article.content,
                "contentType": article.content_type,
                "media": article.media,
                "tableOfContents": article.table_of_contents,
                "comments": [
                    serialize_comment(comment)
                    for comment in article.comments.select_related("user")
                ],
                "likedByMe": bool(
                    viewer is not None
                    and article.likes.filter(user_id=viewer.pk).exists()
                ),
            }
        )
    return data
