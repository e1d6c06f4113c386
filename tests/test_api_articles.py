import pytest

from journal.models import Article, Comment, User

from .conftest import ApiClient

VIDEO_ID = "dQw4w9WgXcQ"


@pytest.mark.django_db
class TestCreateArticle:
    def test_requires_auth(self, anon_api):
        response = anon_api.post("/api/articles/", {"title": "Hello there", "content": "x" * 20})
        assert response.status_code == 401

    def test_create_normalizes_content(self, author_api, author):
        response = author_api.post(
            "/api/articles/",
            {
                "title": "My first video post",
                "content": f"Check this https://www.youtube.com/watch?v={VIDEO_ID} out",
                "tags": ["Video", "music"],
                "featuredImage": {"url": "https://example.com/cover.png", "alt": "Cover"},
            },
        )
        assert response.status_code == 201
        data = response.json()["data"]["article"]
        assert data["slug"] == "my-first-video-post"
        assert data["content"] == f"Check this \n\n{{{{youtube:{VIDEO_ID}}}}}\n\n out"
        assert data["media"][0]["metadata"]["videoId"] == VIDEO_ID
        assert data["status"] == "draft"
        assert data["contentType"] == "markdown"
        assert sorted(data["tags"]) == ["music", "video"]
        assert data["featuredImage"]["alt"] == "Cover"
        assert data["author"]["id"] == author.pk

    def test_invalid_embed_rejected(self, author_api):
        response = author_api.post(
            "/api/articles/",
            {"title": "Broken embeds", "content": "Look at {{youtube:short}} please"},
        )
        body = response.json()
        assert response.status_code == 400
        assert body["message"] == "Invalid markdown content"
        assert body["errors"] == ["Invalid YouTube video ID in: {{youtube:short}}"]
        assert not Article.objects.exists()

    def test_validation_errors(self, author_api):
        response = author_api.post("/api/articles/", {"title": "Hey", "content": "short", "tags": "nope"})
        assert response.status_code == 400
        fields = {error["field"] for error in response.json()["errors"]}
        assert fields == {"title", "content", "tags"}

    def test_html_article(self, author_api):
        response = author_api.post(
            "/api/articles/",
            {
                "title": "Hand written HTML",
                "content": "<p>Hello readers</p><script>alert(1)</script>",
                "contentType": "html",
            },
        )
        assert response.status_code == 201
        assert "<script" not in response.json()["data"]["article"]["content"]


@pytest.mark.django_db
class TestListArticles:
    def test_only_published_public(self, anon_api, make_article):
        listed = make_article(title="Visible article")
        make_article(title="Draft article", status=Article.Status.DRAFT)
        make_article(title="Private article", visibility=Article.Visibility.PRIVATE)

        response = anon_api.get("/api/articles/")
        body = response.json()
        assert response.status_code == 200
        assert [a["slug"] for a in body["data"]["articles"]] == [listed.slug]
        assert body["meta"] == {
            "currentPage": 1,
            "totalPages": 1,
            "totalItems": 1,
            "itemsPerPage": 10,
            "hasNextPage": False,
            "hasPrevPage": False,
        }

    def test_pagination(self, anon_api, make_article):
        for i in range(5):
            make_article(title=f"Article number {i}")
        body = anon_api.get("/api/articles/", {"page": 2, "limit": 2}).json()
        assert len(body["data"]["articles"]) == 2
        assert body["meta"]["totalPages"] == 3
        assert body["meta"]["hasNextPage"] is True
        assert body["meta"]["hasPrevPage"] is True

    def test_filters(self, anon_api, make_article):
        tagged = make_article(title="Tagged article", category="Tech")
        tagged.set_tags(["python"])
        make_article(title="Other article", content="Nothing about snakes here at all.")

        by_tag = anon_api.get("/api/articles/", {"tag": "Python"}).json()
        assert [a["id"] for a in by_tag["data"]["articles"]] == [tagged.pk]

        by_category = anon_api.get("/api/articles/", {"category": "tech"}).json()
        assert [a["id"] for a in by_category["data"]["articles"]] == [tagged.pk]

        by_search = anon_api.get("/api/articles/", {"search": "snakes"}).json()
        assert [a["title"] for a in by_search["data"]["articles"]] == ["Other article"]

    def test_sorting(self, anon_api, make_article):
        make_article(title="Bravo article")
        make_article(title="Alpha article")
        body = anon_api.get("/api/articles/", {"sortBy": "title", "sortOrder": "asc"}).json()
        assert [a["title"] for a in body["data"]["articles"]] == ["Alpha article", "Bravo article"]

    def test_my_articles_includes_drafts(self, author_api, make_article):
        make_article(title="Draft article", status=Article.Status.DRAFT)
        make_article(title="Live article")
        body = author_api.get("/api/articles/my-articles/", {"status": "draft"}).json()
        assert [a["title"] for a in body["data"]["articles"]] == ["Draft article"]


@pytest.mark.django_db
class TestReadArticle:
    def test_by_slug_and_id(self, anon_api, make_article):
        article = make_article()
        assert anon_api.get(f"/api/articles/{article.slug}/").status_code == 200
        assert anon_api.get(f"/api/articles/{article.pk}/").status_code == 200

    def test_missing(self, anon_api):
        assert anon_api.get("/api/articles/nope/").status_code == 404

    def test_views_increment(self, anon_api, make_article):
        article = make_article()
        anon_api.get(f"/api/articles/{article.slug}/")
        anon_api.get(f"/api/articles/{article.slug}/")
        article.refresh_from_db()
        assert article.views == 2

    def test_private_article_access(self, anon_api, author_api, reader_api, make_article):
        article = make_article(visibility=Article.Visibility.PRIVATE)
        url = f"/api/articles/{article.slug}/"
        assert anon_api.get(url).status_code == 404
        assert reader_api.get(url).status_code == 403
        assert author_api.get(url).status_code == 200

    def test_render(self, anon_api, make_article):
        article = make_article(content=f"## Section\n\nText https://youtu.be/{VIDEO_ID}")
        response = anon_api.get(f"/api/articles/{article.slug}/render/")
        data = response.json()["data"]["article"]
        assert response.status_code == 200
        assert "<iframe" in data["renderedContent"]
        assert "{{youtube:" not in data["renderedContent"]
        assert data["tableOfContents"][0]["title"] == "Section"


@pytest.mark.django_db
class TestUpdateDeleteArticle:
    def test_author_updates(self, author_api, make_article):
        article = make_article()
        response = author_api.put(
            f"/api/articles/{article.slug}/",
            {"title": "A brand new title", "tags": ["fresh"]},
        )
        assert response.status_code == 200
        data = response.json()["data"]["article"]
        assert data["slug"] == "a-brand-new-title"
        assert data["tags"] == ["fresh"]
        assert data["content"] == article.content

    def test_update_revalidates_embeds(self, author_api, make_article):
        article = make_article()
        response = author_api.put(
            f"/api/articles/{article.slug}/", {"content": "Now with {{googledrive:abc}} inside"}
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid markdown content"

    def test_only_author_updates(self, reader_api, make_article):
        article = make_article()
        response = reader_api.put(f"/api/articles/{article.slug}/", {"title": "Hijacked title"})
        assert response.status_code == 403

    def test_delete(self, author_api, reader_api, make_article):
        article = make_article()
        assert reader_api.delete(f"/api/articles/{article.slug}/").status_code == 403
        assert author_api.delete(f"/api/articles/{article.slug}/").status_code == 200
        assert not Article.objects.exists()


@pytest.mark.django_db
class TestPreview:
    def test_preview_markdown(self, author_api):
        response = author_api.post(
            "/api/articles/preview/",
            {"content": f"# Title\n\nSee https://youtu.be/{VIDEO_ID} and [docs](https://docs.dev)"},
        )
        data = response.json()["data"]
        assert response.status_code == 200
        assert "<iframe" in data["renderedContent"]
        assert data["media"][0]["type"] == "youtube"
        assert data["tableOfContents"][0]["id"] == "title"
        assert data["validation"]["isValid"] is True
        assert data["readTime"] == 1
        assert not Article.objects.exists()

    def test_preview_reports_problems(self, author_api):
        response = author_api.post(
            "/api/articles/preview/", {"content": "Broken {{youtube:short}} and ```"}
        )
        validation = response.json()["data"]["validation"]
        assert validation["isValid"] is False
        assert len(validation["errors"]) == 2


@pytest.mark.django_db
class TestEngagement:
    def test_like_toggle(self, reader_api, make_article):
        article = make_article()
        url = f"/api/articles/{article.slug}/like/"

        first = reader_api.post(url).json()["data"]
        assert first == {"liked": True, "likeCount": 1}
        second = reader_api.post(url).json()["data"]
        assert second == {"liked": False, "likeCount": 0}

    def test_cannot_like_draft(self, reader_api, make_article):
        article = make_article(status=Article.Status.DRAFT)
        assert reader_api.post(f"/api/articles/{article.slug}/like/").status_code == 403

    def test_comment_and_delete(self, reader_api, author_api, make_article, reader):
        article = make_article()
        response = reader_api.post(
            f"/api/articles/{article.slug}/comments/", {"content": "Great read!"}
        )
        assert response.status_code == 201
        comment_id = response.json()["data"]["comment"]["id"]
        assert Comment.objects.get(pk=comment_id).user == reader

        detail = reader_api.get(f"/api/articles/{article.slug}/").json()["data"]["article"]
        assert detail["commentCount"] == 1
        assert detail["comments"][0]["content"] == "Great read!"

        # the article author may moderate comments
        url = f"/api/articles/{article.slug}/comments/{comment_id}/"
        assert author_api.delete(url).status_code == 200
        assert not Comment.objects.exists()

    def test_comment_delete_forbidden_for_others(self, make_article, author):
        article = make_article()
        comment = Comment.objects.create(article=article, user=author, content="Mine")
        stranger = User.objects.create_user(email="s@example.com", password="x", name="Stranger")

        response = ApiClient(stranger).delete(
            f"/api/articles/{article.slug}/comments/{comment.pk}/"
        )
        assert response.status_code == 403

    def test_comment_too_long(self, reader_api, make_article):
        article = make_article()
        response = reader_api.post(
            f"/api/articles/{article.slug}/comments/", {"content": "x" * 1001}
        )
        assert response.status_code == 400
