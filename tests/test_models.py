import pytest

from journal.models import Article, Comment, Like, Tag, User

VIDEO_ID = "dQw4w9WgXcQ"


@pytest.mark.django_db
class TestUser:
    def test_username_generated_from_name(self):
        user = User.objects.create_user(email="Jo.Bloggs@Example.com", password="x", name="Jo Bloggs!")
        assert user.username == "jobloggs"
        assert user.email == "jo.bloggs@example.com"

    def test_username_collisions_get_a_counter(self):
        first = User.objects.create_user(email="a@example.com", password="x", name="Sam")
        second = User.objects.create_user(email="b@example.com", password="x", name="Sam")
        assert first.username == "sam"
        assert second.username == "sam2"

    def test_short_or_symbol_names(self):
        assert User._username_base("Al") == "aluser"
        assert User._username_base("!!!") == "user"
        assert User._username_base("A" * 40) == "a" * 20

    def test_explicit_username_lowercased(self):
        user = User.objects.create_user(email="c@example.com", password="x", name="Cee", username="CeeDee")
        assert user.username == "ceedee"

    def test_following_is_asymmetric(self, author, reader):
        reader.following.add(author)
        assert reader.is_following(author)
        assert not author.is_following(reader)
        assert list(author.followers.all()) == [reader]

    def test_superuser_is_admin(self):
        admin = User.objects.create_superuser(email="root@example.com", password="x", name="Root")
        assert admin.role == User.Role.ADMIN
        assert admin.is_admin


@pytest.mark.django_db
class TestArticleSave:
    def test_raw_links_normalized_and_media_extracted(self, author):
        article = Article.objects.create(
            title="Watch this video",
            content=f"Look https://youtu.be/{VIDEO_ID} here",
            author=author,
        )
        assert "youtu.be" not in article.content
        assert f"{{{{youtube:{VIDEO_ID}}}}}" in article.content
        assert len(article.media) == 1
        assert article.media[0]["metadata"]["videoId"] == VIDEO_ID
        assert article.read_time == 1
        assert article.excerpt == "Look here"

    def test_slug_unique_and_follows_title(self, make_article):
        first = make_article(title="Hello World")
        second = make_article(title="Hello World")
        assert first.slug == "hello-world"
        assert second.slug == "hello-world-2"

        second.title = "Something Else"
        second.save()
        assert second.slug == "something-else"

    def test_published_at_set_once(self, make_article):
        article = make_article(status=Article.Status.DRAFT)
        assert article.published_at is None

        article.status = Article.Status.PUBLISHED
        article.save()
        first_published = article.published_at
        assert first_published is not None

        article.title = "A renamed article"
        article.save()
        assert article.published_at == first_published

    def test_explicit_excerpt_kept(self, make_article):
        article = make_article(excerpt="Hand written")
        article.content = "Completely different content now."
        article.save()
        assert article.excerpt == "Hand written"

    def test_content_change_clears_cached_render(self, make_article):
        article = make_article()
        Article.objects.filter(pk=article.pk).update(content_html_cached="<p>old</p>")
        article.refresh_from_db()

        article.content = "New content for this article."
        article.save()
        assert article.content_html_cached == ""

    def test_html_content_sanitized(self, make_article):
        article = make_article(
            content_type=Article.ContentType.HTML,
            content='<p>Hi there reader</p><script>x()</script><iframe src="https://e.x"></iframe>',
        )
        assert "<script" not in article.content
        assert "<iframe" not in article.content
        assert article.media == []
        assert article.excerpt.startswith("Hi there reader")

    def test_render_task_runs_after_commit(self, make_article, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            article = make_article(content=f"# Heading\n\nIntro text https://youtu.be/{VIDEO_ID}")
        assert len(callbacks) == 1

        article.refresh_from_db()
        assert "<iframe" in article.content_html_cached
        assert article.table_of_contents[0]["title"] == "Heading"
        assert article.render() == article.content_html_cached


@pytest.mark.django_db
class TestArticleAccess:
    def test_listed_articles(self, make_article):
        listed = make_article()
        make_article(status=Article.Status.DRAFT)
        make_article(visibility=Article.Visibility.PRIVATE)
        assert list(Article.objects.listed()) == [listed]

    def test_can_view(self, make_article, author, reader):
        private = make_article(visibility=Article.Visibility.PRIVATE)
        assert private.can_view(author)
        assert not private.can_view(reader)
        assert not private.can_view(None)

        reader.role = User.Role.ADMIN
        assert private.can_view(reader)

    def test_toggle_like(self, make_article, reader):
        article = make_article()
        assert article.toggle_like(reader) is True
        assert Like.objects.filter(article=article, user=reader).count() == 1
        assert article.toggle_like(reader) is False
        assert not Like.objects.exists()

    def test_set_tags_normalizes(self, make_article):
        article = make_article()
        article.set_tags(["Python", " django ", "", "python"])
        assert sorted(t.name for t in article.tags.all()) == ["django", "python"]
        assert Tag.objects.count() == 2

    def test_record_view(self, make_article):
        article = make_article()
        article.record_view()
        article.refresh_from_db()
        assert article.views == 1

    def test_comments_ordered_oldest_first(self, make_article, author, reader):
        article = make_article()
        first = Comment.objects.create(article=article, user=reader, content="First")
        second = Comment.objects.create(article=article, user=author, content="Second")
        assert list(article.comments.all()) == [first, second]
