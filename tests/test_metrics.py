import pytest

from journal.markdown.metrics import (
    EXCERPT_LENGTH,
    derive_html_metrics,
    derive_metrics,
    make_excerpt,
    markdown_to_plain_text,
    reading_minutes,
)


class TestPlainText:
    def test_strips_markdown_syntax(self):
        text = (
            "# Heading\n\n"
            "Some **bold** and _italic_ words with [a link](https://x.dev).\n\n"
            "![img](https://x.dev/a.png)\n\n"
            "```python\nprint('code')\n```\n\n"
            "Inline `code` here {{youtube:dQw4w9WgXcQ}}"
        )
        assert markdown_to_plain_text(text) == (
            "Heading Some bold and italic words with a link. Inline here"
        )

    def test_empty(self):
        assert markdown_to_plain_text("") == ""
        assert markdown_to_plain_text(None) == ""


class TestReadingMinutes:
    def test_floor_of_one(self):
        assert reading_minutes(0) == 1
        assert derive_metrics("").reading_minutes == 1

    def test_rounds_up(self):
        assert reading_minutes(200) == 1
        assert reading_minutes(201) == 2

    def test_media_adds_half_a_minute_each(self):
        assert reading_minutes(200, media_count=2) == 2
        assert reading_minutes(200, media_count=3) == 3

    @pytest.mark.parametrize("words", [0, 50, 199, 200, 401, 1000, 5000])
    def test_monotonic_in_word_count(self, words):
        assert reading_minutes(words + 1) >= reading_minutes(words)

    def test_embed_tokens_count_as_media(self):
        words = " ".join(["word"] * 200)
        with_video = derive_metrics(f"{words}\n\n{{{{youtube:dQw4w9WgXcQ}}}}")
        assert with_video.word_count == 200
        assert with_video.reading_minutes == 2


class TestExcerpt:
    def test_short_text_kept(self):
        assert make_excerpt("short") == "short"

    def test_long_text_truncated(self):
        excerpt = make_excerpt("x" * 400)
        assert len(excerpt) == EXCERPT_LENGTH + 3
        assert excerpt.endswith("...")

    def test_derive_metrics(self):
        metrics = derive_metrics("Hello **world**, this is *fine*.")
        assert metrics.plain_text == "Hello world, this is fine."
        assert metrics.word_count == 5
        assert metrics.excerpt == metrics.plain_text


class TestHtmlMetrics:
    def test_tags_dropped(self):
        metrics = derive_html_metrics("<p>One two <b>three</b></p>\n<p>four</p>")
        assert metrics.plain_text == "One two three four"
        assert metrics.word_count == 4
        assert metrics.reading_minutes == 1
