"""Tests for the article editing session."""

import pytest

from community.exceptions import ValidationError
from community.models.article import Article, ArticleStatus
from community.services.article_editor import ArticleEditor

LONG_CONTENT = "word " * 400


class TestArticleEditor:
    """Tests for ArticleEditor state changes."""

    def test_initial_read_time_from_content(self):
        editor = ArticleEditor(title="Title", content=LONG_CONTENT)
        assert editor.read_time == 2

    def test_content_change_recomputes(self):
        editor = ArticleEditor(title="Title", content="one")
        editor.set_content(LONG_CONTENT)
        assert editor.read_time == 2

    def test_manual_read_time_kept_until_content_changes(self):
        editor = ArticleEditor(title="Title", content=LONG_CONTENT)
        editor.set_read_time(10)

        editor.set_content(LONG_CONTENT)
        assert editor.read_time == 10

        editor.set_content("short")
        assert editor.read_time == 1

    def test_add_tag(self):
        editor = ArticleEditor(tags=["python"])

        assert editor.add_tag("  testing ") is True
        assert editor.add_tag("python") is False
        assert editor.add_tag("   ") is False
        assert editor.tags == ["python", "testing"]

    def test_remove_tag(self):
        editor = ArticleEditor(tags=["a", "b"])
        editor.remove_tag("a")
        editor.remove_tag("missing")
        assert editor.tags == ["b"]

    def test_apply_sets_read_time_after_content(self):
        editor = ArticleEditor(title="Title", content="one")
        editor.apply({"read_time": 4, "content": LONG_CONTENT})
        assert editor.read_time == 4

    def test_apply_rejects_unknown_fields(self):
        editor = ArticleEditor()

        with pytest.raises(ValidationError) as exc_info:
            editor.apply({"published_at": None, "title": "New title"})

        assert exc_info.value.errors == {"published_at": "Field cannot be edited"}
        assert editor.title == ""

    def test_apply_rejects_nulls(self):
        editor = ArticleEditor(title="Title", content=LONG_CONTENT, tags=["x"])

        with pytest.raises(ValidationError) as exc_info:
            editor.apply({"tags": None, "content": None, "title": "New title"})

        assert exc_info.value.errors == {
            "content": "Field cannot be null",
            "tags": "Field cannot be null",
        }
        assert editor.title == "Title"
        assert editor.tags == ["x"]
        assert editor.content == LONG_CONTENT

    def test_from_article(self):
        article = Article(
            id="a1",
            title="Existing title",
            content=LONG_CONTENT,
            tags=["x"],
            status=ArticleStatus.PUBLISHED,
            read_time=6,
            author_id="u1",
        )

        editor = ArticleEditor.from_article(article)

        assert editor.read_time == 6
        assert editor.status is ArticleStatus.PUBLISHED
        assert editor.tags == ["x"]

    def test_validate_returns_form(self):
        editor = ArticleEditor(title="  A fine title  ", content=LONG_CONTENT, status="published")

        form = editor.validate()

        assert form.title == "A fine title"
        assert form.status is ArticleStatus.PUBLISHED

    def test_validate_reports_each_field(self):
        editor = ArticleEditor(title="abc", content="short", status="archived")

        with pytest.raises(ValidationError) as exc_info:
            editor.validate()

        assert set(exc_info.value.errors) == {"title", "content", "status"}
