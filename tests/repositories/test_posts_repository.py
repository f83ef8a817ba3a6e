# tests/repositories/test_posts_repository.py
import pytest
from sqlalchemy import select

from storefront_http_api.db import models
from storefront_http_api.repositories import PostsRepository, paginate
from storefront_http_api.schemas.common import SortKey
from storefront_http_api.schemas.posts import PostListQuery
from tests.conftest import make_category, make_post


@pytest.fixture
def repo(session):
    return PostsRepository(session)


class TestPagination:
    def test_twenty_five_posts_in_pages_of_ten(self, session, repo):
        for i in range(25):
            make_post(session, f"Post {i:02d}")

        first = repo.list_published(PostListQuery(limit=10, page=1))
        third = repo.list_published(PostListQuery(limit=10, page=3))
        beyond = repo.list_published(PostListQuery(limit=10, page=4))

        assert (first.total, first.pages, len(first.items)) == (25, 3, 10)
        assert (third.total, third.pages, len(third.items)) == (25, 3, 5)
        assert beyond.items == []
        assert (beyond.total, beyond.pages, beyond.page, beyond.limit) == (25, 3, 4, 10)

    def test_skip_is_derived_from_page_and_limit(self, session, repo):
        for i in range(3):
            make_post(session, f"Post {i}")
        page = paginate(session, select(models.Post).order_by(models.Post.id), page=2, limit=2)
        assert page.skip == 2
        assert len(page.items) == 1


class TestFilters:
    def test_drafts_never_listed(self, session, repo):
        make_post(session, "Visible")
        make_post(session, "Hidden", status=models.PostStatus.DRAFT)

        page = repo.list_published(PostListQuery(search="i"))

        assert [p.title for p in page.items] == ["Visible"]

    def test_search_is_case_insensitive_over_title_content_and_excerpt(self, session, repo):
        make_post(session, "Garden Basics")
        make_post(session, "Other", content="All about GARDEN tools and more.")
        make_post(session, "Third", excerpt="garden party")
        make_post(session, "Unrelated")

        page = repo.list_published(PostListQuery(search="garden"))

        assert {p.title for p in page.items} == {"Garden Basics", "Other", "Third"}

    def test_search_wildcards_match_literally(self, session, repo):
        make_post(session, "Discounts", content="Up to 50% off this weekend only.")
        make_post(session, "Gardening", content="Nothing discounted about soil.")

        page = repo.list_published(PostListQuery(search="50%"))
        everything = repo.list_published(PostListQuery(search="%"))

        assert [p.title for p in page.items] == ["Discounts"]
        assert [p.title for p in everything.items] == ["Discounts"]

    def test_category_and_tag_facets_combine(self, session, repo):
        tech = make_category(session, "Tech")
        home = make_category(session, "Home")
        hot = models.Tag(name="Hot", slug="hot")
        session.add(hot)
        session.commit()

        a = make_post(session, "Tech hot", category=tech)
        a.tags.append(hot)
        make_post(session, "Tech cold", category=tech)
        b = make_post(session, "Home hot", category=home)
        b.tags.append(hot)
        session.commit()

        page = repo.list_published(PostListQuery(category="tech", tag="hot"))

        assert [p.title for p in page.items] == ["Tech hot"]


class TestSorting:
    def test_popular_sorts_by_views(self, session, repo):
        make_post(session, "Low", views=1)
        make_post(session, "High", views=99)
        make_post(session, "Mid", views=10)

        page = repo.list_published(PostListQuery(sort=SortKey.POPULAR))

        assert [p.title for p in page.items] == ["High", "Mid", "Low"]

    def test_newest_is_default_and_ties_break_by_id(self, session, repo):
        first = make_post(session, "First")
        second = make_post(session, "Second")
        second.created_at = first.created_at
        session.commit()

        page = repo.list_published(PostListQuery())

        assert [p.title for p in page.items] == ["Second", "First"]


def test_increment_views_is_a_single_update(session, repo):
    post = make_post(session, "Counted", views=5)

    repo.increment_views(post.id)
    repo.increment_views(post.id)
    session.commit()
    session.refresh(post)

    assert post.views == 7


def test_slug_exists_can_exclude_a_row(session, repo):
    post = make_post(session, "Taken")

    assert repo.slug_exists("taken") is True
    assert repo.slug_exists("taken", exclude_id=post.id) is False
    assert repo.slug_exists("free") is False
