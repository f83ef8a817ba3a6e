# storefront_http_api/repositories/posts.py

from __future__ import annotations

from typing import Any, Optional, Sequence

from sqlalchemy import Select, func, or_, select, update
from sqlalchemy.orm import Session, selectinload

from ..db import models
from ..schemas.common import SortKey
from ..schemas.posts import PostListQuery
from .base import Page, paginate


class PostsRepository:
    """
    Data access for posts, their comments and their likes.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def session(self) -> Session:
        return self._session

    def _base_select(self) -> Select[Any]:
        return select(models.Post).options(
            selectinload(models.Post.category),
            selectinload(models.Post.tags),
            selectinload(models.Post.likes),
            selectinload(models.Post.comments),
        )

    @staticmethod
    def _ordering(sort: SortKey):
        post = models.Post
        if sort == SortKey.OLDEST:
            return (post.created_at.asc(), post.id.asc())
        if sort in (SortKey.POPULAR, SortKey.RATING):
            return (post.views.desc(), post.id.desc())
        if sort == SortKey.NAME:
            return (post.title.asc(), post.id.asc())
        return (post.created_at.desc(), post.id.desc())

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    def list_published(self, query: PostListQuery) -> Page[models.Post]:
        """
        Filtered, sorted page of published posts. Drafts never appear here,
        whatever the other filters say.
        """
        post = models.Post
        stmt = self._base_select().where(post.status == models.PostStatus.PUBLISHED)

        term = (query.search or "").strip()
        if term:
            # autoescape: % and _ in the search text match literally
            stmt = stmt.where(
                or_(
                    post.title.icontains(term, autoescape=True),
                    post.content.icontains(term, autoescape=True),
                    post.excerpt.icontains(term, autoescape=True),
                )
            )
        if query.category:
            stmt = stmt.where(post.category.has(models.Category.slug == query.category))
        if query.tag:
            stmt = stmt.where(post.tags.any(models.Tag.slug == query.tag))

        stmt = stmt.order_by(*self._ordering(query.sort))
        return paginate(self.session, stmt, page=query.page, limit=query.limit)

    def get_by_id(self, post_id: int) -> Optional[models.Post]:
        stmt = self._base_select().where(models.Post.id == post_id)
        return self.session.execute(stmt).scalar_one_or_none()

    def get_by_slug(self, slug: str) -> Optional[models.Post]:
        stmt = self._base_select().where(models.Post.slug == slug)
        return self.session.execute(stmt).scalar_one_or_none()

    def slug_exists(self, slug: str, *, exclude_id: Optional[int] = None) -> bool:
        stmt = select(models.Post.id).where(models.Post.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(models.Post.id != exclude_id)
        return self.session.execute(stmt.limit(1)).first() is not None

    def published_category_ids(self) -> Sequence[int]:
        stmt = (
            select(models.Post.category_id)
            .where(models.Post.status == models.PostStatus.PUBLISHED)
            .where(models.Post.category_id.is_not(None))
            .distinct()
        )
        return list(self.session.execute(stmt).scalars().all())

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    def add(self, post: models.Post) -> models.Post:
        self.session.add(post)
        self.session.flush()
        return post

    def delete(self, post: models.Post) -> None:
        self.session.delete(post)
        self.session.flush()

    def increment_views(self, post_id: int) -> None:
        """
        ``views = views + 1`` in a single statement, so concurrent readers
        never lose an increment.
        """
        stmt = (
            update(models.Post)
            .where(models.Post.id == post_id)
            .values(views=models.Post.views + 1)
            .execution_options(synchronize_session=False)
        )
        self.session.execute(stmt)

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def add_comment(self, post: models.Post, *, user_id: str, content: str) -> models.Comment:
        comment = models.Comment(post=post, user_id=user_id, content=content)
        self.session.add(comment)
        self.session.flush()
        return comment

    # ------------------------------------------------------------------
    # Likes
    # ------------------------------------------------------------------

    def get_like(self, post_id: int, user_id: str) -> Optional[models.PostLike]:
        stmt = select(models.PostLike).where(
            models.PostLike.post_id == post_id,
            models.PostLike.user_id == user_id,
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def add_like(self, post_id: int, user_id: str) -> models.PostLike:
        like = models.PostLike(post_id=post_id, user_id=user_id)
        self.session.add(like)
        self.session.flush()
        return like

    def remove_like(self, like: models.PostLike) -> None:
        self.session.delete(like)
        self.session.flush()

    def count_likes(self, post_id: int) -> int:
        stmt = select(func.count(models.PostLike.id)).where(models.PostLike.post_id == post_id)
        return self.session.execute(stmt).scalar_one()


__all__ = ["PostsRepository"]
