# storefront_http_api/services/posts_service.py

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from ..auth import Actor
from ..config import Settings
from ..db import models
from ..db.models import utcnow
from ..errors import ForbiddenError, NotFoundError
from ..logging import get_logger
from ..repositories import PostsRepository, TaxonomyRepository
from ..schemas.posts import (
    CommentCreate,
    CommentRead,
    LikeState,
    PostCreate,
    PostDetail,
    PostListData,
    PostListQuery,
    PostSummary,
    PostUpdate,
)
from ..schemas.taxonomy import CategoryRead
from ..slugs import unique_slug
from ..storage import IncomingFile, StorageGateway, StoredObject, discard_objects
from .base import clamp_limit, commit, numeric_id, pagination_of, resolve_category

logger = get_logger(__name__)


class PostsService:
    """
    Blog content: posts, comments, likes and view counting.

    Rules enforced here:
    - only the author or an admin may change or delete a post
    - drafts are visible on detail only to their author or an admin
    - ``published_at`` is stamped on the first publish and never reset
    - an image is uploaded before the row is written; if the write fails the
      upload is discarded again
    """

    def __init__(self, session: Session, storage: StorageGateway, settings: Settings) -> None:
        self._session = session
        self._posts = PostsRepository(session)
        self._taxonomy = TaxonomyRepository(session)
        self._storage = storage
        self._settings = settings

    @property
    def bucket(self) -> str:
        return self._settings.POSTS_BUCKET

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def list_posts(self, query: PostListQuery) -> PostListData:
        query = query.model_copy(
            update={"limit": clamp_limit(query.limit, self._settings.MAX_PAGE_SIZE)}
        )
        page = self._posts.list_published(query)
        return PostListData(
            posts=[PostSummary.model_validate(post) for post in page.items],
            pagination=pagination_of(page),
        )

    def get_post(self, identifier: str, actor: Optional[Actor] = None) -> PostDetail:
        """
        Detail by slug (or numeric id when no slug matches). Each successful
        fetch counts as one view.
        """
        post = self._find(identifier)
        if post is None or not self._visible(post, actor):
            raise NotFoundError("Post", identifier)

        self._posts.increment_views(post.id)
        self._session.commit()
        self._session.refresh(post, attribute_names=["views"])
        return PostDetail.model_validate(post)

    def increment_view(self, post_id: int) -> None:
        if self._posts.get_by_id(post_id) is None:
            raise NotFoundError("Post", post_id)
        self._posts.increment_views(post_id)
        self._session.commit()

    def list_categories(self) -> List[CategoryRead]:
        ids = self._posts.published_category_ids()
        return [CategoryRead.model_validate(c) for c in self._taxonomy.list_categories(ids)]

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def create_post(
        self,
        actor: Actor,
        payload: PostCreate,
        image: Optional[IncomingFile] = None,
    ) -> PostDetail:
        category = resolve_category(self._taxonomy, payload.category)
        stored = self._upload(image)

        try:
            post = models.Post(
                title=payload.title,
                slug=unique_slug(payload.title, self._posts.slug_exists, fallback="post"),
                content=payload.content,
                excerpt=payload.excerpt,
                status=payload.status,
                author_id=actor.user_id,
                category=category,
                tags=self._taxonomy.get_or_create_tags(payload.tags),
                featured_image=stored.url if stored else None,
                views=0,
            )
            if payload.status == models.PostStatus.PUBLISHED:
                post.published_at = utcnow()
            self._posts.add(post)
            commit(self._session, conflict_message="A post with this slug already exists.")
        except Exception:
            self._session.rollback()
            self._discard_upload(stored, reason="post_create_failed")
            raise

        logger.info("post_created", post_id=post.id, slug=post.slug, author_id=actor.user_id)
        return PostDetail.model_validate(post)

    def update_post(
        self,
        post_id: int,
        actor: Actor,
        payload: PostUpdate,
        image: Optional[IncomingFile] = None,
    ) -> PostDetail:
        post = self._get_owned(post_id, actor)
        fields = payload.model_dump(exclude_unset=True, exclude_none=True)

        category = None
        if "category" in fields:
            category = resolve_category(self._taxonomy, payload.category)

        stored = self._upload(image)
        previous_image = post.featured_image

        try:
            if payload.title is not None and payload.title != post.title:
                post.title = payload.title
                post.slug = unique_slug(
                    payload.title,
                    lambda s: self._posts.slug_exists(s, exclude_id=post.id),
                    fallback="post",
                )
            if payload.content is not None:
                post.content = payload.content
            if payload.excerpt is not None:
                post.excerpt = payload.excerpt
            if "category" in fields:
                post.category = category
            if payload.tags is not None:
                post.tags = self._taxonomy.get_or_create_tags(payload.tags)
            if payload.status is not None:
                self._apply_status(post, payload.status)
            if stored is not None:
                post.featured_image = stored.url
            post.updated_at = utcnow()

            commit(self._session, conflict_message="A post with this slug already exists.")
        except Exception:
            self._session.rollback()
            self._discard_upload(stored, reason="post_update_failed")
            raise

        if stored is not None and previous_image:
            discard_objects(self._storage, self.bucket, [previous_image], reason="post_image_replaced")

        logger.info("post_updated", post_id=post.id, fields=sorted(fields))
        return PostDetail.model_validate(post)

    def delete_post(self, post_id: int, actor: Actor) -> None:
        """
        Delete a post with its comments and likes; its image goes best-effort.
        """
        post = self._get_owned(post_id, actor)
        image = post.featured_image

        self._posts.delete(post)
        self._session.commit()

        if image:
            discard_objects(self._storage, self.bucket, [image], reason="post_deleted")
        logger.info("post_deleted", post_id=post_id, actor=actor.user_id)

    def add_comment(self, post_id: int, actor: Actor, payload: CommentCreate) -> CommentRead:
        post = self._posts.get_by_id(post_id)
        if post is None:
            raise NotFoundError("Post", post_id)

        comment = self._posts.add_comment(post, user_id=actor.user_id, content=payload.content)
        self._session.commit()
        logger.info("comment_added", post_id=post_id, comment_id=comment.id)
        return CommentRead.model_validate(comment)

    def toggle_like(self, post_id: int, actor: Actor) -> LikeState:
        """
        Like the post if the actor has not yet, otherwise withdraw the like.
        """
        if self._posts.get_by_id(post_id) is None:
            raise NotFoundError("Post", post_id)

        existing = self._posts.get_like(post_id, actor.user_id)
        if existing is None:
            self._posts.add_like(post_id, actor.user_id)
            is_liked = True
        else:
            self._posts.remove_like(existing)
            is_liked = False
        commit(self._session, conflict_message="You have already liked this post.")

        return LikeState(likes=self._posts.count_likes(post_id), is_liked=is_liked)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _find(self, identifier: str) -> Optional[models.Post]:
        post = self._posts.get_by_slug(identifier)
        if post is None:
            post_id = numeric_id(identifier)
            if post_id is not None:
                post = self._posts.get_by_id(post_id)
        return post

    @staticmethod
    def _visible(post: models.Post, actor: Optional[Actor]) -> bool:
        if post.status == models.PostStatus.PUBLISHED:
            return True
        return actor is not None and actor.can_modify(post.author_id)

    def _get_owned(self, post_id: int, actor: Actor) -> models.Post:
        post = self._posts.get_by_id(post_id)
        if post is None:
            raise NotFoundError("Post", post_id)
        if not actor.can_modify(post.author_id):
            raise ForbiddenError("Not authorized to modify this post")
        return post

    @staticmethod
    def _apply_status(post: models.Post, status: models.PostStatus) -> None:
        post.status = status
        if status == models.PostStatus.PUBLISHED and post.published_at is None:
            post.published_at = utcnow()

    def _upload(self, image: Optional[IncomingFile]) -> Optional[StoredObject]:
        if image is None:
            return None
        stored = self._storage.upload_file(image, self.bucket)
        logger.info("post_image_uploaded", bucket=self.bucket, path=stored.path)
        return stored

    def _discard_upload(self, stored: Optional[StoredObject], *, reason: str) -> None:
        if stored is not None:
            discard_objects(self._storage, self.bucket, [stored.url], reason=reason)


__all__ = ["PostsService"]
