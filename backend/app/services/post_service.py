"""
Layerpost Backend — Post Service (Business Logic)
==================================================

What:  Business rules for posts: validate plain data, delegate storage to the
       repository, tag the outcome.
Why:   Keeps every rule out of the HTTP layer. The service takes mappings and
       ids, never Request/Response objects, so it can be driven from a route,
       a CLI or a test with the same inputs.
Who:   Constructed per request by `app.routes.posts.get_post_controller`.

Result Contract:
    Every public method returns a ServiceResult and never raises:
        success → ServiceResult(success=True, body=PostRead | PostListResponse | None)
        failure → ServiceResult(success=False, error=<the raised exception>)

    pydantic validation failures are translated into app ValidationError;
    every other exception (including DatabaseError from the repository) is
    returned as-is.
"""

import json
import logging
from typing import Any, Mapping, Optional
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError

from app.exceptions import NotFoundError, ValidationError
from app.models.post import Post
from app.repositories.base import Repository
from app.schemas.post import PostCreate, PostListResponse, PostRead, PostUpdate
from app.services.result import ServiceResult

logger = logging.getLogger(__name__)


class PostService:
    """
    Post operations over an injected data-access collaborator.

    Responsibilities:
        - create(): validate and store a new post
        - get(): fetch one post, NotFoundError when missing
        - list(): newest-first page with total count
        - update(): partial update of an existing post
        - delete(): remove a post
    """

    def __init__(self, repository: Repository[Post]):
        self.repository = repository

    async def create(self, data: Optional[Mapping[str, Any]]) -> ServiceResult[PostRead]:
        """
        Create a post from plain data.

        Args:
            data: Mapping with `title` and optionally `content` and `author`.

        Returns:
            ServiceResult tagged success with the created PostRead, or failure
            with the error that stopped the operation.
        """
        try:
            post_in = _validate(PostCreate, data)
            record = await self.repository.create(post_in.model_dump())
            logger.info("Post created: %s", record.id)
            return ServiceResult.ok(PostRead.model_validate(record))
        except Exception as e:
            logger.warning("Post creation failed: %s", e)
            return ServiceResult.fail(e)

    async def get(self, post_id: UUID) -> ServiceResult[PostRead]:
        try:
            record = await self.repository.get(post_id)
            if record is None:
                raise NotFoundError(resource="post", resource_id=str(post_id))
            return ServiceResult.ok(PostRead.model_validate(record))
        except Exception as e:
            return ServiceResult.fail(e)

    async def list(self, limit: int = 20, offset: int = 0) -> ServiceResult[PostListResponse]:
        try:
            records = await self.repository.list(
                limit=limit,
                offset=offset,
                order_by="created_at",
                descending=True,
            )
            total_count = await self.repository.count()
            return ServiceResult.ok(
                PostListResponse(
                    posts=[PostRead.model_validate(r) for r in records],
                    total_count=total_count,
                    limit=limit,
                    offset=offset,
                )
            )
        except Exception as e:
            logger.warning("Listing posts failed: %s", e)
            return ServiceResult.fail(e)

    async def update(
        self, post_id: UUID, changes: Optional[Mapping[str, Any]]
    ) -> ServiceResult[PostRead]:
        """Apply a partial update; keys absent from `changes` are left untouched."""
        try:
            post_in = _validate(PostUpdate, changes)
            record = await self.repository.update(post_id, post_in.model_dump(exclude_unset=True))
            if record is None:
                raise NotFoundError(resource="post", resource_id=str(post_id))
            logger.info("Post updated: %s", post_id)
            return ServiceResult.ok(PostRead.model_validate(record))
        except Exception as e:
            logger.warning("Post update failed for %s: %s", post_id, e)
            return ServiceResult.fail(e)

    async def delete(self, post_id: UUID) -> ServiceResult[None]:
        try:
            deleted = await self.repository.delete(post_id)
            if not deleted:
                raise NotFoundError(resource="post", resource_id=str(post_id))
            logger.info("Post deleted: %s", post_id)
            return ServiceResult.ok()
        except Exception as e:
            return ServiceResult.fail(e)


def _validate(schema, data):
    """Validate `data` against a pydantic schema, raising the app ValidationError."""
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(
            message="Invalid post data",
            context={"errors": json.loads(e.json(include_url=False))},
        ) from e
