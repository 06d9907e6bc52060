"""
Layerpost Backend — Post Routes
================================

What:  HTTP surface for posts under /api/posts.
How:   Each route resolves two dependencies, the decoded payload and a
       request-scoped PostController, and hands plain data to the controller.
       The Request object stops at the dependency functions.

Route Inventory:
    POST   /api/posts          create
    GET    /api/posts          list (limit/offset)
    GET    /api/posts/{id}     get
    PATCH  /api/posts/{id}     update
    DELETE /api/posts/{id}     delete
"""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.post_controller import PostController
from app.database import get_db_session
from app.models.post import Post
from app.repositories.base import Repository
from app.schemas.post import ErrorResponse, PostListResponse, PostRead
from app.services.post_service import PostService

router = APIRouter(prefix="/api", tags=["Posts"])


# ── Dependencies ──────────────────────────────────────────────────────────

def get_payload(request: Request) -> Any:
    """Plain data produced by BodyDecoderMiddleware (None when absent)."""
    return getattr(request.state, "payload", None)


def get_post_controller(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> PostController:
    settings = request.app.state.settings
    service = PostService(Repository(Post, db))
    return PostController(service, expose_errors=not settings.is_production)


# ── Routes ────────────────────────────────────────────────────────────────

@router.post(
    "/posts",
    status_code=201,
    responses={
        201: {"description": "Post created", "model": PostRead},
        500: {"description": "Post could not be created", "model": ErrorResponse},
    },
    summary="Create a post",
    description=(
        "Accepts a JSON or form-encoded body with `title` and optional "
        "`content` and `author`. Any failure, including invalid data, is "
        "reported with status 500 and the error envelope."
    ),
)
async def create_post(
    payload: Any = Depends(get_payload),
    controller: PostController = Depends(get_post_controller),
) -> Response:
    return await controller.create(payload)


@router.get(
    "/posts",
    responses={
        200: {"description": "Newest-first page of posts", "model": PostListResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List posts",
)
async def list_posts(
    limit: int = Query(default=20, ge=1, le=100, description="Items per page (max 100)"),
    offset: int = Query(default=0, ge=0, description="Number of posts to skip"),
    controller: PostController = Depends(get_post_controller),
) -> Response:
    return await controller.list(limit=limit, offset=offset)


@router.get(
    "/posts/{post_id}",
    responses={
        200: {"description": "The post", "model": PostRead},
        404: {"description": "Post not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a post by ID",
)
async def get_post(
    post_id: UUID,
    controller: PostController = Depends(get_post_controller),
) -> Response:
    return await controller.get(post_id)


@router.patch(
    "/posts/{post_id}",
    responses={
        200: {"description": "Updated post", "model": PostRead},
        404: {"description": "Post not found", "model": ErrorResponse},
        500: {"description": "Post could not be updated", "model": ErrorResponse},
    },
    summary="Partially update a post",
)
async def update_post(
    post_id: UUID,
    payload: Any = Depends(get_payload),
    controller: PostController = Depends(get_post_controller),
) -> Response:
    return await controller.update(post_id, payload)


@router.delete(
    "/posts/{post_id}",
    status_code=204,
    responses={
        404: {"description": "Post not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a post",
)
async def delete_post(
    post_id: UUID,
    controller: PostController = Depends(get_post_controller),
) -> Response:
    return await controller.delete(post_id)
