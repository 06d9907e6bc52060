"""
Layerpost Backend — Pydantic Request/Response Schemas
======================================================

What:  Pydantic models defining the API contract for posts.
Why:   The service validates plain-data payloads against PostCreate/PostUpdate
       and renders stored records through PostRead, so the ORM model never
       leaks out of the service layer.
Who:   PostService (validation + rendering), route declarations (OpenAPI docs).
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Input Models (plain data submitted by clients)
# ══════════════════════════════════════════════════════════════════════════


class PostCreate(BaseModel):
    """
    Everything needed to create a post.

    Unknown keys are rejected so a typo in a field name surfaces as a
    validation error instead of being dropped silently.
    """
    title: str = Field(min_length=1, max_length=200, description="Post headline")
    content: str = Field(default="", description="Post body")
    author: Optional[str] = Field(default=None, max_length=100, description="Display name")

    model_config = {"extra": "forbid"}

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("title must not be blank")
        return stripped


class PostUpdate(BaseModel):
    """Partial update; only the fields present in the payload are changed."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = None
    author: Optional[str] = Field(default=None, max_length=100)

    model_config = {"extra": "forbid"}

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            raise ValueError("title cannot be null")
        stripped = v.strip()
        if not stripped:
            raise ValueError("title must not be blank")
        return stripped

    @field_validator("content")
    @classmethod
    def reject_null_content(cls, v: Optional[str]) -> Optional[str]:
        # Omit the key to leave content unchanged; null would violate NOT NULL
        if v is None:
            raise ValueError("content cannot be null")
        return v


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class PostRead(BaseModel):
    """Public representation of a stored post."""
    id: uuid.UUID = Field(description="Unique post identifier (UUID)")
    title: str
    content: str
    author: Optional[str] = None
    created_at: datetime = Field(description="Creation time (UTC ISO 8601)")
    updated_at: datetime = Field(description="Last modification time (UTC ISO 8601)")

    model_config = {"from_attributes": True}


class PostListResponse(BaseModel):
    """Offset-paginated list of posts, newest first."""
    posts: List[PostRead]
    total_count: int = Field(description="Total number of stored posts")
    limit: int
    offset: int


class ErrorResponse(BaseModel):
    """
    Standard error envelope for every failed request.

    Example:
        {
            "error": "validation_error",
            "message": "Invalid post data",
            "details": {"errors": [...]},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="healthy or unhealthy")
    version: str
    environment: str
    database: str = Field(description="connected or disconnected")
    uptime_seconds: float
