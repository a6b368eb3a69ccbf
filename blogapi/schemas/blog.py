"""
Blog API — Pydantic Response Schemas
======================================

What:  Pydantic models describing what the API returns.
How:   Route handlers declare them as `response_model`; FastAPI serializes
       return values through them and documents them in OpenAPI.

Request bodies are deliberately NOT Pydantic models: the API reports missing
fields with its own 400 messages (see `blogapi.services.validation`) instead
of FastAPI's automatic 422 responses.
"""

from typing import List

from pydantic import BaseModel, Field


class BlogPostResponse(BaseModel):
    """
    Public shape of a blog post.

    `author` is the derived full name, not the stored author sub-object.
    """
    id: str = Field(description="Unique blog post identifier")
    title: str = Field(description="Post title")
    author: str = Field(description="Author display name (first and last name)")
    content: str = Field(description="Post body")


class BlogListResponse(BaseModel):
    """Envelope returned by GET /blogs."""
    blogs: List[BlogPostResponse] = Field(description="Every stored blog post")


class MessageResponse(BaseModel):
    """Body used by confirmations and JSON error responses."""
    message: str = Field(description="Human-readable message")


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since the app was created")
