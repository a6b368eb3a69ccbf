"""
Blog API — Blog Route Handlers
================================

What:  The five CRUD endpoints under /blogs.
How:   Reads the raw JSON body, runs the pure validators, then delegates to
       BlogService. Errors are raised as application exceptions and rendered
       by the global handlers in main.py.

Route Inventory:
    GET    /blogs          list every post                    200
    GET    /blogs/{id}     one post, no envelope              200 / 410 / 404
    POST   /blogs          create                             201 / 400 / 500
    PUT    /blogs/{id}     partial update                     200 / 400 / 500
    DELETE /blogs/{id}     delete (idempotent)                200 / 500
"""

import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.database import get_db_session
from blogapi.exceptions import RequiredFieldError, ValidationError
from blogapi.schemas.blog import BlogListResponse, BlogPostResponse, MessageResponse
from blogapi.services.blog_service import BlogService
from blogapi.services.validation import (
    build_new_post,
    build_update,
    find_create_violations,
    find_update_violations,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/blogs", tags=["Blogs"])


def get_blog_service(request: Request) -> BlogService:
    """The BlogService configured for this app in create_app()."""
    return request.app.state.blog_service


async def read_json_object(request: Request, error_class=ValidationError) -> Dict[str, Any]:
    """
    Decode the request body as a JSON object.

    Raises `error_class` (a ValidationError) for an empty body, invalid JSON,
    or a JSON value that is not an object.
    """
    raw = await request.body()
    try:
        payload = json.loads(raw) if raw else None
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise error_class(message="Request body must be valid JSON.")
    if not isinstance(payload, dict):
        raise error_class(message="Request body must be a JSON object.")
    return payload


@router.get(
    "",
    response_model=BlogListResponse,
    responses={500: {"description": "Storage failure", "model": MessageResponse}},
    summary="List all blog posts",
)
async def list_blogs(
    db: AsyncSession = Depends(get_db_session),
    service: BlogService = Depends(get_blog_service),
) -> BlogListResponse:
    blogs = await service.list_blogs(db)
    return BlogListResponse(blogs=[BlogPostResponse(**blog.serialize()) for blog in blogs])


@router.get(
    "/{blog_id}",
    response_model=BlogPostResponse,
    responses={
        404: {"description": "No such post, or the lookup failed", "model": MessageResponse},
        410: {"description": "Malformed id", "model": MessageResponse},
    },
    summary="Get a single blog post by ID",
)
async def get_blog(
    blog_id: str,
    db: AsyncSession = Depends(get_db_session),
    service: BlogService = Depends(get_blog_service),
) -> BlogPostResponse:
    """
    Returns the serialized post itself (not wrapped in an envelope).

    A malformed id answers 410 and stops there; a well-formed id that
    matches nothing answers 404.
    """
    blog = await service.get_blog(db, blog_id)
    return BlogPostResponse(**blog.serialize())


@router.post(
    "",
    status_code=201,
    response_model=BlogPostResponse,
    responses={
        400: {"description": "Missing or blank field (text/plain)"},
        500: {"description": "Record not created", "model": MessageResponse},
    },
    summary="Create a blog post",
)
async def create_blog(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    service: BlogService = Depends(get_blog_service),
) -> BlogPostResponse:
    """
    Required: title, author.lastName, content. author.firstName may be left
    out for single-name authors.

    The first violation is returned as plain text and nothing is stored.
    """
    payload = await read_json_object(request, error_class=RequiredFieldError)
    violations = find_create_violations(payload)
    if violations:
        raise RequiredFieldError(message=violations[0])

    blog = await service.create_blog(db, build_new_post(payload))
    return BlogPostResponse(**blog.serialize())


@router.put(
    "/{blog_id}",
    response_model=str,
    responses={
        400: {"description": "Id mismatch or invalid field", "model": MessageResponse},
        500: {"description": "Update may not have been applied"},
    },
    summary="Update fields of a blog post",
)
async def update_blog(
    blog_id: str,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    service: BlogService = Depends(get_blog_service),
) -> str:
    """
    The body must repeat the path id. Only title, author and content are
    applied; author names are merged into the stored author.
    """
    payload = await read_json_object(request)
    violations = find_update_violations(blog_id, payload)
    if violations:
        raise ValidationError(message=violations[0])

    await service.update_blog(db, blog_id, build_update(payload))
    return "Update successful."


@router.delete(
    "/{blog_id}",
    response_model=MessageResponse,
    responses={500: {"description": "Storage failure", "model": MessageResponse}},
    summary="Delete a blog post",
)
async def delete_blog(
    blog_id: str,
    db: AsyncSession = Depends(get_db_session),
    service: BlogService = Depends(get_blog_service),
) -> MessageResponse:
    """Answers 200 whether or not the post existed."""
    await service.delete_blog(db, blog_id)
    return MessageResponse(message=f"Record (id:{blog_id}) successfully deleted")
