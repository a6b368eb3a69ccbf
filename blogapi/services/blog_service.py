"""
Blog API — Blog Service (Storage Operations)
==============================================

What:  List, fetch, create, update and delete blog posts.
How:   Each method runs its storage calls through `_bounded()` (a per-call
       timeout) and translates driver failures into application exceptions
       that the global handlers render.
Who:   Called by the route handlers in `blogapi.routes.blogs`.

Error Translation:
    list_blogs   → StorageError("Internal server error")                 500
    get_blog     → MalformedIdError                                      410
                   RecordLookupError (missing record or failed lookup)   404
    create_blog  → StorageError("... Record not created.")               500
    update_blog  → UpdateFailedError (incl. unusable ids)                500
    delete_blog  → StorageError("Internal server error")                 500

Design Decision:
    BlogService is stateless apart from its timeout; the session is passed
    into every call, so tests can hand it a mocked AsyncSession.
"""

import asyncio
import logging
import uuid
from typing import Any, Awaitable, Dict, List, Optional, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.exceptions import (
    MalformedIdError,
    RecordLookupError,
    StorageError,
    UpdateFailedError,
)
from blogapi.models.blog import BlogPost

logger = logging.getLogger(__name__)

T = TypeVar("T")


def parse_record_id(record_id: str) -> Optional[uuid.UUID]:
    """
    Return the UUID for a public id string, or None when it is malformed.

    Only the hyphenated form (any case) is accepted, so a record has exactly
    one public id; urn:uuid:, braced and bare-hex spellings are malformed.
    """
    try:
        parsed = uuid.UUID(record_id)
    except (ValueError, TypeError, AttributeError):
        return None
    if str(parsed) != record_id.lower():
        return None
    return parsed


class BlogService:
    """
    Storage operations for BlogPost records.

    Args:
        timeout: Seconds allowed for each storage call before it is
                 abandoned and reported as a failure.
    """

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout

    async def _bounded(self, awaitable: Awaitable[T]) -> T:
        return await asyncio.wait_for(awaitable, timeout=self.timeout)

    async def list_blogs(self, db: AsyncSession) -> List[BlogPost]:
        """All posts, oldest first."""
        try:
            result = await self._bounded(
                db.execute(select(BlogPost).order_by(BlogPost.created_at))
            )
            return list(result.scalars().all())
        except Exception as e:
            logger.error("Listing blogs failed: %s", repr(e), exc_info=True)
            raise StorageError(
                message="Internal server error",
                context={"error_type": type(e).__name__},
            )

    async def get_blog(self, db: AsyncSession, record_id: str) -> BlogPost:
        """
        Fetch one post by its public id.

        Raises:
            MalformedIdError: record_id is not a valid identifier (→ 410)
            RecordLookupError: no such post, or the query failed (→ 404)
        """
        blog_uuid = parse_record_id(record_id)
        if blog_uuid is None:
            logger.warning("Rejected malformed blog id: %s", record_id)
            raise MalformedIdError(record_id)

        try:
            blog = await self._bounded(db.get(BlogPost, blog_uuid))
        except Exception as e:
            logger.error("Fetching blog %s failed: %s", record_id, repr(e), exc_info=True)
            raise RecordLookupError(
                detail=f"{type(e).__name__}: {e}",
                context={"record_id": record_id},
            )

        if blog is None:
            raise RecordLookupError(
                detail=f"blog post with ID '{record_id}' was not found",
                context={"record_id": record_id},
            )
        return blog

    async def create_blog(self, db: AsyncSession, fields: Dict[str, Any]) -> BlogPost:
        """Persist a new post built by `validation.build_new_post()`."""
        blog = BlogPost(
            title=fields["title"],
            author=fields["author"],
            content=fields["content"],
        )
        try:
            db.add(blog)
            await self._bounded(db.commit())
        except Exception as e:
            logger.error("Creating blog failed: %s", repr(e), exc_info=True)
            raise StorageError(
                message="Internal server error. Record not created.",
                context={"error_type": type(e).__name__},
            )
        logger.info("Blog %s created", blog.id)
        return blog

    async def update_blog(
        self, db: AsyncSession, record_id: str, changes: Dict[str, Any]
    ) -> Optional[BlogPost]:
        """
        Apply a partial update built by `validation.build_update()`.

        Author names are merged into the stored author, so sending only
        lastName keeps the existing firstName. Returns None when no post
        has this id; the caller still reports success in that case.
        """
        blog_uuid = parse_record_id(record_id)
        if blog_uuid is None:
            logger.error("Update refused, unusable blog id: %s", record_id)
            raise UpdateFailedError(context={"record_id": record_id})

        try:
            blog = await self._bounded(db.get(BlogPost, blog_uuid))
            if blog is None:
                logger.info("Update matched no blog with id %s", record_id)
                return None

            for field, value in changes.items():
                if field == "author":
                    merged = {**(blog.author or {}), **value}
                    # A new dict so the JSON column is flagged as modified
                    blog.author = {
                        "firstName": merged.get("firstName") or "",
                        "lastName": merged["lastName"],
                    }
                else:
                    setattr(blog, field, value)

            await self._bounded(db.commit())
        except Exception as e:
            logger.error("Updating blog %s failed: %s", record_id, repr(e), exc_info=True)
            raise UpdateFailedError(
                context={"record_id": record_id, "error_type": type(e).__name__},
            )
        logger.info("Blog %s updated (%s)", record_id, ", ".join(sorted(changes)))
        return blog

    async def delete_blog(self, db: AsyncSession, record_id: str) -> None:
        """Remove a post if it exists; an unknown or malformed id is a no-op."""
        blog_uuid = parse_record_id(record_id)
        if blog_uuid is None:
            logger.info("Delete matched no blog, malformed id %s", record_id)
            return

        try:
            await self._bounded(db.execute(delete(BlogPost).where(BlogPost.id == blog_uuid)))
            await self._bounded(db.commit())
        except Exception as e:
            logger.error("Deleting blog %s failed: %s", record_id, repr(e), exc_info=True)
            raise StorageError(
                message="Internal server error",
                context={"record_id": record_id, "error_type": type(e).__name__},
            )
        logger.info("Blog %s deleted", record_id)
