"""
Blog API — BlogPost SQLAlchemy Model
======================================

What:  ORM model representing the `blogs` table.
How:   Inherits from the shared DeclarativeBase; `Database.connect()` creates
       the table from this definition.
Who:   Used by BlogService for CRUD operations.

Table Design:
    - id: UUID assigned on insert; its string form is the public id
    - title / content: required text
    - author: nested document {"firstName": str, "lastName": str} stored as
      JSON (JSONB on PostgreSQL) so the author stays one sub-object
    - created_at: internal insertion timestamp, used only for list ordering
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import JSON, DateTime, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from blogapi.database import Base


class BlogPost(Base):
    """
    A single blog post record.

    Lifecycle:
        1. Created by a validated POST /blogs
        2. Read by GET /blogs and GET /blogs/{id}
        3. Title, content and author fields replaced by a validated PUT
        4. Removed by DELETE /blogs/{id} (hard delete, no history)
    """

    __tablename__ = "blogs"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)

    # Always holds both keys; firstName is "" when the author has one name
    author: Mapped[Dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    @property
    def author_name(self) -> str:
        """Full display name: "First Last", or just "Last" when no first name."""
        author = self.author or {}
        first_name = author.get("firstName") or ""
        last_name = author.get("lastName") or ""
        return f"{first_name} {last_name}".strip()

    def serialize(self) -> Dict[str, str]:
        """Public representation; never exposes created_at or the raw author."""
        return {
            "id": str(self.id),
            "title": self.title,
            "author": self.author_name,
            "content": self.content,
        }

    def __repr__(self) -> str:
        return f"<BlogPost(id={self.id}, title='{self.title}')>"
