"""Snippet database models.

This module defines SQLAlchemy models for snipboard.db. Table and column names
are kept in the camelCase form used by existing snipboard databases, so the
Python attribute names are mapped explicitly where they differ.

IMPORTANT: Link rows rely on SQLite foreign key enforcement, which is only
active when the connection has run PRAGMA foreign_keys=ON (see manager.py).
"""

from typing import List, Optional
from sqlalchemy import (
    String,
    Integer,
    Text,
    ForeignKey,
    Index,
)
from sqlalchemy.orm import DeclarativeBase, relationship, Mapped, mapped_column

# Schema version (increment on breaking changes)
SNIPPET_SCHEMA_VERSION = "1.0.0"


class SnippetBase(DeclarativeBase):
    pass


class Tag(SnippetBase):
    """Named label. Names are unique across all tags."""

    __tablename__ = "Tag"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, unique=True, nullable=False)


class Snippet(SnippetBase):
    """Saved piece of code.

    Only times_copied changes after creation. folder and favorite are
    reserved columns; nothing in the engine sets them.
    """

    __tablename__ = "Snippet"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String)
    language: Mapped[Optional[str]] = mapped_column(String)
    contents: Mapped[Optional[str]] = mapped_column(Text)
    folder: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    favorite: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    times_copied: Mapped[int] = mapped_column(
        "timesCopied", Integer, default=0, nullable=False
    )

    # Read-only view through SnippetTagLink, ordered for display
    tags: Mapped[List["Tag"]] = relationship(
        secondary="SnippetTagLink",
        order_by="Tag.name",
        viewonly=True,
    )

    __table_args__ = (Index("idx_snippet_language_name", "language", "name"),)


class SnippetTagLink(SnippetBase):
    """Many-to-many association between snippets and tags.

    Deleting either side cascades to its links at the database level.
    """

    __tablename__ = "SnippetTagLink"

    snippet_id: Mapped[int] = mapped_column(
        "snippetId",
        ForeignKey("Snippet.id", ondelete="CASCADE"),
        primary_key=True,
    )
    tag_id: Mapped[int] = mapped_column(
        "tagId",
        ForeignKey("Tag.id", ondelete="CASCADE"),
        primary_key=True,
    )

    __table_args__ = (Index("idx_link_tag", "tagId"),)


class Meta(SnippetBase):
    """Metadata key-value store for snipboard.db.

    Used for storing schema_version and other database-level metadata.
    """

    __tablename__ = "meta"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    value: Mapped[Optional[str]] = mapped_column(String)
