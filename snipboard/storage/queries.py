"""Derived read views over the snippet database.

Nothing here is stored: untagged snippets and per-tag listings are computed
from SnippetTagLink on every call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from snipboard.data_models.snippets import SnippetRecord, SnippetWithTags
from snipboard.storage.errors import QueryFailed
from snipboard.storage.models import Snippet, SnippetTagLink

if TYPE_CHECKING:
    from snipboard.storage.manager import StorageManager


def get_snippets_with_tags(storage_manager: StorageManager) -> list[SnippetWithTags]:
    """Return every snippet with its tags, both sorted by name.

    Tags for all snippets are fetched in one extra SELECT ... IN query.
    """
    stmt = select(Snippet).options(selectinload(Snippet.tags)).order_by(Snippet.name)
    with storage_manager.get_session() as session:
        try:
            snippets = session.execute(stmt).scalars().all()
            return [SnippetWithTags.model_validate(s) for s in snippets]
        except SQLAlchemyError as exc:
            raise QueryFailed(f"Failed to load snippets with tags: {exc}") from exc


def get_snippets_by_tag(
    storage_manager: StorageManager, tag_id: int
) -> list[SnippetRecord]:
    """Return snippets linked to tag_id, sorted by name."""
    stmt = (
        select(Snippet)
        .join(SnippetTagLink, SnippetTagLink.snippet_id == Snippet.id)
        .where(SnippetTagLink.tag_id == tag_id)
        .order_by(Snippet.name)
    )
    with storage_manager.get_session() as session:
        try:
            snippets = session.execute(stmt).scalars().all()
            return [SnippetRecord.model_validate(s) for s in snippets]
        except SQLAlchemyError as exc:
            raise QueryFailed(f"Failed to load snippets for tag {tag_id}: {exc}") from exc


def get_untagged_snippets(storage_manager: StorageManager) -> list[SnippetRecord]:
    """Return snippets with no tag links, sorted by name."""
    linked = select(SnippetTagLink.snippet_id)
    stmt = select(Snippet).where(Snippet.id.not_in(linked)).order_by(Snippet.name)
    with storage_manager.get_session() as session:
        try:
            snippets = session.execute(stmt).scalars().all()
            return [SnippetRecord.model_validate(s) for s in snippets]
        except SQLAlchemyError as exc:
            raise QueryFailed(f"Failed to load untagged snippets: {exc}") from exc
