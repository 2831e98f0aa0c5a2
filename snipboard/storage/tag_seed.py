"""Seed tags into the snippet database.

The engine itself never creates tags; this helper is used by the CLI and
tests to populate the Tag table from a list of names or the config YAML.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError

from snipboard.data_models.snippets import TagRecord
from snipboard.storage.errors import ValidationError, WriteFailed
from snipboard.storage.models import Tag

if TYPE_CHECKING:
    from snipboard.storage.manager import StorageManager

logger = logging.getLogger(__name__)


def seed_tags(storage_manager: StorageManager, names: Iterable[str]) -> list[TagRecord]:
    """Insert any tag names that do not exist yet.

    Args:
        storage_manager: Open storage manager
        names: Tag names; surrounding whitespace is stripped

    Returns:
        Records for every requested name, in request order

    Raises:
        ValidationError: If a name is blank
        WriteFailed: If the insert fails
    """
    cleaned: list[str] = []
    for name in names:
        stripped = name.strip()
        if not stripped:
            raise ValidationError("Tag name must not be blank.")
        if stripped not in cleaned:
            cleaned.append(stripped)

    if not cleaned:
        return []

    # A name inserted by another writer (or another process) is not an error
    insert_stmt = (
        sqlite_insert(Tag)
        .values([{"name": name} for name in cleaned])
        .on_conflict_do_nothing(index_elements=[Tag.name])
    )

    with storage_manager.write_session() as session:
        try:
            with session.begin():
                added = session.execute(insert_stmt).rowcount
                by_name = {
                    tag.name: tag
                    for tag in session.execute(
                        select(Tag).where(Tag.name.in_(cleaned))
                    ).scalars()
                }
                records = [TagRecord.model_validate(by_name[name]) for name in cleaned]
        except SQLAlchemyError as exc:
            raise WriteFailed(f"Failed to seed tags: {exc}") from exc

    logger.info(f"Seeded {added} new tag(s), {len(cleaned) - added} already present")
    return records
