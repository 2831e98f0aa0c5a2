"""Storage manager for snipboard.db.

This module provides the main interface for reading and writing snippets,
tags and their links. A StorageManager is constructed explicitly and handed
to every consumer; there is no module-level instance.
"""

import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from sqlalchemy import create_engine, event, or_, select, text, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from snipboard.data_models.snippets import SnippetRecord, SnippetWithTags, TagRecord
from snipboard.storage.errors import (
    LinkInsertionFailed,
    QueryFailed,
    SchemaVersionMismatch,
    StorageUnavailable,
    ValidationError,
    WriteFailed,
)
from snipboard.storage.models import (
    SnippetBase,
    Snippet,
    SnippetTagLink,
    Tag,
    Meta,
    SNIPPET_SCHEMA_VERSION,
)
from snipboard.utils.config import StorageSettings

logger = logging.getLogger(__name__)

DATABASE_NAME = "snipboard.db"


def set_sqlite_pragma(dbapi_conn, connection_record):
    """Set SQLite PRAGMAs for every new connection.

    CRITICAL: This must be done per connection, not just once during engine init.
    Without this, new connections will silently disable foreign key enforcement.
    """
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


class StorageManager:
    """Manager for the snippet database.

    Usage:
        with StorageManager(path) as storage:
            tag_ids = [tag.id for tag in storage.list_tags()]
            snippet_id = storage.save_snippet("Quick Sort", "", "py", code, tag_ids)

    IMPORTANT:
    - open() must be called (or the manager entered) before any operation
    - Once closed, a manager cannot be reopened; construct a new one
    - Writes are serialized per manager; reads are not
    - All results are detached value objects, never ORM rows
    """

    def __init__(self, database_path: Path | str | None = None):
        """Initialize storage manager.

        Args:
            database_path: Path to the SQLite file, or a directory that will
                contain snipboard.db (defaults to StorageSettings().database_path)
        """
        if database_path is None:
            database_path = StorageSettings().database_path
        database_path = Path(database_path)
        if database_path.is_dir():
            database_path = database_path / DATABASE_NAME
        self.database_path = database_path

        self.engine: Engine | None = None
        self._session_factory: sessionmaker | None = None
        self._closed = False
        self._write_lock = threading.Lock()

    def __enter__(self) -> "StorageManager":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def is_open(self) -> bool:
        return self.engine is not None

    # Lifecycle

    def open(self) -> None:
        """Connect to the database, creating the schema if needed.

        Raises:
            StorageUnavailable: If the location is inaccessible or the manager
                was already closed
            SchemaVersionMismatch: If the database was written by another
                schema version
        """
        if self._closed:
            raise StorageUnavailable(
                f"Storage at {self.database_path} was closed and cannot be reopened."
            )
        if self.engine is not None:
            return

        logger.info(f"Opening snippet database at: {self.database_path}")
        # Handle in-memory database path
        if str(self.database_path) == ":memory:":
            db_url = "sqlite:///:memory:"
        else:
            try:
                self.database_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise StorageUnavailable(
                    f"Cannot create storage directory {self.database_path.parent}: {exc}"
                ) from exc
            db_url = f"sqlite:///{self.database_path}"

        engine = create_engine(db_url)
        event.listen(engine, "connect", set_sqlite_pragma)

        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            SnippetBase.metadata.create_all(engine)
        except SQLAlchemyError as exc:
            engine.dispose()
            raise StorageUnavailable(
                f"Cannot open snippet database at {self.database_path}: {exc}"
            ) from exc

        try:
            self._verify_schema_version(engine)
        except Exception:
            engine.dispose()
            raise

        self.engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)
        logger.info("Snippet database opened successfully")

    def _verify_schema_version(self, engine: Engine) -> None:
        """Verify snipboard.db schema version matches code version.

        Args:
            engine: SQLAlchemy engine for snipboard.db

        Raises:
            SchemaVersionMismatch: If schema version mismatch detected
        """
        Session = sessionmaker(bind=engine)
        session = Session()

        try:
            # Get stored version
            meta = session.query(Meta).filter_by(key="schema_version").first()

            if meta is None:
                # New database (or one written before versioning), set version
                meta = Meta(key="schema_version", value=SNIPPET_SCHEMA_VERSION)
                session.add(meta)
                session.commit()
            elif meta.value != SNIPPET_SCHEMA_VERSION:
                raise SchemaVersionMismatch(
                    f"snipboard.db schema version mismatch: "
                    f"database is v{meta.value}, code expects v{SNIPPET_SCHEMA_VERSION}."
                )
        except SQLAlchemyError as exc:
            raise StorageUnavailable(
                f"Cannot read schema version from {self.database_path}: {exc}"
            ) from exc
        finally:
            session.close()

    def close(self) -> None:
        """Release the connection pool. Safe to call more than once."""
        self._closed = True
        engine, self.engine = self.engine, None
        self._session_factory = None
        if engine is None:
            return
        try:
            engine.dispose()
            logger.info(f"Closed snippet database at: {self.database_path}")
        except Exception:
            logger.exception(f"Error closing snippet database at {self.database_path}")

    @contextmanager
    def get_session(self) -> Iterator[Session]:
        """Get SQLAlchemy session for snipboard.db.

        Returns:
            Context manager yielding a SQLAlchemy session

        Raises:
            StorageUnavailable: If the database is not open
        """
        if self._session_factory is None:
            raise StorageUnavailable(
                f"Snippet database at {self.database_path} is not open. "
                "Call open() first."
            )

        session = self._session_factory()
        try:
            yield session
        finally:
            session.close()

    @contextmanager
    def write_session(self) -> Iterator[Session]:
        """Get a session while holding this manager's write lock.

        Every write to snipboard.db goes through here so that writers never
        interleave, whether they live in this class or in helpers such as
        tag_seed.

        Raises:
            StorageUnavailable: If the database is not open
        """
        with self._write_lock, self.get_session() as session:
            yield session

    # Reads

    def list_tags(self) -> List[TagRecord]:
        """Return all tags sorted by name."""
        with self.get_session() as session:
            try:
                tags = session.execute(select(Tag).order_by(Tag.name)).scalars().all()
                return [TagRecord.model_validate(tag) for tag in tags]
            except SQLAlchemyError as exc:
                raise QueryFailed(f"Failed to list tags: {exc}") from exc

    def get_snippet_by_id(self, snippet_id: int) -> Optional[SnippetRecord]:
        """Return the snippet with this id, or None if there is none."""
        with self.get_session() as session:
            try:
                snippet = session.get(Snippet, snippet_id)
            except SQLAlchemyError as exc:
                raise QueryFailed(f"Failed to load snippet {snippet_id}: {exc}") from exc
            if snippet is None:
                return None
            return SnippetRecord.model_validate(snippet)

    def search_snippets(self, query: str, language: str) -> List[SnippetRecord]:
        """Find snippets in a language whose name or description contains query.

        Matching is case-insensitive and treats % and _ in query literally.
        An empty query matches every snippet in the language.
        """
        stmt = (
            select(Snippet)
            .where(
                or_(
                    Snippet.name.icontains(query, autoescape=True),
                    Snippet.description.icontains(query, autoescape=True),
                ),
                Snippet.language == language,
            )
            .order_by(Snippet.name)
        )
        with self.get_session() as session:
            try:
                snippets = session.execute(stmt).scalars().all()
                return [SnippetRecord.model_validate(s) for s in snippets]
            except SQLAlchemyError as exc:
                raise QueryFailed(f"Search for '{query}' failed: {exc}") from exc

    # Derived views (see queries.py)

    def get_snippets_with_tags(self) -> List[SnippetWithTags]:
        from snipboard.storage import queries

        return queries.get_snippets_with_tags(self)

    def get_snippets_by_tag(self, tag_id: int) -> List[SnippetRecord]:
        from snipboard.storage import queries

        return queries.get_snippets_by_tag(self, tag_id)

    def get_untagged_snippets(self) -> List[SnippetRecord]:
        from snipboard.storage import queries

        return queries.get_untagged_snippets(self)

    # Writes

    def save_snippet(
        self,
        name: str,
        description: str,
        language: str,
        contents: str,
        tag_ids: Iterable[int] = (),
    ) -> int:
        """Save a new snippet and link it to the given tags.

        The snippet row and all of its links are written in one transaction.

        Args:
            name: Display name, must not be blank
            description: Free text, may be empty
            language: Language tag, usually a file extension
            contents: Snippet body, must not be blank
            tag_ids: IDs of existing tags; duplicates are ignored

        Returns:
            ID of the new snippet

        Raises:
            ValidationError: If name or contents is blank, or a tag id is not an int
            LinkInsertionFailed: If a tag link could not be written
            WriteFailed: If the snippet row could not be written
        """
        tag_ids = self._validate_snippet(name, contents, tag_ids)

        with self.write_session() as session:
            try:
                with session.begin():
                    snippet = Snippet(
                        name=name,
                        description=description,
                        language=language,
                        contents=contents,
                        folder=None,
                        favorite=0,
                        times_copied=0,
                    )
                    session.add(snippet)
                    session.flush()
                    snippet_id = snippet.id

                    for tag_id in tag_ids:
                        session.add(SnippetTagLink(snippet_id=snippet_id, tag_id=tag_id))
                        try:
                            session.flush()
                        except IntegrityError as exc:
                            logger.warning(
                                f"Rolling back snippet '{name}': link to tag {tag_id} rejected"
                            )
                            raise LinkInsertionFailed(name, tag_id) from exc
            except LinkInsertionFailed:
                raise
            except SQLAlchemyError as exc:
                logger.warning(f"Rolling back snippet '{name}': {exc}")
                raise WriteFailed(f"Failed to save snippet '{name}': {exc}") from exc

        logger.info(f"Saved snippet {snippet_id} '{name}' with {len(tag_ids)} tag(s)")
        return snippet_id

    @staticmethod
    def _validate_snippet(name: str, contents: str, tag_ids: Iterable[int]) -> List[int]:
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Snippet name is required.")
        if not isinstance(contents, str) or not contents.strip():
            raise ValidationError("Snippet contents are required.")

        unique_ids: List[int] = []
        for tag_id in tag_ids:
            if isinstance(tag_id, bool) or not isinstance(tag_id, int):
                raise ValidationError(f"Tag id must be an integer, got {tag_id!r}.")
            if tag_id not in unique_ids:
                unique_ids.append(tag_id)
        return unique_ids

    def increment_times_copied(self, snippet_id: int) -> None:
        """Add one to a snippet's copy counter.

        Usage counting never blocks the insert/copy it accompanies: unknown
        ids are a no-op and any failure is logged, not raised.
        """
        stmt = (
            update(Snippet)
            .where(Snippet.id == snippet_id)
            .values({Snippet.times_copied: Snippet.times_copied + 1})
        )
        try:
            with self.write_session() as session:
                session.execute(stmt)
                session.commit()
        except (SQLAlchemyError, StorageUnavailable):
            logger.exception(f"Error incrementing times copied for snippet {snippet_id}")
