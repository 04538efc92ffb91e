"""
Notes API: SQL Note Repository
==============================

What:  NoteRepository implementation backed by async SQLAlchemy (SQLite by default).
How:   Every operation opens its own session from the shared session factory,
       runs a single statement inside a transaction and returns `Note` copies.
       create/update/delete use `... RETURNING` so the write and the read of
       the affected row are one atomic statement.
Who:   Built once at startup and shared by every request through NoteService.

Error Classification:
    - RETURNING produced no row on update/delete (or SELECT found nothing) → NotFoundError
    - sqlalchemy.exc.SQLAlchemyError                                       → StorageError
      (cause chained, logged here; the driver type never leaves this module)

Lock Contention:
    SQLite allows one writer at a time. A statement that still fails with
    "database is locked" after the busy timeout is retried by tenacity with
    exponential backoff + jitter before being reported as StorageError.
"""

import logging
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from notes_api.config import settings
from notes_api.exceptions import NotFoundError, StorageError
from notes_api.models.note import NewNote, Note, NoteRecord, UpdateNote
from notes_api.repositories.base import NoteRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")

note_table = NoteRecord.__table__

_LOCK_MESSAGES = ("database is locked", "database is busy", "database table is locked")


def is_lock_contention(exc: BaseException) -> bool:
    """True for OperationalErrors caused by another connection holding the lock."""
    if not isinstance(exc, OperationalError):
        return False
    detail = str(exc.orig if exc.orig is not None else exc).lower()
    return any(msg in detail for msg in _LOCK_MESSAGES)


class SQLNoteRepository(NoteRepository):
    """
    Stores notes in the `note` table.

    Args:
        session_factory: async_sessionmaker bound to the process-wide engine.
        retry_attempts:  Attempts per statement under lock contention.
        retry_max_wait:  Upper bound in seconds for one backoff sleep.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        retry_attempts: Optional[int] = None,
        retry_max_wait: Optional[float] = None,
    ):
        self._session_factory = session_factory
        self._retry_attempts = retry_attempts or settings.db_retry_attempts
        self._retry_max_wait = retry_max_wait or settings.db_retry_max_wait

    # ── Operations ────────────────────────────────────────────────────────

    async def list_notes(self) -> List[Note]:
        stmt = select(note_table).order_by(note_table.c.created_at, note_table.c.id)

        async def run(session: AsyncSession) -> List[Note]:
            result = await session.execute(stmt)
            return [Note.from_row(row) for row in result.mappings().all()]

        return await self._execute("list notes", run)

    async def get_note(self, note_id: str) -> Note:
        stmt = select(note_table).where(note_table.c.id == note_id)
        row = await self._execute("get note", self._fetch_optional(stmt), note_id=note_id)
        if row is None:
            raise NotFoundError(resource="note", resource_id=note_id)
        return Note.from_row(row)

    async def create_note(self, note: NewNote) -> Note:
        stmt = (
            insert(note_table)
            .values(
                id=note.id,
                title=note.title,
                content=note.content,
                created_at=note.created_at,
            )
            .returning(*note_table.c)
        )
        row = await self._execute("create note", self._fetch_optional(stmt), note_id=note.id)
        if row is None:
            # INSERT ... RETURNING always yields the inserted row
            raise StorageError(message="Insert returned no row", context={"note_id": note.id})
        logger.info("Note created: %s", note.id)
        return Note.from_row(row)

    async def update_note(self, note_id: str, note: UpdateNote) -> Note:
        stmt = (
            update(note_table)
            .where(note_table.c.id == note_id)
            .values(title=note.title, content=note.content)
            .returning(*note_table.c)
        )
        row = await self._execute("update note", self._fetch_optional(stmt), note_id=note_id)
        if row is None:
            raise NotFoundError(resource="note", resource_id=note_id)
        logger.info("Note updated: %s", note_id)
        return Note.from_row(row)

    async def delete_note(self, note_id: str) -> Note:
        stmt = delete(note_table).where(note_table.c.id == note_id).returning(*note_table.c)
        row = await self._execute("delete note", self._fetch_optional(stmt), note_id=note_id)
        if row is None:
            raise NotFoundError(resource="note", resource_id=note_id)
        logger.info("Note deleted: %s", note_id)
        return Note.from_row(row)

    # ── Internals ─────────────────────────────────────────────────────────

    @staticmethod
    def _fetch_optional(stmt) -> Callable[[AsyncSession], Awaitable[Optional[Any]]]:
        """Statement runner returning the first row as a mapping, or None."""

        async def run(session: AsyncSession) -> Optional[Any]:
            result = await session.execute(stmt)
            return result.mappings().one_or_none()

        return run

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self._retry_attempts),
            wait=wait_exponential_jitter(initial=0.05, max=self._retry_max_wait, jitter=0.1),
            retry=retry_if_exception(is_lock_contention),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    async def _execute(
        self,
        operation: str,
        run: Callable[[AsyncSession], Awaitable[T]],
        note_id: Optional[str] = None,
    ) -> T:
        """
        Run `run` in a fresh transaction, retrying on lock contention.

        Commits when `run` returns; rolls back on any exception. Driver
        errors are converted to StorageError.
        """
        try:
            async for attempt in self._retrying():
                with attempt:
                    async with self._session_factory() as session, session.begin():
                        return await run(session)
        except SQLAlchemyError as e:
            logger.error("Storage error during %s (note_id=%s): %s", operation, note_id, e)
            context = {"operation": operation, "error_type": type(e).__name__}
            if note_id:
                context["note_id"] = note_id
            raise StorageError(message=f"Could not {operation}", context=context) from e
