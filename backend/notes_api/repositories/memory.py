"""
Notes API: In-Memory Note Repository
====================================

What:  Dict-backed NoteRepository with the same semantics as the SQL one.
Who:   Used by the test-suite and anywhere a service is needed without a database.

Notes are kept in insertion order; an asyncio.Lock serializes writers so
concurrent requests see each mutation as a single step.
"""

import asyncio
import logging
from typing import Dict, List

from notes_api.exceptions import NotFoundError, StorageError
from notes_api.models.note import NewNote, Note, UpdateNote
from notes_api.repositories.base import NoteRepository

logger = logging.getLogger(__name__)


class InMemoryNoteRepository(NoteRepository):
    def __init__(self) -> None:
        self._notes: Dict[str, Note] = {}
        self._lock = asyncio.Lock()

    async def list_notes(self) -> List[Note]:
        return list(self._notes.values())

    async def get_note(self, note_id: str) -> Note:
        try:
            return self._notes[note_id]
        except KeyError:
            raise NotFoundError(resource="note", resource_id=note_id) from None

    async def create_note(self, note: NewNote) -> Note:
        async with self._lock:
            if note.id in self._notes:
                # mirrors the PRIMARY KEY violation of the SQL store
                raise StorageError(
                    message="Could not create note",
                    context={"note_id": note.id, "error_type": "DuplicateId"},
                )
            stored = Note(
                id=note.id,
                title=note.title,
                content=note.content,
                created_at=note.created_at,
            )
            self._notes[stored.id] = stored
            logger.debug("Note created in memory: %s", stored.id)
            return stored

    async def update_note(self, note_id: str, note: UpdateNote) -> Note:
        async with self._lock:
            current = await self.get_note(note_id)
            stored = Note(
                id=current.id,
                title=note.title,
                content=note.content,
                created_at=current.created_at,
            )
            self._notes[note_id] = stored
            return stored

    async def delete_note(self, note_id: str) -> Note:
        async with self._lock:
            current = await self.get_note(note_id)
            del self._notes[note_id]
            return current
