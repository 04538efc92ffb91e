"""
Notes API: Note Service (Domain Logic)
======================================

What:  Domain layer sitting between the HTTP routes and a NoteRepository.
How:   Mirrors the repository one-for-one. create/update validate the
       payload first; list/get/delete pass straight through.
Who:   Called by the route handlers in routes/notes.py.

Boundaries:
    - The service never assigns ids or timestamps: NewNote arrives fully
      populated from the HTTP layer, so the service is deterministic for a
      given input.
    - Validation lives here and only here. A payload that fails validation
      never reaches the repository.
    - Errors are not recovered: NotFoundError / StorageError from the
      repository propagate unchanged.

Validation Policy:
    title: length >= 1. Whitespace is NOT trimmed, so "   " is a valid title.
    content: not validated (may be empty).
"""

import logging
from typing import List, Union

from notes_api.exceptions import ValidationError
from notes_api.models.note import NewNote, Note, UpdateNote
from notes_api.repositories.base import NoteRepository

logger = logging.getLogger(__name__)


def validate_title(title: str) -> None:
    """Raise ValidationError unless `title` is a non-empty string."""
    if not isinstance(title, str) or len(title) < 1:
        raise ValidationError(message="title must not be empty", field="title")


class NoteService:
    """
    Domain logic for notes, parameterized over any NoteRepository.

    Stateless apart from the repository reference, so a single instance is
    shared by every request.
    """

    def __init__(self, repository: NoteRepository):
        self.repository = repository

    async def list_notes(self) -> List[Note]:
        return await self.repository.list_notes()

    async def get_note(self, note_id: str) -> Note:
        return await self.repository.get_note(note_id)

    async def create_note(self, note: NewNote) -> Note:
        """
        Validate and persist a new note.

        Raises:
            ValidationError: title is empty (repository is not called).
            StorageError:    the repository failed.
        """
        self._validate(note)
        return await self.repository.create_note(note)

    async def update_note(self, note_id: str, note: UpdateNote) -> Note:
        """
        Validate and apply new title/content to `note_id`.

        Raises:
            ValidationError: title is empty (repository is not called).
            NotFoundError:   no note has `note_id`.
            StorageError:    the repository failed.
        """
        self._validate(note)
        return await self.repository.update_note(note_id, note)

    async def delete_note(self, note_id: str) -> Note:
        return await self.repository.delete_note(note_id)

    @staticmethod
    def _validate(note: Union[NewNote, UpdateNote]) -> None:
        try:
            validate_title(note.title)
        except ValidationError as e:
            logger.debug("Rejected note payload: %s", e.message)
            raise
