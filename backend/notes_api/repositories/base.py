"""
Notes API: Abstract Note Repository Interface
=============================================

What:  Abstract base class defining the storage contract for notes.
How:   Concrete repositories inherit from NoteRepository and implement the
       five operations. NoteService is written against this class only, so
       any implementation (SQL, in-memory) can be plugged in.
Who:   Consumed by NoteService.
"""

from abc import ABC, abstractmethod
from typing import List

from notes_api.models.note import NewNote, Note, UpdateNote


class NoteRepository(ABC):
    """
    Abstract storage capability set for notes.

    Contract:
        - Implementations must be safe to call from many concurrent requests
        - A missing row is reported as NotFoundError, nothing else
        - Every other failure is reported as StorageError; driver exception
          types never cross this boundary
        - Returned notes are value copies; callers may not mutate the store
          through them
    """

    @abstractmethod
    async def list_notes(self) -> List[Note]:
        """
        Return every stored note.

        Order is stable for a given store state.

        Raises:
            StorageError: The store could not be read.
        """
        ...

    @abstractmethod
    async def get_note(self, note_id: str) -> Note:
        """
        Return the note with id `note_id`.

        Raises:
            NotFoundError: No row matches.
            StorageError: Any other failure.
        """
        ...

    @abstractmethod
    async def create_note(self, note: NewNote) -> Note:
        """
        Persist a fully populated note and return the stored row.

        Raises:
            StorageError: Any failure, including an `id` that already exists.
        """
        ...

    @abstractmethod
    async def update_note(self, note_id: str, note: UpdateNote) -> Note:
        """
        Overwrite title and content of `note_id`; return the row after the write.

        Raises:
            NotFoundError: No row matches (nothing is created).
            StorageError: Any other failure.
        """
        ...

    @abstractmethod
    async def delete_note(self, note_id: str) -> Note:
        """
        Remove `note_id`; return the row as it was just before deletion.

        Raises:
            NotFoundError: No row matches.
            StorageError: Any other failure.
        """
        ...
