# Repositories package init
"""
Notes API: Repository Layer
===========================

What:  The only layer allowed to talk to the note store.
How:   `NoteRepository` is the abstract capability set
       {list, get, create, update, delete}; concrete classes implement it.

Repository Inventory:
    - NoteRepository (abstract): Contract consumed by NoteService
    - SQLNoteRepository: Async SQLAlchemy implementation over the shared pool
    - InMemoryNoteRepository: Dict-backed implementation for tests and wiring
"""

from notes_api.repositories.base import NoteRepository
from notes_api.repositories.memory import InMemoryNoteRepository
from notes_api.repositories.sql import SQLNoteRepository

__all__ = ["NoteRepository", "InMemoryNoteRepository", "SQLNoteRepository"]
