"""
Notes API: Note Models
======================

What:  The `note` table mapping plus the domain value records that travel
       between layers.
How:   `NoteRecord` is the SQLAlchemy ORM mapping (read by Alembic and by the
       SQL repository for its table definition). `Note`, `NewNote` and
       `UpdateNote` are frozen dataclasses: repositories return `Note`
       copies, never live ORM objects.

Table Design:
    note(id TEXT PRIMARY KEY, title TEXT NOT NULL,
         content TEXT NOT NULL, created_at TEXT NOT NULL)

    created_at is stored as its ISO-8601 UTC string, exactly as it is
    returned on the wire.
"""

from dataclasses import dataclass
from typing import Any, Mapping

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from notes_api.database import Base


class NoteRecord(Base):
    """ORM mapping of the `note` table."""

    __tablename__ = "note"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<NoteRecord(id={self.id}, created_at='{self.created_at}')>"


@dataclass(frozen=True)
class Note:
    """A stored note. `id` and `created_at` never change after creation."""

    id: str
    title: str
    content: str
    created_at: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Note":
        return cls(
            id=row["id"],
            title=row["title"],
            content=row["content"],
            created_at=row["created_at"],
        )


@dataclass(frozen=True)
class NewNote:
    """Create payload. `id` and `created_at` are filled in by the HTTP layer."""

    id: str
    title: str
    content: str
    created_at: str


@dataclass(frozen=True)
class UpdateNote:
    """Update payload: only title and content are modifiable."""

    title: str
    content: str
