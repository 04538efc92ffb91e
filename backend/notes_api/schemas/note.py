"""
Notes API: Pydantic Request/Response Schemas
============================================

What:  Pydantic models defining the external JSON contract.
How:   FastAPI uses these models to parse request bodies, serialize responses
       and generate the OpenAPI document. External field names are camelCase
       (alias generator); Python attribute names stay snake_case.
Who:   Used by route handlers as request/response types and by exception
       handlers for error bodies.

Schemas are separate from the domain records in models/note.py: the API
contract and the storage shape change independently.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from notes_api.models.note import Note as DomainNote


class CamelModel(BaseModel):
    """Base for all API schemas: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ══════════════════════════════════════════════════════════════════════════
# Resource Model
# ══════════════════════════════════════════════════════════════════════════


class Note(CamelModel):
    """A note as returned by every endpoint."""

    id: str = Field(description="Unique id", examples=["14322988-32fe-447c-ac38-06fb6c699b4a"])
    title: str = Field(description="Title of the note", examples=["Note 1"])
    content: str = Field(description="Content of the note", examples=["This is note #1."])
    created_at: str = Field(
        description="Date of creation (ISO 8601, UTC)",
        examples=["2021-01-01T00:00:00.000000Z"],
    )

    @classmethod
    def from_record(cls, note: DomainNote) -> "Note":
        return cls(
            id=note.id,
            title=note.title,
            content=note.content,
            created_at=note.created_at,
        )


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class CreateNoteRequest(CamelModel):
    """
    Body of POST /notes.

    No length constraints here: the title rule is enforced by NoteService so
    that it applies identically to every caller.
    """

    title: str = Field(description="Title of the note", examples=["Note 1"])
    content: str = Field(description="Content of the note", examples=["This is note #1."])


class UpdateNoteRequest(CamelModel):
    """Body of PUT /notes/{id}."""

    title: str = Field(description="Title of the note", examples=["Note 1"])
    content: str = Field(description="Content of the note", examples=["This is note #1."])


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ListNotesResponse(CamelModel):
    notes: List[Note]


class GetNoteResponse(CamelModel):
    note: Note


class CreateNoteResponse(CamelModel):
    note: Note


class UpdateNoteResponse(CamelModel):
    note: Note


# ══════════════════════════════════════════════════════════════════════════
# Error Response Models
# ══════════════════════════════════════════════════════════════════════════


class MessageResponse(CamelModel):
    """
    Plain message body.

    Examples:
        {"message": "note not found"}
        {"message": "not found"}
        {"message": "internal error"}
    """

    message: str = Field(description="Human-readable status", examples=["note not found"])


class ErrorResponse(CamelModel):
    """
    Body returned when a request payload is rejected.

    Example:
        {"message": "body not valid", "error": "title must not be empty"}
    """

    message: str = Field(description="Human-readable status", examples=["body not valid"])
    error: str = Field(description="Rule that was violated", examples=["title must not be empty"])
