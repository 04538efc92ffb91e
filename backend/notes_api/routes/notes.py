"""
Notes API: Note Route Handlers
==============================

What:  The /notes REST resource: list, get, create, update, delete.
How:   Parses path and body inputs, delegates to NoteService, wraps results
       in response schemas. Errors are raised, never caught here: the global
       exception handlers in main.py turn them into status codes.
Who:   Mounted by create_app(); the service is resolved from app.state.

Route Inventory:
    GET    /notes        → 200 ListNotesResponse
    GET    /notes/{id}   → 200 GetNoteResponse      | 404
    POST   /notes        → 201 CreateNoteResponse   | 400
    PUT    /notes/{id}   → 200 UpdateNoteResponse   | 400 | 404
    DELETE /notes/{id}   → 204 (empty body)         | 404

Identifier & Timestamp Assignment:
    POST synthesizes `id` (UUID v4) and `created_at` (UTC now, ISO 8601 with
    a trailing "Z") before calling the service.
"""

import logging
import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, Response, status

from notes_api.models.note import NewNote, UpdateNote
from notes_api.schemas.note import (
    CreateNoteRequest,
    CreateNoteResponse,
    ErrorResponse,
    GetNoteResponse,
    ListNotesResponse,
    MessageResponse,
    Note,
    UpdateNoteRequest,
    UpdateNoteResponse,
)
from notes_api.services.note_service import NoteService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["notes"])

_NOT_FOUND = {"description": "Note not found by id", "model": MessageResponse}
_NOT_VALID = {"description": "Note not valid", "model": ErrorResponse}
_INTERNAL = {"description": "Internal error", "model": MessageResponse}


def get_note_service(request: Request) -> NoteService:
    """Dependency: the NoteService attached to the application at startup."""
    return request.app.state.note_service


def new_note_id() -> str:
    return str(uuid.uuid4())


def utc_now_iso() -> str:
    """Current UTC time as ISO 8601, e.g. 2024-01-15T12:00:00.123456Z."""
    return datetime.now(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


@router.get(
    "/notes",
    response_model=ListNotesResponse,
    responses={500: _INTERNAL},
    summary="List notes",
    description="Returns every stored note.",
)
async def list_notes(service: NoteService = Depends(get_note_service)) -> ListNotesResponse:
    notes = await service.list_notes()
    return ListNotesResponse(notes=[Note.from_record(n) for n in notes])


@router.get(
    "/notes/{id}",
    response_model=GetNoteResponse,
    responses={404: _NOT_FOUND, 500: _INTERNAL},
    summary="Get note",
    description="Returns the note with the given id.",
)
async def get_note(id: str, service: NoteService = Depends(get_note_service)) -> GetNoteResponse:
    note = await service.get_note(id)
    return GetNoteResponse(note=Note.from_record(note))


@router.post(
    "/notes",
    status_code=status.HTTP_201_CREATED,
    response_model=CreateNoteResponse,
    responses={400: _NOT_VALID, 500: _INTERNAL},
    summary="Create note",
    description="Creates a note. The server assigns `id` and `createdAt`.",
)
async def create_note(
    payload: CreateNoteRequest,
    service: NoteService = Depends(get_note_service),
) -> CreateNoteResponse:
    new_note = NewNote(
        id=new_note_id(),
        title=payload.title,
        content=payload.content,
        created_at=utc_now_iso(),
    )
    note = await service.create_note(new_note)
    return CreateNoteResponse(note=Note.from_record(note))


@router.put(
    "/notes/{id}",
    response_model=UpdateNoteResponse,
    responses={400: _NOT_VALID, 404: _NOT_FOUND, 500: _INTERNAL},
    summary="Update note",
    description="Replaces title and content. `id` and `createdAt` never change.",
)
async def put_note(
    id: str,
    payload: UpdateNoteRequest,
    service: NoteService = Depends(get_note_service),
) -> UpdateNoteResponse:
    note = await service.update_note(id, UpdateNote(title=payload.title, content=payload.content))
    return UpdateNoteResponse(note=Note.from_record(note))


@router.delete(
    "/notes/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={404: _NOT_FOUND, 500: _INTERNAL},
    summary="Delete note",
    description="Deletes the note; the response body is empty.",
)
async def delete_note(id: str, service: NoteService = Depends(get_note_service)) -> Response:
    await service.delete_note(id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
