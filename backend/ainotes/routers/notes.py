"""Note routes."""

from fastapi import APIRouter

from ainotes.dependencies import NoteServiceDep, SessionDep
from ainotes.errors import NoteNotFoundError
from ainotes.models import Note, NoteCreate, NoteUpdate

router = APIRouter()


@router.get("", response_model=list[Note])
async def list_notes(session: SessionDep, service: NoteServiceDep):
    return await service.list_notes(session.user_id)


@router.post("", response_model=Note, status_code=201)
async def create_note(body: NoteCreate, session: SessionDep, service: NoteServiceDep):
    return await service.create_note(session.user_id, body)


@router.get("/{note_id}", response_model=Note)
async def get_note(note_id: str, session: SessionDep, service: NoteServiceDep):
    note = await service.get_note(session.user_id, note_id)
    if not note:
        raise NoteNotFoundError()
    return note


@router.patch("/{note_id}", response_model=Note)
async def update_note(
    note_id: str,
    body: NoteUpdate,
    session: SessionDep,
    service: NoteServiceDep,
):
    return await service.update_note(session.user_id, note_id, body)


@router.delete("/{note_id}")
async def delete_note(note_id: str, session: SessionDep, service: NoteServiceDep):
    await service.delete_note(session.user_id, note_id)
    return {"status": "deleted", "id": note_id}


@router.post("/{note_id}/summarize", response_model=Note)
async def summarize_note(note_id: str, session: SessionDep, service: NoteServiceDep):
    return await service.summarize_note(session.user_id, note_id)
