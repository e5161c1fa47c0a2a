"""Numbered clip list: upload, remove, reorder (setup phase only)."""
from typing import List, Literal

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel

from tombola.api.state import AppState, get_state
from tombola.core.media_store import is_audio
from tombola.core.session import PhaseError, entry_to_dict
from tombola.models.entry import RawMedia

router = APIRouter()


class MoveBody(BaseModel):
    direction: Literal["up", "down"]


def _list_response(state: AppState) -> dict:
    registry = state.session.registry
    return {
        "capacity": registry.capacity,
        "remaining": registry.remaining,
        "entries": [entry_to_dict(e) for e in registry.entries],
    }


@router.get("/")
def list_entries(state: AppState = Depends(get_state)):
    """List clips in number order."""
    return _list_response(state)


@router.post("/")
def upload_entries(
    files: List[UploadFile] = File(...),
    state: AppState = Depends(get_state),
):
    """Add uploaded clips. Non-audio files are skipped; clips past capacity are dropped."""
    if not files:
        raise HTTPException(status_code=400, detail="No files uploaded")
    # Only read as many clips as there are free slots; the rest are dropped unread.
    slots = state.session.registry.remaining
    items = []
    audio_count = 0
    skipped = 0
    for f in files:
        name = f.filename or ""
        if not is_audio(name, f.content_type):
            skipped += 1
            continue
        audio_count += 1
        if len(items) < slots:
            items.append(RawMedia(name=name, data=f.file.read(), content_type=f.content_type))
    try:
        accepted = state.session.add_media(items)
    except PhaseError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {
        "accepted": accepted,
        "dropped": audio_count - accepted,
        "skipped": skipped,
        **_list_response(state),
    }


@router.delete("/{entry_id}", status_code=204)
def delete_entry(
    entry_id: int,
    state: AppState = Depends(get_state),
):
    """Remove a clip; later clips move up one number."""
    try:
        removed = state.session.remove_entry(entry_id)
    except PhaseError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not removed:
        raise HTTPException(status_code=404, detail="Entry not found")


@router.post("/{index}/move")
def move_entry(
    index: int,
    body: MoveBody,
    state: AppState = Depends(get_state),
):
    """Swap the clip at list index with its neighbour; ids follow positions."""
    try:
        moved = state.session.move_entry(index, body.direction)
    except PhaseError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"moved": moved, **_list_response(state)}
