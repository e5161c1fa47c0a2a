"""Draw phase: start, draw, replay, restart, back to setup, reset."""
from fastapi import APIRouter, Depends, HTTPException

from tombola.api.state import AppState, get_state
from tombola.core.session import PhaseError

router = APIRouter()


@router.get("/")
def get_game(state: AppState = Depends(get_state)):
    """Return phase, entries and draw state."""
    return state.session.snapshot()


@router.post("/start")
def start_game(state: AppState = Depends(get_state)):
    """Freeze the list and start drawing."""
    try:
        state.session.start_draw()
    except PhaseError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return state.session.snapshot()


@router.post("/draw")
def draw_number(state: AppState = Depends(get_state)):
    """Draw the next number and play its clip. drawn is null when busy or finished."""
    try:
        drawn = state.session.draw()
    except PhaseError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"drawn": drawn, **state.session.snapshot()}


@router.post("/replay")
def replay_current(state: AppState = Depends(get_state)):
    """Play the last drawn clip again."""
    try:
        replayed = state.session.replay()
    except PhaseError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"replayed": replayed, **state.session.snapshot()}


@router.post("/restart")
def restart_game(state: AppState = Depends(get_state)):
    """Start the game over with the same numbers."""
    try:
        state.session.restart_game()
    except PhaseError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return state.session.snapshot()


@router.post("/setup")
def back_to_setup(state: AppState = Depends(get_state)):
    """Leave the game and edit the list again."""
    try:
        state.session.back_to_setup()
    except PhaseError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return state.session.snapshot()


@router.post("/reset")
def reset_all(state: AppState = Depends(get_state)):
    """Delete every clip and return to setup. The client asks for confirmation first."""
    state.session.reset_all()
    return state.session.snapshot()
