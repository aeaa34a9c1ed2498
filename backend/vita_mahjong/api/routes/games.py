"""Game session API routes."""
from fastapi import APIRouter, Depends, HTTPException

from ...models.schemas import (
    ActionConfirmResponse,
    ActionRequestResponse,
    AdvanceRequest,
    AdvanceResponse,
    AdviceResponse,
    ArrivalResponse,
    CommentaryRequest,
    CreateGameRequest,
    GameStateResponse,
    SelectResponse,
    SettingsRequest,
    TileActionRequest,
)
from ...models.game_config import ActionKind
from ...core.errors import InsufficientCoinsError, SessionNotFoundError
from ...core.game_engine import GameSession
from ...core.session_store import SessionStore
from ...clients.advice import AdviceClient
from ...clients.commentary import LiveCommentaryClient
from ..deps import get_sessions, get_advice

router = APIRouter(prefix="/api/games", tags=["games"])


def _load_session(store: SessionStore, session_id: str) -> GameSession:
    """Fetch a session and fire any timers that came due."""
    try:
        session = store.get(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    session.advance()
    return session


def _state(session: GameSession) -> GameStateResponse:
    return GameStateResponse(**session.to_dict())


@router.post("", response_model=GameStateResponse)
async def create_game(
    request: CreateGameRequest,
    store: SessionStore = Depends(get_sessions),
) -> GameStateResponse:
    """Start a new game session."""
    try:
        session = store.create(difficulty=request.difficulty, level=request.level)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Game creation failed: {str(e)}")
    return _state(session)


@router.get("/{session_id}", response_model=GameStateResponse)
async def get_game(
    session_id: str,
    store: SessionStore = Depends(get_sessions),
) -> GameStateResponse:
    """Current state of a session."""
    return _state(_load_session(store, session_id))


@router.delete("/{session_id}")
async def delete_game(
    session_id: str,
    store: SessionStore = Depends(get_sessions),
):
    """Close a session and its commentary connection."""
    session = _load_session(store, session_id)
    await session.close_commentary()
    store.delete(session_id)
    return {"deleted": session_id}


@router.post("/{session_id}/select", response_model=SelectResponse)
async def select_tile(
    session_id: str,
    request: TileActionRequest,
    store: SessionStore = Depends(get_sessions),
) -> SelectResponse:
    """Send a tile towards the dock. Unplayable picks are ignored."""
    session = _load_session(store, session_id)
    accepted = session.select(request.tile_id)
    return SelectResponse(accepted=accepted, state=_state(session))


@router.post("/{session_id}/arrive", response_model=ArrivalResponse)
async def land_tile(
    session_id: str,
    request: TileActionRequest,
    store: SessionStore = Depends(get_sessions),
) -> ArrivalResponse:
    """Report that a tile's flight animation finished."""
    session = _load_session(store, session_id)
    result = session.arrive(request.tile_id)
    return ArrivalResponse(
        arrival=result.to_dict() if result else None,
        state=_state(session),
    )


@router.post("/{session_id}/advance", response_model=AdvanceResponse)
async def advance_game(
    session_id: str,
    request: AdvanceRequest,
    store: SessionStore = Depends(get_sessions),
) -> AdvanceResponse:
    """Fire scheduled events, optionally looking ahead a few seconds."""
    session = _load_session(store, session_id)
    fired = []
    if request.seconds > 0:
        fired = session.advance(session.now() + request.seconds)
    return AdvanceResponse(
        fired=[e.kind.value for e in fired],
        state=_state(session),
    )


@router.post("/{session_id}/tick", response_model=GameStateResponse)
async def tick_game(
    session_id: str,
    store: SessionStore = Depends(get_sessions),
) -> GameStateResponse:
    """One second of game clock."""
    session = _load_session(store, session_id)
    session.tick()
    return _state(session)


@router.post("/{session_id}/actions/confirm", response_model=ActionConfirmResponse)
async def confirm_action(
    session_id: str,
    store: SessionStore = Depends(get_sessions),
) -> ActionConfirmResponse:
    """Run the action waiting behind the confirmation gate."""
    session = _load_session(store, session_id)
    try:
        outcome = session.confirm_action()
    except InsufficientCoinsError as e:
        raise HTTPException(status_code=402, detail=str(e))
    return ActionConfirmResponse(
        outcome=outcome.to_dict() if outcome else None,
        state=_state(session),
    )


@router.post("/{session_id}/actions/cancel", response_model=GameStateResponse)
async def cancel_action(
    session_id: str,
    store: SessionStore = Depends(get_sessions),
) -> GameStateResponse:
    """Close the confirmation gate without running the action."""
    session = _load_session(store, session_id)
    session.cancel_action()
    return _state(session)


@router.post("/{session_id}/actions/{kind}", response_model=ActionRequestResponse)
async def request_action(
    session_id: str,
    kind: ActionKind,
    store: SessionStore = Depends(get_sessions),
) -> ActionRequestResponse:
    """Ask to use undo, hint or shuffle; opens the confirmation gate."""
    session = _load_session(store, session_id)
    try:
        opened = session.request_action(kind)
    except InsufficientCoinsError as e:
        raise HTTPException(status_code=402, detail=str(e))
    return ActionRequestResponse(
        gate_opened=opened,
        cost=session.rules.cost_of(kind),
        state=_state(session),
    )


@router.post("/{session_id}/restart", response_model=GameStateResponse)
async def restart_game(
    session_id: str,
    store: SessionStore = Depends(get_sessions),
) -> GameStateResponse:
    """Start again from level 1."""
    session = _load_session(store, session_id)
    session.restart()
    return _state(session)


@router.post("/{session_id}/retry", response_model=GameStateResponse)
async def retry_level(
    session_id: str,
    store: SessionStore = Depends(get_sessions),
) -> GameStateResponse:
    """Deal the current level again."""
    session = _load_session(store, session_id)
    session.retry_level()
    return _state(session)


@router.post("/{session_id}/next-level", response_model=GameStateResponse)
async def next_level(
    session_id: str,
    store: SessionStore = Depends(get_sessions),
) -> GameStateResponse:
    """Move on after clearing the board."""
    session = _load_session(store, session_id)
    if not session.next_level():
        raise HTTPException(status_code=409, detail="Level is not cleared yet")
    return _state(session)


@router.put("/{session_id}/settings", response_model=GameStateResponse)
async def update_settings(
    session_id: str,
    request: SettingsRequest,
    store: SessionStore = Depends(get_sessions),
) -> GameStateResponse:
    """Change difficulty, theme, language or pause state."""
    session = _load_session(store, session_id)
    if request.difficulty is not None:
        session.set_difficulty(request.difficulty)
    if request.theme is not None:
        session.set_theme(request.theme)
    if request.language is not None:
        session.set_language(request.language)
    if request.paused is not None:
        session.set_paused(request.paused)
    return _state(session)


@router.get("/{session_id}/advice", response_model=AdviceResponse)
async def get_advice_text(
    session_id: str,
    store: SessionStore = Depends(get_sessions),
    client: AdviceClient = Depends(get_advice),
) -> AdviceResponse:
    """Short advice line in the session's language."""
    session = _load_session(store, session_id)
    text = await client.get_advice(session.language)
    return AdviceResponse(language=session.language, text=text)


@router.post("/{session_id}/commentary", response_model=GameStateResponse)
async def toggle_commentary(
    session_id: str,
    request: CommentaryRequest,
    store: SessionStore = Depends(get_sessions),
) -> GameStateResponse:
    """Connect or disconnect live commentary for this session."""
    session = _load_session(store, session_id)

    if not request.enabled:
        await session.close_commentary()
        return _state(session)

    if not session.commentary.is_live:
        client = LiveCommentaryClient(language=session.language)
        if await client.connect():
            session.set_commentary(client)
    return _state(session)
