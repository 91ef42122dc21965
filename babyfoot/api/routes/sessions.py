from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, status

from babyfoot.api.deps import get_actor_user_id, get_now_utc, get_session_manager
from babyfoot.api.routes.games_models import GameResponse
from babyfoot.api.routes.sessions_models import (
    CreateSessionRequest,
    JoinSessionByPinRequest,
    JoinSessionRequest,
    SessionResponse,
    StartSessionRequest,
    StartSessionTournamentRequest,
)
from babyfoot.api.routes.tournaments_models import TournamentResponse, build_tournament_response
from babyfoot.game.sessions.errors import SessionNotFoundError
from babyfoot.game.sessions.service_facade import SessionManager
from babyfoot.game.sessions.types import GameSession, TeamAssignment

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _session_response(game_session: GameSession) -> SessionResponse:
    response = SessionResponse.model_validate(game_session)
    response.join_link = SessionManager.join_link(game_session)
    return response


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    payload: CreateSessionRequest,
    manager: SessionManager = Depends(get_session_manager),
    now_utc: datetime = Depends(get_now_utc),
) -> SessionResponse:
    game_session = await manager.create_session(
        host=payload.host.to_player(),
        venue_ref=payload.venue_ref,
        format_code=payload.format,
        now_utc=now_utc,
    )
    return _session_response(game_session)


@router.get("/by-pin/{pin_code}", response_model=SessionResponse)
async def resolve_session_by_pin(
    pin_code: str,
    manager: SessionManager = Depends(get_session_manager),
    now_utc: datetime = Depends(get_now_utc),
) -> SessionResponse:
    game_session = await manager.resolve_by_pin(pin_code=pin_code, now_utc=now_utc)
    if game_session is None:
        raise SessionNotFoundError
    return _session_response(game_session)


@router.post("/join-by-pin", response_model=SessionResponse)
async def join_session_by_pin(
    payload: JoinSessionByPinRequest,
    manager: SessionManager = Depends(get_session_manager),
    now_utc: datetime = Depends(get_now_utc),
) -> SessionResponse:
    game_session = await manager.join_session_by_pin(
        pin_code=payload.pin_code,
        player=payload.player.to_player(),
        now_utc=now_utc,
    )
    return _session_response(game_session)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str,
    manager: SessionManager = Depends(get_session_manager),
) -> SessionResponse:
    return _session_response(await manager.get_session(session_id=session_id))


@router.post("/{session_id}/join", response_model=SessionResponse)
async def join_session(
    session_id: str,
    payload: JoinSessionRequest,
    manager: SessionManager = Depends(get_session_manager),
    now_utc: datetime = Depends(get_now_utc),
) -> SessionResponse:
    game_session = await manager.join_session(
        session_id=session_id,
        player=payload.player.to_player(),
        now_utc=now_utc,
    )
    return _session_response(game_session)


@router.post("/{session_id}/start", response_model=GameResponse, status_code=status.HTTP_201_CREATED)
async def start_session(
    session_id: str,
    payload: StartSessionRequest,
    manager: SessionManager = Depends(get_session_manager),
    now_utc: datetime = Depends(get_now_utc),
    actor_user_id: str | None = Depends(get_actor_user_id),
) -> GameResponse:
    game = await manager.start(
        session_id=session_id,
        assignment=TeamAssignment(
            teams=(tuple(payload.teams[0]), tuple(payload.teams[1])),
            colors=payload.colors,
        ),
        target_score=payload.target_score,
        now_utc=now_utc,
        actor_user_id=actor_user_id,
    )
    return GameResponse.model_validate(game)


@router.post(
    "/{session_id}/start-tournament",
    response_model=TournamentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def start_session_tournament(
    session_id: str,
    payload: StartSessionTournamentRequest,
    manager: SessionManager = Depends(get_session_manager),
    now_utc: datetime = Depends(get_now_utc),
    actor_user_id: str | None = Depends(get_actor_user_id),
) -> TournamentResponse:
    tournament = await manager.start_tournament(
        session_id=session_id,
        mode=payload.mode,
        target_score=payload.target_score,
        name=payload.name,
        now_utc=now_utc,
        actor_user_id=actor_user_id,
    )
    return build_tournament_response(tournament)


@router.post("/{session_id}/cancel", response_model=SessionResponse)
async def cancel_session(
    session_id: str,
    manager: SessionManager = Depends(get_session_manager),
    now_utc: datetime = Depends(get_now_utc),
    actor_user_id: str | None = Depends(get_actor_user_id),
) -> SessionResponse:
    game_session = await manager.cancel(
        session_id=session_id,
        now_utc=now_utc,
        actor_user_id=actor_user_id,
    )
    return _session_response(game_session)
