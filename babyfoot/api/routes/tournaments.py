from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, status

from babyfoot.api.deps import get_actor_user_id, get_now_utc, get_tournament_scheduler
from babyfoot.api.routes.games_models import GameResponse
from babyfoot.api.routes.tournaments_models import (
    AddGuestRequest,
    AssignTeamsRequest,
    CreateTournamentRequest,
    JoinTournamentByPinRequest,
    JoinTournamentRequest,
    MatchResultRequest,
    TournamentMatchStartResponse,
    TournamentResponse,
    build_tournament_response,
)
from babyfoot.game.tournaments.errors import TournamentNotFoundError
from babyfoot.game.tournaments.service_facade import TournamentScheduler
from babyfoot.game.tournaments.types import TeamDraft

router = APIRouter(prefix="/tournaments", tags=["tournaments"])


@router.post("", response_model=TournamentResponse, status_code=status.HTTP_201_CREATED)
async def create_tournament(
    payload: CreateTournamentRequest,
    scheduler: TournamentScheduler = Depends(get_tournament_scheduler),
    now_utc: datetime = Depends(get_now_utc),
) -> TournamentResponse:
    tournament = await scheduler.create_tournament(
        host=payload.host.to_player(),
        venue_ref=payload.venue_ref,
        format_code=payload.format,
        mode=payload.mode,
        target_score=payload.target_score,
        name=payload.name,
        now_utc=now_utc,
    )
    return build_tournament_response(tournament)


@router.get("/by-pin/{pin_code}", response_model=TournamentResponse)
async def resolve_tournament_by_pin(
    pin_code: str,
    scheduler: TournamentScheduler = Depends(get_tournament_scheduler),
    now_utc: datetime = Depends(get_now_utc),
) -> TournamentResponse:
    tournament = await scheduler.resolve_by_pin(pin_code=pin_code, now_utc=now_utc)
    if tournament is None:
        raise TournamentNotFoundError
    return build_tournament_response(tournament)


@router.post("/join-by-pin", response_model=TournamentResponse)
async def join_tournament_by_pin(
    payload: JoinTournamentByPinRequest,
    scheduler: TournamentScheduler = Depends(get_tournament_scheduler),
    now_utc: datetime = Depends(get_now_utc),
) -> TournamentResponse:
    tournament = await scheduler.join_by_pin(
        pin_code=payload.pin_code,
        player=payload.player.to_player(),
        now_utc=now_utc,
    )
    return build_tournament_response(tournament)


@router.post("/results/from-game/{game_id}", response_model=TournamentResponse)
async def complete_match_from_game(
    game_id: str,
    scheduler: TournamentScheduler = Depends(get_tournament_scheduler),
) -> TournamentResponse:
    tournament = await scheduler.complete_match_from_game(game_id=game_id)
    return build_tournament_response(tournament)


@router.get("/{tournament_id}", response_model=TournamentResponse)
async def get_tournament(
    tournament_id: str,
    scheduler: TournamentScheduler = Depends(get_tournament_scheduler),
) -> TournamentResponse:
    return build_tournament_response(await scheduler.get_tournament(tournament_id=tournament_id))


@router.post("/{tournament_id}/join", response_model=TournamentResponse)
async def join_tournament(
    tournament_id: str,
    payload: JoinTournamentRequest,
    scheduler: TournamentScheduler = Depends(get_tournament_scheduler),
    now_utc: datetime = Depends(get_now_utc),
) -> TournamentResponse:
    tournament = await scheduler.join(
        tournament_id=tournament_id,
        player=payload.player.to_player(),
        now_utc=now_utc,
    )
    return build_tournament_response(tournament)


@router.post("/{tournament_id}/guests", response_model=TournamentResponse)
async def add_guest_player(
    tournament_id: str,
    payload: AddGuestRequest,
    scheduler: TournamentScheduler = Depends(get_tournament_scheduler),
    now_utc: datetime = Depends(get_now_utc),
) -> TournamentResponse:
    tournament = await scheduler.add_guest_player(
        tournament_id=tournament_id,
        guest_name=payload.name,
        now_utc=now_utc,
    )
    return build_tournament_response(tournament)


@router.delete("/{tournament_id}/players/{user_id}", response_model=TournamentResponse)
async def remove_player(
    tournament_id: str,
    user_id: str,
    scheduler: TournamentScheduler = Depends(get_tournament_scheduler),
    actor_user_id: str | None = Depends(get_actor_user_id),
) -> TournamentResponse:
    tournament = await scheduler.remove_player(
        tournament_id=tournament_id,
        user_id=user_id,
        actor_user_id=actor_user_id,
    )
    return build_tournament_response(tournament)


@router.post("/{tournament_id}/team-setup", response_model=TournamentResponse)
async def begin_team_setup(
    tournament_id: str,
    scheduler: TournamentScheduler = Depends(get_tournament_scheduler),
    actor_user_id: str | None = Depends(get_actor_user_id),
) -> TournamentResponse:
    tournament = await scheduler.begin_team_setup(
        tournament_id=tournament_id,
        actor_user_id=actor_user_id,
    )
    return build_tournament_response(tournament)


@router.put("/{tournament_id}/teams", response_model=TournamentResponse)
async def assign_teams(
    tournament_id: str,
    payload: AssignTeamsRequest,
    scheduler: TournamentScheduler = Depends(get_tournament_scheduler),
    actor_user_id: str | None = Depends(get_actor_user_id),
) -> TournamentResponse:
    tournament = await scheduler.assign_teams(
        tournament_id=tournament_id,
        drafts=[
            TeamDraft(user_ids=tuple(item.user_ids), name=item.name, color=item.color)
            for item in payload.teams
        ],
        actor_user_id=actor_user_id,
    )
    return build_tournament_response(tournament)


@router.post("/{tournament_id}/start", response_model=TournamentResponse)
async def start_tournament(
    tournament_id: str,
    scheduler: TournamentScheduler = Depends(get_tournament_scheduler),
    actor_user_id: str | None = Depends(get_actor_user_id),
) -> TournamentResponse:
    tournament = await scheduler.start_tournament(
        tournament_id=tournament_id,
        actor_user_id=actor_user_id,
    )
    return build_tournament_response(tournament)


@router.post(
    "/{tournament_id}/matches/{match_id}/start",
    response_model=TournamentMatchStartResponse,
    status_code=status.HTTP_201_CREATED,
)
async def start_match(
    tournament_id: str,
    match_id: str,
    scheduler: TournamentScheduler = Depends(get_tournament_scheduler),
    now_utc: datetime = Depends(get_now_utc),
    actor_user_id: str | None = Depends(get_actor_user_id),
) -> TournamentMatchStartResponse:
    tournament, game = await scheduler.start_match(
        tournament_id=tournament_id,
        match_id=match_id,
        now_utc=now_utc,
        actor_user_id=actor_user_id,
    )
    return TournamentMatchStartResponse(
        tournament=build_tournament_response(tournament),
        game=GameResponse.model_validate(game),
    )


@router.post("/{tournament_id}/matches/{match_id}/result", response_model=TournamentResponse)
async def ingest_match_result(
    tournament_id: str,
    match_id: str,
    payload: MatchResultRequest,
    scheduler: TournamentScheduler = Depends(get_tournament_scheduler),
) -> TournamentResponse:
    tournament = await scheduler.ingest_match_result(
        tournament_id=tournament_id,
        match_id=match_id,
        score=payload.score,
        winner_team_id=payload.winner_team_id,
    )
    return build_tournament_response(tournament)


@router.post("/{tournament_id}/cancel", response_model=TournamentResponse)
async def cancel_tournament(
    tournament_id: str,
    scheduler: TournamentScheduler = Depends(get_tournament_scheduler),
    actor_user_id: str | None = Depends(get_actor_user_id),
) -> TournamentResponse:
    tournament = await scheduler.cancel_tournament(
        tournament_id=tournament_id,
        actor_user_id=actor_user_id,
    )
    return build_tournament_response(tournament)
