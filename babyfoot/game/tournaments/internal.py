from __future__ import annotations

from collections.abc import Callable
from typing import Any
from uuid import uuid4

from babyfoot.game.common.constants import COLLECTION_TOURNAMENTS, STORE_MAX_CAS_ATTEMPTS
from babyfoot.game.common.documents import (
    decode_datetime,
    encode_datetime,
    players_from_document,
    players_to_document,
)
from babyfoot.game.tournaments.errors import TournamentAccessError, TournamentNotFoundError
from babyfoot.game.tournaments.types import (
    BracketRound,
    Standing,
    Tournament,
    TournamentMatch,
    TournamentTeam,
)
from babyfoot.store.base import DocumentStore
from babyfoot.store.transactions import mutate_document


def new_entity_id() -> str:
    return uuid4().hex


def ensure_host(tournament: Tournament, actor_user_id: str | None) -> None:
    if actor_user_id is not None and actor_user_id != tournament.host_id:
        raise TournamentAccessError


def team_to_document(team: TournamentTeam) -> dict[str, Any]:
    return {
        "team_id": team.team_id,
        "name": team.name,
        "players": players_to_document(team.players),
        "color": team.color,
    }


def team_from_document(data: dict[str, Any]) -> TournamentTeam:
    return TournamentTeam(
        team_id=str(data["team_id"]),
        name=str(data["name"]),
        players=players_from_document(data.get("players")),
        color=data.get("color"),
    )


def match_to_document(match: TournamentMatch) -> dict[str, Any]:
    return {
        "match_id": match.match_id,
        "game_ref": match.game_ref,
        "team1_ref": match.team1_ref,
        "team2_ref": match.team2_ref,
        "status": match.status,
        "round": match.round,
        "match_number": match.match_number,
        "score": list(match.score) if match.score is not None else None,
        "winner_team_id": match.winner_team_id,
    }


def match_from_document(data: dict[str, Any]) -> TournamentMatch:
    score = data.get("score")
    round_no = data.get("round")
    return TournamentMatch(
        match_id=str(data["match_id"]),
        team1_ref=str(data["team1_ref"]),
        team2_ref=data.get("team2_ref"),
        status=str(data["status"]),
        match_number=int(data["match_number"]),
        round=int(round_no) if round_no is not None else None,
        game_ref=data.get("game_ref"),
        score=(int(score[0]), int(score[1])) if score is not None else None,
        winner_team_id=data.get("winner_team_id"),
    )


def standing_to_document(standing: Standing) -> dict[str, Any]:
    return {
        "team_id": standing.team_id,
        "played": standing.played,
        "wins": standing.wins,
        "draws": standing.draws,
        "losses": standing.losses,
        "goals_for": standing.goals_for,
        "goals_against": standing.goals_against,
        "points": standing.points,
    }


def standing_from_document(data: dict[str, Any]) -> Standing:
    return Standing(
        team_id=str(data["team_id"]),
        played=int(data.get("played") or 0),
        wins=int(data.get("wins") or 0),
        draws=int(data.get("draws") or 0),
        losses=int(data.get("losses") or 0),
        goals_for=int(data.get("goals_for") or 0),
        goals_against=int(data.get("goals_against") or 0),
        points=int(data.get("points") or 0),
    )


def bracket_round_to_document(bracket_round: BracketRound) -> dict[str, Any]:
    return {
        "round_number": bracket_round.round_number,
        "round_name": bracket_round.round_name,
        "match_ids": list(bracket_round.match_ids),
    }


def bracket_round_from_document(data: dict[str, Any]) -> BracketRound:
    return BracketRound(
        round_number=int(data["round_number"]),
        round_name=str(data["round_name"]),
        match_ids=tuple(str(item) for item in data.get("match_ids") or ()),
    )


def tournament_to_document(tournament: Tournament) -> dict[str, Any]:
    bracket = None
    if tournament.bracket is not None:
        bracket = [bracket_round_to_document(item) for item in tournament.bracket]
    return {
        "tournament_id": tournament.tournament_id,
        "name": tournament.name,
        "host_id": tournament.host_id,
        "venue_ref": tournament.venue_ref,
        "format": tournament.format,
        "target_score": tournament.target_score,
        "mode": tournament.mode,
        "players": players_to_document(tournament.players),
        "teams": [team_to_document(team) for team in tournament.teams],
        "max_teams": tournament.max_teams,
        "pin_code": tournament.pin_code,
        "status": tournament.status,
        "matches": [match_to_document(match) for match in tournament.matches],
        "standings": [standing_to_document(item) for item in tournament.standings],
        "bracket": bracket,
        "current_match_id": tournament.current_match_id,
        "session_ref": tournament.session_ref,
        "created_at": encode_datetime(tournament.created_at),
        "expires_at": encode_datetime(tournament.expires_at),
    }


def tournament_from_document(data: dict[str, Any]) -> Tournament:
    bracket = data.get("bracket")
    return Tournament(
        tournament_id=str(data["tournament_id"]),
        name=str(data["name"]),
        host_id=str(data["host_id"]),
        venue_ref=str(data["venue_ref"]),
        format=str(data["format"]),
        target_score=int(data["target_score"]),
        mode=str(data["mode"]),
        players=players_from_document(data.get("players")),
        teams=tuple(team_from_document(item) for item in data.get("teams") or ()),
        pin_code=str(data["pin_code"]),
        status=str(data["status"]),
        matches=tuple(match_from_document(item) for item in data.get("matches") or ()),
        standings=tuple(standing_from_document(item) for item in data.get("standings") or ()),
        max_teams=int(data["max_teams"]),
        created_at=decode_datetime(data["created_at"]),
        expires_at=decode_datetime(data["expires_at"]),
        bracket=(
            tuple(bracket_round_from_document(item) for item in bracket)
            if bracket is not None
            else None
        ),
        current_match_id=data.get("current_match_id"),
        session_ref=data.get("session_ref"),
    )


async def mutate_tournament(
    store: DocumentStore,
    *,
    tournament_id: str,
    transition: Callable[[Tournament], Tournament | None],
) -> Tournament:
    def _apply(data: dict[str, Any]) -> dict[str, Any] | None:
        next_tournament = transition(tournament_from_document(data))
        if next_tournament is None:
            return None
        return tournament_to_document(next_tournament)

    stored = await mutate_document(
        store,
        collection=COLLECTION_TOURNAMENTS,
        doc_id=tournament_id,
        transition=_apply,
        max_attempts=STORE_MAX_CAS_ATTEMPTS,
        not_found=TournamentNotFoundError,
    )
    return tournament_from_document(stored.data)
