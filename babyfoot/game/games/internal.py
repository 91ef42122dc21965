from __future__ import annotations

from collections.abc import Callable
from typing import Any
from uuid import uuid4

from babyfoot.game.common.constants import COLLECTION_GAMES, STORE_MAX_CAS_ATTEMPTS
from babyfoot.game.common.documents import (
    decode_datetime,
    encode_datetime,
    players_from_document,
    players_to_document,
)
from babyfoot.game.games.errors import GameNotFoundError
from babyfoot.game.games.types import Game, GameTeam, Goal
from babyfoot.store.base import DocumentStore
from babyfoot.store.transactions import mutate_document


def new_game_id() -> str:
    return uuid4().hex


def new_goal_id() -> str:
    return uuid4().hex


def goal_to_document(goal: Goal) -> dict[str, Any]:
    return {
        "goal_id": goal.goal_id,
        "scorer_id": goal.scorer_id,
        "scorer_name": goal.scorer_name,
        "team_index": goal.team_index,
        "position": goal.position,
        "type": goal.type,
        "points": goal.points,
        "timestamp": encode_datetime(goal.timestamp),
    }


def goal_from_document(data: dict[str, Any]) -> Goal:
    return Goal(
        goal_id=str(data["goal_id"]),
        scorer_id=str(data["scorer_id"]),
        scorer_name=str(data["scorer_name"]),
        team_index=int(data["team_index"]),
        position=str(data["position"]),
        type=str(data["type"]),
        points=int(data["points"]),
        timestamp=decode_datetime(data["timestamp"]),
    )


def team_to_document(team: GameTeam) -> dict[str, Any]:
    return {
        "players": players_to_document(team.players),
        "color": team.color,
        "score": team.score,
        "name": team.name,
    }


def team_from_document(data: dict[str, Any]) -> GameTeam:
    return GameTeam(
        players=players_from_document(data.get("players")),
        color=str(data["color"]),
        score=int(data.get("score") or 0),
        name=data.get("name"),
    )


def game_to_document(game: Game) -> dict[str, Any]:
    return {
        "game_id": game.game_id,
        "venue_ref": game.venue_ref,
        "session_ref": game.session_ref,
        "tournament_ref": game.tournament_ref,
        "tournament_match_ref": game.tournament_match_ref,
        "teams": [team_to_document(team) for team in game.teams],
        "goals": [goal_to_document(goal) for goal in game.goals],
        "target_score": game.target_score,
        "win_margin": game.win_margin,
        "status": game.status,
        "started_at": encode_datetime(game.started_at),
        "ended_at": encode_datetime(game.ended_at),
        "duration_seconds": game.duration_seconds,
        "winner_team_index": game.winner_team_index,
        "end_reason": game.end_reason,
    }


def game_from_document(data: dict[str, Any]) -> Game:
    teams = tuple(team_from_document(item) for item in data["teams"])
    winner_team_index = data.get("winner_team_index")
    duration_seconds = data.get("duration_seconds")
    return Game(
        game_id=str(data["game_id"]),
        venue_ref=str(data["venue_ref"]),
        teams=(teams[0], teams[1]),
        goals=tuple(goal_from_document(item) for item in data.get("goals") or ()),
        target_score=int(data["target_score"]),
        win_margin=int(data.get("win_margin") or 1),
        status=str(data["status"]),
        started_at=decode_datetime(data["started_at"]),
        session_ref=data.get("session_ref"),
        tournament_ref=data.get("tournament_ref"),
        tournament_match_ref=data.get("tournament_match_ref"),
        ended_at=decode_datetime(data.get("ended_at")),
        duration_seconds=int(duration_seconds) if duration_seconds is not None else None,
        winner_team_index=int(winner_team_index) if winner_team_index is not None else None,
        end_reason=data.get("end_reason"),
    )


async def mutate_game(
    store: DocumentStore,
    *,
    game_id: str,
    transition: Callable[[Game], Game | None],
) -> Game:
    def _apply(data: dict[str, Any]) -> dict[str, Any] | None:
        next_game = transition(game_from_document(data))
        if next_game is None:
            return None
        return game_to_document(next_game)

    stored = await mutate_document(
        store,
        collection=COLLECTION_GAMES,
        doc_id=game_id,
        transition=_apply,
        max_attempts=STORE_MAX_CAS_ATTEMPTS,
        not_found=GameNotFoundError,
    )
    return game_from_document(stored.data)
