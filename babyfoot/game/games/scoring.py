"""Pure game transitions.

Every function here takes a ``Game`` snapshot and returns the next snapshot
(or ``None`` when the call changes nothing). Scores are always rebuilt from
the goal ledger so ``teams[i].score`` can never drift from the goals.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import replace
from datetime import datetime, timedelta

from babyfoot.game.common.types import Player
from babyfoot.game.games.constants import (
    END_REASON_ABANDONED,
    END_REASON_FORFEIT,
    END_REASON_MANUAL,
    END_REASON_TARGET_REACHED,
    GAME_STATUS_ABANDONED,
    GAME_STATUS_COMPLETED,
    GAME_STATUS_IN_PROGRESS,
    GOAL_POINTS,
    GOAL_POSITIONS,
    GOAL_TYPE_GAMELLE,
)
from babyfoot.game.games.errors import (
    GameNotInProgressError,
    InvalidGoalError,
    InvalidScorerError,
    NothingToRetractError,
)
from babyfoot.game.games.types import Game, GameResults, GameTeam, Goal

GOAL_TIMESTAMP_STEP = timedelta(microseconds=1)


def score_totals(goals: tuple[Goal, ...]) -> tuple[int, int]:
    totals = [0, 0]
    for goal in goals:
        totals[goal.team_index] += goal.points
    return totals[0], totals[1]


def resolve_target_winner(
    scores: tuple[int, int],
    *,
    target_score: int,
    win_margin: int,
) -> int | None:
    for team_index in (0, 1):
        own = scores[team_index]
        other = scores[1 - team_index]
        if own >= target_score and own - other >= win_margin:
            return team_index
    return None


def resolve_score_winner(scores: tuple[int, int]) -> int | None:
    if scores[0] == scores[1]:
        return None
    return 0 if scores[0] > scores[1] else 1


def _with_goals(game: Game, goals: tuple[Goal, ...]) -> Game:
    scores = score_totals(goals)
    teams = (
        replace(game.teams[0], score=scores[0]),
        replace(game.teams[1], score=scores[1]),
    )
    return replace(game, goals=goals, teams=teams)


def _finish(
    game: Game,
    *,
    status: str,
    ended_at: datetime,
    winner_team_index: int | None,
    end_reason: str,
) -> Game:
    duration = int((ended_at - game.started_at).total_seconds())
    return replace(
        game,
        status=status,
        ended_at=ended_at,
        duration_seconds=max(0, duration),
        winner_team_index=winner_team_index,
        end_reason=end_reason,
    )


def _ensure_in_progress(game: Game) -> None:
    if game.status != GAME_STATUS_IN_PROGRESS:
        raise GameNotInProgressError


def _ensure_team_index(team_index: int) -> None:
    if team_index not in (0, 1):
        raise InvalidGoalError


def next_goal_timestamp(game: Game, *, now_utc: datetime) -> datetime:
    if not game.goals:
        return now_utc
    return max(now_utc, game.goals[-1].timestamp + GOAL_TIMESTAMP_STEP)


def find_team_player(team: GameTeam, user_id: str) -> Player | None:
    for player in team.players:
        if player.user_id == user_id:
            return player
    return None


def apply_goal(
    game: Game,
    *,
    goal_id: str,
    team_index: int,
    scorer_id: str,
    position: str,
    goal_type: str,
    now_utc: datetime,
    scorer_name: str | None = None,
) -> Game | None:
    if any(goal.goal_id == goal_id for goal in game.goals):
        return None
    _ensure_in_progress(game)
    _ensure_team_index(team_index)
    if goal_type not in GOAL_POINTS or position not in GOAL_POSITIONS:
        raise InvalidGoalError
    scorer = find_team_player(game.teams[team_index], scorer_id)
    if scorer is None:
        raise InvalidScorerError

    timestamp = next_goal_timestamp(game, now_utc=now_utc)
    goal = Goal(
        goal_id=goal_id,
        scorer_id=scorer.user_id,
        scorer_name=scorer_name or scorer.username,
        team_index=team_index,
        position=position,
        type=goal_type,
        points=GOAL_POINTS[goal_type],
        timestamp=timestamp,
    )
    scored = _with_goals(game, game.goals + (goal,))
    winner = resolve_target_winner(
        scored.scores,
        target_score=scored.target_score,
        win_margin=scored.win_margin,
    )
    if winner is None:
        return scored
    return _finish(
        scored,
        status=GAME_STATUS_COMPLETED,
        ended_at=timestamp,
        winner_team_index=winner,
        end_reason=END_REASON_TARGET_REACHED,
    )


def can_retract(game: Game) -> bool:
    if not game.goals:
        return False
    if game.status == GAME_STATUS_IN_PROGRESS:
        return True
    # A finished tournament game may already be recorded in the standings.
    if game.tournament_match_ref is not None:
        return False
    return game.status == GAME_STATUS_COMPLETED and game.end_reason == END_REASON_TARGET_REACHED


def apply_retract(game: Game) -> Game:
    if not can_retract(game):
        raise NothingToRetractError
    reopened = replace(
        game,
        status=GAME_STATUS_IN_PROGRESS,
        ended_at=None,
        duration_seconds=None,
        winner_team_index=None,
        end_reason=None,
    )
    return _with_goals(reopened, game.goals[:-1])


def apply_end(game: Game, *, now_utc: datetime) -> Game:
    _ensure_in_progress(game)
    return _finish(
        game,
        status=GAME_STATUS_COMPLETED,
        ended_at=now_utc,
        winner_team_index=resolve_score_winner(game.scores),
        end_reason=END_REASON_MANUAL,
    )


def apply_forfeit(game: Game, *, forfeiting_team_index: int, now_utc: datetime) -> Game:
    _ensure_in_progress(game)
    _ensure_team_index(forfeiting_team_index)
    return _finish(
        game,
        status=GAME_STATUS_COMPLETED,
        ended_at=now_utc,
        winner_team_index=1 - forfeiting_team_index,
        end_reason=END_REASON_FORFEIT,
    )


def apply_abandon(game: Game, *, now_utc: datetime) -> Game | None:
    if game.status == GAME_STATUS_ABANDONED:
        return None
    _ensure_in_progress(game)
    return _finish(
        game,
        status=GAME_STATUS_ABANDONED,
        ended_at=now_utc,
        winner_team_index=None,
        end_reason=END_REASON_ABANDONED,
    )


def compute_results(game: Game) -> GameResults:
    """MVP is the top scorer; on a tie the one who reached the count first wins."""
    players: dict[str, Player] = {}
    for team in game.teams:
        for player in team.players:
            players[player.user_id] = player

    goals_by_player: Counter[str] = Counter()
    goals_by_position: Counter[str] = Counter()
    gamelles_by_player: Counter[str] = Counter()
    reached_at: dict[tuple[str, int], int] = {}
    for order, goal in enumerate(game.goals):
        if goal.type == GOAL_TYPE_GAMELLE:
            gamelles_by_player[goal.scorer_id] += 1
        if goal.points <= 0:
            continue
        goals_by_player[goal.scorer_id] += 1
        goals_by_position[goal.position] += 1
        reached_at[(goal.scorer_id, goals_by_player[goal.scorer_id])] = order

    mvp: Player | None = None
    mvp_goals = 0
    if goals_by_player:
        mvp_goals = max(goals_by_player.values())
        leaders = [user_id for user_id, total in goals_by_player.items() if total == mvp_goals]
        mvp_id = min(leaders, key=lambda user_id: reached_at[(user_id, mvp_goals)])
        mvp = players.get(mvp_id) or Player(user_id=mvp_id, username=mvp_id)

    return GameResults(
        game_id=game.game_id,
        mvp=mvp,
        mvp_goals=mvp_goals,
        goals_by_player=dict(goals_by_player),
        goals_by_position=dict(goals_by_position),
        gamelles_by_player=dict(gamelles_by_player),
    )
