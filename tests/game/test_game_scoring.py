from __future__ import annotations

from dataclasses import replace
from datetime import timedelta

import pytest

from babyfoot.game.games.constants import (
    END_REASON_FORFEIT,
    END_REASON_MANUAL,
    END_REASON_TARGET_REACHED,
    GAME_STATUS_ABANDONED,
    GAME_STATUS_COMPLETED,
    GAME_STATUS_IN_PROGRESS,
)
from babyfoot.game.games.errors import (
    GameNotInProgressError,
    InvalidGoalError,
    InvalidScorerError,
    NothingToRetractError,
)
from babyfoot.game.games.scoring import (
    apply_abandon,
    apply_end,
    apply_forfeit,
    apply_goal,
    apply_retract,
    compute_results,
    resolve_target_winner,
    score_totals,
)
from babyfoot.game.games.types import Game
from tests.game.babyfoot_fixtures import NOW_UTC, VENUE_REF, _doubles_teams, _duel_teams


def _game(*, teams=None, target_score: int = 6, win_margin: int = 1) -> Game:
    return Game(
        game_id="game-1",
        venue_ref=VENUE_REF,
        teams=teams or _duel_teams(),
        goals=(),
        target_score=target_score,
        win_margin=win_margin,
        status=GAME_STATUS_IN_PROGRESS,
        started_at=NOW_UTC,
    )


def _goal(game: Game, n: int, *, team_index: int, scorer_id: str, goal_type: str = "normal", position: str = "attack"):
    return apply_goal(
        game,
        goal_id=f"goal-{n}",
        team_index=team_index,
        scorer_id=scorer_id,
        position=position,
        goal_type=goal_type,
        now_utc=NOW_UTC + timedelta(seconds=n),
    )


def test_goal_types_are_weighted_into_team_score() -> None:
    game = _game()
    game = _goal(game, 1, team_index=0, scorer_id="alice")
    game = _goal(game, 2, team_index=0, scorer_id="alice", goal_type="gamelle")
    game = _goal(game, 3, team_index=1, scorer_id="bob", goal_type="gamelle_rentrante")

    assert game.scores == (1, 1)
    assert score_totals(game.goals) == game.scores
    assert [goal.points for goal in game.goals] == [1, 0, 1]
    assert game.status == GAME_STATUS_IN_PROGRESS


def test_goal_timestamps_are_strictly_increasing_even_with_a_frozen_clock() -> None:
    game = _game()
    for n in range(3):
        game = apply_goal(
            game,
            goal_id=f"goal-{n}",
            team_index=0,
            scorer_id="alice",
            position="defense",
            goal_type="normal",
            now_utc=NOW_UTC,
        )
    stamps = [goal.timestamp for goal in game.goals]
    assert stamps == sorted(stamps)
    assert len(set(stamps)) == 3


def test_reaching_target_completes_the_game() -> None:
    game = _game()
    for n in range(6):
        game = _goal(game, n, team_index=0, scorer_id="alice")

    assert game.status == GAME_STATUS_COMPLETED
    assert game.winner_team_index == 0
    assert game.end_reason == END_REASON_TARGET_REACHED
    assert game.ended_at == game.goals[-1].timestamp
    assert game.duration_seconds == 5

    with pytest.raises(GameNotInProgressError):
        _goal(game, 99, team_index=1, scorer_id="bob")


def test_win_margin_policy_delays_completion() -> None:
    game = _game(win_margin=2)
    n = 0
    for _ in range(5):
        game = _goal(game, n, team_index=0, scorer_id="alice")
        game = _goal(game, n + 1, team_index=1, scorer_id="bob")
        n += 2
    game = _goal(game, n, team_index=0, scorer_id="alice")
    game = _goal(game, n + 1, team_index=1, scorer_id="bob")
    assert game.scores == (6, 6)
    assert game.status == GAME_STATUS_IN_PROGRESS

    game = _goal(game, n + 2, team_index=0, scorer_id="alice")
    assert game.status == GAME_STATUS_IN_PROGRESS
    game = _goal(game, n + 3, team_index=0, scorer_id="alice")
    assert game.status == GAME_STATUS_COMPLETED
    assert game.winner_team_index == 0


def test_resolve_target_winner_requires_target_and_margin() -> None:
    assert resolve_target_winner((6, 5), target_score=6, win_margin=1) == 0
    assert resolve_target_winner((5, 6), target_score=6, win_margin=1) == 1
    assert resolve_target_winner((6, 5), target_score=6, win_margin=2) is None
    assert resolve_target_winner((5, 4), target_score=6, win_margin=1) is None


def test_scorer_must_belong_to_scoring_team() -> None:
    game = _game()
    with pytest.raises(InvalidScorerError):
        _goal(game, 1, team_index=0, scorer_id="bob")
    with pytest.raises(InvalidScorerError):
        _goal(game, 1, team_index=1, scorer_id="nobody")


def test_unknown_goal_type_or_position_is_rejected() -> None:
    game = _game()
    with pytest.raises(InvalidGoalError):
        _goal(game, 1, team_index=0, scorer_id="alice", goal_type="own_goal")
    with pytest.raises(InvalidGoalError):
        _goal(game, 1, team_index=0, scorer_id="alice", position="bench")
    with pytest.raises(InvalidGoalError):
        _goal(game, 1, team_index=2, scorer_id="alice")


def test_repeated_goal_id_is_a_noop() -> None:
    game = _goal(_game(), 1, team_index=0, scorer_id="alice")
    assert _goal(game, 1, team_index=0, scorer_id="alice") is None


def test_retract_then_replay_restores_score_and_status() -> None:
    game = _game()
    for n in range(6):
        game = _goal(game, n, team_index=0, scorer_id="alice")
    completed = game

    reopened = apply_retract(completed)
    assert reopened.status == GAME_STATUS_IN_PROGRESS
    assert reopened.scores == (5, 0)
    assert reopened.winner_team_index is None
    assert reopened.ended_at is None

    replayed = _goal(reopened, 5, team_index=0, scorer_id="alice")
    assert replayed.scores == completed.scores
    assert replayed.status == completed.status
    assert replayed.winner_team_index == completed.winner_team_index


def test_finished_tournament_game_cannot_be_reopened() -> None:
    game = replace(_game(), tournament_ref="cup-1", tournament_match_ref="match-1")
    game = _goal(game, 10, team_index=1, scorer_id="bob")
    assert apply_retract(game).scores == (0, 0)

    for n in range(6):
        game = _goal(game, n, team_index=0, scorer_id="alice")
    assert game.status == GAME_STATUS_COMPLETED
    with pytest.raises(NothingToRetractError):
        apply_retract(game)


def test_retract_removes_only_the_latest_goal() -> None:
    game = _game()
    game = _goal(game, 1, team_index=0, scorer_id="alice")
    game = _goal(game, 2, team_index=1, scorer_id="bob")

    game = apply_retract(game)
    assert [goal.goal_id for goal in game.goals] == ["goal-1"]
    assert game.scores == (1, 0)


def test_retract_rejected_without_goals_or_after_manual_end() -> None:
    with pytest.raises(NothingToRetractError):
        apply_retract(_game())

    ended = apply_end(_goal(_game(), 1, team_index=0, scorer_id="alice"), now_utc=NOW_UTC)
    with pytest.raises(NothingToRetractError):
        apply_retract(ended)


def test_manual_end_allows_draw() -> None:
    game = _goal(_game(), 1, team_index=0, scorer_id="alice")
    game = _goal(game, 2, team_index=1, scorer_id="bob")

    ended = apply_end(game, now_utc=NOW_UTC + timedelta(minutes=3))
    assert ended.status == GAME_STATUS_COMPLETED
    assert ended.winner_team_index is None
    assert ended.end_reason == END_REASON_MANUAL
    assert ended.duration_seconds == 180


def test_forfeit_awards_the_other_team() -> None:
    game = _goal(_game(), 1, team_index=0, scorer_id="alice")
    forfeited = apply_forfeit(game, forfeiting_team_index=0, now_utc=NOW_UTC)
    assert forfeited.winner_team_index == 1
    assert forfeited.end_reason == END_REASON_FORFEIT


def test_abandon_is_terminal_without_winner_and_idempotent() -> None:
    abandoned = apply_abandon(_game(), now_utc=NOW_UTC)
    assert abandoned.status == GAME_STATUS_ABANDONED
    assert abandoned.winner_team_index is None
    assert apply_abandon(abandoned, now_utc=NOW_UTC) is None
    with pytest.raises(NothingToRetractError):
        apply_retract(abandoned)


def test_compute_results_breaks_mvp_tie_by_first_to_reach_count() -> None:
    game = _game(teams=_doubles_teams(), target_score=11)
    game = _goal(game, 1, team_index=1, scorer_id="carol", position="midfield")
    game = _goal(game, 2, team_index=0, scorer_id="alice")
    game = _goal(game, 3, team_index=0, scorer_id="alice", goal_type="gamelle")
    game = _goal(game, 4, team_index=0, scorer_id="alice")
    game = _goal(game, 5, team_index=1, scorer_id="carol", position="midfield")

    results = compute_results(game)
    assert results.mvp is not None
    assert results.mvp.user_id == "alice"
    assert results.mvp_goals == 2
    assert results.goals_by_player == {"carol": 2, "alice": 2}
    assert results.goals_by_position == {"midfield": 2, "attack": 2}
    assert results.gamelles_by_player == {"alice": 1}


def test_compute_results_without_goals_has_no_mvp() -> None:
    results = compute_results(_game())
    assert results.mvp is None
    assert results.mvp_goals == 0
    assert results.goals_by_player == {}
