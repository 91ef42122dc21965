from __future__ import annotations

from datetime import timedelta

import pytest

from babyfoot.game.common.constants import COLLECTION_GAMES
from babyfoot.game.common.errors import InvalidTeamAssignmentError
from babyfoot.game.games.constants import GAME_STATUS_COMPLETED
from babyfoot.game.games.errors import NothingToRetractError
from babyfoot.game.games.service_facade import GameEngine
from babyfoot.game.tournaments.constants import (
    MATCH_STATUS_COMPLETED,
    MATCH_STATUS_IN_PROGRESS,
    MATCH_STATUS_PENDING,
    TOURNAMENT_STATUS_CANCELLED,
    TOURNAMENT_STATUS_COMPLETED,
    TOURNAMENT_STATUS_IN_PROGRESS,
    TOURNAMENT_STATUS_TEAM_SETUP,
    TOURNAMENT_STATUS_WAITING,
)
from babyfoot.game.tournaments.errors import (
    HostRemovalError,
    InvalidTournamentModeError,
    InvalidTournamentTeamsError,
    MatchGameNotFinishedError,
    TournamentAccessError,
    TournamentClosedError,
    TournamentExpiredError,
    TournamentNotFoundError,
)
from babyfoot.game.tournaments.service_facade import TournamentScheduler
from babyfoot.game.tournaments.types import TeamDraft
from tests.game.babyfoot_fixtures import NOW_UTC, VENUE_REF, _player, _store


async def _open_tournament(scheduler: TournamentScheduler, *, format_code: str = "1v1", mode: str = "round_robin"):
    return await scheduler.create_tournament(
        host=_player("alice"),
        venue_ref=VENUE_REF,
        format_code=format_code,
        mode=mode,
        target_score=6,
        now_utc=NOW_UTC,
    )


async def _win_match(scheduler: TournamentScheduler, engine: GameEngine, tournament, *, minute: int):
    match = scheduler.next_pending_match(tournament)
    tournament, game = await scheduler.start_match(
        tournament_id=tournament.tournament_id,
        match_id=match.match_id,
        now_utc=NOW_UTC + timedelta(minutes=minute),
        actor_user_id="alice",
    )
    scorer = game.teams[0].players[0]
    for n in range(6):
        game = await engine.record_goal(
            game_id=game.game_id,
            team_index=0,
            scorer_id=scorer.user_id,
            position="attack",
            goal_type="normal",
            now_utc=NOW_UTC + timedelta(minutes=minute, seconds=n),
        )
    return await scheduler.complete_match_from_game(game_id=game.game_id), game


@pytest.mark.asyncio
async def test_round_robin_flow_from_lobby_to_champion() -> None:
    store = _store()
    scheduler = TournamentScheduler(store)
    engine = GameEngine(store)

    tournament = await _open_tournament(scheduler)
    assert tournament.status == TOURNAMENT_STATUS_WAITING
    assert tournament.name == "Alice's tournament"

    await scheduler.join_by_pin(pin_code=tournament.pin_code.lower(), player=_player("bob"), now_utc=NOW_UTC)
    await scheduler.join(tournament_id=tournament.tournament_id, player=_player("carol"), now_utc=NOW_UTC)
    tournament = await scheduler.begin_team_setup(tournament_id=tournament.tournament_id, actor_user_id="alice")
    assert tournament.status == TOURNAMENT_STATUS_TEAM_SETUP
    assert [team.name for team in tournament.teams] == ["Alice", "Bob", "Carol"]

    tournament = await scheduler.start_tournament(tournament_id=tournament.tournament_id, actor_user_id="alice")
    assert tournament.status == TOURNAMENT_STATUS_IN_PROGRESS
    assert len(tournament.matches) == 3

    for minute in range(3):
        tournament, _ = await _win_match(scheduler, engine, tournament, minute=minute * 10)

    assert tournament.status == TOURNAMENT_STATUS_COMPLETED
    assert scheduler.is_complete(tournament)
    assert all(match.status == MATCH_STATUS_COMPLETED for match in tournament.matches)
    assert sum(item.wins for item in tournament.standings) == 3
    assert sum(item.losses for item in tournament.standings) == 3
    assert scheduler.champion(tournament).team_id == tournament.standings[0].team_id


@pytest.mark.asyncio
async def test_replaying_a_finished_game_is_a_noop() -> None:
    store = _store()
    scheduler = TournamentScheduler(store)
    engine = GameEngine(store)
    tournament = await _open_tournament(scheduler)
    await scheduler.join(tournament_id=tournament.tournament_id, player=_player("bob"), now_utc=NOW_UTC)
    await scheduler.begin_team_setup(tournament_id=tournament.tournament_id)
    tournament = await scheduler.start_tournament(tournament_id=tournament.tournament_id)

    tournament, game = await _win_match(scheduler, engine, tournament, minute=1)
    replayed = await scheduler.complete_match_from_game(game_id=game.game_id)
    assert replayed == tournament
    assert tournament.matches[0].game_ref == game.game_id
    assert tournament.matches[0].score == (6, 0)


@pytest.mark.asyncio
async def test_recorded_match_game_cannot_be_retracted() -> None:
    store = _store()
    scheduler = TournamentScheduler(store)
    engine = GameEngine(store)
    tournament = await _open_tournament(scheduler)
    await scheduler.join(tournament_id=tournament.tournament_id, player=_player("bob"), now_utc=NOW_UTC)
    await scheduler.begin_team_setup(tournament_id=tournament.tournament_id)
    tournament = await scheduler.start_tournament(tournament_id=tournament.tournament_id)

    tournament, game = await _win_match(scheduler, engine, tournament, minute=1)
    assert tournament.status == TOURNAMENT_STATUS_COMPLETED

    with pytest.raises(NothingToRetractError):
        await engine.retract_last_goal(game_id=game.game_id)

    stored_game = await engine.get_game(game_id=game.game_id)
    assert stored_game.status == GAME_STATUS_COMPLETED
    assert stored_game.scores == (6, 0)
    stored = await scheduler.get_tournament(tournament_id=tournament.tournament_id)
    assert stored.matches[0].score == stored_game.scores


@pytest.mark.asyncio
async def test_doubles_bracket_with_manual_teams() -> None:
    store = _store()
    scheduler = TournamentScheduler(store)
    tournament = await _open_tournament(scheduler, format_code="2v2", mode="bracket")
    for user_id in ("bob", "carol", "dave"):
        await scheduler.join(tournament_id=tournament.tournament_id, player=_player(user_id), now_utc=NOW_UTC)

    tournament = await scheduler.begin_team_setup(tournament_id=tournament.tournament_id)
    assert tournament.teams == ()

    with pytest.raises(InvalidTeamAssignmentError):
        await scheduler.assign_teams(
            tournament_id=tournament.tournament_id,
            drafts=[TeamDraft(user_ids=("alice", "bob")), TeamDraft(user_ids=("carol", "alice"))],
        )

    tournament = await scheduler.assign_teams(
        tournament_id=tournament.tournament_id,
        drafts=[
            TeamDraft(user_ids=("alice", "carol"), name="Les Bleus", color="blue"),
            TeamDraft(user_ids=("bob", "dave"), color="blue"),
        ],
    )
    assert [team.name for team in tournament.teams] == ["Les Bleus", "Bob & Dave"]

    tournament = await scheduler.start_tournament(tournament_id=tournament.tournament_id)
    assert [item.round_name for item in tournament.bracket] == ["Final"]

    final = tournament.matches[0]
    tournament, game = await scheduler.start_match(
        tournament_id=tournament.tournament_id,
        match_id=final.match_id,
        now_utc=NOW_UTC,
    )
    assert {team.color for team in game.teams} == {"red", "blue"}
    assert game.tournament_match_ref == final.match_id

    tournament = await scheduler.ingest_match_result(
        tournament_id=tournament.tournament_id,
        match_id=final.match_id,
        score=(4, 6),
    )
    assert tournament.status == TOURNAMENT_STATUS_COMPLETED
    assert scheduler.champion(tournament).name == "Bob & Dave"


@pytest.mark.asyncio
async def test_abandoned_game_releases_the_match() -> None:
    store = _store()
    scheduler = TournamentScheduler(store)
    engine = GameEngine(store)
    tournament = await _open_tournament(scheduler)
    await scheduler.join(tournament_id=tournament.tournament_id, player=_player("bob"), now_utc=NOW_UTC)
    await scheduler.begin_team_setup(tournament_id=tournament.tournament_id)
    tournament = await scheduler.start_tournament(tournament_id=tournament.tournament_id)
    match_id = tournament.matches[0].match_id

    tournament, game = await scheduler.start_match(
        tournament_id=tournament.tournament_id,
        match_id=match_id,
        now_utc=NOW_UTC,
    )
    assert tournament.find_match(match_id).status == MATCH_STATUS_IN_PROGRESS

    with pytest.raises(MatchGameNotFinishedError):
        await scheduler.complete_match_from_game(game_id=game.game_id)

    await engine.abandon_game(game_id=game.game_id, now_utc=NOW_UTC)
    tournament = await scheduler.complete_match_from_game(game_id=game.game_id)
    released = tournament.find_match(match_id)
    assert released.status == MATCH_STATUS_PENDING
    assert released.game_ref is None
    assert tournament.current_match_id == match_id

    tournament, retry = await scheduler.start_match(
        tournament_id=tournament.tournament_id,
        match_id=match_id,
        now_utc=NOW_UTC,
    )
    assert retry.game_id != game.game_id


@pytest.mark.asyncio
async def test_host_only_actions_reject_other_players() -> None:
    store = _store()
    scheduler = TournamentScheduler(store)
    tournament = await _open_tournament(scheduler)
    await scheduler.join(tournament_id=tournament.tournament_id, player=_player("bob"), now_utc=NOW_UTC)

    with pytest.raises(TournamentAccessError):
        await scheduler.begin_team_setup(tournament_id=tournament.tournament_id, actor_user_id="bob")
    with pytest.raises(TournamentAccessError):
        await scheduler.remove_player(tournament_id=tournament.tournament_id, user_id="alice", actor_user_id="bob")
    with pytest.raises(HostRemovalError):
        await scheduler.remove_player(tournament_id=tournament.tournament_id, user_id="alice", actor_user_id="alice")

    await scheduler.begin_team_setup(tournament_id=tournament.tournament_id)
    tournament = await scheduler.start_tournament(tournament_id=tournament.tournament_id)
    with pytest.raises(TournamentAccessError):
        await scheduler.start_match(
            tournament_id=tournament.tournament_id,
            match_id=tournament.matches[0].match_id,
            now_utc=NOW_UTC,
            actor_user_id="bob",
        )
    assert await store.query(COLLECTION_GAMES, "tournament_ref", "==", tournament.tournament_id) == []


@pytest.mark.asyncio
async def test_roster_changes_and_join_guards() -> None:
    scheduler = TournamentScheduler(_store())
    tournament = await _open_tournament(scheduler)

    tournament = await scheduler.add_guest_player(
        tournament_id=tournament.tournament_id,
        guest_name="  Walk-in ",
        now_utc=NOW_UTC,
    )
    guest = tournament.players[-1]
    assert guest.is_guest
    assert guest.username == "Walk-in"

    tournament = await scheduler.remove_player(tournament_id=tournament.tournament_id, user_id=guest.user_id)
    assert [player.user_id for player in tournament.players] == ["alice"]

    with pytest.raises(TournamentExpiredError):
        await scheduler.join(
            tournament_id=tournament.tournament_id,
            player=_player("late"),
            now_utc=NOW_UTC + timedelta(hours=2),
        )

    await scheduler.join(tournament_id=tournament.tournament_id, player=_player("bob"), now_utc=NOW_UTC)
    await scheduler.begin_team_setup(tournament_id=tournament.tournament_id)
    tournament = await scheduler.join(tournament_id=tournament.tournament_id, player=_player("carol"), now_utc=NOW_UTC)
    assert [team.name for team in tournament.teams] == ["Alice", "Bob", "Carol"]

    await scheduler.start_tournament(tournament_id=tournament.tournament_id)
    with pytest.raises(TournamentClosedError):
        await scheduler.join(tournament_id=tournament.tournament_id, player=_player("dave"), now_utc=NOW_UTC)
    assert await scheduler.resolve_by_pin(pin_code=tournament.pin_code, now_utc=NOW_UTC) is None


@pytest.mark.asyncio
async def test_start_requires_two_complete_teams() -> None:
    scheduler = TournamentScheduler(_store())
    solo = await _open_tournament(scheduler)
    await scheduler.begin_team_setup(tournament_id=solo.tournament_id)
    with pytest.raises(InvalidTournamentTeamsError):
        await scheduler.start_tournament(tournament_id=solo.tournament_id)

    doubles = await _open_tournament(scheduler, format_code="2v2")
    for user_id in ("bob", "carol", "dave"):
        await scheduler.join(tournament_id=doubles.tournament_id, player=_player(user_id), now_utc=NOW_UTC)
    await scheduler.begin_team_setup(tournament_id=doubles.tournament_id)
    with pytest.raises(InvalidTournamentTeamsError):
        await scheduler.start_tournament(tournament_id=doubles.tournament_id)

    with pytest.raises(InvalidTournamentModeError):
        await _open_tournament(scheduler, mode="swiss")


@pytest.mark.asyncio
async def test_cancel_stops_further_matches() -> None:
    scheduler = TournamentScheduler(_store())
    tournament = await _open_tournament(scheduler)
    await scheduler.join(tournament_id=tournament.tournament_id, player=_player("bob"), now_utc=NOW_UTC)
    await scheduler.begin_team_setup(tournament_id=tournament.tournament_id)
    tournament = await scheduler.start_tournament(tournament_id=tournament.tournament_id)

    with pytest.raises(TournamentAccessError):
        await scheduler.cancel_tournament(tournament_id=tournament.tournament_id, actor_user_id="bob")
    cancelled = await scheduler.cancel_tournament(tournament_id=tournament.tournament_id, actor_user_id="alice")
    assert cancelled.status == TOURNAMENT_STATUS_CANCELLED
    assert await scheduler.cancel_tournament(tournament_id=tournament.tournament_id) == cancelled

    with pytest.raises(TournamentClosedError):
        await scheduler.start_match(
            tournament_id=tournament.tournament_id,
            match_id=tournament.matches[0].match_id,
            now_utc=NOW_UTC,
        )


@pytest.mark.asyncio
async def test_unknown_tournament_is_not_found() -> None:
    scheduler = TournamentScheduler(_store())
    with pytest.raises(TournamentNotFoundError):
        await scheduler.get_tournament(tournament_id="missing")
    with pytest.raises(TournamentNotFoundError):
        await scheduler.join_by_pin(pin_code="ZZZ-999", player=_player("bob"), now_utc=NOW_UTC)
