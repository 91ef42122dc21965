from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from babyfoot.game.tournaments.constants import (
    MATCH_STATUS_BYE,
    MATCH_STATUS_PENDING,
    TOURNAMENT_MODE_BRACKET,
    TOURNAMENT_STATUS_COMPLETED,
    bracket_round_name,
    bracket_rounds_total,
)
from babyfoot.game.tournaments.internal import new_entity_id
from babyfoot.game.tournaments.standings import compute_standings
from babyfoot.game.tournaments.types import (
    BracketRound,
    Tournament,
    TournamentMatch,
    TournamentTeam,
)

Pair = tuple[str, str]


def circle_method_rounds(team_ids: Sequence[str]) -> list[list[Pair]]:
    slots: list[str | None] = list(team_ids)
    if len(slots) % 2 == 1:
        slots.append(None)
    size = len(slots)
    rounds: list[list[Pair]] = []
    for _ in range(size - 1):
        current: list[Pair] = []
        for index in range(size // 2):
            home = slots[index]
            away = slots[size - 1 - index]
            if home is None or away is None:
                continue
            current.append((home, away))
        rounds.append(current)
        slots = [slots[0], slots[-1], *slots[1:-1]]
    return rounds


def order_without_back_to_back(pairs: Sequence[Pair]) -> list[Pair]:
    """Greedily reorders pairs so consecutive matches share no team when possible."""
    remaining = list(pairs)
    ordered: list[Pair] = []
    previous: set[str] = set()
    while remaining:
        pick = next(
            (index for index, pair in enumerate(remaining) if previous.isdisjoint(pair)),
            0,
        )
        pair = remaining.pop(pick)
        ordered.append(pair)
        previous = set(pair)
    return ordered


def generate_round_robin_matches(
    teams: Sequence[TournamentTeam],
    *,
    first_match_number: int = 1,
) -> tuple[TournamentMatch, ...]:
    team_ids = [team.team_id for team in teams]
    round_of_pair: dict[Pair, int] = {}
    flat: list[Pair] = []
    for round_no, pairs in enumerate(circle_method_rounds(team_ids), start=1):
        for pair in pairs:
            round_of_pair[pair] = round_no
            flat.append(pair)

    matches: list[TournamentMatch] = []
    for offset, pair in enumerate(order_without_back_to_back(flat)):
        matches.append(
            TournamentMatch(
                match_id=new_entity_id(),
                team1_ref=pair[0],
                team2_ref=pair[1],
                status=MATCH_STATUS_PENDING,
                match_number=first_match_number + offset,
                round=round_of_pair[pair],
            )
        )
    return tuple(matches)


def collect_bye_history(matches: Sequence[TournamentMatch]) -> set[str]:
    return {match.team1_ref for match in matches if match.status == MATCH_STATUS_BYE}


def pick_bye_team(
    team_ids: Sequence[str],
    *,
    registration_index: dict[str, int],
    bye_history: set[str],
) -> str:
    candidates = [team_id for team_id in team_ids if team_id not in bye_history] or list(team_ids)
    return min(candidates, key=lambda team_id: registration_index.get(team_id, len(registration_index)))


def build_bracket_round(
    team_ids: Sequence[str],
    *,
    round_number: int,
    rounds_total: int,
    registration_index: dict[str, int],
    bye_history: set[str],
    first_match_number: int,
) -> tuple[list[TournamentMatch], BracketRound]:
    bye_team_id: str | None = None
    if len(team_ids) % 2 == 1:
        bye_team_id = pick_bye_team(
            team_ids,
            registration_index=registration_index,
            bye_history=bye_history,
        )
    playing = [team_id for team_id in team_ids if team_id != bye_team_id]
    opponents = dict(zip(playing[0::2], playing[1::2]))

    matches: list[TournamentMatch] = []
    for team_id in team_ids:
        number = first_match_number + len(matches)
        if team_id == bye_team_id:
            matches.append(
                TournamentMatch(
                    match_id=new_entity_id(),
                    team1_ref=team_id,
                    team2_ref=None,
                    status=MATCH_STATUS_BYE,
                    match_number=number,
                    round=round_number,
                    winner_team_id=team_id,
                )
            )
        elif team_id in opponents:
            matches.append(
                TournamentMatch(
                    match_id=new_entity_id(),
                    team1_ref=team_id,
                    team2_ref=opponents[team_id],
                    status=MATCH_STATUS_PENDING,
                    match_number=number,
                    round=round_number,
                )
            )

    bracket_round = BracketRound(
        round_number=round_number,
        round_name=bracket_round_name(round_number=round_number, rounds_total=rounds_total),
        match_ids=tuple(match.match_id for match in matches),
    )
    return matches, bracket_round


def generate_bracket(
    teams: Sequence[TournamentTeam],
) -> tuple[tuple[TournamentMatch, ...], tuple[BracketRound, ...]]:
    team_ids = [team.team_id for team in teams]
    matches, first_round = build_bracket_round(
        team_ids,
        round_number=1,
        rounds_total=bracket_rounds_total(len(team_ids)),
        registration_index={team_id: index for index, team_id in enumerate(team_ids)},
        bye_history=set(),
        first_match_number=1,
    )
    return tuple(matches), (first_round,)


def round_matches(tournament: Tournament, bracket_round: BracketRound) -> list[TournamentMatch]:
    by_id = {match.match_id: match for match in tournament.matches}
    return [by_id[match_id] for match_id in bracket_round.match_ids]


def next_pending_match(tournament: Tournament) -> TournamentMatch | None:
    for match in tournament.matches:
        if match.is_playable:
            return match
    return None


def resolve_current_match_id(tournament: Tournament) -> str | None:
    for match in tournament.matches:
        if match.is_in_progress:
            return match.match_id
    pending = next_pending_match(tournament)
    return pending.match_id if pending is not None else None


def advance_bracket(tournament: Tournament) -> Tournament:
    """Materializes the next round once every match of the latest round is terminal.

    Winners keep their bracket order. A single remaining winner completes the
    tournament.
    """
    if tournament.mode != TOURNAMENT_MODE_BRACKET or not tournament.bracket:
        return tournament
    latest = tournament.bracket[-1]
    latest_matches = round_matches(tournament, latest)
    if not all(match.is_terminal for match in latest_matches):
        return tournament

    winners = [match.winner_team_id for match in latest_matches if match.winner_team_id is not None]
    if len(winners) <= 1:
        return replace(tournament, status=TOURNAMENT_STATUS_COMPLETED, current_match_id=None)

    new_matches, new_round = build_bracket_round(
        winners,
        round_number=latest.round_number + 1,
        rounds_total=bracket_rounds_total(len(tournament.teams)),
        registration_index={team.team_id: index for index, team in enumerate(tournament.teams)},
        bye_history=collect_bye_history(tournament.matches),
        first_match_number=len(tournament.matches) + 1,
    )
    return replace(
        tournament,
        matches=tournament.matches + tuple(new_matches),
        bracket=tournament.bracket + (new_round,),
    )


def generate_schedule(tournament: Tournament) -> Tournament:
    if tournament.mode == TOURNAMENT_MODE_BRACKET:
        matches, bracket = generate_bracket(tournament.teams)
    else:
        matches, bracket = generate_round_robin_matches(tournament.teams), None
    scheduled = replace(
        tournament,
        matches=matches,
        bracket=bracket,
        standings=compute_standings(tournament.teams, matches),
    )
    return replace(scheduled, current_match_id=resolve_current_match_id(scheduled))
