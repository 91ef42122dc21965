from __future__ import annotations

import math

from babyfoot.core.config import get_settings

settings = get_settings()

TOURNAMENT_STATUS_WAITING = "waiting"
TOURNAMENT_STATUS_TEAM_SETUP = "team_setup"
TOURNAMENT_STATUS_IN_PROGRESS = "in_progress"
TOURNAMENT_STATUS_COMPLETED = "completed"
TOURNAMENT_STATUS_CANCELLED = "cancelled"

TOURNAMENT_OPEN_STATUSES: frozenset[str] = frozenset(
    {TOURNAMENT_STATUS_WAITING, TOURNAMENT_STATUS_TEAM_SETUP}
)
TOURNAMENT_TERMINAL_STATUSES: frozenset[str] = frozenset(
    {TOURNAMENT_STATUS_COMPLETED, TOURNAMENT_STATUS_CANCELLED}
)

TOURNAMENT_MODE_ROUND_ROBIN = "round_robin"
TOURNAMENT_MODE_BRACKET = "bracket"
TOURNAMENT_MODES: frozenset[str] = frozenset({TOURNAMENT_MODE_ROUND_ROBIN, TOURNAMENT_MODE_BRACKET})

MATCH_STATUS_PENDING = "pending"
MATCH_STATUS_IN_PROGRESS = "in_progress"
MATCH_STATUS_COMPLETED = "completed"
MATCH_STATUS_BYE = "bye"
MATCH_TERMINAL_STATUSES: frozenset[str] = frozenset({MATCH_STATUS_COMPLETED, MATCH_STATUS_BYE})

TOURNAMENT_MIN_TEAMS = 2
TOURNAMENT_JOIN_TTL_SECONDS = max(1, int(settings.tournament_join_ttl_seconds))
TOURNAMENT_POINTS_WIN = int(settings.tournament_points_win)
TOURNAMENT_POINTS_DRAW = int(settings.tournament_points_draw)
TOURNAMENT_POINTS_LOSS = int(settings.tournament_points_loss)

MAX_TEAMS_BY_MODE: dict[str, int] = {
    TOURNAMENT_MODE_ROUND_ROBIN: max(TOURNAMENT_MIN_TEAMS, int(settings.round_robin_max_teams)),
    TOURNAMENT_MODE_BRACKET: max(TOURNAMENT_MIN_TEAMS, int(settings.bracket_max_teams)),
}

_ROUND_NAMES_FROM_END: tuple[str, ...] = ("Final", "Semi-finals", "Quarter-finals", "Round of 16")


def bracket_rounds_total(teams_total: int) -> int:
    if teams_total < 2:
        return 0
    return math.ceil(math.log2(teams_total))


def bracket_round_name(*, round_number: int, rounds_total: int) -> str:
    remaining = rounds_total - round_number
    if 0 <= remaining < len(_ROUND_NAMES_FROM_END):
        return _ROUND_NAMES_FROM_END[remaining]
    return f"Round {round_number}"
