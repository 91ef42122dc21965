from __future__ import annotations

from babyfoot.core.config import get_settings

FORMAT_1V1 = "1v1"
FORMAT_2V2 = "2v2"
FORMATS: frozenset[str] = frozenset({FORMAT_1V1, FORMAT_2V2})

PLAYERS_PER_TEAM: dict[str, int] = {
    FORMAT_1V1: 1,
    FORMAT_2V2: 2,
}

TARGET_SCORE_SHORT = 6
TARGET_SCORE_LONG = 11
TARGET_SCORES: frozenset[int] = frozenset({TARGET_SCORE_SHORT, TARGET_SCORE_LONG})

TEAM_COLORS: tuple[str, ...] = ("red", "blue", "green", "yellow", "orange", "purple")
DEFAULT_TEAM_COLORS: tuple[str, str] = ("red", "blue")

GUEST_USER_ID_PREFIX = "guest_"

COLLECTION_SESSIONS = "game_sessions"
COLLECTION_GAMES = "games"
COLLECTION_TOURNAMENTS = "tournaments"

STORE_MAX_CAS_ATTEMPTS = max(1, int(get_settings().store_max_cas_attempts))
PIN_CODE_MAX_ATTEMPTS = max(1, int(get_settings().pin_code_max_attempts))


def max_players_for_format(format_code: str) -> int:
    return PLAYERS_PER_TEAM[format_code] * 2