from __future__ import annotations

from babyfoot.core.config import get_settings

settings = get_settings()

GAME_STATUS_IN_PROGRESS = "in_progress"
GAME_STATUS_COMPLETED = "completed"
GAME_STATUS_ABANDONED = "abandoned"
GAME_TERMINAL_STATUSES: frozenset[str] = frozenset({GAME_STATUS_COMPLETED, GAME_STATUS_ABANDONED})

GOAL_TYPE_NORMAL = "normal"
GOAL_TYPE_GAMELLE = "gamelle"
GOAL_TYPE_GAMELLE_RENTRANTE = "gamelle_rentrante"
GOAL_POINTS: dict[str, int] = {
    GOAL_TYPE_NORMAL: 1,
    GOAL_TYPE_GAMELLE: 0,
    GOAL_TYPE_GAMELLE_RENTRANTE: 1,
}

GOAL_POSITION_GOALKEEPER = "goalkeeper"
GOAL_POSITION_DEFENSE = "defense"
GOAL_POSITION_MIDFIELD = "midfield"
GOAL_POSITION_ATTACK = "attack"
GOAL_POSITIONS: tuple[str, ...] = (
    GOAL_POSITION_GOALKEEPER,
    GOAL_POSITION_DEFENSE,
    GOAL_POSITION_MIDFIELD,
    GOAL_POSITION_ATTACK,
)

END_REASON_TARGET_REACHED = "target_reached"
END_REASON_MANUAL = "manual"
END_REASON_FORFEIT = "forfeit"
END_REASON_ABANDONED = "abandoned"

GAME_WIN_MARGIN = max(1, int(settings.game_win_margin))
