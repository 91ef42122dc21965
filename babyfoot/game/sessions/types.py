from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from babyfoot.game.common.constants import DEFAULT_TEAM_COLORS, max_players_for_format
from babyfoot.game.common.types import Player
from babyfoot.game.sessions.constants import SESSION_TERMINAL_STATUSES


@dataclass(frozen=True, slots=True)
class GameSession:
    session_id: str
    pin_code: str
    format: str
    venue_ref: str
    host_id: str
    players: tuple[Player, ...]
    status: str
    created_at: datetime
    expires_at: datetime
    game_ref: str | None = None
    tournament_ref: str | None = None
    closed_at: datetime | None = None

    @property
    def max_players(self) -> int:
        return max_players_for_format(self.format)

    @property
    def is_full(self) -> bool:
        return len(self.players) >= self.max_players

    @property
    def is_terminal(self) -> bool:
        return self.status in SESSION_TERMINAL_STATUSES

    def has_player(self, user_id: str) -> bool:
        return any(player.user_id == user_id for player in self.players)

    def is_past_expiry(self, now_utc: datetime) -> bool:
        return now_utc > self.expires_at


@dataclass(frozen=True, slots=True)
class TeamAssignment:
    """Two groups of user ids, one per side of the table."""

    teams: tuple[tuple[str, ...], tuple[str, ...]]
    colors: tuple[str, str] = DEFAULT_TEAM_COLORS
