from __future__ import annotations

from dataclasses import dataclass

from babyfoot.game.common.constants import GUEST_USER_ID_PREFIX


@dataclass(frozen=True, slots=True)
class Player:
    """Snapshot of an account taken when the player entered a lobby."""

    user_id: str
    username: str
    avatar_url: str | None = None

    @property
    def is_guest(self) -> bool:
        return self.user_id.startswith(GUEST_USER_ID_PREFIX)
