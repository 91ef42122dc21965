from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from babyfoot.game.common.types import Player


class PlayerModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str = Field(min_length=1, max_length=128)
    username: str = Field(min_length=1, max_length=64)
    avatar_url: str | None = None

    def to_player(self) -> Player:
        return Player(user_id=self.user_id, username=self.username, avatar_url=self.avatar_url)
