from __future__ import annotations

from datetime import datetime
from typing import Any

from babyfoot.game.common.types import Player


def encode_datetime(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()


def decode_datetime(value: Any) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def player_to_document(player: Player) -> dict[str, Any]:
    return {
        "user_id": player.user_id,
        "username": player.username,
        "avatar_url": player.avatar_url,
    }


def player_from_document(data: dict[str, Any]) -> Player:
    return Player(
        user_id=str(data["user_id"]),
        username=str(data["username"]),
        avatar_url=data.get("avatar_url"),
    )


def players_to_document(players: tuple[Player, ...]) -> list[dict[str, Any]]:
    return [player_to_document(player) for player in players]


def players_from_document(items: list[dict[str, Any]] | None) -> tuple[Player, ...]:
    return tuple(player_from_document(item) for item in items or ())
