from __future__ import annotations

from collections.abc import Sequence

from babyfoot.game.common.errors import InvalidTeamAssignmentError
from babyfoot.game.common.types import Player


def partition_roster(
    roster: Sequence[Player],
    groups: Sequence[Sequence[str]],
    *,
    team_size: int,
    teams_total: int | None = None,
) -> list[tuple[Player, ...]]:
    """Maps user id groups onto roster snapshots.

    Every roster member must appear in exactly one group and every group must
    hold exactly ``team_size`` players, otherwise the assignment is rejected.
    """
    if teams_total is not None and len(groups) != teams_total:
        raise InvalidTeamAssignmentError
    by_user_id = {player.user_id: player for player in roster}
    seen: set[str] = set()
    teams: list[tuple[Player, ...]] = []
    for group in groups:
        if len(group) != team_size:
            raise InvalidTeamAssignmentError
        members: list[Player] = []
        for user_id in group:
            player = by_user_id.get(user_id)
            if player is None or user_id in seen:
                raise InvalidTeamAssignmentError
            seen.add(user_id)
            members.append(player)
        teams.append(tuple(members))
    if seen != set(by_user_id):
        raise InvalidTeamAssignmentError
    return teams
