from babyfoot.game.tournaments.create_join import (
    add_guest_player,
    create_tournament,
    create_tournament_from_roster,
    join_tournament,
    join_tournament_by_pin,
    remove_player,
)
from babyfoot.game.tournaments.lifecycle import cancel_tournament
from babyfoot.game.tournaments.matches import (
    complete_match_from_game,
    ingest_match_result,
    start_match,
)
from babyfoot.game.tournaments.queries import (
    build_tournament_join_link,
    get_tournament,
    resolve_tournament_by_pin,
    subscribe_to_tournament,
)
from babyfoot.game.tournaments.results import champion, is_complete
from babyfoot.game.tournaments.schedule import generate_schedule, next_pending_match
from babyfoot.game.tournaments.setup import assign_teams, begin_team_setup
from babyfoot.game.tournaments.standings import compute_standings
from babyfoot.game.tournaments.start import start_tournament
from babyfoot.game.tournaments.teams import auto_assign_teams, form_teams

__all__ = [
    "add_guest_player",
    "assign_teams",
    "auto_assign_teams",
    "begin_team_setup",
    "build_tournament_join_link",
    "cancel_tournament",
    "champion",
    "complete_match_from_game",
    "compute_standings",
    "create_tournament",
    "create_tournament_from_roster",
    "form_teams",
    "generate_schedule",
    "get_tournament",
    "ingest_match_result",
    "is_complete",
    "join_tournament",
    "join_tournament_by_pin",
    "next_pending_match",
    "remove_player",
    "resolve_tournament_by_pin",
    "start_match",
    "start_tournament",
    "subscribe_to_tournament",
]
