from babyfoot.game.games.create import build_team, create_game
from babyfoot.game.games.goals import record_goal, retract_last_goal
from babyfoot.game.games.lifecycle import abandon_game, end_game, forfeit_game
from babyfoot.game.games.queries import get_game, get_game_results, subscribe_to_game
from babyfoot.game.games.scoring import compute_results

__all__ = [
    "abandon_game",
    "build_team",
    "compute_results",
    "create_game",
    "end_game",
    "forfeit_game",
    "get_game",
    "get_game_results",
    "record_goal",
    "retract_last_goal",
    "subscribe_to_game",
]
