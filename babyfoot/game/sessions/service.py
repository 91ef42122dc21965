from babyfoot.game.sessions.create import create_session
from babyfoot.game.sessions.join import join_session, join_session_by_pin
from babyfoot.game.sessions.manage import cancel_session, expire_due_sessions
from babyfoot.game.sessions.queries import (
    build_session_join_link,
    get_session,
    resolve_by_pin,
    subscribe_to_session,
)
from babyfoot.game.sessions.start import start_session, start_tournament_from_session

__all__ = [
    "build_session_join_link",
    "cancel_session",
    "create_session",
    "expire_due_sessions",
    "get_session",
    "join_session",
    "join_session_by_pin",
    "resolve_by_pin",
    "start_session",
    "start_tournament_from_session",
    "subscribe_to_session",
]
