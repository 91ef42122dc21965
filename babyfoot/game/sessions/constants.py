from __future__ import annotations

from babyfoot.core.config import get_settings

settings = get_settings()

SESSION_STATUS_WAITING = "waiting"
SESSION_STATUS_READY = "ready"
SESSION_STATUS_ACTIVE = "active"
SESSION_STATUS_EXPIRED = "expired"
SESSION_STATUS_CANCELLED = "cancelled"

SESSION_JOINABLE_STATUSES: frozenset[str] = frozenset(
    {SESSION_STATUS_WAITING, SESSION_STATUS_READY}
)
SESSION_TERMINAL_STATUSES: frozenset[str] = frozenset(
    {SESSION_STATUS_ACTIVE, SESSION_STATUS_EXPIRED, SESSION_STATUS_CANCELLED}
)

SESSION_TTL_SECONDS = max(1, int(settings.session_ttl_seconds))

# Lobbies read per sweep, as a multiple of the batch size.
SESSION_EXPIRY_SCAN_FACTOR = 4
