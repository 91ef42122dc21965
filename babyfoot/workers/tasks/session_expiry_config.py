from __future__ import annotations

from babyfoot.core.config import get_settings

settings = get_settings()

EXPIRY_BATCH_SIZE = max(1, int(settings.session_expiry_batch_size))
SCAN_INTERVAL_SECONDS = max(10, int(settings.session_expiry_scan_interval_seconds))

__all__ = ["EXPIRY_BATCH_SIZE", "SCAN_INTERVAL_SECONDS"]
