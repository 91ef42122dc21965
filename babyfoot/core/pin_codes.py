from __future__ import annotations

import re
import secrets
from urllib.parse import urlencode

LETTERS = "ABCDEFGHJKLMNPQRSTUVWXYZ"
DIGITS = "0123456789"
SEPARATOR = "-"
PIN_CODE_RE = re.compile(r"^[A-Z]{3}-[0-9]{3}$")
_NON_ALNUM_RE = re.compile(r"[^A-Za-z0-9]")


def generate_pin_code() -> str:
    """Generates a join code like ``ABC-123`` without the ambiguous I and O."""
    letters = "".join(secrets.choice(LETTERS) for _ in range(3))
    digits = "".join(secrets.choice(DIGITS) for _ in range(3))
    return f"{letters}{SEPARATOR}{digits}"


def validate_pin_code(code: str) -> bool:
    if not isinstance(code, str):
        return False
    return PIN_CODE_RE.match(code.upper()) is not None


def format_pin_code(raw_input: str) -> str:
    """Normalizes keystrokes into canonical form, e.g. ``abc 12 3`` -> ``ABC-123``.

    Inputs shorter than six alphanumerics are returned cleaned and uppercased
    without a separator so partial codes can be echoed back while typing.
    """
    cleaned = _NON_ALNUM_RE.sub("", raw_input or "").upper()
    if len(cleaned) >= 6:
        return f"{cleaned[:3]}{SEPARATOR}{cleaned[3:6]}"
    return cleaned


def canonical_pin_code(raw_input: str) -> str | None:
    formatted = format_pin_code(raw_input)
    if not validate_pin_code(formatted):
        return None
    return formatted


def build_join_link(*, base_url: str, session_id: str, pin_code: str) -> str:
    query = urlencode({"code": pin_code, "session": session_id})
    return f"{base_url.rstrip('/')}/game/join?{query}"
