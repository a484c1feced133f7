"""Environment-driven settings, read once at import time."""

from __future__ import annotations

import os


def _env_flag(name: str, default: bool = True) -> bool:
    """Read a boolean-like flag from environment.

    Accepted falsy values: "0", "false", "off", "no" (case-insensitive).
    Anything else unrecognised (or unset) falls back to `default`.
    """

    raw = os.environ.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in {"0", "false", "off", "no"}:
        return False
    if value in {"1", "true", "on", "yes"}:
        return True
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def _env_str(name: str, default: str) -> str:
    raw = os.environ.get(name)
    return raw.strip() if raw and raw.strip() else default


APP_NAME = _env_str("BOOKING_APP_NAME", "Hotel Booking Service")
APP_VERSION = "1.0.0"
LOG_LEVEL = _env_str("BOOKING_LOG_LEVEL", "INFO").upper()

# Demo data
SEED_DEMO_DATA: bool = _env_flag("BOOKING_SEED_DEMO_DATA", default=True)
SEED_BOOKINGS: int = _env_int("BOOKING_SEED_BOOKINGS", 0)

# CONFIRMED -> COMPLETED sweep; 0 disables the background task
COMPLETION_SWEEP_SECONDS: int = _env_int("BOOKING_COMPLETION_SWEEP_SECONDS", 3600)

GRAPHIQL: bool = _env_flag("BOOKING_GRAPHIQL", default=True)
