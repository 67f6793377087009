from __future__ import annotations

from typing import Final

from decouple import config


def _non_negative_float(name: str, default: float) -> float:
    """Return env var as a float, clamped at zero."""
    value = config(name, default=default, cast=float)
    return max(0.0, value)


ENVIRONMENT: Final[str] = config("ENVIRONMENT", default="production")
DEBUG: Final[bool] = ENVIRONMENT != "production"

SECRET_KEY: Final[str] = config("SECRET_KEY", default="super-secret-dev-key")

APP_VERSION: Final[str] = config("APP_VERSION", default="dev")

LOG_LEVEL: Final[str] = config("LOG_LEVEL", default="INFO").upper()

# --- Automated opponent pacing (seconds) ---
AI_TURN_DELAY: Final[float] = _non_negative_float("AI_TURN_DELAY", 1.0)
AI_FOLLOW_UP_DELAY: Final[float] = _non_negative_float("AI_FOLLOW_UP_DELAY", 1.5)

# --- Random placement ---
# 0 keeps retrying until a legal spot turns up.
PLACEMENT_MAX_ATTEMPTS: Final[int] = max(
    0, config("PLACEMENT_MAX_ATTEMPTS", default=0, cast=int)
)
