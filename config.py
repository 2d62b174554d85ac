"""Configuration settings for PUSHIN'."""

import logging
import os
import sys
from pathlib import Path
from dotenv import load_dotenv


def get_user_data_dir() -> Path:
    """
    Get the directory for user-writable data (blocklist settings).

    Honours the PUSHIN_DATA_DIR environment variable, otherwise uses a
    per-platform application folder in the user's home directory.

    Returns:
        Path to the user data directory (not created here).
    """
    override = os.getenv("PUSHIN_DATA_DIR")
    if override:
        return Path(override).expanduser()

    if sys.platform == 'darwin':
        # macOS: ~/Library/Application Support/Pushin
        return Path.home() / "Library" / "Application Support" / "Pushin"
    elif sys.platform == 'win32':
        appdata = os.environ.get('APPDATA')
        if appdata:
            return Path(appdata) / "Pushin"
        return Path.home() / "AppData" / "Roaming" / "Pushin"
    # Linux: ~/.local/share/Pushin
    return Path.home() / ".local" / "share" / "Pushin"


def _get_int(env_var: str, default: int) -> int:
    """
    Read a non-negative integer setting from the environment.

    Args:
        env_var: Environment variable name.
        default: Value used when the variable is unset or malformed.

    Returns:
        Parsed integer value.
    """
    raw = os.getenv(env_var, "")
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logging.getLogger(__name__).warning(
            f"{env_var}={raw!r} is not an integer, using {default}"
        )
        return default
    return max(0, value)


def _get_float(env_var: str, default: float) -> float:
    """Read a positive float setting from the environment."""
    raw = os.getenv(env_var, "")
    try:
        value = float(raw) if raw else default
    except ValueError:
        return default
    return value if value > 0 else default


# Load environment variables from the project .env file
# regardless of the current working directory
_env_path = Path(__file__).parent / ".env"
load_dotenv(_env_path)

# User data directory (for writable data like blocklist settings)
USER_DATA_DIR = get_user_data_dir()

# Blocked app list persistence (static configuration, not session state)
BLOCKLIST_FILE = Path(os.getenv("PUSHIN_BLOCKLIST_FILE", str(USER_DATA_DIR / "blocklist.json")))

# Access controller settings
# Seconds that targets stay blocked in EXPIRED before the full re-lock
GRACE_PERIOD_SECONDS = _get_int("GRACE_PERIOD_SECONDS", 30)  # Free plan default

# Cadence of the engine's periodic tick
TICK_INTERVAL_SECONDS = _get_float("TICK_INTERVAL_SECONDS", 1.0)

# Plan tiers and daily unlock caps (seconds, None = unlimited)
PLAN_FREE = "free"
PLAN_PRO = "pro"
PLAN_ADVANCED = "advanced"
DAILY_CAP_SECONDS = {
    PLAN_FREE: 3600,       # 1 hour
    PLAN_PRO: 10800,       # 3 hours
    PLAN_ADVANCED: None,   # Unlimited
}
PLAN_TIER = os.getenv("PLAN_TIER", PLAN_FREE).lower()

# Reward settings
BASE_SECONDS_PER_REP = 30  # 20 push-ups = 10 minutes

# Workout history
HISTORY_RETENTION_DAYS = 90
RECENT_WORKOUTS_LIMIT = 10

# Unlock session reasons
UNLOCK_REASON_WORKOUT = "workout_completed"

# Forced lock reasons reported through engine alerts
LOCK_REASON_MANUAL = "manual"
LOCK_REASON_DAILY_CAP = "daily_cap_reached"

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")  # Can override in .env: DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
