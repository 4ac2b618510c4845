import json
import logging
import os
import tempfile
from datetime import date, timedelta

from chat_config import DATA_DIR

logger = logging.getLogger(__name__)

STATE_FILENAME = "state.json"


def ensure_base_dir(base_dir: str = DATA_DIR) -> None:
    """Ensure that the base data directory exists."""
    os.makedirs(base_dir, exist_ok=True)


def load_json(path: str, default):
    """Load JSON from a file, returning default on error or if the file does not exist."""
    if not os.path.exists(path):
        return default
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read {path}, using defaults: {e}")
        return default


def save_json(path: str, data) -> None:
    """Atomically save JSON to a file, creating parent directories if necessary."""
    parent = os.path.dirname(path) or "."
    os.makedirs(parent, exist_ok=True)

    fd, tmp = tempfile.mkstemp(prefix=".tmp_state_", dir=parent, text=True)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    os.replace(tmp, path)


def today_str(today: date | None = None) -> str:
    """Return today's date as an ISO string (YYYY-MM-DD)."""
    return (today or date.today()).isoformat()


def yesterday_str(today: date | None = None) -> str:
    """Return yesterday's date as an ISO string (YYYY-MM-DD)."""
    return ((today or date.today()) - timedelta(days=1)).isoformat()


def get_user_dir(user_id: str, base_dir: str = DATA_DIR) -> str:
    """Return the directory for a given user, creating it if necessary."""
    directory = os.path.join(base_dir, user_id)
    os.makedirs(directory, exist_ok=True)
    return directory


def get_state_path(user_id: str, base_dir: str = DATA_DIR) -> str:
    """Return the path of the user's persisted state file."""
    return os.path.join(get_user_dir(user_id, base_dir), STATE_FILENAME)
