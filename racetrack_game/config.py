import json
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from racetrack_game.engine.constants import DEFAULT_MAX_ROUNDS

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[1]
CONFIG_FILE_PATH = REPO_ROOT / 'configs' / 'race_config.json'

# Load environment variables from .env file
load_dotenv()


def load_config(path=CONFIG_FILE_PATH):
    """
    Loads the race config file. Returns None when it is missing or unreadable.
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except FileNotFoundError:
        logger.warning("Could not find config file at %s", path)
        return None
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not parse config file %s: %s", path, e)
        return None


# Load the config ONCE when the module is first imported
RACE_CONFIG = load_config()


def get_config(key_path, default=None):
    """
    Safely gets a value from the loaded config using a 'dot.path'.
    Example: get_config('cars.max_speed')
    """
    if not RACE_CONFIG:
        return default

    try:
        value = RACE_CONFIG
        for key in key_path.split('.'):
            value = value[key]
        return value
    except (KeyError, TypeError):
        logger.debug("Config key %s not set, using default %r", key_path, default)
        return default


def track_file_setting():
    """Track file path: RACETRACK_TRACK_FILE wins over the config file."""
    env_value = os.getenv('RACETRACK_TRACK_FILE')
    value = env_value or get_config('track.file')
    if not value:
        return None
    path = Path(value)
    return path if path.is_absolute() else REPO_ROOT / path


def max_rounds_setting(default=DEFAULT_MAX_ROUNDS):
    env_value = os.getenv('RACETRACK_MAX_ROUNDS')
    if env_value is not None:
        try:
            return int(env_value)
        except ValueError:
            logger.warning("Ignoring non-integer RACETRACK_MAX_ROUNDS=%r", env_value)
    return int(get_config('race.max_rounds', default))
