"""
Layout service settings, read from a YAML file and merged over defaults.

The file location comes from the ``BRACKET_LAYOUT_CONFIG`` environment
variable, falling back to ``layout_settings.yaml`` at the repository root.
"""
import copy
import logging
import os

import yaml

from bracket_layout.constants import DEFAULT_CACHE_CAPACITY, MAX_SCALE_FACTOR, MIN_SCALE_FACTOR

BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
SETTINGS_ENV_VAR = 'BRACKET_LAYOUT_CONFIG'
DEFAULT_SETTINGS_FILE = os.path.join(BASE_DIR, 'layout_settings.yaml')

logger = logging.getLogger(__name__)

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class SettingsError(ValueError):
    """The settings file exists but cannot be used."""


def get_default_settings() -> dict:
    """Return default settings."""
    return {
        'cache_capacity': DEFAULT_CACHE_CAPACITY,
        'min_scale': MIN_SCALE_FACTOR,
        'default_container': {
            'width': 1280,
            'height': 720,
        },
        'log_level': 'INFO',
    }


def settings_path() -> str:
    return os.environ.get(SETTINGS_ENV_VAR, DEFAULT_SETTINGS_FILE)


def _check(settings: dict, path: str) -> dict:
    capacity = settings['cache_capacity']
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
        raise SettingsError(f'{path}: cache_capacity must be a positive integer, got {capacity!r}')

    min_scale = settings['min_scale']
    if isinstance(min_scale, bool) or not isinstance(min_scale, (int, float)):
        raise SettingsError(f'{path}: min_scale must be a number, got {min_scale!r}')
    if not MIN_SCALE_FACTOR <= min_scale <= MAX_SCALE_FACTOR:
        raise SettingsError(f'{path}: min_scale must be between {MIN_SCALE_FACTOR} and {MAX_SCALE_FACTOR}')

    container = settings['default_container']
    if not isinstance(container, dict):
        raise SettingsError(f'{path}: default_container must be a mapping with width and height')
    for key in ('width', 'height'):
        value = container.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise SettingsError(f'{path}: default_container.{key} must be a positive number, got {value!r}')

    level = str(settings['log_level']).upper()
    if level not in LOG_LEVELS:
        raise SettingsError(f'{path}: log_level must be one of {", ".join(LOG_LEVELS)}')
    settings['log_level'] = level
    return settings


def load_settings(path: str = None) -> dict:
    """Load settings from YAML file, merging with defaults."""
    path = path or settings_path()
    settings = get_default_settings()
    if not os.path.exists(path):
        return settings

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SettingsError(f'Failed to parse {path}: {e}') from e

    if not data:
        return settings
    if not isinstance(data, dict):
        raise SettingsError(f'{path}: expected a mapping at the top level')

    for key, value in data.items():
        if key not in settings:
            logger.warning(f'Ignoring unknown setting {key!r} in {path}')
            continue
        if key == 'default_container' and isinstance(value, dict):
            merged = copy.deepcopy(settings[key])
            merged.update(value)
            value = merged
        settings[key] = value

    return _check(settings, path)


def configure_logging(level: str = 'INFO') -> None:
    """Route library logging to stderr at ``level``."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
