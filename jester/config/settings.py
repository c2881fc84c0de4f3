"""
Settings

Resolves Jester settings from defaults, the JSON config file and
command-line overrides, in that order.
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional

from jester.core.ollama_client import DEFAULT_ENDPOINT
from jester.services.config_service import ConfigService

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "JESTER_CONFIG"


@dataclass
class JesterSettings:
    """Effective settings for one CLI run."""
    endpoint: str = DEFAULT_ENDPOINT
    model: str = ""
    auto_apply: bool = False
    # Cosmetic pause between a finished stream and auto-apply
    apply_delay: float = 0.0
    timeout: float = 60


def default_config_path() -> Path:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return Path.home() / ".jester" / "config.json"


def load_settings(config_path: Optional[Path] = None, **overrides: Any) -> JesterSettings:
    """
    Build settings from the config file (if present) and overrides.

    Overrides whose value is None are ignored so argparse defaults can be
    passed straight through.

    Raises:
        ValueError: If the config file exists but is not valid JSON
    """
    service = ConfigService(config_path=config_path or default_config_path())
    settings = JesterSettings()

    if service.exists():
        service.load()
        for f in fields(JesterSettings):
            value = service.get(f.name)
            if value is not None:
                settings = replace(settings, **{f.name: value})
    else:
        logger.debug(f"No config file at {service.config_path}, using defaults")

    known = {f.name for f in fields(JesterSettings)}
    for key, value in overrides.items():
        if key not in known:
            raise TypeError(f"Unknown setting: {key}")
        if value is not None:
            settings = replace(settings, **{key: value})

    return settings


def validate_setting(key: str, value: Any) -> None:
    """
    Check that `value` fits the JesterSettings field named `key`.

    Raises:
        TypeError: Unknown key, or a value of the wrong type
    """
    defaults = JesterSettings()
    if key not in {f.name for f in fields(JesterSettings)}:
        raise TypeError(f"Unknown setting: {key}")

    expected = type(getattr(defaults, key))
    if expected is bool:
        ok = isinstance(value, bool)
    elif expected in (int, float):
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
    else:
        ok = isinstance(value, expected)
    if not ok:
        raise TypeError(f"{key} expects {expected.__name__}, got {type(value).__name__}")
