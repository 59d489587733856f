"""
Configuration loader
"""
import os
from pathlib import Path
from typing import Optional

import yaml

from tippy.models import Settings


CONFIG_ENV_VAR = "TIPPY_CONFIG"


def load_config(config_path: str = "config/tippy.yaml") -> Settings:
    """
    Load settings from YAML file

    Args:
        config_path: Path to config file

    Returns:
        Settings object

    Raises:
        FileNotFoundError: If config file not found
    """
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    # Ignore keys Settings does not know about
    allowed_fields = set(Settings.model_fields)
    filtered_data = {k: v for k, v in data.items() if k in allowed_fields}

    return Settings(**filtered_data)


def settings_from_env(environ: Optional[dict] = None) -> Settings:
    """Load settings from the file named by TIPPY_CONFIG, defaults if unset"""
    environ = os.environ if environ is None else environ
    config_path = environ.get(CONFIG_ENV_VAR)
    if not config_path:
        return Settings()
    return load_config(config_path)
