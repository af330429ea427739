"""Configuration and logging setup."""

import logging
import os

import yaml

DEFAULTS = {
    "sheet_size": 10000,
    "sheet_title": "Sheet1",
    "legacy_page_window": False,
    "log_level": "INFO",
}


def load_config(config_path=None):
    """Load configuration from a YAML file over :data:`DEFAULTS`."""
    config = dict(DEFAULTS)
    if config_path and os.path.exists(config_path):
        with open(config_path, "r") as f:
            user_config = yaml.safe_load(f) or {}
        if not isinstance(user_config, dict):
            raise ValueError(f"{config_path}: expected a mapping at top level")
        config.update(user_config)
    return config


def setup_logging(level_str: str = "INFO"):
    """Configure logging."""
    level = getattr(logging, str(level_str).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )
