"""Seed script for site settings."""

import logging
import sys

import yaml

from trustypcs.config import app_settings
from trustypcs.core.errors import SettingsError
from trustypcs.core.settings_store import SettingsStore, create_settings_store

logger = logging.getLogger(__name__)


def load_settings_file(yaml_file: str) -> dict:
    """Read the `settings:` mapping from a YAML file."""
    with open(yaml_file, "r") as f:
        data = yaml.safe_load(f) or {}

    settings_data = data.get("settings", {}) if isinstance(data, dict) else None
    if not isinstance(settings_data, dict):
        raise SettingsError(f"{yaml_file}: 'settings' must be a mapping")
    return settings_data


def seed_settings(store: SettingsStore, yaml_file: str) -> dict:
    """Apply settings from a YAML file as one batch."""
    settings_data = load_settings_file(yaml_file)
    if not settings_data:
        print("No settings found in YAML file")
        return {}

    applied = store.update_settings(settings_data)
    print(f"Successfully seeded {len(applied)} settings")
    return applied


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python -m trustypcs.seed settings.yaml")
        sys.exit(1)
    logging.basicConfig(level=app_settings.log_level.upper())
    try:
        seed_settings(create_settings_store(app_settings.settings_store), sys.argv[1])
    except (OSError, SettingsError) as e:
        print(f"Error seeding settings: {e}")
        sys.exit(1)
