"""Settings error types."""


class SettingsError(Exception):
    """Base class for settings errors."""


class InvalidSettingKey(SettingsError, ValueError):
    """Setting key does not match the allowed pattern."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Invalid setting key: {key}")


class SettingsStoreError(SettingsError):
    """Backing store failed to read or write settings."""
