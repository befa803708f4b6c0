from __future__ import annotations


class SettingsError(ValueError):
    """Raised when game settings are rejected at construction time."""


class InvalidSeed(SettingsError):
    pass


class SerializationError(RuntimeError):
    pass
