"""Exceptions raised by secret sync operations."""


class SecretsSyncError(Exception):
    """Base exception for secret sync failures."""
    pass


class ConfigError(SecretsSyncError):
    """Configuration error exception."""
    pass


class MissingConfigError(ConfigError):
    """A setting required by the requested operation is absent."""
    pass


class InvalidFormatError(SecretsSyncError):
    """Secrets content does not decode to a mapping of names to values."""
    pass


class RemoteFetchError(SecretsSyncError):
    """Reading from the parameter store failed (not-found included)."""
    pass


class RemoteWriteError(SecretsSyncError):
    """Writing to or deleting from the parameter store failed."""

    def __init__(self, message: str, names=None):
        super().__init__(message)
        self.names = list(names or [])
