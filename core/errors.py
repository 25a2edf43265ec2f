"""
Configuration errors raised while composing the backend at startup.

All of them are fatal: they propagate out of the boot sequence so the
service never starts serving traffic with an inconsistent configuration.
An absent signal is never an error; it simply turns a feature off.
"""

from typing import Iterable


class ConfigurationError(ValueError):
    """Base class for every composition-time failure."""


class MalformedSignalError(ConfigurationError):
    """
    A signal is present but does not have a permitted shape.

    The offending value is never included in the message, since many
    signals are credentials.
    """

    def __init__(self, signal: str, reason: str):
        self.signal = signal
        self.reason = reason
        super().__init__(f"Malformed value for {signal}: {reason}")


class MissingRequiredSettingError(ConfigurationError):
    """One or more required core settings are absent (strict boot mode)."""

    def __init__(self, fields: Iterable[str]):
        self.fields = tuple(fields)
        super().__init__(
            "Missing required settings: " + ", ".join(self.fields)
        )


class CompositionError(ConfigurationError):
    """The composed module graph violates a structural invariant."""
