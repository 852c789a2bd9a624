"""Exceptions raised by the sound alert engine."""

PERMISSION_MESSAGE = (
    "Microphone access is required for sound detection. "
    "Please allow microphone access and try again."
)


class SoundAlertError(Exception):
    """Base class for all engine errors."""


class AccessDenied(SoundAlertError):
    """Audio capture access was refused. Recoverable by retrying start()."""

    def __init__(self, message: str = PERMISSION_MESSAGE):
        super().__init__(message)
        self.message = message


class CaptureContractError(SoundAlertError, ValueError):
    """The capture source returned malformed frequency data."""
