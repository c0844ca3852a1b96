"""Error taxonomy shared by the game engine and the score service."""

from typing import List


class TypeSpeedError(Exception):
    """Base class for every error raised by this package."""


class UserInputError(TypeSpeedError):
    """A typed answer failed validation. Recoverable: the round goes on."""

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason
        self.message = message


class ValidationError(TypeSpeedError):
    """A score submission broke one or more rules. Nothing was persisted."""

    def __init__(self, errors: List[str]):
        super().__init__('Validation failed')
        self.errors = list(errors)


class TransportError(TypeSpeedError):
    """A call to the remote score service failed."""


class StorageError(TypeSpeedError):
    """A query against the score table failed."""
