from typing import Optional


class VocaSRSError(Exception):
    """Base exception for vocasrs errors."""

    def __init__(
        self, message: str, original_exception: Optional[Exception] = None
    ):
        super().__init__(message)
        self.original_exception = original_exception


class InvalidQualityError(VocaSRSError, ValueError):
    """Raised when a review quality falls outside the 1-5 scale."""

    pass


class SettingsError(VocaSRSError):
    """Raised for invalid or unreadable scheduler settings."""

    pass


class CardNotFoundError(VocaSRSError, KeyError):
    """Raised when a card id is unknown to a store or a session."""

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return str(self.args[0]) if self.args else ""
