class BookieError(Exception):
    """Base exception for ledger and registry rejections."""

    reason = "error"

    def __init__(self, message: str, reason: str | None = None):
        super().__init__(message)
        if reason is not None:
            self.reason = reason


class NotFoundError(BookieError):
    """Referenced game or bet does not exist."""

    reason = "not_found"


class InvalidStateError(BookieError):
    """Operation not permitted from the record's current status."""

    reason = "invalid_state"


class InvalidBetError(BookieError):
    """Bet creation input is malformed."""

    reason = "invalid_bet"


class ConfigError(BookieError):
    """Configuration file could not be loaded."""

    reason = "config"
