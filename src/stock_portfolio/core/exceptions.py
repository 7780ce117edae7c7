"""Custom exceptions for the stock portfolio tracker."""

from typing import Optional


class PortfolioTrackerError(Exception):
    """Base exception."""
    pass


class ValidationError(PortfolioTrackerError):
    """Form input is missing or malformed.

    ``errors`` maps each offending field name to a short message.
    """

    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        detail = "; ".join(f"{k}: {v}" for k, v in self.errors.items())
        super().__init__(f"Invalid input — {detail}")


class DuplicateIdentityError(PortfolioTrackerError):
    def __init__(self, identity: str):
        self.identity = identity
        super().__init__(f"A holding with identity '{identity}' already exists")


class HoldingNotFoundError(PortfolioTrackerError):
    def __init__(self, identity: str):
        self.identity = identity
        super().__init__(f"Holding '{identity}' not found")


NotFoundError = HoldingNotFoundError


class ImportShapeError(PortfolioTrackerError):
    """Imported data is not an array of well-formed holding records."""

    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        if index is not None:
            message = f"record {index}: {message}"
        super().__init__(message)


class FormStateError(PortfolioTrackerError):
    pass


class RefreshInProgressError(PortfolioTrackerError):
    pass


class PriceFetchError(PortfolioTrackerError):
    pass


class ConfigError(PortfolioTrackerError):
    pass
