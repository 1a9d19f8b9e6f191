"""Core exception classes for the Crypto Sensei analysis engine."""


class AnalysisError(Exception):
    """Base exception for analysis operations."""

    pass


class APIError(AnalysisError):
    """Raised when external API operations fail."""

    pass


class UpstreamDataError(AnalysisError):
    """Raised when the historical series required for an analysis cannot be fetched."""

    pass


class DataValidationError(AnalysisError):
    """Raised when data validation fails."""

    pass


class InvalidPriceError(DataValidationError):
    """Raised when a current price is missing, non-positive or not finite."""

    pass


class RateLimitedError(APIError):
    """Raised when an upstream call is refused by a fail-fast throttle."""

    def __init__(self, message: str, retry_after: float):
        super().__init__(message)
        self.retry_after = retry_after
