"""Custom exception classes for the News API.

This module defines application-specific exceptions following Google Python
Style Guide.
"""


class NewsApiError(Exception):
    """Base exception for all News API errors."""

    pass


class ConfigurationError(NewsApiError):
    """Raised when there is a configuration error."""

    pass


class InvalidTokenError(NewsApiError):
    """Raised when a session token cannot be parsed."""

    def __init__(self, reason: str = "Invalid token"):
        """Initialize the exception.

        Args:
            reason: Human readable description of the problem.
        """
        self.reason = reason
        super().__init__(reason)
