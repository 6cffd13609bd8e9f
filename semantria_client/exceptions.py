"""
Custom exceptions for the Semantria client library.
"""

from typing import Optional


class SemantriaClientError(Exception):
    """Base exception for Semantria client errors."""
    pass


class ConfigurationError(SemantriaClientError):
    """Raised when client configuration is invalid or incomplete."""
    pass


class CredentialExchangeError(SemantriaClientError):
    """Raised when the login or session refresh exchange fails."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


class TransportError(SemantriaClientError):
    """Raised when an HTTP request could not be completed."""
    pass


class ApiError(SemantriaClientError):
    """Raised when the API answers with an unexpected status code."""

    def __init__(self, message: str, status: int):
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self):
        return f"{self.status}: {self.message}"
