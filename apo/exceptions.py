"""Exception types raised by apo."""

from typing import Optional


class ApoError(Exception):
    """Base exception for all apo errors."""


class ConfigError(ApoError):
    """Raised when configuration is missing, incomplete or unreadable."""


class ApiError(ApoError):
    """Raised when a request to the Azure DevOps REST API fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TerminalError(ApoError):
    """Raised when the terminal cannot be switched into or out of raw mode."""
