"""
Error taxonomy for the project tracker.

Every error carries the HTTP status it maps to; main.py turns them into
JSON responses of the form {"error": ..., "details": ...}.
"""
from typing import Optional


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class AuthenticationRequired(AppError):
    status_code = 401

    def __init__(self, message: str = "Authentication required", details: Optional[str] = None):
        super().__init__(message, details)


class AccessDenied(AppError):
    status_code = 403


class ValidationError(AppError):
    status_code = 400


class NotFound(AppError):
    status_code = 404


class UpstreamFailure(AppError):
    """A Sheets / Drive / SMTP call failed. `message` names the operation."""
    status_code = 500
