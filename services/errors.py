from __future__ import annotations


class ScienceFairError(Exception):
    """Base class for failures surfaced to the user as a notification."""

    title = "Error"
    status_code = 500


class StoreError(ScienceFairError):
    title = "Storage error"
    status_code = 502


class ProjectNotFoundError(StoreError, LookupError):
    title = "Project not found"
    status_code = 404


class AdvisorError(ScienceFairError):
    title = "AI assistant error"
    status_code = 502


class InputValidationError(ScienceFairError, ValueError):
    title = "Invalid input"
    status_code = 400


class AuthError(ScienceFairError):
    title = "Authentication failed"
    status_code = 401
