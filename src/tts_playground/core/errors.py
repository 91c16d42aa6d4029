"""
Error Codes and Exceptions.

Every failure the service reports to a caller is a PlaygroundError
subclass. Each carries a machine-readable code, the HTTP status the API
maps it to, and optional structured details.

Taxonomy:
    InvalidRequestError     INVALID_REQUEST     400  schema/range violation
    UnknownVoiceError       UNKNOWN_VOICE       400  voice not in directory
    RemoteUnavailableError  REMOTE_UNAVAILABLE  500  voice listing failed
    RemoteError             REMOTE_ERROR        500  synthesis failed / no audio

None of these are retried.

Response Format:
    {
        "ok": false,
        "error": "Unknown voiceName. Fetch /api/voices and pick one from the list.",
        "code": "UNKNOWN_VOICE",
        "details": {...}
    }
"""
from __future__ import annotations

from typing import Any, Dict


class ErrorCode:
    """Standardized error codes for API responses."""
    INVALID_REQUEST = "INVALID_REQUEST"
    UNKNOWN_VOICE = "UNKNOWN_VOICE"
    REMOTE_UNAVAILABLE = "REMOTE_UNAVAILABLE"
    REMOTE_ERROR = "REMOTE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class PlaygroundError(Exception):
    """
    Base exception for service errors.

    Attributes:
        message: Human-readable error message.
        code: Error code from ErrorCode.
        details: Optional structured context (per-field errors, remote message).
        status_code: HTTP status used by the API layer.
    """
    status_code = 500

    def __init__(self, message: str, code: str = ErrorCode.INTERNAL_ERROR, details: Any = None):
        self.message = message
        self.code = code
        self.details = details
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON error body returned by the API."""
        return {
            "ok": False,
            "error": self.message,
            "code": self.code,
            "details": self.details,
        }


class InvalidRequestError(PlaygroundError):
    """Raised when a synthesis request fails validation."""
    status_code = 400

    def __init__(self, message: str = "Bad request", details: Any = None):
        super().__init__(message, ErrorCode.INVALID_REQUEST, details)


class UnknownVoiceError(PlaygroundError):
    """Raised when the requested voice is not in the current directory."""
    status_code = 400

    def __init__(self, voice_name: str):
        super().__init__(
            "Unknown voiceName. Fetch /api/voices and pick one from the list.",
            ErrorCode.UNKNOWN_VOICE,
            {"voiceName": voice_name},
        )
        self.voice_name = voice_name


class RemoteUnavailableError(PlaygroundError):
    """Raised when the remote voice listing cannot be fetched."""
    status_code = 500

    def __init__(self, message: str = "Failed to list voices", details: Any = None):
        super().__init__(message, ErrorCode.REMOTE_UNAVAILABLE, details)


class RemoteError(PlaygroundError):
    """Raised when remote synthesis fails or returns no audio."""
    status_code = 500

    def __init__(self, message: str, details: Any = None):
        super().__init__(message, ErrorCode.REMOTE_ERROR, details)
