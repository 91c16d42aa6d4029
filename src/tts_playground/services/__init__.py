"""
tts-playground Services Layer.

Business logic between the API layer and the remote backend.

Components:
    - synthesis_service.py: SynthesisService (validate, downgrade, forward, shape)
    - validators.py: Field-level request validation
"""
from tts_playground.core.errors import (
    ErrorCode,
    InvalidRequestError,
    PlaygroundError,
    RemoteError,
    RemoteUnavailableError,
    UnknownVoiceError,
)
from .synthesis_service import (
    SynthesisResult,
    SynthesisService,
    SynthesizeRequest,
)

__all__ = [
    "SynthesisService",
    "SynthesizeRequest",
    "SynthesisResult",
    "PlaygroundError",
    "InvalidRequestError",
    "UnknownVoiceError",
    "RemoteUnavailableError",
    "RemoteError",
    "ErrorCode",
]
