"""Remote text-to-speech backends."""
from .backend import RemoteSynthesisRequest, SpeechBackend

__all__ = ["RemoteSynthesisRequest", "SpeechBackend"]
