"""Client console: browser page (static/index.html) and a Python session."""
from tts_playground.console.session import (
    HISTORY_LIMIT,
    ConsoleError,
    ConsoleForm,
    ConsoleSession,
    HistoryEntry,
    format_usd,
)

__all__ = [
    "HISTORY_LIMIT",
    "ConsoleError",
    "ConsoleForm",
    "ConsoleSession",
    "HistoryEntry",
    "format_usd",
]
