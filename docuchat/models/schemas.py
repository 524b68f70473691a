from enum import Enum


class Sender(str, Enum):
    """Who produced a message in the conversation log."""

    USER = "user"
    ASSISTANT = "assistant"
    FILE = "file"


class SessionState(str, Enum):
    """Lifecycle of a single send cycle in the session controller."""

    IDLE = "idle"
    SENDING = "sending"
    STREAMING = "streaming"
    FAILED = "failed"


class ThemePreference(str, Enum):
    """Persisted light/dark preference of the chat page."""

    LIGHT = "light"
    DARK = "dark"

    def toggled(self) -> "ThemePreference":
        return ThemePreference.DARK if self is ThemePreference.LIGHT else ThemePreference.LIGHT
