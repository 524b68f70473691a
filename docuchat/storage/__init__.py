"""Session snapshot persistence (load once at startup, save on every change)."""

from docuchat.storage.session_store import InMemorySessionStore, JsonSessionStore, SessionStore

__all__ = ["InMemorySessionStore", "JsonSessionStore", "SessionStore"]
