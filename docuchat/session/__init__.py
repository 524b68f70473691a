"""Conversation session core.

Components (leaf-first):
    - conversation: append-only message log with a persistence hook
    - attachments: the single pending document text and its generation counter
    - streamer: typing simulation over grapheme-safe units
    - controller: send state machine, epoch tagging, uploads, clearing

Everything here runs on one asyncio event loop; no locks are needed because
state only changes between await points.
"""

from docuchat.session.attachments import AttachmentManager
from docuchat.session.controller import EmptyResultError, SessionController, StaleEpochError
from docuchat.session.conversation import ConversationLog
from docuchat.session.streamer import CompletionStreamer, iter_units, typing_steps

__all__ = [
    "AttachmentManager",
    "CompletionStreamer",
    "ConversationLog",
    "EmptyResultError",
    "SessionController",
    "StaleEpochError",
    "iter_units",
    "typing_steps",
]
