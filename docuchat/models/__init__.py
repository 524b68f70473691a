"""Pydantic models for conversation state.

Provides type safety, validation, and JSON serialization for persistence.

Models:
    - Message: Individual entry in the conversation log
    - Attachment: Text extracted from one uploaded document
    - SessionSnapshot: Persisted conversation log and theme preference
"""

import uuid

from pydantic import BaseModel, Field

from docuchat.models.schemas import Sender, SessionState, ThemePreference


class Message(BaseModel):
    """A single message in the conversation log.

    Attributes:
        id: Stable identifier, used to address the streaming slot.
        sender: Who produced the message (user, assistant, or file marker).
        content: The message text (file name for file markers).
        is_streaming: Whether the content is still being revealed.
    """

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, description="Message identifier")
    sender: Sender = Field(..., description="Message sender: 'user', 'assistant', or 'file'")
    content: str = Field(..., description="The message content")
    is_streaming: bool = Field(False, description="True while the content is being typed out")


class Attachment(BaseModel):
    """Text extracted from an uploaded document, pending use in the next prompt.

    Attributes:
        file_name: Original file name of the upload.
        extracted_text: Page-ordered text, None while extraction is running.
        consumed: Whether a send already incorporated the text.
        generation: Upload generation this attachment belongs to.
    """

    file_name: str = Field(..., min_length=1)
    extracted_text: str | None = None
    consumed: bool = False
    generation: int = Field(..., ge=1)


class SessionSnapshot(BaseModel):
    """Persisted session state, written after every log mutation.

    Attributes:
        log: The full conversation log in display order.
        theme: Light/dark preference of the chat page.
    """

    log: list[Message] = Field(default_factory=list)
    theme: ThemePreference = ThemePreference.LIGHT


__all__ = [
    "Attachment",
    "Message",
    "Sender",
    "SessionSnapshot",
    "SessionState",
    "ThemePreference",
]
