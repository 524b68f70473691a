"""Append-only conversation log.

Insertion order is display order. The only in-place edit is replacing the
streaming assistant message at the tail; the only single-message removal is
dropping the file marker once its attachment is consumed or abandoned.
"""

import logging
from collections.abc import Callable, Iterator

from docuchat.models import Message, Sender

logger = logging.getLogger(__name__)


class ConversationLog:
    """Ordered message history with a change hook.

    Args:
        on_change: Called after every mutation (persistence, UI refresh).
        on_clear: Called after ``clear`` instead of ``on_change``.
    """

    def __init__(
        self,
        on_change: Callable[[], None] | None = None,
        on_clear: Callable[[], None] | None = None,
    ) -> None:
        self._messages: list[Message] = []
        self._on_change = on_change
        self._on_clear = on_clear

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(list(self._messages))

    @property
    def messages(self) -> list[Message]:
        """Copy of the log in display order."""
        return list(self._messages)

    @property
    def last(self) -> Message | None:
        return self._messages[-1] if self._messages else None

    @property
    def streaming(self) -> Message | None:
        """The message currently being typed out, if any."""
        return next((m for m in self._messages if m.is_streaming), None)

    @property
    def file_marker(self) -> Message | None:
        return next((m for m in self._messages if m.sender is Sender.FILE), None)

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def append(self, message: Message) -> None:
        """Add a message to the end of the log.

        Raises:
            ValueError: If the message streams while another one already does.
        """
        if message.is_streaming and self.streaming is not None:
            raise ValueError("Another message is already streaming")
        self._messages.append(message)
        self._changed()

    def replace_last(self, message: Message) -> bool:
        """Swap the streaming tail message for an updated copy.

        The replacement must carry the same id. Passing ``is_streaming=False``
        finalizes the message.

        Returns:
            False (and leaves the log untouched) if there is no streaming tail
            with that id.
        """
        last = self.last
        if last is None:
            logger.warning("replace_last on an empty log ignored")
            return False
        if not last.is_streaming:
            logger.warning("replace_last ignored: last message is not streaming")
            return False
        if last.id != message.id:
            logger.warning(f"replace_last ignored: slot {message.id} is no longer last")
            return False

        self._messages[-1] = message
        self._changed()
        return True

    def drop_file_marker(self) -> bool:
        """Remove the file-marker message. Returns whether one was removed."""
        marker = self.file_marker
        if marker is None:
            return False
        self._messages.remove(marker)
        self._changed()
        return True

    def restore(self, messages: list[Message]) -> None:
        """Load a persisted log at startup.

        File markers are dropped because attachment text is never persisted,
        and any message saved mid-stream is finalized as-is.
        """
        restored = [
            m.model_copy(update={"is_streaming": False}) if m.is_streaming else m
            for m in messages
            if m.sender is not Sender.FILE
        ]
        self._messages = restored
        logger.info(f"Restored {len(restored)} messages")

    def clear(self) -> None:
        """Empty the log and erase its persisted copy."""
        self._messages.clear()
        if self._on_clear is not None:
            self._on_clear()
        else:
            self._changed()
