"""Client-side typing simulation for a finished completion.

The completion is already complete when it arrives; this module reveals it
one user-perceived character at a time into the streaming slot of the log.
"""

import asyncio
import logging
from collections.abc import Callable, Iterator

import regex

from docuchat.models import Message
from docuchat.session.conversation import ConversationLog

logger = logging.getLogger(__name__)

GRAPHEME = regex.compile(r"\X")


def iter_units(text: str) -> Iterator[str]:
    """Split text into display units that must never be shown half-typed.

    Units are Unicode extended grapheme clusters: combining marks, Hangul
    jamo, spacing marks, emoji ZWJ sequences, flag pairs, and CRLF stay whole.
    """
    for match in GRAPHEME.finditer(text):
        yield match.group()


def typing_steps(text: str) -> Iterator[str]:
    """Yield successively longer prefixes of ``text``, one unit at a time."""
    typed = ""
    for unit in iter_units(text):
        typed += unit
        yield typed


class CompletionStreamer:
    """Reveals a completion into the log's streaming slot.

    Not responsible for admission or cancellation: it only grows the one slot
    it was given and stops as soon as that slot is gone or ``should_continue``
    turns false.
    """

    def __init__(self, log: ConversationLog, delay: float = 0.025) -> None:
        self._log = log
        self._delay = delay

    async def stream(
        self,
        slot: Message,
        text: str,
        should_continue: Callable[[], bool] = lambda: True,
    ) -> bool:
        """Type ``text`` into ``slot`` and finalize it.

        Args:
            slot: The streaming placeholder already appended to the log.
            text: The final completion text.
            should_continue: Checked before every step; False stops the stream.

        Returns:
            True if the full text was revealed and the slot finalized.
        """
        for step, typed in enumerate(typing_steps(text)):
            if step:
                await asyncio.sleep(self._delay)
            if not should_continue():
                logger.debug(f"Stream into {slot.id} stopped after {step} steps")
                return False
            if not self._log.replace_last(slot.model_copy(update={"content": typed})):
                return False

        if not should_continue():
            return False
        return self._log.replace_last(
            slot.model_copy(update={"content": text, "is_streaming": False})
        )
