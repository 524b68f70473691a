"""Pending document context for the next message.

At most one attachment exists. Each upload bumps a generation counter and
extraction results are accepted only for the generation that is still
current, so the latest upload wins regardless of which extraction finishes
first.
"""

import logging

from docuchat.models import Attachment

logger = logging.getLogger(__name__)


class AttachmentManager:
    """Tracks the single pending attachment and its consumption."""

    def __init__(self) -> None:
        self._attachment: Attachment | None = None
        self._generation = 0

    @property
    def current(self) -> Attachment | None:
        return self._attachment

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def pending(self) -> Attachment | None:
        """The attachment if it has not been consumed yet."""
        if self._attachment is None or self._attachment.consumed:
            return None
        return self._attachment

    def begin_upload(self, file_name: str) -> int:
        """Record a new upload before its text is known.

        Replaces any previous attachment outright.

        Returns:
            The generation token the extraction result must present.
        """
        self._generation += 1
        if self.pending is not None:
            logger.info(f"Replacing pending attachment {self._attachment.file_name!r}")
        self._attachment = Attachment(file_name=file_name, generation=self._generation)
        return self._generation

    def on_extracted(self, generation: int, text: str) -> bool:
        """Store extracted text if the upload is still the current one."""
        attachment = self.pending
        if attachment is None or generation != self._generation:
            logger.debug(f"Discarding extraction result for stale generation {generation}")
            return False
        self._attachment = attachment.model_copy(update={"extracted_text": text})
        return True

    def on_failed(self, generation: int) -> bool:
        """Drop the attachment whose extraction failed, if still current."""
        if self.pending is None or generation != self._generation:
            return False
        self._attachment = None
        return True

    def consume(self) -> Attachment | None:
        """Hand out the extracted text exactly once.

        Returns:
            The consumed attachment, or None when there is no unconsumed
            attachment with extracted text (extraction may still be running).
        """
        attachment = self.pending
        if attachment is None or attachment.extracted_text is None:
            return None
        self._attachment = attachment.model_copy(update={"consumed": True})
        return self._attachment

    def clear(self) -> None:
        """Forget any attachment; in-flight extractions become stale."""
        self._generation += 1
        self._attachment = None
