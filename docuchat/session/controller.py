"""Session controller: one conversation, one exchange at a time.

Owns the conversation log, the pending attachment, and the send state
machine::

    idle -> sending -> streaming -> idle
    idle -> sending -> failed -> idle

``send`` is a no-op unless the controller is idle; that is the only admission
control. Every exchange is tagged with an epoch when it starts. Clearing the
conversation advances the epoch, so whatever the interrupted exchange
resolves to later is discarded instead of written into the new log.

Snapshot writes are queued on a single writer thread so they keep their order
and never block the event loop.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from concurrent.futures import Future, ThreadPoolExecutor

from docuchat.agent.chat_agent import CompletionClient, ServiceError
from docuchat.config import SessionConfig, get_session_config
from docuchat.models import (
    Attachment,
    Message,
    Sender,
    SessionSnapshot,
    SessionState,
    ThemePreference,
)
from docuchat.parsing.pdf_parser import ExtractionError, extract_text
from docuchat.session.attachments import AttachmentManager
from docuchat.session.conversation import ConversationLog
from docuchat.session.streamer import CompletionStreamer
from docuchat.storage.session_store import SessionStore

logger = logging.getLogger(__name__)

Extractor = Callable[[bytes], Awaitable[str]]


class EmptyResultError(Exception):
    """The service answered but produced no usable text."""


class StaleEpochError(Exception):
    """An async result resolved after its exchange was superseded."""


class SessionController:
    """Orchestrates sends, uploads, streaming, and persistence for one conversation.

    Args:
        service: Generative text service with ``async complete(prompt) -> str``.
        store: Snapshot persistence (best-effort).
        config: Session behaviour. Loads from environment if not provided.
        extractor: Async ``bytes -> text`` document extractor.
    """

    def __init__(
        self,
        service: CompletionClient,
        store: SessionStore,
        config: SessionConfig | None = None,
        extractor: Extractor = extract_text,
    ) -> None:
        self._config = config or get_session_config()
        self._service = service
        self._store = store
        self._extractor = extractor

        self._log = ConversationLog(on_change=self._on_log_change, on_clear=self._on_log_clear)
        self._attachments = AttachmentManager()
        self._streamer = CompletionStreamer(self._log, delay=self._config.typing_delay)

        self._state = SessionState.IDLE
        self._epoch = 0
        self._theme = ThemePreference.LIGHT
        self._listeners: list[Callable[[], None]] = []
        self._loaded = False

        self._writer = ThreadPoolExecutor(max_workers=1, thread_name_prefix="docuchat-store")
        self._last_write: Future | None = None
        self._closed = False

    # --- read-only views ---

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def theme(self) -> ThemePreference:
        return self._theme

    @property
    def messages(self) -> list[Message]:
        return self._log.messages

    @property
    def attachment(self) -> Attachment | None:
        return self._attachments.current

    @property
    def is_idle(self) -> bool:
        return self._state is SessionState.IDLE

    # --- change notification and persistence ---

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register a change listener. Returns a function that unregisters it."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback()

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(log=self._log.messages, theme=self._theme)

    def _submit(self, write: Callable[[], None]) -> None:
        if self._closed:
            logger.debug("Store writer closed, skipping snapshot write")
            return
        self._last_write = self._writer.submit(write)

    def _save(self, snapshot: SessionSnapshot) -> None:
        try:
            self._store.save(self._config.storage_key, snapshot)
        except Exception as e:
            logger.warning(f"Session snapshot not saved: {e}")

    def _remove(self) -> None:
        try:
            self._store.remove(self._config.storage_key)
        except Exception as e:
            logger.warning(f"Session snapshot not removed: {e}")

    def _persist(self) -> None:
        snapshot = self.snapshot()
        self._submit(lambda: self._save(snapshot))

    def _on_log_change(self) -> None:
        self._persist()
        self._notify()

    def _on_log_clear(self) -> None:
        self._submit(self._remove)
        if self._theme is not ThemePreference.LIGHT:
            self._persist()
        self._notify()

    async def flush(self) -> None:
        """Wait until every queued snapshot write has reached the store."""
        if self._last_write is not None:
            await asyncio.wrap_future(self._last_write)

    def close(self) -> None:
        """Stop accepting writes. Queued writes still complete in the background."""
        self._closed = True
        self._writer.shutdown(wait=False)

    def load(self) -> None:
        """Restore the persisted snapshot. Only the first call has an effect."""
        if self._loaded:
            return
        self._loaded = True

        try:
            snapshot = self._store.load(self._config.storage_key)
        except Exception as e:
            logger.warning(f"Session snapshot not loaded: {e}")
            snapshot = None

        if snapshot is not None:
            self._log.restore(snapshot.log)
            self._theme = snapshot.theme
        self._notify()

    def toggle_theme(self) -> ThemePreference:
        self._theme = self._theme.toggled()
        self._persist()
        self._notify()
        return self._theme

    # --- state machine helpers ---

    def _transition(self, state: SessionState) -> None:
        logger.debug(f"Session {self._state.value} -> {state.value} (epoch {self._epoch})")
        self._state = state
        if state is SessionState.IDLE:
            self._sync_file_marker()
        self._notify()

    def _check_epoch(self, epoch: int) -> None:
        if epoch != self._epoch:
            raise StaleEpochError(f"Exchange {epoch} superseded by {self._epoch}")

    def _sync_file_marker(self) -> None:
        """Show the pending attachment's marker, unless an exchange is in flight.

        Appending during an exchange would push the streaming slot off the tail,
        so the marker waits until the controller is idle again.
        """
        attachment = self._attachments.pending
        if attachment is None or not self.is_idle or self._log.file_marker is not None:
            return
        self._log.append(Message(sender=Sender.FILE, content=attachment.file_name))

    def _finish_placeholder(self, placeholder: Message, content: str) -> None:
        self._log.replace_last(
            placeholder.model_copy(update={"content": content, "is_streaming": False})
        )

    def _build_prompt(self, text: str) -> str:
        attachment = self._attachments.consume()
        if attachment is None:
            return text

        self._log.drop_file_marker()
        logger.info(f"Attaching {attachment.file_name!r} to prompt")
        return f"{text}\n\n{self._config.context_header}\n{attachment.extracted_text}"

    # --- user actions ---

    async def send(self, user_text: str) -> bool:
        """Send a message and reveal the reply.

        Returns:
            True if the send was admitted, False if it was ignored (blank text
            or an exchange already in flight).
        """
        text = user_text.strip()
        if not text:
            logger.debug("Ignoring blank message")
            return False
        if not self.is_idle:
            logger.info(f"Send ignored while {self._state.value}")
            return False

        self._epoch += 1
        epoch = self._epoch

        prompt = self._build_prompt(text)
        self._log.append(Message(sender=Sender.USER, content=text))
        placeholder = Message(
            sender=Sender.ASSISTANT,
            content=self._config.typing_indicator_for(self._theme),
            is_streaming=True,
        )
        self._log.append(placeholder)
        self._transition(SessionState.SENDING)

        try:
            await self._exchange(epoch, prompt, placeholder)
        except StaleEpochError as e:
            logger.debug(f"Discarding late result: {e}")
        except Exception as e:
            if epoch != self._epoch:
                logger.debug(f"Discarding late failure of exchange {epoch}: {e!r}")
                return True
            self._finish_placeholder(placeholder, self._config.error_notice)
            self._transition(SessionState.IDLE)
            raise
        return True

    async def _exchange(self, epoch: int, prompt: str, placeholder: Message) -> None:
        try:
            completion = await self._service.complete(prompt)
        except ServiceError as e:
            self._check_epoch(epoch)
            logger.warning(f"Completion failed: {e}")
            self._transition(SessionState.FAILED)
            self._finish_placeholder(placeholder, self._config.error_notice)
            self._transition(SessionState.IDLE)
            return

        self._check_epoch(epoch)
        try:
            self._check_completion(completion)
        except EmptyResultError as e:
            logger.info(f"Showing fallback notice: {e}")
            self._finish_placeholder(placeholder, self._config.fallback_notice)
            self._transition(SessionState.IDLE)
            return

        self._transition(SessionState.STREAMING)
        completed = await self._streamer.stream(
            placeholder,
            completion,
            should_continue=lambda: epoch == self._epoch,
        )
        self._check_epoch(epoch)
        if not completed:
            logger.warning(f"Stream into {placeholder.id} ended early")
        self._transition(SessionState.IDLE)

    @staticmethod
    def _check_completion(completion: object) -> None:
        if not isinstance(completion, str) or not completion.strip():
            raise EmptyResultError("completion was empty")

    async def upload(self, file_name: str, data: bytes) -> bool:
        """Attach a document's text to the next message.

        The file marker appears right away; the text arrives when extraction
        finishes. A newer upload or a cleared conversation makes this
        extraction's result stale.

        Returns:
            True if the extracted text became the pending attachment.
        """
        generation = self._attachments.begin_upload(file_name)
        self._log.drop_file_marker()
        self._sync_file_marker()
        self._notify()

        try:
            text = await self._extractor(data)
        except ExtractionError as e:
            logger.warning(f"Extraction failed for {file_name!r}: {e}")
            if self._attachments.on_failed(generation):
                self._log.drop_file_marker()
                self._notify()
            return False

        if not self._attachments.on_extracted(generation, text):
            logger.debug(f"Extraction of {file_name!r} superseded")
            return False

        logger.info(f"Attachment {file_name!r} ready ({len(text)} characters)")
        self._notify()
        return True

    def clear_conversation(self) -> None:
        """Wipe log and attachment and return to idle, even mid-exchange."""
        self._epoch += 1
        self._attachments.clear()
        self._log.clear()
        self._transition(SessionState.IDLE)
        logger.info("Conversation cleared")
