"""Unit tests for ConversationLog."""

import pytest

from docuchat.models import Message, Sender
from docuchat.session import ConversationLog


def user(text: str) -> Message:
    return Message(sender=Sender.USER, content=text)


def placeholder() -> Message:
    return Message(sender=Sender.ASSISTANT, content="typing...", is_streaming=True)


class TestAppend:
    """Tests for appending messages."""

    def test_append_keeps_insertion_order(self) -> None:
        log = ConversationLog()
        log.append(user("one"))
        log.append(user("two"))

        assert [m.content for m in log] == ["one", "two"]

    def test_append_notifies_change(self) -> None:
        changes: list[int] = []
        log = ConversationLog(on_change=lambda: changes.append(len(log)))

        log.append(user("hi"))

        assert changes == [1]

    def test_second_streaming_message_rejected(self) -> None:
        log = ConversationLog()
        log.append(placeholder())

        with pytest.raises(ValueError, match="already streaming"):
            log.append(placeholder())

        assert len(log) == 1


class TestReplaceLast:
    """Tests for in-place updates of the streaming tail."""

    def test_replaces_streaming_tail(self) -> None:
        log = ConversationLog()
        slot = placeholder()
        log.append(slot)

        assert log.replace_last(slot.model_copy(update={"content": "He"})) is True
        assert log.last.content == "He"
        assert log.last.is_streaming is True

    def test_finalizes_streaming_tail(self) -> None:
        log = ConversationLog()
        slot = placeholder()
        log.append(slot)

        log.replace_last(slot.model_copy(update={"content": "Hello", "is_streaming": False}))

        assert log.streaming is None
        assert log.last.content == "Hello"

    def test_empty_log_is_noop(self) -> None:
        log = ConversationLog()

        assert log.replace_last(placeholder()) is False
        assert len(log) == 0

    def test_non_streaming_tail_is_noop(self) -> None:
        changes: list[None] = []
        log = ConversationLog(on_change=lambda: changes.append(None))
        log.append(user("done"))

        assert log.replace_last(user("changed")) is False
        assert log.last.content == "done"
        assert len(changes) == 1

    def test_other_slot_is_noop(self) -> None:
        log = ConversationLog()
        log.append(placeholder())

        stranger = placeholder()
        assert log.replace_last(stranger) is False
        assert log.last.id != stranger.id


class TestFileMarker:
    """Tests for dropping the file marker."""

    def test_drops_only_the_marker(self) -> None:
        log = ConversationLog()
        log.append(user("before"))
        log.append(Message(sender=Sender.FILE, content="notes.pdf"))
        log.append(user("after"))

        assert log.drop_file_marker() is True
        assert [m.content for m in log] == ["before", "after"]

    def test_no_marker_returns_false(self) -> None:
        log = ConversationLog()
        log.append(user("hi"))

        assert log.drop_file_marker() is False
        assert len(log) == 1


class TestRestoreAndClear:
    """Tests for startup restore and clearing."""

    def test_restore_drops_markers_and_finalizes_streaming(self) -> None:
        log = ConversationLog()
        log.restore(
            [
                user("hi"),
                Message(sender=Sender.FILE, content="old.pdf"),
                Message(sender=Sender.ASSISTANT, content="Hal", is_streaming=True),
            ]
        )

        assert [m.sender for m in log] == [Sender.USER, Sender.ASSISTANT]
        assert log.streaming is None
        assert log.last.content == "Hal"

    def test_clear_empties_and_calls_clear_hook(self) -> None:
        cleared: list[bool] = []
        changes: list[bool] = []
        log = ConversationLog(
            on_change=lambda: changes.append(True),
            on_clear=lambda: cleared.append(True),
        )
        log.append(user("hi"))

        log.clear()

        assert len(log) == 0
        assert cleared == [True]
        assert changes == [True]
