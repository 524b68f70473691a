"""NiceGUI chat page bound to a SessionController."""

import logging

from nicegui import events, ui

from docuchat.agent import get_completion_service
from docuchat.config import get_session_config
from docuchat.models import Message, Sender, ThemePreference
from docuchat.session import SessionController
from docuchat.storage import JsonSessionStore

logger = logging.getLogger(__name__)

CUSTOM_CSS = """
<style>
    .message-user {
        background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
        color: white;
        border-radius: 18px 18px 4px 18px;
    }
    .message-assistant {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }
    .message-file {
        background: #fef3c7;
        color: #78350f;
        border-radius: 10px;
    }
    .body--dark .message-assistant { background: #1f2937; color: #f3f4f6; }
    .body--dark .message-file { background: #3f2d0c; color: #fde68a; }
</style>
"""


def create_controller() -> SessionController:
    """Build a controller for one page visit and restore the saved conversation."""
    config = get_session_config()
    controller = SessionController(
        service=get_completion_service(),
        store=JsonSessionStore(config.storage_dir),
        config=config,
    )
    controller.load()
    return controller


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    controller = create_controller()
    dark = ui.dark_mode(controller.theme is ThemePreference.DARK)

    messages_container: ui.column
    input_field: ui.input
    send_btn: ui.button
    rendered_ids: list[str] = []
    tail: dict[str, ui.markdown] = {}

    def render_message(msg: Message) -> None:
        if msg.sender is Sender.FILE:
            with ui.row().classes("w-full justify-center"):
                ui.label(f"File Uploaded: {msg.content}").classes("message-file px-4 py-2 text-sm")
            return

        is_user = msg.sender is Sender.USER
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"
        with ui.row().classes(f"w-full {align}"):
            with ui.element("div").classes(f"max-w-[70%] px-4 py-3 {bubble}"):
                if is_user:
                    ui.label(msg.content).classes("text-sm whitespace-pre-wrap")
                else:
                    tail[msg.id] = ui.markdown(msg.content).classes("text-sm")

    def refresh_messages() -> None:
        messages_container.clear()
        tail.clear()
        rendered_ids[:] = [m.id for m in controller.messages]
        with messages_container:
            if not rendered_ids:
                with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                    ui.icon("forum").classes("text-5xl text-gray-300")
                    ui.label("Upload a PDF, ask a question, or just say hello.").classes(
                        "text-lg text-gray-400"
                    )
            else:
                for msg in controller.messages:
                    render_message(msg)

    def on_change() -> None:
        messages = controller.messages
        if messages and [m.id for m in messages] == rendered_ids and messages[-1].id in tail:
            # Typing step: only the tail bubble changed
            tail[messages[-1].id].set_content(messages[-1].content)
        else:
            refresh_messages()
        send_btn.set_enabled(controller.is_idle)
        dark.set_value(controller.theme is ThemePreference.DARK)

    async def send_message() -> None:
        text = input_field.value or ""
        if not text.strip() or not controller.is_idle:
            return
        input_field.value = ""
        await controller.send(text)

    async def handle_upload(e: events.UploadEventArguments) -> None:
        data = await e.file.read()
        uploader.reset()
        if not await controller.upload(e.file.name, data):
            logger.info(f"Upload of {e.file.name!r} produced no attachment")

    # === UI Layout ===
    with ui.column().classes("w-full max-w-3xl mx-auto h-screen p-4 gap-0"):
        with ui.row().classes("w-full px-5 py-4 items-center justify-between bg-indigo-600"):
            with ui.row().classes("items-center gap-3"):
                ui.icon("smart_toy").classes("text-white text-3xl")
                ui.label("DocuChat").classes("text-lg font-semibold text-white")
            with ui.row().classes("items-center gap-2"):
                ui.button(icon="contrast", on_click=controller.toggle_theme).props(
                    "flat round color=white"
                )
                ui.button(icon="delete", on_click=controller.clear_conversation).props(
                    "flat round color=white"
                )

        with ui.scroll_area().classes("flex-grow w-full"):
            messages_container = ui.column().classes("w-full gap-4 p-5")

        with ui.row().classes("w-full p-4 gap-3 items-center border-t"):
            uploader = (
                ui.upload(on_upload=handle_upload, auto_upload=True, max_files=1)
                .props("accept=.pdf flat")
                .classes("w-40")
            )
            input_field = (
                ui.input(placeholder="Type a message...")
                .props("borderless dense")
                .classes("flex-grow")
                .on("keydown.enter", send_message)
            )
            send_btn = ui.button(icon="send", on_click=send_message).props("round unelevated")

    refresh_messages()
    unsubscribe = controller.subscribe(on_change)

    def on_delete() -> None:
        unsubscribe()
        controller.close()

    ui.context.client.on_delete(on_delete)
