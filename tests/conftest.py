"""Pytest fixtures and shared test configuration.

Fixtures:
    - session_config: SessionConfig with no typing delay, storing under tmp_path
    - memory_store: InMemorySessionStore
    - service: ScriptedService returning queued completions or raising queued errors
    - controller: SessionController wired to the fixtures above
    - build_pdf: helper producing real PDF bytes with one text line per page

PDFs are generated in code so tests need no binary fixture files.
"""

import asyncio
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from docuchat.config import SessionConfig
from docuchat.session import SessionController
from docuchat.storage import InMemorySessionStore


def make_pdf(pages: list[str]) -> bytes:
    """Build a minimal PDF whose page i shows ``pages[i]`` in Helvetica.

    Empty strings produce pages without a text layer.
    """
    count = len(pages)
    kids = " ".join(f"{4 + 2 * i} 0 R" for i in range(count))
    objects: list[bytes] = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{kids}] /Count {count} >>".encode(),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    for i, text in enumerate(pages):
        stream = f"BT /F1 12 Tf 72 712 Td ({text}) Tj ET".encode() if text else b""
        objects.append(
            (
                "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                f"/Resources << /Font << /F1 3 0 R >> >> /Contents {5 + 2 * i} 0 R >>"
            ).encode()
        )
        objects.append(b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream")

    out = bytearray(b"%PDF-1.4\n")
    offsets: list[int] = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_offset = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (
        len(objects) + 1,
        xref_offset,
    )
    return bytes(out)


class ScriptedService:
    """Completion client that replays queued results.

    Queue strings to return them, exceptions to raise them. Set ``gate`` to an
    asyncio.Event to hold every call until the event is set.
    """

    def __init__(self, *results: str | Exception) -> None:
        self.results: list[str | Exception] = list(results)
        self.prompts: list[str] = []
        self.gate: asyncio.Event | None = None

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.gate is not None:
            await self.gate.wait()
        result = self.results.pop(0) if self.results else "ok"
        if isinstance(result, Exception):
            raise result
        return result


class GatedExtractor:
    """Extractor whose calls stay pending until the test resolves them."""

    def __init__(self) -> None:
        self.calls: list[asyncio.Future[str]] = []

    async def __call__(self, data: bytes) -> str:
        future: asyncio.Future[str] = asyncio.get_running_loop().create_future()
        self.calls.append(future)
        return await future


async def wait_for(predicate: Callable[[], bool], attempts: int = 1000) -> None:
    """Yield to the event loop until ``predicate`` holds."""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition never became true")


@pytest.fixture
def build_pdf() -> Callable[[list[str]], bytes]:
    return make_pdf


@pytest.fixture
def session_config(tmp_path: Path) -> SessionConfig:
    """Session config with instant typing and storage inside tmp_path."""
    return SessionConfig(typing_delay=0.0, storage_dir=tmp_path / "data")


@pytest.fixture
def memory_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def service() -> ScriptedService:
    return ScriptedService()


@pytest.fixture
def extractor() -> GatedExtractor:
    return GatedExtractor()


@pytest.fixture
def controller(
    service: ScriptedService,
    memory_store: InMemorySessionStore,
    session_config: SessionConfig,
    extractor: GatedExtractor,
) -> Iterator[SessionController]:
    """Loaded controller with scripted service, gated extractor, in-memory store."""
    ctrl = SessionController(
        service=service,
        store=memory_store,
        config=session_config,
        extractor=extractor,
    )
    ctrl.load()
    yield ctrl
    ctrl.close()
