"""Shared fixtures and fakes for the PDF analyzer tests."""
from __future__ import annotations

from types import SimpleNamespace
from typing import Iterable, List, Optional

import pytest

from pdf_analyzer.config import Settings


def build_pdf(page_texts: Iterable[str]) -> bytes:
    """Assemble a minimal PDF with one line of Helvetica text per page."""
    page_texts = list(page_texts)
    bodies: List[bytes] = []

    page_ids = [4 + 2 * index for index in range(len(page_texts))]
    kids = " ".join(f"{page_id} 0 R" for page_id in page_ids)

    bodies.append(b"<< /Type /Catalog /Pages 2 0 R >>")
    bodies.append(f"<< /Type /Pages /Kids [{kids}] /Count {len(page_texts)} >>".encode("latin-1"))
    bodies.append(b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>")

    for page_id, text in zip(page_ids, page_texts):
        bodies.append(
            (
                "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                f"/Resources << /Font << /F1 3 0 R >> >> /Contents {page_id + 1} 0 R >>"
            ).encode("latin-1")
        )
        stream = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode("latin-1")
        bodies.append(
            b"<< /Length " + str(len(stream)).encode("latin-1") + b" >>\nstream\n"
            + stream + b"\nendstream"
        )

    output = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(bodies, start=1):
        offsets.append(len(output))
        output += f"{number} 0 obj\n".encode("latin-1") + body + b"\nendobj\n"

    xref_offset = len(output)
    output += f"xref\n0 {len(bodies) + 1}\n".encode("latin-1")
    output += b"0000000000 65535 f \n"
    for offset in offsets:
        output += f"{offset:010d} 00000 n \n".encode("latin-1")
    output += (
        f"trailer\n<< /Size {len(bodies) + 1} /Root 1 0 R >>\n"
        f"startxref\n{xref_offset}\n%%EOF\n"
    ).encode("latin-1")
    return bytes(output)


def text_message(role: str, *values: str) -> SimpleNamespace:
    content = [SimpleNamespace(type="text", text=SimpleNamespace(value=value)) for value in values]
    return SimpleNamespace(role=role, content=content)


class FakeAssistantService:
    """In-memory stand-in for :class:`AssistantService`."""

    def __init__(
        self,
        statuses: Optional[List[str]] = None,
        replies: Optional[List[SimpleNamespace]] = None,
        fail_on: Optional[str] = None,
    ) -> None:
        self.statuses = list(statuses or ["completed"])
        self.replies = replies if replies is not None else [text_message("assistant", "Looks fine.")]
        self.fail_on = fail_on
        self.calls: List[tuple] = []
        self.posted: List[str] = []
        self.closed = False

    def _maybe_fail(self, operation: str) -> None:
        if self.fail_on == operation:
            from pdf_analyzer.errors import ServiceError

            raise ServiceError(f"{operation} exploded")

    async def create_assistant(self, name, instructions, tools=None):
        self.calls.append(("create_assistant", name, tools))
        self._maybe_fail("create_assistant")
        return SimpleNamespace(id="asst_1", name=name)

    async def create_thread(self):
        self.calls.append(("create_thread",))
        self._maybe_fail("create_thread")
        return SimpleNamespace(id="thread_1")

    async def create_message(self, thread_id, content, role="user"):
        self.calls.append(("create_message", thread_id, role))
        self._maybe_fail("create_message")
        self.posted.append(content)
        return SimpleNamespace(id=f"msg_{len(self.posted)}", role=role)

    async def create_run(self, thread_id, assistant_id):
        self.calls.append(("create_run", thread_id, assistant_id))
        self._maybe_fail("create_run")
        return SimpleNamespace(id="run_1", status=self.statuses.pop(0), last_error=None)

    async def get_run(self, thread_id, run_id):
        self.calls.append(("get_run", thread_id, run_id))
        self._maybe_fail("get_run")
        return SimpleNamespace(id=run_id, status=self.statuses.pop(0), last_error=None)

    async def list_messages(self, thread_id):
        self.calls.append(("list_messages", thread_id))
        self._maybe_fail("list_messages")
        return [text_message("user", content) for content in self.posted] + list(self.replies)

    async def close(self):
        self.closed = True

    def called(self, operation: str) -> bool:
        return any(call[0] == operation for call in self.calls)


@pytest.fixture
def fast_settings(tmp_path) -> Settings:
    """Settings that poll without meaningful waits and stage uploads in a temp dir."""
    return Settings(
        azure_openai_endpoint="https://example.openai.azure.com",
        azure_openai_key="test-key",
        azure_openai_deployment_name="gpt-test",
        upload_dir=str(tmp_path / "uploads"),
        poll_initial_interval_ms=1,
        poll_step_ms=1,
        poll_min_interval_ms=1,
        poll_timeout_seconds=5.0,
    )


@pytest.fixture
def sample_pdf() -> bytes:
    return build_pdf(["Hello world", "Second page"])
