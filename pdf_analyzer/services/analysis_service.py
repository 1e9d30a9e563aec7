"""
Main analysis service that orchestrates PDF extraction, chunking and the assistant run.
"""

import asyncio
from pathlib import Path
from typing import Any, List, Optional

from starlette.concurrency import run_in_threadpool

from .assistant_service import AssistantService
from .pdf_processor import PDFProcessor
from .run_poller import await_run_completion
from .text_chunker import chunk_pages
from .upload_storage import remove_upload
from ..config import Settings, settings as default_settings
from ..errors import ServiceError
from ..utils import measure_time, log_processing_info
import logging

logger = logging.getLogger(__name__)

CODE_INTERPRETER_TOOL = {"type": "code_interpreter"}
TEST_ASSISTANT_NAME = "Test Assistant"
TEST_ASSISTANT_INSTRUCTIONS = "Test instructions"


def collect_assistant_text(messages: List[Any]) -> str:
    """
    Join the text parts of all assistant messages.

    Args:
        messages: Thread messages in chronological order

    Returns:
        Text parts joined by a single space, stripped
    """
    parts = []
    for message in messages:
        if getattr(message, "role", None) != "assistant":
            continue
        for content in getattr(message, "content", None) or []:
            if getattr(content, "type", None) == "text":
                parts.append(content.text.value)
    return " ".join(parts).strip()


class AnalysisService:
    """Runs one uploaded PDF through the assistant and returns its answer."""

    def __init__(
        self,
        assistant_service: AssistantService,
        pdf_processor: Optional[PDFProcessor] = None,
        settings: Optional[Settings] = None
    ):
        """Initialize the analysis service."""
        self.assistant_service = assistant_service
        self.pdf_processor = pdf_processor or PDFProcessor()
        self.settings = settings or default_settings

    async def _resolve_assistant_id(self) -> str:
        if self.settings.assistant_id:
            return self.settings.assistant_id
        assistant = await self.assistant_service.create_assistant(
            name=self.settings.assistant_name,
            instructions=self.settings.assistant_instructions,
            tools=[CODE_INTERPRETER_TOOL]
        )
        return assistant.id

    @measure_time
    async def analyze_file(
        self,
        pdf_path: Path,
        question: Optional[str] = None,
        cancel_event: Optional[asyncio.Event] = None
    ) -> str:
        """
        Analyze a staged PDF and delete it afterwards.

        The file is removed exactly once whether the analysis succeeds or fails.

        Args:
            pdf_path: Path of the staged upload
            question: Question for the assistant, the default prompt when empty
            cancel_event: Setting this event stops waiting for the run

        Returns:
            The assistant's answer
        """
        try:
            content = await run_in_threadpool(pdf_path.read_bytes)
            pages = await run_in_threadpool(self.pdf_processor.extract_pages, content, pdf_path.name)
            chunks = chunk_pages(pages, self.settings.max_chunk_size)

            log_processing_info("Document chunked", {
                "filename": pdf_path.name,
                "pages": len(pages),
                "chunks": len(chunks)
            })

            return await self._run_analysis(chunks, question or self.settings.default_question, cancel_event)
        finally:
            remove_upload(pdf_path)

    async def _run_analysis(
        self,
        chunks: List[str],
        question: str,
        cancel_event: Optional[asyncio.Event]
    ) -> str:
        thread = await self.assistant_service.create_thread()

        for chunk in chunks:
            await self.assistant_service.create_message(thread.id, chunk)
        await self.assistant_service.create_message(thread.id, question)

        assistant_id = await self._resolve_assistant_id()
        run = await self.assistant_service.create_run(thread.id, assistant_id)

        log_processing_info("Run started", {
            "thread_id": thread.id,
            "run_id": run.id,
            "assistant_id": assistant_id,
            "messages": len(chunks) + 1
        })

        run = await await_run_completion(
            thread.id,
            run,
            self.assistant_service.get_run,
            initial_interval_ms=self.settings.poll_initial_interval_ms,
            step_ms=self.settings.poll_step_ms,
            min_interval_ms=self.settings.poll_min_interval_ms,
            timeout=self.settings.poll_timeout_seconds,
            cancel_event=cancel_event
        )

        if run.status != "completed":
            last_error = getattr(run, "last_error", None)
            detail = getattr(last_error, "message", None) if last_error else None
            message = f"Run {run.id} ended with status {run.status}"
            if detail:
                message = f"{message}: {detail}"
            raise ServiceError(message)

        messages = await self.assistant_service.list_messages(thread.id)
        return collect_assistant_text(messages)

    async def test_connection(self) -> str:
        """Create a throwaway assistant and return its identifier."""
        assistant = await self.assistant_service.create_assistant(
            name=TEST_ASSISTANT_NAME,
            instructions=TEST_ASSISTANT_INSTRUCTIONS
        )
        log_processing_info("Connection test succeeded", {"assistant_id": assistant.id})
        return assistant.id
