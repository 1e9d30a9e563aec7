"""
Assistant service wrapping the Azure OpenAI Assistants API.
"""

from typing import Any, Dict, List, Optional

from openai import AsyncAzureOpenAI, OpenAIError

from ..config import Settings, settings as default_settings
from ..errors import RunFetchError, ServiceError
from ..utils import log_processing_info, handle_processing_error
import logging

logger = logging.getLogger(__name__)


class AssistantService:
    """Thin async facade over the assistant endpoints the analyzer uses."""

    def __init__(self, client: Optional[AsyncAzureOpenAI] = None, settings: Optional[Settings] = None):
        """Initialize the assistant service."""
        self.settings = settings or default_settings
        self.client = client if client is not None else self._initialize_client()

    def _initialize_client(self) -> AsyncAzureOpenAI:
        """Initialize the Azure OpenAI client."""
        try:
            client = AsyncAzureOpenAI(
                azure_endpoint=self.settings.azure_openai_endpoint,
                api_key=self.settings.azure_openai_key,
                api_version=self.settings.azure_openai_api_version,
            )

            log_processing_info("Azure OpenAI client initialized", {
                "endpoint": self.settings.azure_openai_endpoint,
                "api_version": self.settings.azure_openai_api_version
            })

            return client

        except OpenAIError as e:
            error_info = handle_processing_error("assistant_client_init", e)
            raise ServiceError(f"Failed to initialize assistant client: {error_info['error_message']}") from e

    def _fail(self, operation: str, error: Exception, context: Optional[Dict[str, Any]] = None,
              error_class=ServiceError) -> ServiceError:
        error_info = handle_processing_error(operation, error, context)
        return error_class(f"Assistant service call '{operation}' failed: {error_info['error_message']}")

    async def create_assistant(
        self,
        name: str,
        instructions: str,
        tools: Optional[List[Dict[str, Any]]] = None
    ) -> Any:
        """Create an assistant on the configured deployment."""
        kwargs: Dict[str, Any] = {
            "model": self.settings.azure_openai_deployment_name,
            "name": name,
            "instructions": instructions,
        }
        if tools:
            kwargs["tools"] = tools
        try:
            return await self.client.beta.assistants.create(**kwargs)
        except OpenAIError as e:
            raise self._fail("create_assistant", e, {"name": name}) from e

    async def create_thread(self) -> Any:
        """Create an empty conversation thread."""
        try:
            return await self.client.beta.threads.create()
        except OpenAIError as e:
            raise self._fail("create_thread", e) from e

    async def create_message(self, thread_id: str, content: str, role: str = "user") -> Any:
        """Append a message to a thread."""
        try:
            return await self.client.beta.threads.messages.create(
                thread_id,
                role=role,
                content=content,
            )
        except OpenAIError as e:
            raise self._fail("create_message", e, {"thread_id": thread_id, "content_length": len(content)}) from e

    async def create_run(self, thread_id: str, assistant_id: str) -> Any:
        """Start a run of an assistant over a thread."""
        try:
            return await self.client.beta.threads.runs.create(
                thread_id=thread_id,
                assistant_id=assistant_id,
            )
        except OpenAIError as e:
            raise self._fail("create_run", e, {"thread_id": thread_id, "assistant_id": assistant_id}) from e

    async def get_run(self, thread_id: str, run_id: str) -> Any:
        """Fetch the current state of a run."""
        try:
            return await self.client.beta.threads.runs.retrieve(run_id, thread_id=thread_id)
        except OpenAIError as e:
            raise self._fail(
                "get_run", e, {"thread_id": thread_id, "run_id": run_id}, error_class=RunFetchError
            ) from e

    async def list_messages(self, thread_id: str) -> List[Any]:
        """List all messages of a thread, oldest first."""
        try:
            messages = []
            async for message in self.client.beta.threads.messages.list(thread_id, order="asc"):
                messages.append(message)
            return messages
        except OpenAIError as e:
            raise self._fail("list_messages", e, {"thread_id": thread_id}) from e

    async def close(self) -> None:
        """Release the underlying HTTP connections."""
        await self.client.close()
        logger.info("Azure OpenAI client closed")
