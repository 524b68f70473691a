"""Agno-backed generative text service.

Sends one prompt, waits for the whole completion, and hands back plain text.
Typing simulation happens client side, so no streaming transport is used here.

Failures are reported through a small exception family so the session
controller can show one fixed notice without knowing about agno or httpx:

    ServiceError
    ├── NetworkError            - the service could not be reached
    ├── RejectedError           - the service refused the request
    └── MalformedResponseError  - the reply could not be decoded

A reply without usable text is not an error: ``complete`` returns ``""``.
"""

import json
import logging
from typing import Protocol

import httpx
from agno.agent import Agent
from agno.exceptions import ModelProviderError
from agno.models.openai import OpenAIChat

from docuchat.config import AgentConfig, get_agent_config

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Raised when the generative text service call fails."""

    pass


class NetworkError(ServiceError):
    """The service could not be reached or timed out."""


class RejectedError(ServiceError):
    """The service answered with an error status."""


class MalformedResponseError(ServiceError):
    """The service answered with something that is not a completion."""


class CompletionClient(Protocol):
    async def complete(self, prompt: str) -> str: ...


class CompletionService:
    """Single-shot completion over an agno Agent.

    No session storage, no knowledge base: every prompt is self-contained,
    including any document context the controller attached.
    """

    def __init__(self, config: AgentConfig | None = None) -> None:
        """Initialize the completion service.

        Args:
            config: Optional agent configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_agent_config()
        self._agent = self._create_agent()

    def _create_agent(self) -> Agent:
        """Create the Agno agent instance.

        Returns:
            Agent with an OpenAI-compatible chat model and no history.
        """
        model = OpenAIChat(
            id=self._config.model_name,
            api_key=self._config.api_key,
            base_url=self._config.base_url,
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
            timeout=self._config.timeout,
            # Single attempt; failures are terminal for the exchange
            max_retries=0,
        )

        return Agent(
            model=model,
            description="A helpful assistant that can answer questions about attached documents.",
            instructions=[
                "Provide helpful and accurate responses.",
                "When document context is included, cite the page it came from.",
                "Be concise yet thorough.",
            ],
            markdown=True,
        )

    async def complete(self, prompt: str) -> str:
        """Get the complete response for a prompt.

        Args:
            prompt: The effective prompt, user text plus optional document context.

        Returns:
            Completion text, or "" when the service produced nothing usable.

        Raises:
            NetworkError: Connection failure or timeout.
            RejectedError: The provider returned an error status.
            MalformedResponseError: The provider reply could not be decoded.
        """
        try:
            response = await self._agent.arun(prompt)
        except (httpx.TimeoutException, httpx.TransportError, TimeoutError, ConnectionError) as e:
            raise NetworkError(f"Connection failed: {e}") from e
        except ModelProviderError as e:
            status_code = getattr(e, "status_code", None) or 0
            if status_code >= 500:
                raise NetworkError(f"Provider unavailable ({status_code}): {e}") from e
            raise RejectedError(f"Provider rejected request ({status_code}): {e}") from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedResponseError(f"Could not decode provider reply: {e}") from e
        except Exception as e:
            raise ServiceError(f"Completion failed: {e}") from e

        status = getattr(response, "status", None)
        if str(getattr(status, "value", status or "")).lower() == "error":
            raise RejectedError(f"Run ended with error: {response.content}")

        content = getattr(response, "content", None)
        if not isinstance(content, str):
            logger.warning(f"Completion had no text content ({type(content).__name__})")
            return ""
        return content


# Module-level singleton instance
_completion_service: CompletionService | None = None


def get_completion_service() -> CompletionService:
    """Get or create the global completion service.

    Returns:
        The CompletionService instance.
    """
    global _completion_service
    if _completion_service is None:
        _completion_service = CompletionService()
    return _completion_service
