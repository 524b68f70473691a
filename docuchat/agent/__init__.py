"""Agno agent logic for the generative text service.

Responsibilities:
    - Agent initialization with an OpenAI-compatible model
    - One prompt in, one completion string out
    - Mapping provider and transport failures to ServiceError subclasses

Keeps agno out of the session controller, which only sees ``complete(prompt)``.
"""

from docuchat.agent.chat_agent import (
    CompletionClient,
    CompletionService,
    MalformedResponseError,
    NetworkError,
    RejectedError,
    ServiceError,
    get_completion_service,
)

__all__ = [
    "CompletionClient",
    "CompletionService",
    "MalformedResponseError",
    "NetworkError",
    "RejectedError",
    "ServiceError",
    "get_completion_service",
]
