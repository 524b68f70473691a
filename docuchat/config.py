"""Application configuration loaded from the environment.

Two pydantic models:
    - AgentConfig: how to reach the generative text service
    - SessionConfig: typing simulation, fixed notices, and snapshot storage

Both read a ``.env`` file on import so defaults pick up local overrides.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from docuchat.models.schemas import ThemePreference

load_dotenv()


class AgentConfig(BaseModel):
    """Connection settings for the completion agent.

    Works with OpenAI and any OpenAI-compatible endpoint (set LLM_BASE_URL).

    Attributes:
        api_key: API key for model access.
        base_url: API base URL (None for OpenAI default).
        model_name: Model identifier to use.
        temperature: Sampling temperature (0.0 = deterministic, 2.0 = creative).
        max_tokens: Maximum tokens in generated response.
        timeout: Seconds to wait for the single completion request.
    """

    api_key: str = Field(
        default_factory=lambda: os.getenv("LLM_API_KEY", os.getenv("OPENAI_API_KEY", "")),
        validate_default=True,
        description="API key for LLM provider",
    )
    base_url: str | None = Field(
        default_factory=lambda: os.getenv("LLM_BASE_URL") or None,
        description="API base URL (None for OpenAI default)",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL", "gpt-4o-mini"),
        description="Model to use",
    )
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1024, ge=1, le=128000)
    timeout: float = Field(
        default_factory=lambda: float(os.getenv("LLM_TIMEOUT", "120")),
        gt=0,
        description="Request timeout in seconds",
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Reject a missing or blank API key."""
        if not v or not v.strip():
            raise ValueError("API key required. Set LLM_API_KEY or OPENAI_API_KEY in .env")
        return v.strip()


class SessionConfig(BaseModel):
    """Behaviour of the chat session controller.

    Attributes:
        typing_delay: Pause between revealed units, in seconds.
        typing_indicator: Placeholder content while waiting for the service (light theme).
        dark_typing_indicator: Placeholder content in the dark theme.
        fallback_notice: Shown when the service answers without usable text.
        error_notice: Shown when the service call fails.
        context_header: Delimiter line placed before attached document text.
        storage_dir: Directory holding the persisted session snapshot.
        storage_key: Key under which the snapshot is stored.
    """

    typing_delay: float = Field(
        default_factory=lambda: float(os.getenv("TYPING_DELAY", "0.025")),
        ge=0.0,
    )
    typing_indicator: str = "Assistant is typing..."
    dark_typing_indicator: str = "Assistant is typing in the dark..."
    fallback_notice: str = "🤖 The assistant could not respond."
    error_notice: str = "❌ Error connecting to the generative service."
    context_header: str = "[Context from file]:"
    storage_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("DOCUCHAT_DATA_DIR", "data")),
    )
    storage_key: str = Field(default="chat-history", min_length=1)

    @field_validator(
        "typing_indicator",
        "dark_typing_indicator",
        "fallback_notice",
        "error_notice",
        "context_header",
    )
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Notices must render as visible text."""
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    def typing_indicator_for(self, theme: ThemePreference) -> str:
        if theme is ThemePreference.DARK:
            return self.dark_typing_indicator
        return self.typing_indicator


def get_agent_config() -> AgentConfig:
    """Create agent configuration from environment.

    Raises:
        ValueError: If no API key is set.
    """
    return AgentConfig()


def get_session_config() -> SessionConfig:
    """Create session configuration from environment."""
    return SessionConfig()
