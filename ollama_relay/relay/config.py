"""Relay configuration with environment variable loading.

Pydantic-based configuration for the Ollama backend connection.
Defaults target a local Ollama install on its standard port.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Load environment variables from .env file
load_dotenv()

DEFAULT_BACKEND_URL = "http://localhost:11434/api/generate"
DEFAULT_MODEL = "gpt-oss:20b"


class RelayConfig(BaseModel):
    """Configuration for the chat relay.

    Attributes:
        backend_url: Ollama generate endpoint.
        model_name: Model identifier sent with every request.
        thinking_delay: Seconds the thinking phase is held open.
        connect_timeout: Seconds allowed to establish the backend connection.
        read_timeout: Seconds allowed between backend reads (None = no limit).
    """

    # Environment values arrive as strings; validate them like explicit arguments
    model_config = ConfigDict(validate_default=True)

    backend_url: str = Field(
        default_factory=lambda: os.getenv("OLLAMA_URL", DEFAULT_BACKEND_URL),
        description="Ollama generate endpoint URL",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("OLLAMA_MODEL", DEFAULT_MODEL),
        description="Model to use",
    )
    thinking_delay: float = Field(
        default_factory=lambda: os.getenv("THINKING_DELAY", "1.0"),
        ge=0.0,
        le=10.0,
        description="Pause between the thinking and done-thinking events",
    )
    connect_timeout: float = Field(
        default_factory=lambda: os.getenv("OLLAMA_CONNECT_TIMEOUT", "10.0"),
        gt=0.0,
        description="Backend connect timeout in seconds",
    )
    read_timeout: float | None = Field(
        default_factory=lambda: os.getenv("OLLAMA_READ_TIMEOUT") or None,
        gt=0.0,
        description="Backend read timeout in seconds (None waits for tokens indefinitely)",
    )

    @field_validator("backend_url", "model_name")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject empty backend URL or model name."""
        if not v or not v.strip():
            raise ValueError("Value required. Set OLLAMA_URL and OLLAMA_MODEL in .env")
        return v.strip()


def get_relay_config() -> RelayConfig:
    """Create relay configuration from environment.

    Returns:
        Configured RelayConfig instance.
    """
    return RelayConfig()
