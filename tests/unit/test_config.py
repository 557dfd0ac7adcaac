"""Unit tests for RelayConfig.

Tests configuration defaults, environment loading, and validation.
"""

from unittest.mock import patch

import pytest
from pydantic import ValidationError

from ollama_relay.relay.config import (
    DEFAULT_BACKEND_URL,
    DEFAULT_MODEL,
    RelayConfig,
    get_relay_config,
)

RELAY_ENV_VARS = (
    "OLLAMA_URL",
    "OLLAMA_MODEL",
    "THINKING_DELAY",
    "OLLAMA_CONNECT_TIMEOUT",
    "OLLAMA_READ_TIMEOUT",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in RELAY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestRelayConfig:
    """Tests for RelayConfig validation."""

    def test_defaults(self, clean_env: None) -> None:
        """Config targets local Ollama when nothing is set."""
        config = RelayConfig()

        assert config.backend_url == DEFAULT_BACKEND_URL
        assert config.model_name == DEFAULT_MODEL
        assert config.thinking_delay == 1.0
        assert config.connect_timeout == 10.0
        assert config.read_timeout is None

    def test_valid_config_with_all_fields(self) -> None:
        config = RelayConfig(
            backend_url="http://gpu-box:11434/api/generate",
            model_name="llama3",
            thinking_delay=0.5,
            connect_timeout=3.0,
            read_timeout=30.0,
        )

        assert config.backend_url == "http://gpu-box:11434/api/generate"
        assert config.model_name == "llama3"
        assert config.thinking_delay == 0.5
        assert config.read_timeout == 30.0

    def test_strips_whitespace(self) -> None:
        config = RelayConfig(backend_url="  http://x/api/generate  ", model_name=" m ")

        assert config.backend_url == "http://x/api/generate"
        assert config.model_name == "m"

    @pytest.mark.parametrize("field", ["backend_url", "model_name"])
    def test_rejects_blank_values(self, field: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            RelayConfig(**{field: "   "})

        assert "Value required" in str(exc_info.value)

    @pytest.mark.parametrize("delay", [-0.1, 10.5])
    def test_rejects_out_of_range_delay(self, delay: float) -> None:
        with pytest.raises(ValidationError) as exc_info:
            RelayConfig(thinking_delay=delay)

        assert "thinking_delay" in str(exc_info.value)

    def test_accepts_zero_delay(self) -> None:
        assert RelayConfig(thinking_delay=0.0).thinking_delay == 0.0

    def test_rejects_non_positive_connect_timeout(self) -> None:
        with pytest.raises(ValidationError):
            RelayConfig(connect_timeout=0)

    @pytest.mark.parametrize("timeout", [0, -1.0])
    def test_rejects_non_positive_read_timeout(self, timeout: float) -> None:
        with pytest.raises(ValidationError) as exc_info:
            RelayConfig(read_timeout=timeout)

        assert "read_timeout" in str(exc_info.value)


class TestGetRelayConfig:
    """Tests for get_relay_config factory function."""

    def test_reads_environment(self, clean_env: None) -> None:
        env = {
            "OLLAMA_URL": "http://remote:11434/api/generate",
            "OLLAMA_MODEL": "qwen3",
            "THINKING_DELAY": "0.25",
            "OLLAMA_READ_TIMEOUT": "45",
        }
        with patch.dict("os.environ", env):
            config = get_relay_config()

        assert config.backend_url == "http://remote:11434/api/generate"
        assert config.model_name == "qwen3"
        assert config.thinking_delay == 0.25
        assert config.read_timeout == 45.0

    def test_blank_model_in_environment_fails(self, clean_env: None) -> None:
        with (
            patch.dict("os.environ", {"OLLAMA_MODEL": ""}),
            pytest.raises(ValidationError),
        ):
            get_relay_config()

    def test_blank_read_timeout_means_no_limit(self, clean_env: None) -> None:
        with patch.dict("os.environ", {"OLLAMA_READ_TIMEOUT": ""}):
            config = get_relay_config()

        assert config.read_timeout is None

    @pytest.mark.parametrize(
        ("name", "value"),
        [
            ("OLLAMA_READ_TIMEOUT", "abc"),
            ("OLLAMA_READ_TIMEOUT", "-5"),
            ("OLLAMA_READ_TIMEOUT", "0"),
            ("THINKING_DELAY", "soon"),
            ("THINKING_DELAY", "60"),
            ("OLLAMA_CONNECT_TIMEOUT", "abc"),
        ],
    )
    def test_bad_numeric_environment_fails_validation(
        self, clean_env: None, name: str, value: str
    ) -> None:
        """Malformed or out-of-range env values are rejected by the model."""
        with patch.dict("os.environ", {name: value}), pytest.raises(ValidationError):
            get_relay_config()
