"""Tests for backend configuration."""

import pytest
from pydantic import ValidationError

from severn import BackendConfig, QdrantConfig


def test_defaults():
    config = BackendConfig()
    assert config.provider == "openai"
    assert config.resolved_model == "gpt-4o"
    assert config.resolved_base_url is None


@pytest.mark.parametrize(
    "provider, model",
    [
        ("anthropic", "claude-sonnet-4-5-20250929"),
        ("google", "gemini-2.0-flash"),
        ("ollama", "llama3.2"),
    ],
)
def test_provider_default_models(provider, model):
    assert BackendConfig(provider=provider).resolved_model == model


def test_explicit_model_wins():
    assert BackendConfig(model="gpt-4o-mini").resolved_model == "gpt-4o-mini"


def test_ollama_base_url():
    assert BackendConfig(provider="ollama").resolved_base_url == "http://localhost:11434/v1"
    custom = BackendConfig(provider="ollama", base_url="http://gpu:11434/v1")
    assert custom.resolved_base_url == "http://gpu:11434/v1"


def test_config_is_frozen():
    config = BackendConfig(api_key="k")
    with pytest.raises(ValidationError):
        config.api_key = "other"


def test_rejects_unknown_provider():
    with pytest.raises(ValidationError):
        BackendConfig(provider="mistral")


def test_from_env_reads_injected_environment():
    config = BackendConfig.from_env(
        "anthropic", environ={"ANTHROPIC_API_KEY": "sk-ant"}, model="claude-test"
    )
    assert config.api_key == "sk-ant"
    assert config.model == "claude-test"


def test_from_env_missing_key():
    with pytest.raises(KeyError, match="OPENAI_API_KEY"):
        BackendConfig.from_env("openai", environ={})


def test_from_env_ollama_needs_no_key():
    assert BackendConfig.from_env("ollama", environ={}).api_key == "ollama"


def test_qdrant_config_validation():
    assert QdrantConfig().collection_name == "severn"
    with pytest.raises(ValidationError):
        QdrantConfig(limit=0)
