import pytest

from receipt_ocr_parser.core.config import PLACEHOLDER_API_KEY, RefinementConfig
from receipt_ocr_parser.core.errors import ConfigurationError


def test_refinement_needs_a_real_key() -> None:
    assert RefinementConfig(api_key="sk-test").is_configured
    assert not RefinementConfig().is_configured
    assert not RefinementConfig(api_key="").is_configured
    assert not RefinementConfig(api_key=PLACEHOLDER_API_KEY).is_configured


def test_disabled_refinement_is_not_configured() -> None:
    assert not RefinementConfig(enabled=False, api_key="sk-test").is_configured


def test_azure_needs_endpoint() -> None:
    assert not RefinementConfig(provider="azure-openai", api_key="k").is_configured
    assert RefinementConfig(provider="azure-openai", api_key="k",
                            azure_endpoint="https://example.openai.azure.com").is_configured


def test_unknown_provider_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        RefinementConfig(provider="bogus")


def test_from_env(monkeypatch) -> None:
    monkeypatch.setenv("LLM_PROVIDER", "anthropic")
    monkeypatch.setenv("LLM_MODEL", "claude-test")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "ak-test")

    config = RefinementConfig.from_env()

    assert config.provider == "anthropic"
    assert config.model == "claude-test"
    assert config.api_key == "ak-test"
    assert config.is_configured


def test_from_env_arguments_win(monkeypatch) -> None:
    monkeypatch.setenv("LLM_PROVIDER", "anthropic")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

    config = RefinementConfig.from_env(provider="openai", model="gpt-test", enabled=False)

    assert config.provider == "openai"
    assert config.model == "gpt-test"
    assert config.api_key == "sk-test"
    assert not config.is_configured


def test_from_env_without_key(monkeypatch) -> None:
    monkeypatch.delenv("LLM_PROVIDER", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    config = RefinementConfig.from_env()

    assert config.provider == "openai"
    assert not config.is_configured


def test_from_env_bad_provider(monkeypatch) -> None:
    monkeypatch.setenv("LLM_PROVIDER", "bogus")

    with pytest.raises(ConfigurationError):
        RefinementConfig.from_env()
