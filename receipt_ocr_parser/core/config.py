"""
Configuration values passed explicitly into the parser and processor.

Environment variables are only read here, by the from_env() constructors,
which the CLI calls once at startup.
"""

import os
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError

PROVIDERS = ["openai", "anthropic", "azure-openai"]

# Shipped in sample configs; never a real key
PLACEHOLDER_API_KEY = "YOUR_OPENAI_API_KEY_HERE"

# Environment variable holding the API key for each provider
API_KEY_ENV_VARS = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "azure-openai": "AZURE_OPENAI_API_KEY",
}

DEFAULT_AZURE_API_VERSION = "2024-02-15-preview"


@dataclass(frozen=True)
class ParserConfig:
    """Options for the local heuristic parser."""
    extract_tax: bool = False
    ner_model: Optional[str] = None  # spaCy pipeline name, e.g. "en_core_web_sm"


@dataclass(frozen=True)
class RefinementConfig:
    """Options for the optional LLM refinement step."""
    enabled: bool = True
    provider: str = "openai"
    model: Optional[str] = None
    api_key: Optional[str] = None
    azure_endpoint: Optional[str] = None
    azure_api_version: str = DEFAULT_AZURE_API_VERSION

    def __post_init__(self):
        if self.provider not in PROVIDERS:
            raise ConfigurationError(
                f"Invalid LLM provider: {self.provider} (must be one of: {', '.join(PROVIDERS)})"
            )

    @property
    def is_configured(self) -> bool:
        """True when refinement is enabled and has usable credentials."""
        if not self.enabled:
            return False
        if not self.api_key or self.api_key == PLACEHOLDER_API_KEY:
            return False
        if self.provider == "azure-openai" and not self.azure_endpoint:
            return False
        return True

    @classmethod
    def from_env(cls, provider: Optional[str] = None, model: Optional[str] = None,
                 enabled: bool = True) -> "RefinementConfig":
        """
        Build a config from environment variables.

        Explicit arguments win over LLM_PROVIDER / LLM_MODEL. The API key is
        read from the provider's usual variable (OPENAI_API_KEY, ...).
        """
        provider = provider or os.getenv("LLM_PROVIDER", "openai")
        if provider not in PROVIDERS:
            raise ConfigurationError(
                f"Invalid LLM provider: {provider} (must be one of: {', '.join(PROVIDERS)})"
            )
        return cls(
            enabled=enabled,
            provider=provider,
            model=model or os.getenv("LLM_MODEL"),
            api_key=os.getenv(API_KEY_ENV_VARS[provider]),
            azure_endpoint=os.getenv("AZURE_OPENAI_ENDPOINT"),
            azure_api_version=os.getenv("AZURE_OPENAI_API_VERSION", DEFAULT_AZURE_API_VERSION),
        )
