"""
LLM Router
==========
Decides which bug generator backs the stress agent.

Routing Strategy:
    1. ANTHROPIC_API_KEY configured → live Anthropic Messages API client
    2. No key → null client that always reports "unavailable"

The null client makes the deterministic fallback a first-class branch:
the stress agent checks availability before building a prompt and goes
straight to the mutation planner.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from app.core.config import (
    ANTHROPIC_API_KEY, GENERATION_BASE_URL, GENERATION_MODEL,
    GENERATION_MAX_TOKENS, GENERATION_TIMEOUT_SECONDS,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Provider Configuration
# ---------------------------------------------------------------------------
@dataclass
class ProviderConfig:
    """Configuration for the text-generation provider."""
    name: str
    api_key: str
    base_url: str
    model: str
    max_tokens: int = 16000
    timeout_seconds: float = 90.0
    api_version: str = "2023-06-01"


ANTHROPIC_CONFIG = ProviderConfig(
    name="anthropic",
    api_key=ANTHROPIC_API_KEY or "",
    base_url=GENERATION_BASE_URL,
    model=GENERATION_MODEL,
    max_tokens=GENERATION_MAX_TOKENS,
    timeout_seconds=GENERATION_TIMEOUT_SECONDS,
)


def get_generation_client(provider: Optional[ProviderConfig] = None):
    """
    Build the generation client for the configured provider.

    Parameters
    ----------
    provider : ProviderConfig or None
        Defaults to ANTHROPIC_CONFIG.

    Returns
    -------
    GenerationClient
        AnthropicGenerationClient when an API key is present,
        NullGenerationClient otherwise.
    """
    from app.llm.client import AnthropicGenerationClient, NullGenerationClient

    provider = provider or ANTHROPIC_CONFIG
    if provider.api_key and provider.api_key.strip():
        logger.debug("Selected generation provider: %s (%s)", provider.name, provider.model)
        return AnthropicGenerationClient(provider)

    logger.info("No generation API key configured, using deterministic fallback only")
    return NullGenerationClient()
