"""
LLM Client
==========
Asynchronous text-generation clients and reply parsing for the stress agent.

Clients:
    - AnthropicGenerationClient: Anthropic Messages API over httpx
    - NullGenerationClient: always unavailable (no key configured)

Failure Contract:
    Every failure (timeout, HTTP error, transport error, empty reply)
    is raised as GenerationUnavailable. The stress agent catches it and
    degrades to the mutation planner; nothing here retries.

Deadline:
    One call, bounded by ProviderConfig.timeout_seconds. A slow upstream
    can no longer block a stress request indefinitely.

Reply Contract:
    The generator must answer with ONE JSON object:
        {"modifiedCode": str, "changes": [str], "symptoms": [str]}
    Prose or code fences around the object are tolerated; the first
    balanced object that decodes is used.
"""
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from app.core.errors import GenerationResponseError, GenerationUnavailable
from app.llm.router import ProviderConfig
from app.models.stress import GeneratedStress

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Response Parsing
# ---------------------------------------------------------------------------
def extract_json_object(raw: str) -> dict[str, Any]:
    """
    Find the first well-formed JSON object inside raw text.

    Scans each '{' in order, tracks brace depth outside string literals,
    and returns the first balanced candidate that json-decodes to a dict.
    An unclosed candidate ends the scan: no later '{' can close either,
    so a truncated reply costs one linear pass.

    Raises
    ------
    GenerationResponseError
        If no JSON object can be found.
    """
    if not raw or not raw.strip():
        raise GenerationResponseError("Empty response from generator")

    start = raw.find("{")
    while start != -1:
        end = _balanced_end(raw, start)
        if end is None:
            break
        try:
            data = json.loads(raw[start:end + 1])
        except (json.JSONDecodeError, ValueError):
            data = None
        if isinstance(data, dict):
            return data
        start = raw.find("{", start + 1)

    raise GenerationResponseError("Failed to parse AI response: no JSON object found")


def _balanced_end(text: str, start: int) -> Optional[int]:
    """Index of the '}' closing the object opened at start, or None."""
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return None


def parse_generation_response(raw: str) -> GeneratedStress:
    """
    Validate a generator reply and convert it to GeneratedStress.

    Required fields:
        - modifiedCode (non-empty string)
        - changes (list of strings)
    Optional:
        - symptoms (list of strings); missing → empty list, filled later

    Raises
    ------
    GenerationResponseError
        If the object is missing or malformed.
    """
    data = extract_json_object(raw)

    modified = data.get("modifiedCode")
    changes = data.get("changes")
    if not modified or not isinstance(modified, str) or not changes:
        raise GenerationResponseError("Invalid AI response structure")
    if not isinstance(changes, list) or not all(isinstance(c, str) for c in changes):
        raise GenerationResponseError("Invalid AI response structure: changes must be a list of strings")

    symptoms = data.get("symptoms") or []
    if not isinstance(symptoms, list):
        symptoms = []
    symptoms = [s for s in symptoms if isinstance(s, str) and s.strip()]

    return GeneratedStress(content=modified, changes=changes, symptoms=symptoms)


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------
class GenerationClient(ABC):
    """Capability: turn a prompt into raw generated text."""

    available: bool = True

    @abstractmethod
    async def generate_text(self, prompt: str) -> str:
        """Return the raw reply or raise GenerationUnavailable."""

    async def close(self) -> None:
        """Release network resources (no-op by default)."""


class NullGenerationClient(GenerationClient):
    """Stands in when no generator is configured."""

    available = False

    async def generate_text(self, prompt: str) -> str:
        raise GenerationUnavailable("No text-generation provider configured")


class AnthropicGenerationClient(GenerationClient):
    """
    Async HTTP client for the Anthropic Messages API.

    Usage:
        client = AnthropicGenerationClient(ANTHROPIC_CONFIG)
        text = await client.generate_text(prompt)
        await client.close()
    """

    def __init__(self, provider: ProviderConfig) -> None:
        self.provider = provider
        self._http: Optional[httpx.AsyncClient] = None

    async def _get_http(self) -> httpx.AsyncClient:
        """Lazy-initialise the HTTP client."""
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(
                timeout=httpx.Timeout(self.provider.timeout_seconds)
            )
        return self._http

    async def close(self) -> None:
        if self._http and not self._http.is_closed:
            await self._http.aclose()
            self._http = None

    async def generate_text(self, prompt: str) -> str:
        http = await self._get_http()
        url = f"{self.provider.base_url}/messages"
        headers = {
            "x-api-key": self.provider.api_key,
            "anthropic-version": self.provider.api_version,
            "content-type": "application/json",
        }
        payload = {
            "model": self.provider.model,
            "max_tokens": self.provider.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }

        try:
            resp = await http.post(url, json=payload, headers=headers)
            resp.raise_for_status()
            data = resp.json()
        except httpx.TimeoutException as e:
            raise GenerationUnavailable(
                f"{self.provider.name} timed out after {self.provider.timeout_seconds}s"
            ) from e
        except httpx.HTTPStatusError as e:
            raise GenerationUnavailable(
                f"{self.provider.name} returned HTTP {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise GenerationUnavailable(f"{self.provider.name} request failed: {e}") from e

        text = _extract_text(data)
        if not text.strip():
            raise GenerationUnavailable(f"{self.provider.name} returned an empty reply")
        return text


def _extract_text(data: Any) -> str:
    """Concatenate the text blocks of a Messages API response."""
    try:
        blocks = data.get("content", [])
        return "".join(
            block.get("text", "") for block in blocks if block.get("type") == "text"
        )
    except (AttributeError, TypeError):
        return ""
