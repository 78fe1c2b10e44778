"""Anthropic-backed event discovery.

``EventDiscovery`` is the discovery collaborator used by the session: it asks
the Messages API (with the web search tool) for upcoming events in the
configured region and parses the JSON array it returns. Failures never
escape; they come back as a single sentinel event with category "error".
"""
from __future__ import annotations

import asyncio
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, List, Optional

from anthropic import Anthropic, APIStatusError

from ..agenda.categories import ALL_CATEGORY_ID
from ..config import Settings
from ..events.types import ERROR_CATEGORY, CandidateEvent

logger = logging.getLogger(__name__)


DEFAULT_MODEL = "claude-sonnet-4-20250514"

SYSTEM_PROMPT = """You research local events and answer with JSON only.
No markdown, no explanations, no text outside the JSON array."""

USER_PROMPT_TEMPLATE = """Find up-to-date information about {query} in {region} for the next 2-4 weeks.
Include dates, venues, short descriptions and how to take part.

Respond ONLY with a JSON array in exactly this format:
[{{"title": "Event name", "date_text": "DD/MM/YYYY or a DD/MM/YYYY - DD/MM/YYYY range", "location": "Specific venue", "category": "social/cultural/sports/etc", "description": "Short description", "source_text": "Where the information came from"}}]
"""

WEB_SEARCH_TOOL = {
    "type": "web_search_20250305",
    "name": "web_search",
    "max_uses": 3,
}

ERROR_TITLE = "Error searching for events"
ERROR_DESCRIPTION = "There was a problem searching for events. Please try again."


class DiscoveryError(RuntimeError):
    """Base error for discovery failures."""


class DiscoveryNotConfigured(DiscoveryError):
    """Raised when the API key is missing."""


@dataclass(slots=True)
class DiscoveryConfig:
    model: str = DEFAULT_MODEL
    max_output_tokens: int = 1000
    region: str = "Turks and Caicos"


def error_event(detail: Optional[str] = None) -> CandidateEvent:
    """Sentinel candidate returned when discovery fails."""
    description = ERROR_DESCRIPTION if not detail else f"{ERROR_DESCRIPTION} ({detail})"
    return CandidateEvent(title=ERROR_TITLE, category=ERROR_CATEGORY, description=description)


def build_anthropic_client(api_key: Optional[str]) -> Anthropic:
    """Instantiate the Anthropic SDK client."""
    if not api_key:
        raise DiscoveryNotConfigured(
            "ANTHROPIC_API_KEY is missing. Add it to your environment or .env file."
        )
    return Anthropic(api_key=api_key)


def resolve_config(settings: Settings, model_override: Optional[str] = None) -> DiscoveryConfig:
    model = model_override or settings.anthropic_model or DEFAULT_MODEL
    return DiscoveryConfig(model=model, region=settings.discovery_region)


def build_query(category: Optional[str]) -> str:
    if not category or category == ALL_CATEGORY_ID:
        return "events"
    return f"{category} events"


def fetch_events(
    category: Optional[str],
    *,
    client: Anthropic,
    config: DiscoveryConfig,
) -> List[CandidateEvent]:
    """Call the Messages API and parse the returned events (blocking).

    Raises:
        DiscoveryError: on API, transport or parse failures.
    """
    prompt = USER_PROMPT_TEMPLATE.format(query=build_query(category), region=config.region)
    try:
        response = client.messages.create(
            model=config.model,
            max_tokens=config.max_output_tokens,
            system=SYSTEM_PROMPT,
            messages=[{"role": "user", "content": [{"type": "text", "text": prompt}]}],
            tools=[WEB_SEARCH_TOOL],
        )
    except APIStatusError as exc:  # pragma: no cover - network behaviour
        raise DiscoveryError(f"Anthropic API error: {exc}") from exc
    except Exception as exc:  # pragma: no cover - network behaviour
        raise DiscoveryError(f"Anthropic request failed: {exc}") from exc

    data = _parse_json(_extract_text(response))
    if not isinstance(data, list):
        return []
    return [CandidateEvent.from_dict(item) for item in data if isinstance(item, dict)]


def _extract_text(response: Any) -> str:
    """Join the text blocks of a Messages API response."""
    chunks = []
    for block in getattr(response, "content", None) or []:
        if getattr(block, "type", None) == "text":
            chunks.append(getattr(block, "text", ""))
    text = "\n".join(chunks).strip()
    if not text:
        raise DiscoveryError("Anthropic response did not contain text content.")
    return text


def _parse_json(text: str) -> Any:
    """Parse JSON from text, dropping markdown code fences anywhere in it."""
    cleaned = re.sub(r"```json\n?", "", text)
    cleaned = re.sub(r"```\n?", "", cleaned).strip()
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise DiscoveryError(f"Discovery response was not valid JSON: {text[:200]}") from exc


class EventDiscovery:
    """Async discovery collaborator: ``await discovery(category)``."""

    def __init__(
        self,
        settings: Settings,
        *,
        client: Optional[Anthropic] = None,
        model_override: Optional[str] = None,
    ) -> None:
        self._settings = settings
        self._client = client
        self._config = resolve_config(settings, model_override)

    def _get_client(self) -> Anthropic:
        if self._client is None:
            self._client = build_anthropic_client(self._settings.anthropic_api_key)
        return self._client

    async def __call__(self, category: Optional[str] = None) -> List[CandidateEvent]:
        """Discover events for ``category``. Never raises (except cancellation)."""
        try:
            client = self._get_client()
            events = await asyncio.to_thread(
                fetch_events, category, client=client, config=self._config
            )
        except DiscoveryError as exc:
            logger.warning(f"Discovery failed: {exc}")
            return [error_event()]
        except Exception:
            logger.exception("Unexpected discovery failure")
            return [error_event()]

        logger.info(f"Discovered {len(events)} event(s) for category {category or ALL_CATEGORY_ID!r}")
        return events
