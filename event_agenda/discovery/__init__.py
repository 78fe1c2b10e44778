"""Event discovery collaborator."""
from __future__ import annotations

from .client import (
    DEFAULT_MODEL,
    DiscoveryConfig,
    DiscoveryError,
    DiscoveryNotConfigured,
    EventDiscovery,
    build_anthropic_client,
    error_event,
    fetch_events,
    resolve_config,
)


__all__ = [
    "DEFAULT_MODEL",
    "DiscoveryConfig",
    "DiscoveryError",
    "DiscoveryNotConfigured",
    "EventDiscovery",
    "build_anthropic_client",
    "error_event",
    "fetch_events",
    "resolve_config",
]
