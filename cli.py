#!/usr/bin/env python3
"""Event Agenda CLI."""
from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Iterable

from event_agenda.agenda.calendar import CalendarDay
from event_agenda.config import ConfigError, configure_logging, load_settings
from event_agenda.discovery import EventDiscovery
from event_agenda.events.types import CandidateEvent, EventStatus
from event_agenda.session import AgendaSession


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agenda",
        description="Discover local events and manage a personal agenda.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    discover_parser = subparsers.add_parser(
        "discover",
        help="Run one discovery round and print the candidate events.",
    )
    discover_parser.add_argument(
        "--category",
        default="all",
        help="Category id to search (default: all).",
    )
    discover_parser.add_argument(
        "--anthropic-model",
        help="Override Anthropic model for discovery (otherwise env/default is used).",
    )

    calendar_parser = subparsers.add_parser(
        "calendar",
        help="Print the saved events of an exported agenda grouped by date.",
    )
    calendar_parser.add_argument("snapshot", help="Path to an agenda JSON export.")

    subparsers.add_parser(
        "check-config",
        help="Validate the environment configuration.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP API.",
    )
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def _format_candidates(events: Iterable[CandidateEvent]) -> str:
    lines = []
    for event in events:
        if event.is_error:
            lines.append(f"! {event.title}: {event.description}")
            continue
        lines.append(f"- {event.title} | {event.date_text} | {event.location}")
        if event.description:
            lines.append(f"    {event.description}")
    return "\n".join(lines) if lines else "No events found."


def _format_calendar(days: Iterable[CalendarDay]) -> str:
    lines = []
    for day in days:
        heading = day.date.date().isoformat() if day.date else f"{day.date_key} (unparsed)"
        lines.append(heading)
        for event in day.events:
            status = "-" if event.status is EventStatus.UNSET else event.status.value
            lines.append(f"  - {event.title} [{status}] {event.location}")
    return "\n".join(lines) if lines else "Agenda is empty."


def _cmd_discover(category: str, anthropic_model: str | None) -> int:
    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1
    configure_logging(settings.log_level)

    async def run() -> list[CandidateEvent]:
        discovery = EventDiscovery(settings, model_override=anthropic_model)
        async with AgendaSession(settings, discover=discovery) as session:
            return await session.search(category) or []

    events = asyncio.run(run())
    print(_format_candidates(events))
    return 0


def _cmd_calendar(snapshot: str) -> int:
    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    async def run() -> tuple[str | None, list[CalendarDay]]:
        async with AgendaSession(settings) as session:
            error = session.import_file(snapshot)
            return error, session.calendar()

    error, days = asyncio.run(run())
    if error:
        print(error, file=sys.stderr)
        return 1
    print(_format_calendar(days))
    return 0


def _cmd_check_config() -> int:
    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Configuration check failed: {exc}", file=sys.stderr)
        return 1

    print(
        f"environment={settings.environment}",
        f"timezone={settings.timezone}",
        f"region={settings.discovery_region}",
    )
    print(
        "Anthropic key loaded:",
        "yes" if settings.anthropic_api_key else "no",
        "| Polling:",
        f"every {settings.poll_interval_minutes:g} min" if settings.poll_enabled else "off",
    )
    return 0


def _cmd_serve(host: str, port: int) -> int:
    import uvicorn

    uvicorn.run("api.main:app", host=host, port=port)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "discover":
        return _cmd_discover(
            category=args.category,
            anthropic_model=getattr(args, "anthropic_model", None),
        )
    if args.command == "calendar":
        return _cmd_calendar(args.snapshot)
    if args.command == "check-config":
        return _cmd_check_config()
    if args.command == "serve":
        return _cmd_serve(host=args.host, port=args.port)

    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
