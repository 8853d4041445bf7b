"""CLI commands for onesignal-client.

This module provides command-line utilities for:
- Validating and dumping configuration (with secrets redacted)
- Calling the OneSignal REST API (notifications, players, CSV export)
"""
from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import structlog

from onesignal_client._version import __version__
from onesignal_client.adapters.onesignal.client import OneSignalClient
from onesignal_client.adapters.onesignal.errors import ApiError
from onesignal_client.config.load import load_settings
from onesignal_client.config.redact import redact_settings_dict
from onesignal_client.config.validate import ConfigValidationError
from onesignal_client.observability.logger import configure_logging

log = structlog.get_logger(__name__)


def cmd_validate_config(args: argparse.Namespace) -> int:
    """Validate configuration and exit with appropriate code.

    Exit codes:
        0: Configuration is valid
        1: Configuration is invalid
    """
    try:
        settings = load_settings()
    except ConfigValidationError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1
    print("✓ Configuration is valid")
    print(f"  - App id: {settings.onesignal.app_id}")
    print(f"  - API URL: {settings.onesignal.api_url}")
    print(f"  - Timeout: {settings.onesignal.timeout_seconds}s")
    return 0


def cmd_dump_config(args: argparse.Namespace) -> int:
    """Dump current configuration as JSON (with secrets redacted)."""
    try:
        settings = load_settings()
    except ConfigValidationError as e:
        print(f"✗ Failed to load configuration: {e}", file=sys.stderr)
        return 1
    data = settings.model_dump(mode="json")
    print(json.dumps(redact_settings_dict(data), indent=2, default=str))
    return 0


def _read_payload(raw: str) -> dict[str, Any]:
    """Accept inline JSON or `@path/to/file.json`."""
    text = Path(raw[1:]).read_text(encoding="utf-8") if raw.startswith("@") else raw
    payload = json.loads(text)
    if not isinstance(payload, dict):
        raise ValueError("payload must be a JSON object")
    return payload


def _print_response(response: httpx.Response) -> None:
    try:
        body = response.json()
    except ValueError:
        if response.text:
            print(response.text)
        return
    print(json.dumps(body, indent=2))


def _run_api_command(call: Callable[[OneSignalClient], httpx.Response]) -> int:
    try:
        settings = load_settings()
    except ConfigValidationError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1

    observability = settings.observability
    configure_logging(
        log_level=observability.log_level,
        log_format=observability.log_format,
    )

    try:
        with OneSignalClient.from_settings(settings) as client:
            response = call(client)
    except ApiError as e:
        log.debug("cli.api_error", kind=e.kind.value, status_code=e.status_code)
        print(f"✗ OneSignal API error ({e.kind.value}): {e.message}", file=sys.stderr)
        return 1
    except httpx.HTTPError as e:
        print(f"✗ Request to OneSignal failed: {e}", file=sys.stderr)
        return 1

    _print_response(response)
    return 0


def cmd_create_notification(args: argparse.Namespace) -> int:
    try:
        payload = _read_payload(args.payload)
    except (OSError, ValueError) as e:
        print(f"✗ Invalid notification payload: {e}", file=sys.stderr)
        return 1
    return _run_api_command(lambda client: client.create_notification(payload))


def cmd_fetch_notification(args: argparse.Namespace) -> int:
    return _run_api_command(lambda client: client.fetch_notification(args.notification_id))


def cmd_fetch_notifications(args: argparse.Namespace) -> int:
    return _run_api_command(
        lambda client: client.fetch_notifications(
            page_limit=args.limit, page_offset=args.offset, kind=args.kind
        )
    )


def cmd_fetch_players(args: argparse.Namespace) -> int:
    return _run_api_command(lambda client: client.fetch_players())


def cmd_fetch_player(args: argparse.Namespace) -> int:
    return _run_api_command(lambda client: client.fetch_player(args.player_id))


def cmd_delete_player(args: argparse.Namespace) -> int:
    return _run_api_command(lambda client: client.delete_player(args.player_id))


def cmd_csv_export(args: argparse.Namespace) -> int:
    return _run_api_command(
        lambda client: client.csv_export(
            extra_fields=args.extra_fields,
            last_active_since=args.last_active_since,
            segment_name=args.segment_name,
        )
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="onesignal-client",
        description="OneSignal REST API client utilities",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    validate_parser = subparsers.add_parser(
        "validate-config",
        help="Validate configuration and exit",
    )
    validate_parser.set_defaults(func=cmd_validate_config)

    dump_parser = subparsers.add_parser(
        "dump-config",
        help="Dump configuration as JSON (secrets redacted)",
    )
    dump_parser.set_defaults(func=cmd_dump_config)

    create_parser = subparsers.add_parser(
        "create-notification",
        help="Create a notification from a JSON payload",
    )
    create_parser.add_argument(
        "--payload",
        required=True,
        help="Notification JSON, or @path to a JSON file",
    )
    create_parser.set_defaults(func=cmd_create_notification)

    fetch_notification_parser = subparsers.add_parser(
        "fetch-notification",
        help="Fetch a single notification",
    )
    fetch_notification_parser.add_argument("notification_id")
    fetch_notification_parser.set_defaults(func=cmd_fetch_notification)

    fetch_notifications_parser = subparsers.add_parser(
        "fetch-notifications",
        help="Fetch one page of notifications",
    )
    fetch_notifications_parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Page size (default: 50)",
    )
    fetch_notifications_parser.add_argument(
        "--offset",
        type=int,
        default=None,
        help="Page offset (default: 0)",
    )
    fetch_notifications_parser.add_argument(
        "--kind",
        type=int,
        default=None,
        help="Optional notification kind filter",
    )
    fetch_notifications_parser.set_defaults(func=cmd_fetch_notifications)

    fetch_players_parser = subparsers.add_parser("fetch-players", help="Fetch players")
    fetch_players_parser.set_defaults(func=cmd_fetch_players)

    fetch_player_parser = subparsers.add_parser("fetch-player", help="Fetch a single player")
    fetch_player_parser.add_argument("player_id")
    fetch_player_parser.set_defaults(func=cmd_fetch_player)

    delete_player_parser = subparsers.add_parser("delete-player", help="Delete a player")
    delete_player_parser.add_argument("player_id")
    delete_player_parser.set_defaults(func=cmd_delete_player)

    csv_parser = subparsers.add_parser("csv-export", help="Request a CSV export of players")
    csv_parser.add_argument(
        "--extra-field",
        dest="extra_fields",
        action="append",
        default=None,
        help="Extra column to include (repeatable)",
    )
    csv_parser.add_argument(
        "--last-active-since",
        type=int,
        default=None,
        help="Only players active since this unix timestamp",
    )
    csv_parser.add_argument("--segment-name", default=None)
    csv_parser.set_defaults(func=cmd_csv_export)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
