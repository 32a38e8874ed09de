"""Command line client for the Chaum-Pedersen authentication service."""

from __future__ import annotations

import argparse
import json
import logging
import sys

import httpx

from cpauth.client import ChaumPedersenClient
from cpauth.config import load_settings
from cpauth.exceptions import AuthError


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--server",
        default=None,
        help="Base URL of the service (default: $CPAUTH_SERVER_URL or http://127.0.0.1:8000)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("register", "Register a user derived from a password"),
        ("login", "Authenticate a registered user"),
    ):
        command = subparsers.add_parser(name, help=help_text)
        command.add_argument("-n", "--name", required=True, help="User name")
        command.add_argument("-p", "--password", required=True, help="User password")

    subparsers.add_parser("params", help="Show the group parameters used by the server")

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    namespace = parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=logging.DEBUG if namespace.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    server_url = namespace.server or load_settings().server_url

    with ChaumPedersenClient(server_url) as client:
        try:
            if namespace.command == "register":
                client.register(namespace.name, namespace.password)
                print(json.dumps({"user": namespace.name, "registered": True}, indent=2))
                return 0

            if namespace.command == "login":
                session_id = client.login(namespace.name, namespace.password)
                print(json.dumps({"user": namespace.name, "session_id": session_id}, indent=2))
                return 0

            if namespace.command == "params":
                print(json.dumps(client.parameters(), indent=2))
                return 0
        except (AuthError, httpx.HTTPError) as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1

    raise RuntimeError("Unreachable")


if __name__ == "__main__":
    raise SystemExit(main())
