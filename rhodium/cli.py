"""Command-line helpers for signing, verifying, and parsing webhook payloads."""

from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path

import msgspec

from rhodium.adapters.config import AdapterConfig
from rhodium.adapters.errors import AdapterError
from rhodium.adapters.github import EVENT_HEADER, SIGNATURE_HEADER, GitHubAdapter
from rhodium.adapters.signature import signature_header_value


def _adapter(secret: str | None) -> GitHubAdapter:
    config = AdapterConfig.from_env("github")
    if secret is not None:
        config = dataclasses.replace(config, webhook_secret=secret)
    return GitHubAdapter(config)


def _sign(args: argparse.Namespace) -> int:
    payload = args.payload.read_bytes()
    print(signature_header_value(args.secret, payload))
    return 0


def _verify(args: argparse.Namespace) -> int:
    payload = args.payload.read_bytes()
    adapter = _adapter(args.secret)
    if adapter.config.webhook_secret is None:
        print("no webhook secret given; pass --secret or set the environment")
        return 1
    if adapter.verify_webhook(payload, {SIGNATURE_HEADER: args.signature}):
        print(f"signature valid for {args.payload}")
        return 0
    print(f"signature does not match {args.payload}")
    return 1


def _parse(args: argparse.Namespace) -> int:
    payload = args.payload.read_bytes()
    event = _adapter(None).parse_webhook(payload, {EVENT_HEADER: args.event})
    sys.stdout.write(msgspec.json.format(msgspec.json.encode(event)).decode("utf-8"))
    sys.stdout.write("\n")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    commands = parser.add_subparsers(dest="command", required=True)

    sign = commands.add_parser("sign", help="Print the signature header value")
    sign.add_argument("payload", type=Path, help="Webhook body file")
    sign.add_argument("--secret", required=True, help="Webhook secret")
    sign.set_defaults(handler=_sign)

    verify = commands.add_parser("verify", help="Check a signature header value")
    verify.add_argument("payload", type=Path, help="Webhook body file")
    verify.add_argument(
        "--signature", required=True, help="Signature header value (sha256=...)"
    )
    verify.add_argument(
        "--secret",
        default=None,
        help="Webhook secret (default: RHODIUM_GITHUB_WEBHOOK_SECRET)",
    )
    verify.set_defaults(handler=_verify)

    parse = commands.add_parser("parse", help="Print the canonical event as JSON")
    parse.add_argument("payload", type=Path, help="Webhook body file")
    parse.add_argument("--event", required=True, help="Webhook event type header")
    parse.set_defaults(handler=_parse)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the ``rhodium-webhook`` command.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command-line arguments. ``None`` defaults to ``sys.argv``.

    Returns
    -------
    int
        Exit code: 0 on success, 1 when verification or parsing fails.

    """
    args = _build_parser().parse_args(argv)
    try:
        return args.handler(args)
    except AdapterError as exc:
        print(f"{args.command} failed: {exc}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
