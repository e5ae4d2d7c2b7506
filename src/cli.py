"""Command-line entry point: serve, accounts, test.

Exit status is 0 on success and 1 on a fatal error (bad config, gh missing,
failed account test). Human-readable output goes to stdout; logs go to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence
from pathlib import Path

import structlog
from pydantic import ValidationError

from src.accounts.config import load_config, resolve_config_path
from src.accounts.credentials import CredentialStore
from src.accounts.registry import AccountRegistry
from src.config.settings import Settings, get_settings
from src.constants import PROJECT_NAME, VERSION
from src.executor.runner import CommandExecutor
from src.gateway.server import build_context, serve
from src.infra.errors import GhMcpError
from src.infra.logging import setup_logging
from src.infra.redaction import known_secrets, redact

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROJECT_NAME,
        description="GitHub MCP server with multi-account support",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to the accounts file (default: user config dir, then ./)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("serve", help="Run the MCP server on stdio")
    subparsers.add_parser("accounts", help="List configured accounts")
    test_parser = subparsers.add_parser("test", help="Test gh CLI and account authentication")
    test_parser.add_argument(
        "account",
        nargs="?",
        default=None,
        help="Account alias to test (default: the default account)",
    )
    return parser


def run_accounts(config_path: Path | None) -> int:
    config = load_config(resolve_config_path(config_path))
    registry = AccountRegistry(config)

    print("Configured accounts:")
    print()
    for account in registry.accounts():
        marker = " (default)" if account.alias == registry.default_alias else ""
        status = "✅" if account.expanded_token_path.exists() else "❌"
        print(f"  {status} {account.alias}{marker}")
        print(f"     Token: {account.token_path}")
    return 0


async def run_test(settings: Settings, config_path: Path | None, alias: str | None) -> int:
    config = load_config(resolve_config_path(config_path))
    registry = AccountRegistry(config)
    account = registry.resolve(alias)
    executor = CommandExecutor(
        settings.executor.gh_binary, kill_grace_s=settings.executor.kill_grace_s
    )
    timeout = settings.executor.default_timeout_s

    print(f"Testing account: {account.alias}")
    print()

    print("Checking gh CLI... ", end="", flush=True)
    try:
        executor.find_binary()
        version = await executor.version(timeout)
    except GhMcpError as e:
        print(f"❌ {e.message}")
        return 1
    print(f"✅ {version}")

    print("Testing authentication... ", end="", flush=True)
    try:
        token = await CredentialStore().credential_for(account)
        result = await executor.execute(["api", "user", "--jq", ".login"], token, timeout)
    except GhMcpError as e:
        print(f"❌ {redact(e.message, known_secrets.snapshot())}")
        return 1
    if not result.ok:
        detail = result.stderr_text().strip() or f"gh exited with status {result.exit_code}"
        print(f"❌ {redact(detail, (token,))}")
        return 1
    login = result.stdout_text().strip().strip('"') or "unknown"
    print(f"✅ Authenticated as: {login}")
    return 0


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Error: invalid settings: {e}", file=sys.stderr)
        return 1

    log_level = "DEBUG" if args.verbose else settings.log.level
    setup_logging(json_output=settings.log.json_output, log_level=log_level)

    try:
        if args.command == "serve":
            ctx = build_context(settings, args.config)
            asyncio.run(serve(ctx))
            return 0
        if args.command == "accounts":
            return run_accounts(args.config)
        if args.command == "test":
            return asyncio.run(run_test(settings, args.config, args.account))
    except GhMcpError as e:
        logger.error("startup_failed", error_code=e.code, message=e.message)
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 0
    parser.error(f"unknown command: {args.command}")
    return 2


def main() -> int:
    return run_cli()


if __name__ == "__main__":
    sys.exit(main())
