"""Core dispatch: lookup → validate → account → credential → build → execute → transform.

Every failure on this path is returned as an error ToolResponse, never raised,
so one bad call cannot take down the server. asyncio.CancelledError is the
exception: it propagates after the executor has killed the child.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

import structlog

from src.accounts.credentials import CredentialStore
from src.accounts.registry import AccountRegistry
from src.config.settings import Settings
from src.executor.runner import CommandExecutor
from src.infra.errors import GhMcpError, UnknownToolError
from src.infra.redaction import known_secrets, redact
from src.tools.base import ToolDescriptor, ToolResponse
from src.tools.context import ToolContext
from src.tools.registry import ToolRegistry
from src.tools.schema import validate_arguments

logger = structlog.get_logger()


@dataclass(frozen=True)
class AppContext:
    """Everything a dispatch needs, built once at startup and passed explicitly."""

    settings: Settings
    accounts: AccountRegistry
    credentials: CredentialStore
    tools: ToolRegistry
    executor: CommandExecutor


class Dispatcher:
    def __init__(self, ctx: AppContext) -> None:
        self._ctx = ctx

    @property
    def context(self) -> AppContext:
        return self._ctx

    async def dispatch(
        self,
        tool_name: str,
        account_alias: str | None,
        arguments: dict[str, Any] | None,
    ) -> ToolResponse:
        started = time.monotonic()
        credential: str | None = None
        try:
            tool = self._ctx.tools.get(tool_name)
            if tool is None:
                raise UnknownToolError(tool_name)

            args = validate_arguments(tool.params, arguments or {})

            alias: str | None = None
            if tool.requires_account:
                account = self._ctx.accounts.resolve(account_alias)
                alias = account.alias
                credential = await self._ctx.credentials.credential_for(account)

            timeout = self._timeout_for(tool)
            if tool.lookup is not None and tool.lookup.when(args):
                lookup_result = await self._ctx.executor.execute(
                    tool.lookup.build(args), credential, timeout
                )
                args = {**args, tool.lookup.target: tool.lookup.extract(lookup_result)}

            argv = tool.build(args)
            result = await self._ctx.executor.execute(argv, credential, timeout)

            ctx = ToolContext(
                tool_name=tool.name, account=alias, arguments=args, credential=credential
            )
            response = tool.transform(result, ctx)
        except GhMcpError as e:
            response = ToolResponse.failure(
                e.code, self._redact(e.message, credential), retryable=e.retryable
            )
        except Exception:
            logger.exception("tool_internal_error", tool_name=tool_name)
            response = ToolResponse.failure(
                "INTERNAL_ERROR", f"Internal error while running {tool_name}"
            )

        elapsed_ms = int((time.monotonic() - started) * 1000)
        if response.ok:
            logger.info(
                "tool_dispatched",
                tool_name=tool_name,
                account=account_alias,
                elapsed_ms=elapsed_ms,
            )
        else:
            logger.warning(
                "tool_failed",
                tool_name=tool_name,
                account=account_alias,
                error_code=response.code,
                message=response.message,
                elapsed_ms=elapsed_ms,
            )
        return response

    def _timeout_for(self, tool: ToolDescriptor) -> float:
        executor = self._ctx.settings.executor
        return executor.download_timeout_s if tool.long_running else executor.default_timeout_s

    @staticmethod
    def _redact(message: str, credential: str | None) -> str:
        secrets = set(known_secrets.snapshot())
        if credential:
            secrets.add(credential)
        return redact(message, secrets)
