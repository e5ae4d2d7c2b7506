"""Transport-neutral protocol boundary: tool listing, invocation, rendering.

The MCP adapter in server.py is a thin shell over these functions so the
request/response contract can be tested without a live stdio session.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.gateway.dispatch import Dispatcher
from src.infra.errors import GhMcpError
from src.tools.base import ToolResponse
from src.tools.registry import ToolRegistry

ACCOUNT_ARGUMENT = "account"


class ToolInfo(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str
    input_schema: dict[str, Any] = Field(alias="inputSchema")


class ToolCallError(GhMcpError):
    """Raised at the transport edge so the client sees an error result."""

    def __init__(self, response: ToolResponse) -> None:
        super().__init__(render_error(response), code=response.code or "INTERNAL_ERROR")
        self.retryable = response.retryable
        self.response = response


def list_tools(registry: ToolRegistry) -> list[ToolInfo]:
    return [ToolInfo.model_validate(entry) for entry in registry.get_tools_schema()]


async def invoke(
    dispatcher: Dispatcher, name: str, arguments: dict[str, Any] | None
) -> ToolResponse:
    """Split the account selector off the arguments and dispatch.

    An empty account string means the default account.
    """
    args = dict(arguments or {})
    account = args.pop(ACCOUNT_ARGUMENT, None)
    if account is not None and not isinstance(account, str):
        return ToolResponse.failure(
            "INVALID_ARGUMENTS", "Invalid argument 'account': expected string"
        )
    return await dispatcher.dispatch(name, account or None, args)


def render_payload(payload: Any) -> str:
    """Strings pass through as-is; structured payloads become indented JSON."""
    if isinstance(payload, str):
        return payload
    return json.dumps(payload, indent=2, ensure_ascii=False)


def render_error(response: ToolResponse) -> str:
    return f"[{response.code}] {response.message}"
