"""Declarative tool descriptors.

A tool is data, not a subclass: a parameter schema plus two pure functions.
``build`` turns validated arguments into the gh argv (without the binary);
``transform`` turns the raw ExecutionResult into a ToolResponse.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from src.executor.runner import ExecutionResult
    from src.tools.context import ToolContext


class ToolGroup(StrEnum):
    account = "account"
    repos = "repos"
    branches = "branches"
    protection = "protection"
    pulls = "pulls"
    code = "code"
    releases = "releases"
    tags = "tags"
    workflows = "workflows"
    teams = "teams"


class RiskLevel(StrEnum):
    """Retry classification.

    low: read-only (list/get/search), safe for a caller to retry.
    high: mutates GitHub state; never retried automatically.
    Undeclared tools default to 'high' (fail-closed).
    """

    low = "low"
    high = "high"


class ParamType(StrEnum):
    string = "string"
    integer = "integer"
    boolean = "boolean"
    object = "object"
    array = "array"


@dataclass(frozen=True)
class Param:
    name: str
    type: ParamType = ParamType.string
    description: str = ""
    required: bool = False
    enum: tuple[str, ...] | None = None
    pattern: str | None = None
    minimum: int | None = None
    items: ParamType | None = None  # element type for arrays
    properties: tuple[Param, ...] = ()  # fields for objects

    def json_schema(self) -> dict:
        schema: dict[str, Any] = {"type": str(self.type)}
        if self.description:
            schema["description"] = self.description
        if self.enum is not None:
            schema["enum"] = list(self.enum)
        if self.pattern is not None:
            schema["pattern"] = self.pattern
        if self.minimum is not None:
            schema["minimum"] = self.minimum
        if self.type is ParamType.array and self.items is not None:
            schema["items"] = {"type": str(self.items)}
        if self.type is ParamType.object:
            schema["properties"] = {p.name: p.json_schema() for p in self.properties}
            required = [p.name for p in self.properties if p.required]
            if required:
                schema["required"] = required
        return schema


ACCOUNT_PARAM = Param(
    "account",
    description=(
        "The account to use (e.g., 'home', 'work'). Uses default if not specified."
    ),
)


@dataclass(frozen=True)
class ToolResponse:
    """Success payload, or structured error (code + message)."""

    ok: bool
    payload: Any = None
    code: str | None = None
    message: str = ""
    retryable: bool = False

    @classmethod
    def success(cls, payload: Any) -> ToolResponse:
        return cls(ok=True, payload=payload)

    @classmethod
    def failure(cls, code: str, message: str, *, retryable: bool = False) -> ToolResponse:
        return cls(ok=False, code=code, message=message, retryable=retryable)

    def to_dict(self) -> dict:
        if self.ok:
            return {"ok": True, "result": self.payload}
        return {
            "ok": False,
            "error_code": self.code,
            "message": self.message,
            "retryable": self.retryable,
        }


CommandBuilder = Callable[[dict[str, Any]], list[str]]
OutputTransformer = Callable[["ExecutionResult", "ToolContext"], ToolResponse]


def _always(_arguments: dict[str, Any]) -> bool:
    return True


@dataclass(frozen=True)
class Lookup:
    """A preliminary gh call whose extracted value feeds the main command.

    Runs with the same account and credential as the main command, only when
    ``when(arguments)`` is true. ``extract`` raises on unexpected output.
    """

    target: str
    build: CommandBuilder
    extract: Callable[[ExecutionResult], Any]
    when: Callable[[dict[str, Any]], bool] = _always


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    build: CommandBuilder
    transform: OutputTransformer
    params: tuple[Param, ...] = ()
    group: ToolGroup = ToolGroup.repos
    risk_level: RiskLevel = RiskLevel.high
    requires_account: bool = True
    long_running: bool = False  # selects the download timeout
    lookup: Lookup | None = field(default=None)

    @property
    def parameters(self) -> dict:
        """JSON Schema for the tool's input, including the account selector."""
        params = (ACCOUNT_PARAM, *self.params) if self.requires_account else self.params
        return {
            "type": "object",
            "properties": {p.name: p.json_schema() for p in params},
            "required": [p.name for p in params if p.required],
        }
