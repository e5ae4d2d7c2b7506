"""Custom exception hierarchy for the GitHub tool server.

All application-specific exceptions inherit from GhMcpError, which carries an
error code the protocol boundary surfaces verbatim to the calling agent.
``retryable`` tells the caller whether the same call may succeed later.
"""

from __future__ import annotations


class GhMcpError(Exception):
    """Base exception for all server errors."""

    retryable: bool = False

    def __init__(self, message: str, *, code: str = "INTERNAL_ERROR") -> None:
        super().__init__(message)
        self.code = code

    @property
    def message(self) -> str:
        return str(self)


class ConfigError(GhMcpError):
    """Accounts file missing, unparsable or inconsistent. Fatal at startup."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="CONFIG_ERROR")


class GhNotFoundError(GhMcpError):
    """The gh binary is not installed or not on PATH. Fatal at startup."""

    def __init__(self, message: str = "gh CLI not found") -> None:
        super().__init__(message, code="GH_NOT_FOUND")


class UnknownAccountError(GhMcpError):
    def __init__(self, alias: str, available: list[str] | None = None) -> None:
        message = f"Account not found: {alias}"
        if available:
            message += f" (configured: {', '.join(sorted(available))})"
        super().__init__(message, code="UNKNOWN_ACCOUNT")
        self.alias = alias


class CredentialError(GhMcpError):
    """Token file missing, unreadable or empty.

    Messages name the token path only; token content never appears here.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message, code="CREDENTIAL_ERROR")


class UnknownToolError(GhMcpError):
    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Unknown tool: {tool_name}", code="UNKNOWN_TOOL")
        self.tool_name = tool_name


class InvalidArgumentsError(GhMcpError):
    """Arguments do not match the tool's parameter schema."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"Invalid argument '{field}': {reason}", code="INVALID_ARGUMENTS")
        self.field = field


class ToolTimeoutError(GhMcpError):
    """The child process exceeded its deadline and was killed."""

    retryable = True

    def __init__(self, message: str) -> None:
        super().__init__(message, code="TIMEOUT")


class ExecutionFailure(GhMcpError):
    """gh could not be run, or exited nonzero without a more specific class.

    ``code`` may be narrowed by output transformers (RATE_LIMITED,
    AUTH_FAILED, NOT_FOUND, NOT_MERGEABLE).
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "EXECUTION_FAILED",
        exit_code: int | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message, code=code)
        self.exit_code = exit_code
        self.retryable = retryable


class TransformError(GhMcpError):
    """gh succeeded but its output did not have the expected shape."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="TRANSFORM_ERROR")
