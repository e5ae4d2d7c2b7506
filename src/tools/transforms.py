"""Output transformers shared by the built-in tools.

A transformer receives the raw ExecutionResult plus the ToolContext and
returns a ToolResponse. It decides success vs failure (exit code and, for
some commands, stderr), decodes structured payloads, and redacts the
credential from every string it forwards.
"""

from __future__ import annotations

import base64
import binascii
import json
import re
from typing import Any

from src.executor.runner import ExecutionResult
from src.infra.errors import ExecutionFailure, TransformError
from src.tools.base import OutputTransformer, ToolResponse
from src.tools.context import ToolContext

MAX_ERROR_CHARS = 2000
_SHA_RE = re.compile(r"[0-9a-f]{40}")

# (code, retryable, pattern) checked in order against gh's error text.
_FAILURE_PATTERNS: tuple[tuple[str, bool, re.Pattern[str]], ...] = (
    ("RATE_LIMITED", True, re.compile(r"rate limit|HTTP 429|abuse detection", re.IGNORECASE)),
    ("AUTH_FAILED", False, re.compile(r"HTTP 401|Bad credentials|authentication required", re.IGNORECASE)),
    ("NOT_FOUND", False, re.compile(r"HTTP 404\b|Could not resolve to an?\b")),
)


def _truncate(text: str, limit: int = MAX_ERROR_CHARS) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + f"... [truncated {len(text) - limit} chars]"


def error_text(result: ExecutionResult) -> str:
    """gh's own explanation: stderr, or stdout when stderr is empty."""
    stderr = result.stderr_text().strip()
    return stderr or result.stdout_text().strip()


def classify_failure(result: ExecutionResult) -> ExecutionFailure:
    """Map a nonzero gh exit to a coded ExecutionFailure (unredacted)."""
    text = error_text(result)
    for code, retryable, pattern in _FAILURE_PATTERNS:
        if pattern.search(text):
            return ExecutionFailure(
                _truncate(text), code=code, exit_code=result.exit_code, retryable=retryable
            )
    message = text or f"gh exited with status {result.exit_code}"
    return ExecutionFailure(_truncate(message), exit_code=result.exit_code)


def failure_response(result: ExecutionResult, ctx: ToolContext) -> ToolResponse:
    err = classify_failure(result)
    return ToolResponse.failure(err.code, ctx.redact(err.message), retryable=err.retryable)


def parse_json(result: ExecutionResult) -> Any:
    """Decode stdout as JSON. Empty stdout is None. Raises TransformError."""
    text = result.stdout_text().strip()
    if not text:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise TransformError(
            f"Failed to parse gh output as JSON: {e.msg}. Output: {_truncate(text, 500)}"
        ) from e


def json_output(result: ExecutionResult, ctx: ToolContext) -> ToolResponse:
    if not result.ok:
        return failure_response(result, ctx)
    try:
        data = parse_json(result)
    except TransformError as e:
        return ToolResponse.failure(e.code, ctx.redact(e.message))
    return ToolResponse.success(ctx.redact_payload(data))


def json_or_text_output(result: ExecutionResult, ctx: ToolContext) -> ToolResponse:
    """For gh commands that print a URL or a status line instead of JSON."""
    if not result.ok:
        return failure_response(result, ctx)
    text = result.stdout_text().strip()
    if text:
        try:
            return ToolResponse.success(ctx.redact_payload(json.loads(text)))
        except json.JSONDecodeError:
            return ToolResponse.success(ctx.redact(text))
    # Human-readable confirmations (e.g. "✓ Closed pull request #3") go to stderr.
    status = result.stderr_text().strip()
    return ToolResponse.success(ctx.redact(status) if status else "OK")


def text_output(result: ExecutionResult, ctx: ToolContext) -> ToolResponse:
    if not result.ok:
        return failure_response(result, ctx)
    return ToolResponse.success(ctx.redact(result.stdout_text()))


def message_output(template: str) -> OutputTransformer:
    """Fixed confirmation built from the tool arguments, e.g. for DELETEs."""

    def transform(result: ExecutionResult, ctx: ToolContext) -> ToolResponse:
        if not result.ok:
            return failure_response(result, ctx)
        return ToolResponse.success(ctx.redact(template.format(**ctx.arguments)))

    return transform


def file_content_output(result: ExecutionResult, ctx: ToolContext) -> ToolResponse:
    """Contents API: decode base64 file bodies to text when they are UTF-8.

    Directory listings, binaries and symlink/submodule entries come back as
    the raw JSON object.
    """
    response = json_output(result, ctx)
    if not response.ok or not isinstance(response.payload, dict):
        return response
    payload = response.payload
    content = payload.get("content")
    if not isinstance(content, str) or payload.get("encoding", "base64") != "base64":
        return response
    try:
        text = base64.b64decode(content.replace("\n", ""), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return response
    return ToolResponse.success(ctx.redact(text))


_MERGED_RE = re.compile(r"Merged pull request|was already merged", re.IGNORECASE)
_UNMERGEABLE_RE = re.compile(
    r"not mergeable|merge conflict|is in clean status|required status check|"
    r"review is required|base branch policy",
    re.IGNORECASE,
)


def merge_output(result: ExecutionResult, ctx: ToolContext) -> ToolResponse:
    """gh pr merge: exit status alone does not tell the whole story.

    A merge can succeed while a follow-up step (branch deletion) fails with a
    nonzero exit; that is reported as success with warnings. Merge refusals
    are classified NOT_MERGEABLE.
    """
    combined = f"{result.stdout_text()}\n{result.stderr_text()}".strip()
    if result.ok:
        return ToolResponse.success(
            {"merged": True, "number": ctx.arguments.get("number"), "output": ctx.redact(combined)}
        )
    if _MERGED_RE.search(combined):
        return ToolResponse.success(
            {
                "merged": True,
                "number": ctx.arguments.get("number"),
                "warnings": ctx.redact(_truncate(error_text(result))),
            }
        )
    if _UNMERGEABLE_RE.search(combined):
        return ToolResponse.failure("NOT_MERGEABLE", ctx.redact(_truncate(error_text(result))))
    return failure_response(result, ctx)


def extract_sha(result: ExecutionResult) -> str:
    """Lookup extractor for ``gh api .../commits/<ref> --jq .sha``."""
    if not result.ok:
        raise classify_failure(result)
    sha = result.stdout_text().strip().strip('"')
    if not _SHA_RE.fullmatch(sha):
        raise TransformError(f"Expected a commit SHA, got: {_truncate(sha, 100)!r}")
    return sha
