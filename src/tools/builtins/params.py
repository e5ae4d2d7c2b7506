"""Parameter definitions and argv helpers shared across the catalog."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote, urlencode

from src.tools.base import Param, ParamType

# Positional values must never look like flags.
LOGIN_PATTERN = r"[A-Za-z0-9][A-Za-z0-9-]{0,38}"
REPO_PATTERN = r"(?!\.{1,2}$)[A-Za-z0-9._][A-Za-z0-9._-]{0,99}"
# Git ref rules: no leading "-", no ".." and no component starting with ".",
# no URL or revision metacharacters.
REF_PATTERN = r"(?!.*\.\.)(?!\.)(?!.*/\.)[^-\s?#%\\~^:*\[][^\s?#%\\~^:*\[]*"
# Repository file path: no "." or ".." segments.
PATH_PATTERN = r"(?!(?:.*/)?\.{1,2}(?:/|$))[^\s].*"
SLUG_PATTERN = r"(?!\.{1,2}$)[A-Za-z0-9._][A-Za-z0-9._-]*"

OWNER = Param(
    "owner",
    description="Repository owner (user or organization)",
    required=True,
    pattern=LOGIN_PATTERN,
)
REPO = Param("repo", description="Repository name", required=True, pattern=REPO_PATTERN)
ORG = Param("org", description="Organization name", required=True, pattern=LOGIN_PATTERN)
PR_NUMBER = Param(
    "number", ParamType.integer, description="Pull request number", required=True, minimum=1
)
RUN_ID = Param("run_id", ParamType.integer, description="Workflow run ID", required=True, minimum=1)
RELEASE_TAG = Param(
    "tag", description="Release tag (e.g., 'v1.0.0')", required=True, pattern=REF_PATTERN
)


def limit(default: int = 30, noun: str = "results") -> Param:
    return Param(
        "limit",
        ParamType.integer,
        description=f"Maximum number of {noun} to return (default: {default})",
        minimum=1,
    )


def branch(description: str) -> Param:
    return Param("branch", description=description, required=True, pattern=REF_PATTERN)


def repo_slug(args: dict[str, Any]) -> str:
    return f"{args['owner']}/{args['repo']}"


def repo_path(args: dict[str, Any], *parts: Any) -> str:
    """REST path under repos/{owner}/{repo}; each part is percent-encoded, "/" kept."""
    suffix = "/".join(quote(str(p), safe="/") for p in parts)
    base = f"repos/{args['owner']}/{args['repo']}"
    return f"{base}/{suffix}" if suffix else base


def with_query(endpoint: str, **query: Any) -> str:
    """Append the non-None query parameters, URL-encoded, in keyword order."""
    pairs = [(k, _query_value(v)) for k, v in query.items() if v is not None]
    if not pairs:
        return endpoint
    return f"{endpoint}?{urlencode(pairs)}"


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def opt(argv: list[str], flag: str, value: Any) -> None:
    """Append ``--flag=value`` when value is not None (never as two args)."""
    if value is not None:
        argv.append(f"{flag}={value}")


def switch(argv: list[str], flag: str, enabled: bool | None) -> None:
    if enabled:
        argv.append(flag)


def limit_opt(argv: list[str], value: int | None) -> None:
    if value is not None:
        argv.extend(["--limit", str(value)])
