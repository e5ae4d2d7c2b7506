"""Code and content tools."""

from __future__ import annotations

from typing import Any

from src.tools.base import Param, RiskLevel, ToolDescriptor, ToolGroup
from src.tools.builtins.params import (
    OWNER,
    PATH_PATTERN,
    REF_PATTERN,
    REPO,
    limit,
    limit_opt,
    repo_path,
    with_query,
)
from src.tools.transforms import file_content_output, json_output

CODE_SEARCH_FIELDS = "path,repository,textMatches"


def build_get_file(args: dict[str, Any]) -> list[str]:
    endpoint = repo_path(args, "contents", args["path"].lstrip("/"))
    return ["api", with_query(endpoint, ref=args.get("ref"))]


def build_search_code(args: dict[str, Any]) -> list[str]:
    argv = ["search", "code"]
    limit_opt(argv, args.get("limit"))
    argv.extend(["--json", CODE_SEARCH_FIELDS, "--", args["query"]])
    return argv


def build_list_commits(args: dict[str, Any]) -> list[str]:
    endpoint = with_query(
        repo_path(args, "commits"),
        sha=args.get("sha"),
        path=args.get("path"),
        author=args.get("author"),
        per_page=args.get("limit"),
    )
    return ["api", endpoint]


TOOLS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="get_file",
        description="Get the contents of a file from a repository.",
        params=(
            OWNER,
            REPO,
            Param(
                "path",
                description="File path within the repository",
                required=True,
                pattern=PATH_PATTERN,
            ),
            Param(
                "ref",
                description="Git ref (branch, tag, or commit SHA). Defaults to default branch.",
                pattern=REF_PATTERN,
            ),
        ),
        build=build_get_file,
        transform=file_content_output,
        group=ToolGroup.code,
        risk_level=RiskLevel.low,
    ),
    ToolDescriptor(
        name="search_code",
        description="Search code using GitHub code search syntax.",
        params=(
            Param(
                "query",
                description="Search query using GitHub code search syntax",
                required=True,
            ),
            limit(30),
        ),
        build=build_search_code,
        transform=json_output,
        group=ToolGroup.code,
        risk_level=RiskLevel.low,
    ),
    ToolDescriptor(
        name="list_commits",
        description="List commits in a repository with optional filters.",
        params=(
            OWNER,
            REPO,
            Param(
                "sha",
                description="Branch or commit SHA to list commits from",
                pattern=REF_PATTERN,
            ),
            Param("path", description="File path to filter commits by"),
            Param("author", description="Author username or email to filter commits by"),
            limit(30, "commits"),
        ),
        build=build_list_commits,
        transform=json_output,
        group=ToolGroup.code,
        risk_level=RiskLevel.low,
    ),
)
