"""Account and repository tools."""

from __future__ import annotations

from typing import Any

from src.tools.base import Param, ParamType, RiskLevel, ToolDescriptor, ToolGroup
from src.tools.builtins.params import (
    LOGIN_PATTERN,
    OWNER,
    REPO,
    REPO_PATTERN,
    limit,
    limit_opt,
    opt,
    repo_path,
    repo_slug,
)
from src.tools.transforms import json_or_text_output, json_output

REPO_VIEW_FIELDS = (
    "name,description,visibility,defaultBranchRef,url,createdAt,updatedAt,"
    "owner,stargazerCount,forkCount,issues,pullRequests"
)
REPO_LIST_FIELDS = "name,description,visibility,updatedAt,url"


def build_get_me(args: dict[str, Any]) -> list[str]:
    return ["api", "user"]


def build_create_repo(args: dict[str, Any]) -> list[str]:
    name = args["name"]
    if args.get("org"):
        name = f"{args['org']}/{name}"
    argv = ["repo", "create", name]
    opt(argv, "--description", args.get("description"))
    argv.append("--private" if args.get("private") else "--public")
    return argv


def build_list_repos(args: dict[str, Any]) -> list[str]:
    argv = ["repo", "list"]
    if args.get("owner"):
        argv.append(args["owner"])
    limit_opt(argv, args.get("limit"))
    argv.extend(["--json", REPO_LIST_FIELDS])
    return argv


def build_get_repo(args: dict[str, Any]) -> list[str]:
    return ["repo", "view", repo_slug(args), "--json", REPO_VIEW_FIELDS]


def build_archive_repo(args: dict[str, Any]) -> list[str]:
    return ["api", "-X", "PATCH", repo_path(args), "-F", "archived=true"]


TOOLS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="get_me",
        description=(
            "Get the authenticated GitHub user's information. Use the 'account' "
            "parameter to specify which account to use (e.g., 'home', 'work'). "
            "If not specified, the default account will be used."
        ),
        build=build_get_me,
        transform=json_output,
        group=ToolGroup.account,
        risk_level=RiskLevel.low,
    ),
    ToolDescriptor(
        name="create_repo",
        description="Create a new GitHub repository. Can create personal or organization repos.",
        params=(
            Param(
                "name",
                description="Name of the repository to create",
                required=True,
                pattern=REPO_PATTERN,
            ),
            Param("description", description="Description of the repository"),
            Param(
                "private",
                ParamType.boolean,
                description="Whether the repository should be private (default: false)",
            ),
            Param(
                "org",
                description="Organization to create the repo in (omit for personal repo)",
                pattern=LOGIN_PATTERN,
            ),
        ),
        build=build_create_repo,
        transform=json_or_text_output,
    ),
    ToolDescriptor(
        name="list_repos",
        description=(
            "List repositories for a user or organization. "
            "Defaults to authenticated user's repos."
        ),
        params=(
            Param(
                "owner",
                description="Owner (user or org) to list repos for. Defaults to authenticated user.",
                pattern=LOGIN_PATTERN,
            ),
            limit(30, "repos"),
        ),
        build=build_list_repos,
        transform=json_output,
        risk_level=RiskLevel.low,
    ),
    ToolDescriptor(
        name="get_repo",
        description="Get detailed information about a specific repository.",
        params=(OWNER, REPO),
        build=build_get_repo,
        transform=json_output,
        risk_level=RiskLevel.low,
    ),
    ToolDescriptor(
        name="archive_repo",
        description=(
            "Archive a repository. This is a safer alternative to deletion - the repo "
            "becomes read-only but can be unarchived."
        ),
        params=(OWNER, REPO),
        build=build_archive_repo,
        transform=json_output,
    ),
)
