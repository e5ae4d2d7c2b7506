"""Pull request tools."""

from __future__ import annotations

from typing import Any

from src.tools.base import Param, ParamType, RiskLevel, ToolDescriptor, ToolGroup
from src.tools.builtins.params import (
    OWNER,
    PR_NUMBER,
    REF_PATTERN,
    REPO,
    limit,
    limit_opt,
    opt,
    repo_slug,
    switch,
)
from src.tools.transforms import json_or_text_output, json_output, merge_output, text_output

PR_VIEW_FIELDS = (
    "number,title,state,body,author,createdAt,updatedAt,url,headRefName,"
    "baseRefName,mergeable,additions,deletions,changedFiles"
)
PR_LIST_FIELDS = "number,title,state,author,createdAt,updatedAt,url,headRefName,baseRefName"
PR_SEARCH_FIELDS = "number,title,state,author,repository,createdAt,updatedAt,url"

PR_STATES = ("open", "closed", "merged", "all")
MERGE_METHODS = ("merge", "squash", "rebase")


def _pr(verb: str, args: dict[str, Any]) -> list[str]:
    return ["pr", verb, str(args["number"]), "--repo", repo_slug(args)]


def build_get_pr(args: dict[str, Any]) -> list[str]:
    return [*_pr("view", args), "--json", PR_VIEW_FIELDS]


def build_get_pr_diff(args: dict[str, Any]) -> list[str]:
    return _pr("diff", args)


def build_get_pr_files(args: dict[str, Any]) -> list[str]:
    return [*_pr("view", args), "--json", "files"]


def build_list_prs(args: dict[str, Any]) -> list[str]:
    argv = ["pr", "list", "--repo", repo_slug(args)]
    opt(argv, "--state", args.get("state"))
    limit_opt(argv, args.get("limit"))
    opt(argv, "--base", args.get("base"))
    opt(argv, "--head", args.get("head"))
    argv.extend(["--json", PR_LIST_FIELDS])
    return argv


def build_search_prs(args: dict[str, Any]) -> list[str]:
    argv = ["search", "prs"]
    limit_opt(argv, args.get("limit"))
    argv.extend(["--json", PR_SEARCH_FIELDS])
    # "--" so queries like "-label:bug" are not parsed as flags.
    argv.extend(["--", args["query"]])
    return argv


def build_create_pr(args: dict[str, Any]) -> list[str]:
    argv = ["pr", "create", "--repo", repo_slug(args)]
    opt(argv, "--title", args["title"])
    opt(argv, "--head", args["head"])
    # gh refuses to run non-interactively without a body.
    opt(argv, "--body", args.get("body", ""))
    opt(argv, "--base", args.get("base"))
    switch(argv, "--draft", args.get("draft"))
    return argv


def build_edit_pr(args: dict[str, Any]) -> list[str]:
    argv = _pr("edit", args)
    opt(argv, "--title", args.get("title"))
    opt(argv, "--body", args.get("body"))
    opt(argv, "--base", args.get("base"))
    return argv


def build_merge_pr(args: dict[str, Any]) -> list[str]:
    argv = _pr("merge", args)
    argv.append(f"--{args.get('method') or 'merge'}")
    switch(argv, "--delete-branch", args.get("delete_branch"))
    opt(argv, "--body", args.get("commit_message"))
    return argv


def build_close_pr(args: dict[str, Any]) -> list[str]:
    return _pr("close", args)


def build_comment_pr(args: dict[str, Any]) -> list[str]:
    argv = _pr("comment", args)
    opt(argv, "--body", args["body"])
    return argv


TOOLS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="get_pr",
        description="Get detailed information about a specific pull request.",
        params=(OWNER, REPO, PR_NUMBER),
        build=build_get_pr,
        transform=json_output,
        group=ToolGroup.pulls,
        risk_level=RiskLevel.low,
    ),
    ToolDescriptor(
        name="get_pr_diff",
        description="Get the diff/patch of a pull request.",
        params=(OWNER, REPO, PR_NUMBER),
        build=build_get_pr_diff,
        transform=text_output,
        group=ToolGroup.pulls,
        risk_level=RiskLevel.low,
    ),
    ToolDescriptor(
        name="get_pr_files",
        description="Get the list of files changed in a pull request.",
        params=(OWNER, REPO, PR_NUMBER),
        build=build_get_pr_files,
        transform=json_output,
        group=ToolGroup.pulls,
        risk_level=RiskLevel.low,
    ),
    ToolDescriptor(
        name="list_prs",
        description="List pull requests in a repository with optional filters.",
        params=(
            OWNER,
            REPO,
            Param(
                "state",
                description="Filter by state: open, closed, merged, all (default: open)",
                enum=PR_STATES,
            ),
            limit(30, "PRs"),
            Param("base", description="Filter by base branch", pattern=REF_PATTERN),
            Param("head", description="Filter by head branch", pattern=REF_PATTERN),
        ),
        build=build_list_prs,
        transform=json_output,
        group=ToolGroup.pulls,
        risk_level=RiskLevel.low,
    ),
    ToolDescriptor(
        name="search_prs",
        description="Search pull requests using GitHub search syntax.",
        params=(
            Param("query", description="Search query using GitHub search syntax", required=True),
            limit(30),
        ),
        build=build_search_prs,
        transform=json_output,
        group=ToolGroup.pulls,
        risk_level=RiskLevel.low,
    ),
    ToolDescriptor(
        name="create_pr",
        description="Create a new pull request.",
        params=(
            OWNER,
            REPO,
            Param("title", description="Pull request title", required=True),
            Param("body", description="Pull request body/description"),
            Param(
                "head",
                description="Head branch containing the changes",
                required=True,
                pattern=REF_PATTERN,
            ),
            Param(
                "base",
                description="Base branch to merge into (default: default branch)",
                pattern=REF_PATTERN,
            ),
            Param("draft", ParamType.boolean, description="Create as draft PR"),
        ),
        build=build_create_pr,
        transform=json_or_text_output,
        group=ToolGroup.pulls,
    ),
    ToolDescriptor(
        name="edit_pr",
        description="Edit an existing pull request's title, body, or base branch.",
        params=(
            OWNER,
            REPO,
            PR_NUMBER,
            Param("title", description="New title for the PR"),
            Param("body", description="New body/description for the PR"),
            Param("base", description="New base branch", pattern=REF_PATTERN),
        ),
        build=build_edit_pr,
        transform=json_or_text_output,
        group=ToolGroup.pulls,
    ),
    ToolDescriptor(
        name="merge_pr",
        description="Merge a pull request. Supports merge, squash, and rebase methods.",
        params=(
            OWNER,
            REPO,
            PR_NUMBER,
            Param(
                "method",
                description="Merge method: merge, squash, rebase (default: merge)",
                enum=MERGE_METHODS,
            ),
            Param(
                "delete_branch",
                ParamType.boolean,
                description="Delete the head branch after merging",
            ),
            Param("commit_message", description="Custom commit message"),
        ),
        build=build_merge_pr,
        transform=merge_output,
        group=ToolGroup.pulls,
    ),
    ToolDescriptor(
        name="close_pr",
        description="Close a pull request without merging.",
        params=(OWNER, REPO, PR_NUMBER),
        build=build_close_pr,
        transform=json_or_text_output,
        group=ToolGroup.pulls,
    ),
    ToolDescriptor(
        name="comment_pr",
        description="Add a comment to a pull request.",
        params=(
            OWNER,
            REPO,
            PR_NUMBER,
            Param("body", description="Comment body (Markdown supported)", required=True),
        ),
        build=build_comment_pr,
        transform=json_or_text_output,
        group=ToolGroup.pulls,
    ),
)
