"""Branch, branch protection and tag tools."""

from __future__ import annotations

from typing import Any

from src.tools.base import Lookup, Param, ParamType, RiskLevel, ToolDescriptor, ToolGroup
from src.tools.builtins.params import (
    OWNER,
    REF_PATTERN,
    REPO,
    branch,
    limit,
    repo_path,
    with_query,
)
from src.tools.transforms import extract_sha, json_output, message_output

# --- branches -------------------------------------------------------------


def build_list_branches(args: dict[str, Any]) -> list[str]:
    return ["api", repo_path(args, "branches")]


def build_resolve_from(args: dict[str, Any]) -> list[str]:
    # HEAD resolves to the tip of the default branch.
    ref = args.get("from") or "HEAD"
    return ["api", repo_path(args, "commits", ref), "--jq", ".sha"]


def build_create_branch(args: dict[str, Any]) -> list[str]:
    return [
        "api",
        "-X",
        "POST",
        repo_path(args, "git", "refs"),
        "-f",
        f"ref=refs/heads/{args['branch']}",
        "-f",
        f"sha={args['sha']}",
    ]


def build_delete_branch(args: dict[str, Any]) -> list[str]:
    return ["api", "-X", "DELETE", repo_path(args, "git", "refs", "heads", args["branch"])]


# --- branch protection ----------------------------------------------------


def build_get_branch_protection(args: dict[str, Any]) -> list[str]:
    return ["api", repo_path(args, "branches", args["branch"], "protection")]


def build_set_branch_protection(args: dict[str, Any]) -> list[str]:
    """PUT the full protection body through gh's typed -F field syntax.

    The endpoint requires required_status_checks, enforce_admins,
    required_pull_request_reviews and restrictions to be present; omitted
    sections are sent as null.
    """
    argv = [
        "api",
        "-X",
        "PUT",
        repo_path(args, "branches", args["branch"], "protection"),
        "-H",
        "Accept: application/vnd.github+json",
    ]

    checks = args.get("required_status_checks")
    if checks is None:
        argv.extend(["-F", "required_status_checks=null"])
    else:
        argv.extend(["-F", f"required_status_checks[strict]={_flag(checks.get('strict'))}"])
        contexts = checks.get("contexts") or []
        if contexts:
            for context in contexts:
                argv.extend(["-f", f"required_status_checks[contexts][]={context}"])
        else:
            argv.extend(["-F", "required_status_checks[contexts][]"])

    argv.extend(["-F", f"enforce_admins={_flag(args.get('enforce_admins'))}"])

    reviews = args.get("required_pull_request_reviews")
    if reviews is None:
        argv.extend(["-F", "required_pull_request_reviews=null"])
    else:
        count = reviews.get("required_approving_review_count")
        argv.extend([
            "-F",
            f"required_pull_request_reviews[required_approving_review_count]={1 if count is None else count}",
            "-F",
            f"required_pull_request_reviews[dismiss_stale_reviews]={_flag(reviews.get('dismiss_stale_reviews'))}",
            "-F",
            f"required_pull_request_reviews[require_code_owner_reviews]={_flag(reviews.get('require_code_owner_reviews'))}",
        ])

    argv.extend(["-F", "restrictions=null"])

    for key in ("required_linear_history", "allow_force_pushes", "allow_deletions"):
        if args.get(key) is not None:
            argv.extend(["-F", f"{key}={_flag(args[key])}"])
    return argv


def _flag(value: bool | None) -> str:
    return "true" if value else "false"


def build_delete_branch_protection(args: dict[str, Any]) -> list[str]:
    return ["api", "-X", "DELETE", repo_path(args, "branches", args["branch"], "protection")]


# --- tags -----------------------------------------------------------------


def build_list_tags(args: dict[str, Any]) -> list[str]:
    return ["api", with_query(repo_path(args, "tags"), per_page=args.get("limit"))]


def build_resolve_tag_target(args: dict[str, Any]) -> list[str]:
    return ["api", repo_path(args, "commits", "HEAD"), "--jq", ".sha"]


def build_create_tag(args: dict[str, Any]) -> list[str]:
    # Lightweight tag: a ref pointing straight at the commit.
    return [
        "api",
        "-X",
        "POST",
        repo_path(args, "git", "refs"),
        "-f",
        f"ref=refs/tags/{args['tag']}",
        "-f",
        f"sha={args['sha']}",
    ]


def build_delete_tag(args: dict[str, Any]) -> list[str]:
    return ["api", "-X", "DELETE", repo_path(args, "git", "refs", "tags", args["tag"])]


STATUS_CHECKS = Param(
    "required_status_checks",
    ParamType.object,
    description="Require status checks to pass before merging",
    properties=(
        Param(
            "strict",
            ParamType.boolean,
            description="Require branches to be up to date before merging",
        ),
        Param(
            "contexts",
            ParamType.array,
            items=ParamType.string,
            description="List of status check contexts that must pass",
        ),
    ),
)

PULL_REQUEST_REVIEWS = Param(
    "required_pull_request_reviews",
    ParamType.object,
    description="Require pull request reviews before merging",
    properties=(
        Param(
            "required_approving_review_count",
            ParamType.integer,
            description="Number of required approving reviews",
            minimum=0,
        ),
        Param(
            "dismiss_stale_reviews",
            ParamType.boolean,
            description="Dismiss stale reviews when new commits are pushed",
        ),
        Param(
            "require_code_owner_reviews",
            ParamType.boolean,
            description="Require review from code owners",
        ),
    ),
)

TOOLS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="list_branches",
        description="List all branches in a repository.",
        params=(OWNER, REPO),
        build=build_list_branches,
        transform=json_output,
        group=ToolGroup.branches,
        risk_level=RiskLevel.low,
    ),
    ToolDescriptor(
        name="create_branch",
        description=(
            "Create a new branch in a repository. Optionally specify a source "
            "branch/commit to branch from."
        ),
        params=(
            OWNER,
            REPO,
            branch("Name of the new branch to create"),
            Param(
                "from",
                description="Source branch or commit SHA to branch from (default: default branch)",
                pattern=REF_PATTERN,
            ),
        ),
        build=build_create_branch,
        transform=json_output,
        group=ToolGroup.branches,
        lookup=Lookup(target="sha", build=build_resolve_from, extract=extract_sha),
    ),
    ToolDescriptor(
        name="delete_branch",
        description="Delete a branch from a repository. Cannot delete the default branch.",
        params=(OWNER, REPO, branch("Name of the branch to delete")),
        build=build_delete_branch,
        transform=message_output("Branch '{branch}' deleted successfully"),
        group=ToolGroup.branches,
    ),
    ToolDescriptor(
        name="get_branch_protection",
        description="Get the branch protection rules for a specific branch.",
        params=(OWNER, REPO, branch("Branch name to get protection rules for")),
        build=build_get_branch_protection,
        transform=json_output,
        group=ToolGroup.protection,
        risk_level=RiskLevel.low,
    ),
    ToolDescriptor(
        name="set_branch_protection",
        description=(
            "Set branch protection rules for a branch. Includes options for required "
            "reviews, status checks, admin enforcement, etc."
        ),
        params=(
            OWNER,
            REPO,
            branch("Branch name to set protection rules for"),
            STATUS_CHECKS,
            Param(
                "enforce_admins",
                ParamType.boolean,
                description="Enforce all configured restrictions for administrators",
            ),
            PULL_REQUEST_REVIEWS,
            Param(
                "required_linear_history",
                ParamType.boolean,
                description="Require linear history (no merge commits)",
            ),
            Param("allow_force_pushes", ParamType.boolean, description="Allow force pushes"),
            Param("allow_deletions", ParamType.boolean, description="Allow branch deletions"),
        ),
        build=build_set_branch_protection,
        transform=json_output,
        group=ToolGroup.protection,
    ),
    ToolDescriptor(
        name="delete_branch_protection",
        description="Remove all branch protection rules from a branch.",
        params=(OWNER, REPO, branch("Branch name to remove protection from")),
        build=build_delete_branch_protection,
        transform=message_output("Branch protection removed from '{branch}'"),
        group=ToolGroup.protection,
    ),
    ToolDescriptor(
        name="list_tags",
        description="List git tags in a repository.",
        params=(OWNER, REPO, limit(30, "tags")),
        build=build_list_tags,
        transform=json_output,
        group=ToolGroup.tags,
        risk_level=RiskLevel.low,
    ),
    ToolDescriptor(
        name="create_tag",
        description="Create a new git tag pointing to a specific commit.",
        params=(
            OWNER,
            REPO,
            Param("tag", description="Tag name (e.g., 'v1.0.0')", required=True, pattern=REF_PATTERN),
            Param(
                "sha",
                description="Commit SHA to tag (default: HEAD of default branch)",
                pattern=r"[0-9a-f]{40}",
            ),
        ),
        build=build_create_tag,
        transform=json_output,
        group=ToolGroup.tags,
        lookup=Lookup(
            target="sha",
            build=build_resolve_tag_target,
            extract=extract_sha,
            when=lambda args: not args.get("sha"),
        ),
    ),
    ToolDescriptor(
        name="delete_tag",
        description="Delete a git tag from a repository.",
        params=(
            OWNER,
            REPO,
            Param("tag", description="Tag name to delete", required=True, pattern=REF_PATTERN),
        ),
        build=build_delete_tag,
        transform=message_output("Tag '{tag}' deleted successfully"),
        group=ToolGroup.tags,
    ),
)
