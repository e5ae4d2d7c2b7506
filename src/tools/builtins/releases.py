"""Release tools."""

from __future__ import annotations

from typing import Any

from src.tools.base import Param, ParamType, RiskLevel, ToolDescriptor, ToolGroup
from src.tools.builtins.params import (
    OWNER,
    REF_PATTERN,
    RELEASE_TAG,
    REPO,
    limit,
    limit_opt,
    opt,
    repo_slug,
    switch,
)
from src.tools.transforms import json_or_text_output, json_output, message_output

RELEASE_LIST_FIELDS = "tagName,name,isDraft,isPrerelease,isLatest,createdAt,publishedAt"
RELEASE_VIEW_FIELDS = (
    "tagName,name,body,author,createdAt,publishedAt,isDraft,isPrerelease,assets,url"
)


def _release(verb: str, args: dict[str, Any]) -> list[str]:
    return ["release", verb, args["tag"], "--repo", repo_slug(args)]


def build_list_releases(args: dict[str, Any]) -> list[str]:
    argv = ["release", "list", "--repo", repo_slug(args)]
    limit_opt(argv, args.get("limit"))
    argv.extend(["--json", RELEASE_LIST_FIELDS])
    return argv


def build_get_release(args: dict[str, Any]) -> list[str]:
    return [*_release("view", args), "--json", RELEASE_VIEW_FIELDS]


def build_create_release(args: dict[str, Any]) -> list[str]:
    argv = _release("create", args)
    opt(argv, "--title", args.get("title"))
    opt(argv, "--notes", args.get("notes"))
    opt(argv, "--target", args.get("target"))
    switch(argv, "--draft", args.get("draft"))
    switch(argv, "--prerelease", args.get("prerelease"))
    switch(argv, "--generate-notes", args.get("generate_notes"))
    if args.get("notes") is None and not args.get("generate_notes"):
        # Without notes gh would open an editor.
        opt(argv, "--notes", "")
    return argv


def build_delete_release(args: dict[str, Any]) -> list[str]:
    argv = [*_release("delete", args), "--yes"]
    switch(argv, "--cleanup-tag", args.get("delete_tag"))
    return argv


def build_list_release_assets(args: dict[str, Any]) -> list[str]:
    return [*_release("view", args), "--json", "assets"]


def build_download_release_asset(args: dict[str, Any]) -> list[str]:
    argv = _release("download", args)
    opt(argv, "--pattern", args.get("pattern"))
    opt(argv, "--dir", args.get("dir"))
    return argv


TOOLS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="list_releases",
        description="List releases in a repository.",
        params=(OWNER, REPO, limit(30, "releases")),
        build=build_list_releases,
        transform=json_output,
        group=ToolGroup.releases,
        risk_level=RiskLevel.low,
    ),
    ToolDescriptor(
        name="get_release",
        description="Get detailed information about a specific release by tag.",
        params=(OWNER, REPO, RELEASE_TAG),
        build=build_get_release,
        transform=json_output,
        group=ToolGroup.releases,
        risk_level=RiskLevel.low,
    ),
    ToolDescriptor(
        name="create_release",
        description="Create a new release with optional release notes.",
        params=(
            OWNER,
            REPO,
            Param(
                "tag",
                description="Tag name for the release (e.g., 'v1.0.0')",
                required=True,
                pattern=REF_PATTERN,
            ),
            Param("title", description="Release title"),
            Param("notes", description="Release notes/body (Markdown supported)"),
            Param(
                "target",
                description="Target commit SHA or branch (default: default branch)",
                pattern=REF_PATTERN,
            ),
            Param("draft", ParamType.boolean, description="Create as draft release"),
            Param("prerelease", ParamType.boolean, description="Mark as prerelease"),
            Param(
                "generate_notes",
                ParamType.boolean,
                description="Auto-generate release notes from commits",
            ),
        ),
        build=build_create_release,
        transform=json_or_text_output,
        group=ToolGroup.releases,
    ),
    ToolDescriptor(
        name="delete_release",
        description="Delete a release by tag. Optionally delete the associated git tag.",
        params=(
            OWNER,
            REPO,
            Param("tag", description="Release tag to delete", required=True, pattern=REF_PATTERN),
            Param(
                "delete_tag",
                ParamType.boolean,
                description="Also delete the associated git tag",
            ),
        ),
        build=build_delete_release,
        transform=message_output("Release '{tag}' deleted successfully"),
        group=ToolGroup.releases,
    ),
    ToolDescriptor(
        name="list_release_assets",
        description="List assets (files) attached to a release.",
        params=(OWNER, REPO, RELEASE_TAG),
        build=build_list_release_assets,
        transform=json_output,
        group=ToolGroup.releases,
        risk_level=RiskLevel.low,
    ),
    ToolDescriptor(
        name="download_release_asset",
        description="Download assets from a release.",
        params=(
            OWNER,
            REPO,
            RELEASE_TAG,
            Param(
                "pattern",
                description="Asset pattern to download (glob pattern, e.g., '*.tar.gz')",
            ),
            Param(
                "dir",
                description="Directory to download assets to (default: current directory)",
            ),
        ),
        build=build_download_release_asset,
        transform=json_or_text_output,
        group=ToolGroup.releases,
        long_running=True,
    ),
)
