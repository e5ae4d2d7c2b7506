"""GitHub Actions workflow run and artifact tools."""

from __future__ import annotations

from typing import Any

from src.tools.base import Param, RiskLevel, ToolDescriptor, ToolGroup
from src.tools.builtins.params import (
    OWNER,
    REF_PATTERN,
    REPO,
    RUN_ID,
    limit,
    limit_opt,
    opt,
    repo_path,
    repo_slug,
)
from src.tools.transforms import json_or_text_output, json_output

RUN_LIST_FIELDS = (
    "databaseId,workflowName,displayTitle,status,conclusion,headBranch,event,createdAt,url"
)
RUN_STATUSES = (
    "queued",
    "in_progress",
    "completed",
    "success",
    "failure",
    "cancelled",
    "skipped",
    "waiting",
    "pending",
    "requested",
    "action_required",
    "neutral",
    "stale",
    "startup_failure",
    "timed_out",
)


def build_list_workflow_runs(args: dict[str, Any]) -> list[str]:
    argv = ["run", "list", "--repo", repo_slug(args)]
    opt(argv, "--workflow", args.get("workflow"))
    opt(argv, "--branch", args.get("branch"))
    opt(argv, "--status", args.get("status"))
    limit_opt(argv, args.get("limit"))
    argv.extend(["--json", RUN_LIST_FIELDS])
    return argv


def build_list_run_artifacts(args: dict[str, Any]) -> list[str]:
    return ["api", repo_path(args, "actions", "runs", args["run_id"], "artifacts")]


def build_download_run_artifact(args: dict[str, Any]) -> list[str]:
    argv = ["run", "download", str(args["run_id"]), "--repo", repo_slug(args)]
    opt(argv, "--name", args.get("name"))
    opt(argv, "--dir", args.get("dir"))
    return argv


TOOLS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="list_workflow_runs",
        description="List GitHub Actions workflow runs for a repository.",
        params=(
            OWNER,
            REPO,
            Param(
                "workflow",
                description="Filter by workflow name or filename (e.g., 'ci.yml')",
                pattern=REF_PATTERN,
            ),
            Param("branch", description="Filter by branch name", pattern=REF_PATTERN),
            Param(
                "status",
                description="Filter by run status or conclusion",
                enum=RUN_STATUSES,
            ),
            limit(20, "runs"),
        ),
        build=build_list_workflow_runs,
        transform=json_output,
        group=ToolGroup.workflows,
        risk_level=RiskLevel.low,
    ),
    ToolDescriptor(
        name="list_run_artifacts",
        description="List artifacts produced by a workflow run.",
        params=(OWNER, REPO, RUN_ID),
        build=build_list_run_artifacts,
        transform=json_output,
        group=ToolGroup.workflows,
        risk_level=RiskLevel.low,
    ),
    ToolDescriptor(
        name="download_run_artifact",
        description="Download artifacts from a workflow run.",
        params=(
            OWNER,
            REPO,
            RUN_ID,
            Param("name", description="Artifact name to download (default: all artifacts)"),
            Param(
                "dir",
                description="Directory to download artifacts to (default: current directory)",
            ),
        ),
        build=build_download_run_artifact,
        transform=json_or_text_output,
        group=ToolGroup.workflows,
        long_running=True,
    ),
)
