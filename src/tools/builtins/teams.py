"""Collaborator and organization team tools."""

from __future__ import annotations

from typing import Any

from src.tools.base import Param, RiskLevel, ToolDescriptor, ToolGroup
from src.tools.builtins.params import (
    LOGIN_PATTERN,
    ORG,
    OWNER,
    REPO,
    SLUG_PATTERN,
    limit,
    repo_path,
    with_query,
)
from src.tools.transforms import json_or_text_output, json_output, message_output

AFFILIATIONS = ("outside", "direct", "all")
PERMISSIONS = ("pull", "triage", "push", "maintain", "admin")
MEMBER_ROLES = ("member", "maintainer", "all")

USERNAME = Param("username", description="GitHub username", required=True, pattern=LOGIN_PATTERN)


def build_list_collaborators(args: dict[str, Any]) -> list[str]:
    endpoint = with_query(
        repo_path(args, "collaborators"),
        affiliation=args.get("affiliation"),
        per_page=args.get("limit"),
    )
    return ["api", endpoint]


def build_add_collaborator(args: dict[str, Any]) -> list[str]:
    return [
        "api",
        "-X",
        "PUT",
        repo_path(args, "collaborators", args["username"]),
        "-f",
        f"permission={args.get('permission') or 'push'}",
    ]


def build_remove_collaborator(args: dict[str, Any]) -> list[str]:
    return ["api", "-X", "DELETE", repo_path(args, "collaborators", args["username"])]


def build_list_teams(args: dict[str, Any]) -> list[str]:
    return ["api", with_query(f"orgs/{args['org']}/teams", per_page=args.get("limit"))]


def build_get_team_members(args: dict[str, Any]) -> list[str]:
    endpoint = with_query(
        f"orgs/{args['org']}/teams/{args['team']}/members",
        role=args.get("role"),
        per_page=args.get("limit"),
    )
    return ["api", endpoint]


TOOLS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="list_collaborators",
        description="List collaborators on a repository.",
        params=(
            OWNER,
            REPO,
            Param(
                "affiliation",
                description="Filter by affiliation: outside, direct, all (default: all)",
                enum=AFFILIATIONS,
            ),
            limit(30, "collaborators"),
        ),
        build=build_list_collaborators,
        transform=json_output,
        group=ToolGroup.teams,
        risk_level=RiskLevel.low,
    ),
    ToolDescriptor(
        name="add_collaborator",
        description="Invite a user to collaborate on a repository with the given permission.",
        params=(
            OWNER,
            REPO,
            USERNAME,
            Param(
                "permission",
                description="Permission to grant: pull, triage, push, maintain, admin (default: push)",
                enum=PERMISSIONS,
            ),
        ),
        build=build_add_collaborator,
        transform=json_or_text_output,
        group=ToolGroup.teams,
    ),
    ToolDescriptor(
        name="remove_collaborator",
        description="Remove a collaborator from a repository.",
        params=(OWNER, REPO, USERNAME),
        build=build_remove_collaborator,
        transform=message_output("Collaborator '{username}' removed"),
        group=ToolGroup.teams,
    ),
    ToolDescriptor(
        name="list_teams",
        description="List teams in an organization.",
        params=(ORG, limit(30, "teams")),
        build=build_list_teams,
        transform=json_output,
        group=ToolGroup.teams,
        risk_level=RiskLevel.low,
    ),
    ToolDescriptor(
        name="get_team_members",
        description="List members of an organization team.",
        params=(
            ORG,
            Param("team", description="Team slug", required=True, pattern=SLUG_PATTERN),
            Param(
                "role",
                description="Filter by role: member, maintainer, all (default: all)",
                enum=MEMBER_ROLES,
            ),
            limit(30, "members"),
        ),
        build=build_get_team_members,
        transform=json_output,
        group=ToolGroup.teams,
        risk_level=RiskLevel.low,
    ),
)
