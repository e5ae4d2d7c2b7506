"""Exact argv produced by the catalog's command builders.

Arguments go through validate_arguments first, as they do in dispatch.
"""

from __future__ import annotations

from typing import Any

from src.tools.builtins import build_registry
from src.tools.builtins.pulls import PR_LIST_FIELDS, PR_SEARCH_FIELDS, PR_VIEW_FIELDS
from src.tools.builtins.releases import RELEASE_VIEW_FIELDS
from src.tools.builtins.repos import REPO_LIST_FIELDS, REPO_VIEW_FIELDS
from src.tools.builtins.workflows import RUN_LIST_FIELDS
from src.tools.schema import validate_arguments
from tests.helpers import SHA

REGISTRY = build_registry()
REPO = {"owner": "tatari-tv", "repo": "foo"}


def argv(tool_name: str, **arguments: Any) -> list[str]:
    tool = REGISTRY.get(tool_name)
    return tool.build(validate_arguments(tool.params, arguments))


def lookup_argv(tool_name: str, **arguments: Any) -> list[str] | None:
    tool = REGISTRY.get(tool_name)
    args = validate_arguments(tool.params, arguments)
    if tool.lookup is None or not tool.lookup.when(args):
        return None
    return tool.lookup.build(args)


class TestRepos:
    def test_get_repo(self) -> None:
        assert argv("get_repo", **REPO) == [
            "repo", "view", "tatari-tv/foo", "--json", REPO_VIEW_FIELDS,
        ]

    def test_get_me(self) -> None:
        assert argv("get_me") == ["api", "user"]

    def test_create_repo_personal_public(self) -> None:
        assert argv("create_repo", name="demo") == ["repo", "create", "demo", "--public"]

    def test_create_repo_org_private(self) -> None:
        assert argv(
            "create_repo", name="demo", org="acme", private=True, description="A demo"
        ) == ["repo", "create", "acme/demo", "--description=A demo", "--private"]

    def test_list_repos(self) -> None:
        assert argv("list_repos", owner="acme", limit=5) == [
            "repo", "list", "acme", "--limit", "5", "--json", REPO_LIST_FIELDS,
        ]

    def test_list_repos_defaults_to_self(self) -> None:
        assert argv("list_repos") == ["repo", "list", "--json", REPO_LIST_FIELDS]

    def test_archive_repo(self) -> None:
        assert argv("archive_repo", **REPO) == [
            "api", "-X", "PATCH", "repos/tatari-tv/foo", "-F", "archived=true",
        ]


class TestBranches:
    def test_list_branches(self) -> None:
        assert argv("list_branches", **REPO) == ["api", "repos/tatari-tv/foo/branches"]

    def test_create_branch_lookup_defaults_to_head(self) -> None:
        assert lookup_argv("create_branch", branch="feat", **REPO) == [
            "api", "repos/tatari-tv/foo/commits/HEAD", "--jq", ".sha",
        ]

    def test_create_branch_lookup_from_ref(self) -> None:
        assert lookup_argv("create_branch", branch="feat", **{"from": "release/1.x"}, **REPO) == [
            "api", "repos/tatari-tv/foo/commits/release/1.x", "--jq", ".sha",
        ]

    def test_create_branch_main_command(self) -> None:
        tool = REGISTRY.get("create_branch")
        args = {**validate_arguments(tool.params, {"branch": "feat", **REPO}), "sha": SHA}
        assert tool.build(args) == [
            "api", "-X", "POST", "repos/tatari-tv/foo/git/refs",
            "-f", "ref=refs/heads/feat", "-f", f"sha={SHA}",
        ]

    def test_delete_branch(self) -> None:
        assert argv("delete_branch", branch="feat/x", **REPO) == [
            "api", "-X", "DELETE", "repos/tatari-tv/foo/git/refs/heads/feat/x",
        ]

    def test_get_branch_protection(self) -> None:
        assert argv("get_branch_protection", branch="main", **REPO) == [
            "api", "repos/tatari-tv/foo/branches/main/protection",
        ]

    def test_set_branch_protection_minimal(self) -> None:
        assert argv("set_branch_protection", branch="main", **REPO) == [
            "api", "-X", "PUT", "repos/tatari-tv/foo/branches/main/protection",
            "-H", "Accept: application/vnd.github+json",
            "-F", "required_status_checks=null",
            "-F", "enforce_admins=false",
            "-F", "required_pull_request_reviews=null",
            "-F", "restrictions=null",
        ]

    def test_set_branch_protection_full(self) -> None:
        result = argv(
            "set_branch_protection",
            branch="main",
            required_status_checks={"strict": True, "contexts": ["ci/test", "lint"]},
            enforce_admins=True,
            required_pull_request_reviews={
                "required_approving_review_count": 2,
                "dismiss_stale_reviews": True,
            },
            allow_force_pushes=False,
            **REPO,
        )
        assert result[6:] == [
            "-F", "required_status_checks[strict]=true",
            "-f", "required_status_checks[contexts][]=ci/test",
            "-f", "required_status_checks[contexts][]=lint",
            "-F", "enforce_admins=true",
            "-F", "required_pull_request_reviews[required_approving_review_count]=2",
            "-F", "required_pull_request_reviews[dismiss_stale_reviews]=true",
            "-F", "required_pull_request_reviews[require_code_owner_reviews]=false",
            "-F", "restrictions=null",
            "-F", "allow_force_pushes=false",
        ]

    def test_set_branch_protection_empty_contexts(self) -> None:
        result = argv(
            "set_branch_protection",
            branch="main",
            required_status_checks={"strict": False},
            required_pull_request_reviews={},
            **REPO,
        )
        assert "required_status_checks[contexts][]" in result
        assert "required_pull_request_reviews[required_approving_review_count]=1" in result

    def test_delete_branch_protection(self) -> None:
        assert argv("delete_branch_protection", branch="main", **REPO) == [
            "api", "-X", "DELETE", "repos/tatari-tv/foo/branches/main/protection",
        ]


class TestTags:
    def test_list_tags(self) -> None:
        assert argv("list_tags", limit=10, **REPO) == [
            "api", "repos/tatari-tv/foo/tags?per_page=10",
        ]

    def test_create_tag_with_sha_skips_lookup(self) -> None:
        assert lookup_argv("create_tag", tag="v1.0.0", sha=SHA, **REPO) is None
        assert argv("create_tag", tag="v1.0.0", sha=SHA, **REPO) == [
            "api", "-X", "POST", "repos/tatari-tv/foo/git/refs",
            "-f", "ref=refs/tags/v1.0.0", "-f", f"sha={SHA}",
        ]

    def test_create_tag_without_sha_looks_up_head(self) -> None:
        assert lookup_argv("create_tag", tag="v1.0.0", **REPO) == [
            "api", "repos/tatari-tv/foo/commits/HEAD", "--jq", ".sha",
        ]

    def test_delete_tag(self) -> None:
        assert argv("delete_tag", tag="v1.0.0", **REPO) == [
            "api", "-X", "DELETE", "repos/tatari-tv/foo/git/refs/tags/v1.0.0",
        ]


class TestPulls:
    def test_get_pr(self) -> None:
        assert argv("get_pr", number=42, **REPO) == [
            "pr", "view", "42", "--repo", "tatari-tv/foo", "--json", PR_VIEW_FIELDS,
        ]

    def test_get_pr_diff(self) -> None:
        assert argv("get_pr_diff", number=42, **REPO) == [
            "pr", "diff", "42", "--repo", "tatari-tv/foo",
        ]

    def test_get_pr_files(self) -> None:
        assert argv("get_pr_files", number=42, **REPO)[-2:] == ["--json", "files"]

    def test_list_prs(self) -> None:
        assert argv("list_prs", state="merged", limit=3, base="main", **REPO) == [
            "pr", "list", "--repo", "tatari-tv/foo", "--state=merged",
            "--limit", "3", "--base=main", "--json", PR_LIST_FIELDS,
        ]

    def test_search_prs_query_after_separator(self) -> None:
        assert argv("search_prs", query="-label:bug is:open") == [
            "search", "prs", "--json", PR_SEARCH_FIELDS, "--", "-label:bug is:open",
        ]

    def test_create_pr_defaults_body(self) -> None:
        assert argv("create_pr", title="Fix", head="feat", **REPO) == [
            "pr", "create", "--repo", "tatari-tv/foo", "--title=Fix", "--head=feat", "--body=",
        ]

    def test_create_pr_flag_like_title_stays_one_argument(self) -> None:
        result = argv("create_pr", title="--draft", head="feat", draft=True, base="dev", **REPO)
        assert "--title=--draft" in result
        assert result[-2:] == ["--base=dev", "--draft"]

    def test_edit_pr(self) -> None:
        assert argv("edit_pr", number=7, title="New", **REPO) == [
            "pr", "edit", "7", "--repo", "tatari-tv/foo", "--title=New",
        ]

    def test_merge_pr_default_method(self) -> None:
        assert argv("merge_pr", number=7, **REPO) == [
            "pr", "merge", "7", "--repo", "tatari-tv/foo", "--merge",
        ]

    def test_merge_pr_squash_delete_branch(self) -> None:
        assert argv(
            "merge_pr", number=7, method="squash", delete_branch=True,
            commit_message="Ship it", **REPO,
        ) == [
            "pr", "merge", "7", "--repo", "tatari-tv/foo",
            "--squash", "--delete-branch", "--body=Ship it",
        ]

    def test_close_pr(self) -> None:
        assert argv("close_pr", number=7, **REPO) == [
            "pr", "close", "7", "--repo", "tatari-tv/foo",
        ]

    def test_comment_pr(self) -> None:
        assert argv("comment_pr", number=7, body="LGTM", **REPO) == [
            "pr", "comment", "7", "--repo", "tatari-tv/foo", "--body=LGTM",
        ]


class TestCode:
    def test_get_file_quotes_path(self) -> None:
        assert argv("get_file", path="/docs/read me.md", ref="v1.0", **REPO) == [
            "api", "repos/tatari-tv/foo/contents/docs/read%20me.md?ref=v1.0",
        ]

    def test_get_file_encodes_url_metacharacters(self) -> None:
        assert argv("get_file", path="notes/a#b?.md", **REPO) == [
            "api", "repos/tatari-tv/foo/contents/notes/a%23b%3F.md",
        ]

    def test_search_code(self) -> None:
        assert argv("search_code", query="repo:acme/x foo", limit=5) == [
            "search", "code", "--limit", "5", "--json", "path,repository,textMatches",
            "--", "repo:acme/x foo",
        ]

    def test_list_commits_query(self) -> None:
        assert argv("list_commits", sha="main", author="octo", limit=5, **REPO) == [
            "api", "repos/tatari-tv/foo/commits?sha=main&author=octo&per_page=5",
        ]


class TestReleases:
    def test_get_release(self) -> None:
        assert argv("get_release", tag="v1.0.0", **REPO) == [
            "release", "view", "v1.0.0", "--repo", "tatari-tv/foo",
            "--json", RELEASE_VIEW_FIELDS,
        ]

    def test_create_release_without_notes_sends_empty_notes(self) -> None:
        assert argv("create_release", tag="v1.0.0", title="One", **REPO) == [
            "release", "create", "v1.0.0", "--repo", "tatari-tv/foo", "--title=One", "--notes=",
        ]

    def test_create_release_generated_notes(self) -> None:
        result = argv("create_release", tag="v1.0.0", generate_notes=True, draft=True, **REPO)
        assert result[-2:] == ["--draft", "--generate-notes"]
        assert not any(a.startswith("--notes") for a in result)

    def test_delete_release_cleanup_tag(self) -> None:
        assert argv("delete_release", tag="v1.0.0", delete_tag=True, **REPO) == [
            "release", "delete", "v1.0.0", "--repo", "tatari-tv/foo", "--yes", "--cleanup-tag",
        ]

    def test_list_release_assets(self) -> None:
        assert argv("list_release_assets", tag="v1", **REPO)[-2:] == ["--json", "assets"]

    def test_download_release_asset(self) -> None:
        assert argv(
            "download_release_asset", tag="v1", pattern="*.tar.gz", dir="/tmp/out", **REPO
        ) == [
            "release", "download", "v1", "--repo", "tatari-tv/foo",
            "--pattern=*.tar.gz", "--dir=/tmp/out",
        ]


class TestWorkflows:
    def test_list_workflow_runs(self) -> None:
        assert argv(
            "list_workflow_runs", workflow="ci.yml", status="failure", limit=5, **REPO
        ) == [
            "run", "list", "--repo", "tatari-tv/foo", "--workflow=ci.yml",
            "--status=failure", "--limit", "5", "--json", RUN_LIST_FIELDS,
        ]

    def test_list_run_artifacts(self) -> None:
        assert argv("list_run_artifacts", run_id=123, **REPO) == [
            "api", "repos/tatari-tv/foo/actions/runs/123/artifacts",
        ]

    def test_download_run_artifact(self) -> None:
        assert argv("download_run_artifact", run_id=123, name="dist", **REPO) == [
            "run", "download", "123", "--repo", "tatari-tv/foo", "--name=dist",
        ]


class TestTeams:
    def test_list_collaborators(self) -> None:
        assert argv("list_collaborators", affiliation="outside", **REPO) == [
            "api", "repos/tatari-tv/foo/collaborators?affiliation=outside",
        ]

    def test_add_collaborator_default_permission(self) -> None:
        assert argv("add_collaborator", username="octocat", **REPO) == [
            "api", "-X", "PUT", "repos/tatari-tv/foo/collaborators/octocat",
            "-f", "permission=push",
        ]

    def test_remove_collaborator(self) -> None:
        assert argv("remove_collaborator", username="octocat", **REPO) == [
            "api", "-X", "DELETE", "repos/tatari-tv/foo/collaborators/octocat",
        ]

    def test_list_teams(self) -> None:
        assert argv("list_teams", org="acme") == ["api", "orgs/acme/teams"]

    def test_get_team_members(self) -> None:
        assert argv("get_team_members", org="acme", team="platform", role="maintainer") == [
            "api", "orgs/acme/teams/platform/members?role=maintainer",
        ]

