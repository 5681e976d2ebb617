"""Bitbucket Cloud API adapter: typed calls per endpoint."""

import logging
from typing import Any
from urllib.parse import quote

from bbcli.adapters.http import DEFAULT_LIMIT, HttpClient
from bbcli.models import (
    Branch,
    Comment,
    CommitStatus,
    Project,
    PullRequest,
    RepoRef,
    Repository,
    User,
    WorkspaceMembership,
)

logger = logging.getLogger(__name__)


def _pr_path(repo: RepoRef, pr_id: int, action: str = "") -> str:
    path = f"{repo.api_path}/pullrequests/{pr_id}"
    return f"{path}/{action}" if action else path


class BitbucketAdapter(HttpClient):
    """Bitbucket Cloud REST API (2.0) implementation."""

    # Repositories

    def get_repository(self, repo: RepoRef) -> Repository:
        return self.parse(self.get(repo.api_path), Repository)

    def get_default_branch(self, repo: RepoRef) -> str:
        """Name of the repository's main branch ("" if the service reports none)."""
        mainbranch = self.get_repository(repo).mainbranch
        return mainbranch.name if mainbranch else ""

    # Pull requests

    def list_pull_requests(
        self,
        repo: RepoRef,
        state: str = "OPEN",
        author: str | None = None,
        limit: int = DEFAULT_LIMIT,
    ) -> list[PullRequest]:
        params: dict[str, Any] = {"state": state}
        if author:
            params["q"] = f'author.username="{author}"'
        return self.paginate(f"{repo.api_path}/pullrequests", PullRequest, params=params, limit=limit)

    def find_open_pull_requests(self, repo: RepoRef, branch: str, limit: int = 1) -> list[PullRequest]:
        """Open pull requests whose source branch is branch."""
        params = {"q": f'source.branch.name="{branch}" AND state="OPEN"'}
        return self.paginate(f"{repo.api_path}/pullrequests", PullRequest, params=params, limit=limit)

    def get_pull_request(self, repo: RepoRef, pr_id: int) -> PullRequest:
        return self.parse(self.get(_pr_path(repo, pr_id)), PullRequest)

    def create_pull_request(
        self,
        repo: RepoRef,
        title: str,
        source_branch: str,
        destination_branch: str,
        description: str = "",
        reviewer_uuids: list[str] | None = None,
        close_source_branch: bool = False,
    ) -> PullRequest:
        payload: dict[str, Any] = {
            "title": title,
            "source": {"branch": {"name": source_branch}},
            "destination": {"branch": {"name": destination_branch}},
        }
        if description:
            payload["description"] = description
        if reviewer_uuids:
            payload["reviewers"] = [{"uuid": uuid} for uuid in reviewer_uuids]
        if close_source_branch:
            payload["close_source_branch"] = True
        resp = self.post(f"{repo.api_path}/pullrequests", json=payload, timeout=self.long_timeout)
        return self.parse(resp, PullRequest)

    def update_pull_request(self, repo: RepoRef, pr_id: int, fields: dict[str, Any]) -> PullRequest:
        """PUT only the given fields (title, description, destination, state)."""
        return self.parse(self.put(_pr_path(repo, pr_id), json=fields), PullRequest)

    def reopen_pull_request(self, repo: RepoRef, pr_id: int) -> PullRequest:
        return self.update_pull_request(repo, pr_id, {"state": "OPEN"})

    def decline_pull_request(self, repo: RepoRef, pr_id: int) -> None:
        self.post(_pr_path(repo, pr_id, "decline"))

    def approve_pull_request(self, repo: RepoRef, pr_id: int) -> None:
        self.post(_pr_path(repo, pr_id, "approve"))

    def request_changes(self, repo: RepoRef, pr_id: int) -> None:
        self.post(_pr_path(repo, pr_id, "request-changes"))

    def merge_pull_request(
        self,
        repo: RepoRef,
        pr_id: int,
        merge_strategy: str,
        message: str = "",
        close_source_branch: bool = False,
    ) -> None:
        payload: dict[str, Any] = {"merge_strategy": merge_strategy}
        if message:
            payload["message"] = message
        if close_source_branch:
            payload["close_source_branch"] = True
        self.post(_pr_path(repo, pr_id, "merge"), json=payload, timeout=self.long_timeout)

    def add_comment(self, repo: RepoRef, pr_id: int, body: str) -> Comment:
        resp = self.post(_pr_path(repo, pr_id, "comments"), json={"content": {"raw": body}})
        return self.parse(resp, Comment)

    def get_diff(self, repo: RepoRef, pr: PullRequest) -> str:
        """Unified diff text; follows the pull request's diff link when present."""
        url = pr.links.diff.href or _pr_path(repo, pr.id, "diff")
        return self.get(url, headers={"Accept": "text/plain"}).text

    def list_statuses(self, repo: RepoRef, pr_id: int, limit: int = 100) -> list[CommitStatus]:
        return self.paginate(_pr_path(repo, pr_id, "statuses"), CommitStatus, limit=limit)

    # Branches

    def list_branches(self, repo: RepoRef, limit: int = DEFAULT_LIMIT) -> list[Branch]:
        return self.paginate(f"{repo.api_path}/refs/branches", Branch, limit=limit)

    def get_branch(self, repo: RepoRef, name: str) -> Branch:
        return self.parse(self.get(f"{repo.api_path}/refs/branches/{quote(name, safe='')}"), Branch)

    def create_branch(self, repo: RepoRef, name: str, target: str) -> Branch:
        """Create name pointing at target (a commit hash, or a ref the service resolves)."""
        payload = {"name": name, "target": {"hash": target}}
        return self.parse(self.post(f"{repo.api_path}/refs/branches", json=payload), Branch)

    def delete_branch(self, repo: RepoRef, name: str) -> None:
        self.delete(f"{repo.api_path}/refs/branches/{quote(name, safe='')}")

    # Projects

    def list_projects(self, workspace: str, limit: int = DEFAULT_LIMIT) -> list[Project]:
        return self.paginate(f"/workspaces/{workspace}/projects", Project, limit=limit)

    def get_project(self, workspace: str, key: str) -> Project:
        return self.parse(self.get(f"/workspaces/{workspace}/projects/{key}"), Project)

    def create_project(
        self,
        workspace: str,
        key: str,
        name: str,
        description: str = "",
        is_private: bool = True,
    ) -> Project:
        payload: dict[str, Any] = {"key": key, "name": name, "is_private": is_private}
        if description:
            payload["description"] = description
        return self.parse(self.post(f"/workspaces/{workspace}/projects", json=payload), Project)

    # Users

    def list_workspace_members(self, workspace: str, limit: int = 500) -> list[User]:
        members = self.paginate(f"/workspaces/{workspace}/members", WorkspaceMembership, limit=limit)
        return [m.user for m in members]

    def get_user(self, username: str) -> User:
        return self.parse(self.get(f"/users/{quote(username, safe='')}"), User)
