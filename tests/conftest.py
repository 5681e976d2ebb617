"""Shared fixtures: fake working copy, captured streams, mocked API session."""

import io
import json
from typing import Any, Callable
from unittest.mock import Mock

import pytest

from bbcli.adapters import BitbucketAdapter
from bbcli.app import AppContext
from bbcli.config import Config, EnvSettings, HostsConfig
from bbcli.credentials import Credential
from bbcli.errors import DetachedHeadError, GitRunnerError
from bbcli.iostreams import IOStreams
from bbcli.models import RemoteEntry, RepoRef
from bbcli.services.git import WorkingCopy

REPO = RepoRef(workspace="acme", slug="widgets")
API = "https://api.bitbucket.org/2.0"


class FakeWorkingCopy(WorkingCopy):
    """In-memory checkout that records mutating calls."""

    def __init__(
        self,
        remotes: list[RemoteEntry] | None = None,
        branch: str | None = "feature/x",
        local_branches: set[str] | None = None,
        subjects: list[str] | None = None,
    ) -> None:
        self.remotes = remotes if remotes is not None else [
            RemoteEntry(
                name="origin",
                fetch_url="git@bitbucket.org:acme/widgets.git",
                push_url="git@bitbucket.org:acme/widgets.git",
                repo=REPO,
            )
        ]
        self.branch = branch
        self.local_branches = set(local_branches or ())
        self.subjects = subjects or []
        self.calls: list[tuple] = []
        self.fail_upstream = False

    def list_remotes(self) -> list[RemoteEntry]:
        self.calls.append(("list_remotes",))
        return list(self.remotes)

    def current_branch(self) -> str:
        if self.branch is None:
            raise DetachedHeadError("HEAD is detached; check out a branch first")
        return self.branch

    def branch_exists_locally(self, name: str) -> bool:
        return name in self.local_branches

    def delete_local_branch(self, name: str, force: bool = False) -> None:
        self.calls.append(("delete_local_branch", name, force))
        self.local_branches.discard(name)

    def fetch(self, remote: str, refspec: str = "") -> None:
        self.calls.append(("fetch", remote, refspec))
        if ":" in refspec:
            self.local_branches.add(refspec.split(":", 1)[1])

    def checkout(self, name: str) -> None:
        self.calls.append(("checkout", name))
        self.branch = name

    def set_upstream(self, branch: str, remote: str) -> None:
        self.calls.append(("set_upstream", branch, remote))
        if self.fail_upstream:
            raise GitRunnerError("git branch --set-upstream-to: no such remote ref")

    def commit_subjects(self, base: str, head: str, remote: str = "origin") -> list[str]:
        self.calls.append(("commit_subjects", base, head, remote))
        return list(self.subjects)


def make_response(
    status: int = 200,
    payload: Any = None,
    text: str | None = None,
    headers: dict[str, str] | None = None,
) -> Mock:
    """Stand-in for requests.Response as seen by HttpClient."""
    resp = Mock()
    resp.status_code = status
    resp.headers = headers or {}
    if payload is not None:
        resp.content = json.dumps(payload).encode()
    elif text is not None:
        resp.content = text.encode()
    else:
        resp.content = b""
    return resp


def pr_payload(
    pr_id: int,
    state: str = "OPEN",
    source: str = "feature/x",
    destination: str = "main",
    title: str | None = None,
    **extra: Any,
) -> dict[str, Any]:
    data = {
        "id": pr_id,
        "title": title or f"Pull request {pr_id}",
        "description": "",
        "state": state,
        "author": {"display_name": "Alice", "username": "alice", "uuid": "{alice}"},
        "source": {"branch": {"name": source}},
        "destination": {"branch": {"name": destination}},
        "comment_count": 0,
        "created_on": "2024-01-15T10:00:00.000000+00:00",
        "updated_on": "2024-01-16T12:00:00.000000+00:00",
        "links": {
            "html": {"href": f"https://bitbucket.org/acme/widgets/pull-requests/{pr_id}"},
            "diff": {"href": f"{API}/repositories/acme/widgets/pullrequests/{pr_id}/diff"},
        },
    }
    data.update(extra)
    return data


def page(values: list[Any], next_url: str | None = None) -> dict[str, Any]:
    data: dict[str, Any] = {"values": values, "size": len(values)}
    if next_url:
        data["next"] = next_url
    return data


def route(routes: dict[tuple[str, str], Any]) -> Callable[..., Mock]:
    """side_effect for Session.request answering by (METHOD, URL path suffix).

    Values are responses, or lists of responses consumed in order.
    """

    def handler(method: str, url: str, **kwargs: Any) -> Mock:
        path = url.split("?", 1)[0]
        for (verb, suffix), answer in routes.items():
            if verb == method and path.endswith(suffix):
                if isinstance(answer, list):
                    return answer.pop(0)
                return answer
        raise AssertionError(f"unexpected request: {method} {url}")

    return handler


@pytest.fixture
def streams() -> IOStreams:
    """Non-interactive, colourless streams backed by StringIO."""
    return IOStreams(
        stdin=io.StringIO(),
        stdout=io.StringIO(),
        stderr=io.StringIO(),
        stdin_tty=False,
        stdout_tty=False,
        color_enabled=False,
    )


@pytest.fixture
def adapter() -> BitbucketAdapter:
    return BitbucketAdapter(Credential(token="test-token", source="env"))


@pytest.fixture
def working_copy() -> FakeWorkingCopy:
    return FakeWorkingCopy()


@pytest.fixture
def app(adapter: BitbucketAdapter, streams: IOStreams, working_copy: FakeWorkingCopy) -> AppContext:
    return AppContext(
        settings=EnvSettings(bb_token=None, bitbucket_token=None),
        config=Config(),
        hosts=HostsConfig(),
        streams=streams,
        working_copy=working_copy,
        editor=Mock(),
        browser=Mock(),
        client=adapter,
    )
