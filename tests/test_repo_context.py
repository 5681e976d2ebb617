"""Tests for target repository resolution."""

import pytest
from conftest import REPO, FakeWorkingCopy

from bbcli.errors import REPO_HINT, MalformedRepoFlagError, NoServiceRemoteError
from bbcli.models import RemoteEntry, RepoRef
from bbcli.services.repo_context import parse_repo_flag, resolve_repository


@pytest.mark.parametrize("value", ["acme", "", "noslash"])
def test_flag_without_slash(value: str) -> None:
    with pytest.raises(MalformedRepoFlagError, match="expected workspace/repo"):
        parse_repo_flag(value)


@pytest.mark.parametrize("value", ["/widgets", "acme/", "/"])
def test_flag_with_empty_half(value: str) -> None:
    with pytest.raises(MalformedRepoFlagError, match="cannot be empty"):
        parse_repo_flag(value)


def test_flag_splits_on_first_slash() -> None:
    assert parse_repo_flag("acme/widgets/extra") == RepoRef(workspace="acme", slug="widgets/extra")


def test_flag_wins_and_skips_working_copy() -> None:
    wc = FakeWorkingCopy()
    repo = resolve_repository(wc, repo_flag="other/thing", default_workspace="dflt", workspace_only=True)
    assert repo == RepoRef(workspace="other", slug="thing")
    assert wc.calls == []


def test_default_workspace_only_for_workspace_commands() -> None:
    wc = FakeWorkingCopy()
    repo = resolve_repository(wc, default_workspace="dflt", workspace_only=True)
    assert repo == RepoRef(workspace="dflt")
    assert repo.slug == ""
    assert wc.calls == []

    assert resolve_repository(wc, default_workspace="dflt") == REPO


def test_origin_preferred() -> None:
    other = RepoRef(workspace="fork", slug="widgets")
    wc = FakeWorkingCopy(
        remotes=[
            RemoteEntry(name="upstream", fetch_url="git@bitbucket.org:fork/widgets.git", repo=other),
            RemoteEntry(name="origin", fetch_url="https://bitbucket.org/acme/widgets.git", repo=REPO),
        ]
    )
    assert resolve_repository(wc) == REPO


def test_first_service_remote_without_origin() -> None:
    wc = FakeWorkingCopy(
        remotes=[
            RemoteEntry(name="gh", fetch_url="git@github.com:acme/widgets.git"),
            RemoteEntry(name="bb", fetch_url="git@bitbucket.org:acme/widgets.git", repo=REPO),
        ]
    )
    assert resolve_repository(wc) == REPO


def test_no_service_remote_carries_hint() -> None:
    wc = FakeWorkingCopy(remotes=[RemoteEntry(name="origin", fetch_url="git@github.com:acme/widgets.git")])
    with pytest.raises(NoServiceRemoteError) as exc_info:
        resolve_repository(wc)
    assert exc_info.value.hint == REPO_HINT
