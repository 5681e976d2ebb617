"""Read configured remotes of the working copy."""

import logging
from pathlib import Path

from bbcli.errors import MalformedURLError
from bbcli.models import RemoteEntry, RepoRef
from bbcli.services.git._run import _run_git
from bbcli.urls import is_service_url, parse_remote_url


def _repo_from_url(url: str) -> RepoRef | None:
    if not url or not is_service_url(url):
        return None
    try:
        return parse_remote_url(url)
    except MalformedURLError:
        return None


def parse_remotes(output: str) -> list[RemoteEntry]:
    """Parse `git remote -v` output into one entry per remote name.

    Lines look like ``origin\\tgit@bitbucket.org:ws/repo.git (fetch)``.
    Entries keep the order in which git lists the remotes. The parsed
    RepoRef comes from the fetch URL, or from the push URL when only that
    one points at Bitbucket.
    """
    urls: dict[str, dict[str, str]] = {}
    for line in output.splitlines():
        parts = line.split()
        if len(parts) < 3 or parts[2] not in ("(fetch)", "(push)"):
            continue
        name, url, kind = parts[0], parts[1], parts[2].strip("()")
        urls.setdefault(name, {})[kind] = url

    remotes = []
    for name, by_kind in urls.items():
        fetch_url = by_kind.get("fetch", "")
        push_url = by_kind.get("push", "")
        repo = _repo_from_url(fetch_url) or _repo_from_url(push_url)
        remotes.append(RemoteEntry(name=name, fetch_url=fetch_url, push_url=push_url, repo=repo))
    return remotes


def list_remotes(
    repo_dir: Path | None = None,
    log: logging.Logger | None = None,
) -> list[RemoteEntry]:
    """Return the remotes configured in the working copy."""
    cwd = Path(repo_dir) if repo_dir is not None else Path.cwd()
    return parse_remotes(_run_git(["remote", "-v"], cwd=cwd, log=log))
