"""Working copy interface used by commands, and its git-backed implementation."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from bbcli.errors import NoServiceRemoteError
from bbcli.models import RemoteEntry
from bbcli.services.git.branches import (
    branch_exists_locally,
    checkout_branch,
    current_branch,
    delete_local_branch,
    set_upstream,
)
from bbcli.services.git.commits import commit_subjects
from bbcli.services.git.fetch import fetch
from bbcli.services.git.remotes import list_remotes

DEFAULT_REMOTE = "origin"


class WorkingCopy(ABC):
    """The local checkout the command runs in."""

    @abstractmethod
    def list_remotes(self) -> list[RemoteEntry]:
        """Configured remotes; raises NotAWorkingCopyError outside a checkout."""
        ...

    @abstractmethod
    def current_branch(self) -> str:
        """Checked-out branch; raises DetachedHeadError."""
        ...

    @abstractmethod
    def branch_exists_locally(self, name: str) -> bool:
        ...

    @abstractmethod
    def delete_local_branch(self, name: str, force: bool = False) -> None:
        ...

    @abstractmethod
    def fetch(self, remote: str, refspec: str = "") -> None:
        ...

    @abstractmethod
    def checkout(self, name: str) -> None:
        ...

    @abstractmethod
    def set_upstream(self, branch: str, remote: str) -> None:
        ...

    @abstractmethod
    def commit_subjects(self, base: str, head: str, remote: str = DEFAULT_REMOTE) -> list[str]:
        """Subjects of commits in base..head."""
        ...

    def default_service_remote(self) -> RemoteEntry:
        """Bitbucket remote to use: "origin" if it is one, else the first found."""
        candidates = [r for r in self.list_remotes() if r.repo is not None]
        if not candidates:
            raise NoServiceRemoteError("no Bitbucket remotes found")
        for remote in candidates:
            if remote.name == DEFAULT_REMOTE:
                return remote
        return candidates[0]


class GitWorkingCopy(WorkingCopy):
    """WorkingCopy backed by the git binary."""

    def __init__(self, repo_dir: Path | None = None, log: logging.Logger | None = None) -> None:
        self._repo_dir = Path(repo_dir) if repo_dir is not None else Path.cwd()
        self._log = log or logging.getLogger(__name__)

    def list_remotes(self) -> list[RemoteEntry]:
        return list_remotes(repo_dir=self._repo_dir, log=self._log)

    def current_branch(self) -> str:
        return current_branch(repo_dir=self._repo_dir, log=self._log)

    def branch_exists_locally(self, name: str) -> bool:
        return branch_exists_locally(name, repo_dir=self._repo_dir, log=self._log)

    def delete_local_branch(self, name: str, force: bool = False) -> None:
        delete_local_branch(name, force=force, repo_dir=self._repo_dir, log=self._log)

    def fetch(self, remote: str, refspec: str = "") -> None:
        fetch(remote, refspec, repo_dir=self._repo_dir, log=self._log)

    def checkout(self, name: str) -> None:
        checkout_branch(name, repo_dir=self._repo_dir, log=self._log)

    def set_upstream(self, branch: str, remote: str) -> None:
        set_upstream(branch, remote, repo_dir=self._repo_dir, log=self._log)

    def commit_subjects(self, base: str, head: str, remote: str = DEFAULT_REMOTE) -> list[str]:
        return commit_subjects(base, head, remote=remote, repo_dir=self._repo_dir, log=self._log)
