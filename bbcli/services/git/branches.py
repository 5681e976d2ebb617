"""Local branch operations: current branch, existence, checkout, delete,
upstream tracking."""

import logging
from pathlib import Path

from bbcli.errors import DetachedHeadError
from bbcli.services.git._run import GitRunnerError, _run_git


def current_branch(
    repo_dir: Path | None = None,
    log: logging.Logger | None = None,
) -> str:
    """Return the checked-out branch name.

    Raises:
        DetachedHeadError: HEAD is not a symbolic ref.
        NotAWorkingCopyError: repo_dir is not inside a git checkout.
    """
    cwd = Path(repo_dir) if repo_dir is not None else Path.cwd()
    try:
        name = _run_git(["symbolic-ref", "--quiet", "--short", "HEAD"], cwd=cwd, log=log).strip()
    except GitRunnerError as e:
        raise DetachedHeadError("HEAD is detached; check out a branch first") from e
    if not name:
        raise DetachedHeadError("HEAD is detached; check out a branch first")
    return name


def branch_exists_locally(
    branch_name: str,
    repo_dir: Path | None = None,
    log: logging.Logger | None = None,
) -> bool:
    """True if refs/heads/<branch_name> exists."""
    cwd = Path(repo_dir) if repo_dir is not None else Path.cwd()
    try:
        _run_git(["show-ref", "--verify", "--quiet", f"refs/heads/{branch_name}"], cwd=cwd, log=None)
    except GitRunnerError:
        return False
    return True


def checkout_branch(
    branch_name: str,
    repo_dir: Path | None = None,
    log: logging.Logger | None = None,
) -> None:
    """Checkout the given local branch."""
    cwd = Path(repo_dir) if repo_dir is not None else Path.cwd()
    _run_git(["checkout", branch_name], cwd=cwd, log=log)
    if log:
        log.info("Checked out branch %s", branch_name)


def delete_local_branch(
    branch_name: str,
    force: bool = False,
    repo_dir: Path | None = None,
    log: logging.Logger | None = None,
) -> None:
    """Delete a local branch (``-D`` when force). Refuses the checked-out branch."""
    cwd = Path(repo_dir) if repo_dir is not None else Path.cwd()
    try:
        checked_out = current_branch(repo_dir=cwd, log=log)
    except DetachedHeadError:
        checked_out = None
    if checked_out == branch_name:
        raise GitRunnerError(f"cannot delete branch '{branch_name}' while it is checked out")
    _run_git(["branch", "-D" if force else "-d", branch_name], cwd=cwd, log=log)
    if log:
        log.info("Deleted local branch %s", branch_name)


def set_upstream(
    branch_name: str,
    remote: str,
    repo_dir: Path | None = None,
    log: logging.Logger | None = None,
) -> None:
    """Make branch_name track <remote>/<branch_name>."""
    cwd = Path(repo_dir) if repo_dir is not None else Path.cwd()
    _run_git(["branch", f"--set-upstream-to={remote}/{branch_name}", branch_name], cwd=cwd, log=log)
