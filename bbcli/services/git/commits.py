"""Read commit history for pull request bodies."""

import logging
from pathlib import Path

from bbcli.services.git._run import GitRunnerError, _run_git


def commit_subjects(
    base: str,
    head: str,
    remote: str = "origin",
    repo_dir: Path | None = None,
    log: logging.Logger | None = None,
) -> list[str]:
    """Return subjects of commits in head but not in base, newest first.

    Compares against ``<remote>/<base>`` first so a stale local base
    branch does not add unrelated commits; falls back to the local base
    when the remote-tracking ref is missing.

    Args:
        base: Destination branch name.
        head: Source branch name.
        remote: Remote whose tracking ref is tried first.
        repo_dir: Repository directory; uses cwd if None.
        log: Optional logger.

    Returns:
        Non-empty commit subjects.
    """
    cwd = Path(repo_dir) if repo_dir is not None else Path.cwd()
    try:
        out = _run_git(["log", "--format=%s", f"{remote}/{base}..{head}"], cwd=cwd, log=log)
    except GitRunnerError:
        out = _run_git(["log", "--format=%s", f"{base}..{head}"], cwd=cwd, log=log)
    return [line.strip() for line in out.splitlines() if line.strip()]
