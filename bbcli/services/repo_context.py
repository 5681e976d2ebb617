"""Decide which remote repository a command targets.

Precedence, the same for every command:

1. ``--repo WORKSPACE/REPO`` when given;
2. the configured default workspace, for commands that only need a
   workspace (projects);
3. the Bitbucket remote of the enclosing working copy ("origin" first).
"""

import logging

from bbcli.errors import REPO_HINT, MalformedRepoFlagError, WorkingCopyError
from bbcli.models import RepoRef
from bbcli.services.git import WorkingCopy

logger = logging.getLogger(__name__)


def parse_repo_flag(value: str) -> RepoRef:
    """Split WORKSPACE/REPO on the first slash; both halves must be non-empty."""
    workspace, sep, slug = value.partition("/")
    if not sep:
        raise MalformedRepoFlagError(f"invalid repository format: {value} (expected workspace/repo)")
    if not workspace or not slug:
        raise MalformedRepoFlagError(f"invalid repository format: {value} (workspace and repo cannot be empty)")
    return RepoRef(workspace=workspace, slug=slug)


def detect_repository(working_copy: WorkingCopy) -> RepoRef:
    """RepoRef of the working copy's default Bitbucket remote."""
    try:
        remote = working_copy.default_service_remote()
    except WorkingCopyError as e:
        e.hint = REPO_HINT
        raise
    logger.debug("Detected repository %s from remote %s", remote.repo, remote.name)
    return remote.repo


def resolve_repository(
    working_copy: WorkingCopy,
    repo_flag: str = "",
    default_workspace: str = "",
    workspace_only: bool = False,
) -> RepoRef:
    """Resolve the target repository.

    Args:
        working_copy: Checkout used for auto-detection.
        repo_flag: Value of --repo ("" when not given).
        default_workspace: Configured default workspace.
        workspace_only: The command needs only a workspace.

    Returns:
        RepoRef; its slug is empty when only the default workspace applied.
    """
    if repo_flag:
        return parse_repo_flag(repo_flag)
    if workspace_only and default_workspace:
        return RepoRef(workspace=default_workspace)
    return detect_repository(working_copy)
