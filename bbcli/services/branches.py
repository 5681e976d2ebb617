"""Remote branch operations."""

import logging

from bbcli.app import AppContext
from bbcli.errors import ApiError, CancelledError, InputError, NonInteractiveError
from bbcli.models import Branch, RepoRef

logger = logging.getLogger(__name__)


def list_branches(app: AppContext, repo: RepoRef, limit: int = 30) -> list[Branch]:
    return app.client.list_branches(repo, limit=limit)


def create_branch(app: AppContext, repo: RepoRef, name: str, target: str) -> Branch:
    """Create a branch from target: a branch name, tag or commit hash.

    A target naming an existing branch is resolved to its head commit;
    anything else is passed through for the service to validate.
    """
    name, target = name.strip(), target.strip()
    if not name:
        raise InputError("branch name is required")
    if not target:
        raise InputError("target is required. Use --target or -t to specify")

    commit = target
    try:
        head = app.client.get_branch(repo, target).target.hash
    except ApiError as e:
        logger.debug("Target %s is not a branch: %s", target, e)
    else:
        commit = head or target

    branch = app.client.create_branch(repo, name, commit)
    app.streams.success(f"Created branch {name} in {repo}")
    return branch


def delete_branch(app: AppContext, repo: RepoRef, name: str, force: bool = False) -> None:
    """Delete a branch on the service, asking first unless force.

    Raises:
        NonInteractiveError: confirmation needed but stdin is not a terminal.
        CancelledError: the answer was not "y" or "yes".
    """
    streams = app.streams
    if not force:
        if not streams.is_stdin_tty:
            raise NonInteractiveError(
                "cannot confirm deletion in non-interactive mode",
                hint="Use --force flag to skip confirmation",
            )
        answer = streams.prompt(f"Delete branch {name} from {repo}? [y/N]: ").strip().lower()
        if answer not in ("y", "yes"):
            raise CancelledError("deletion cancelled")

    app.client.delete_branch(repo, name)
    streams.success(f"Deleted branch {name} from {repo}")
