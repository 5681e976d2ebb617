"""Git operations on the local working copy: remotes, branches, fetch, log."""

from bbcli.services.git._run import GitRunnerError
from bbcli.services.git.branches import (
    branch_exists_locally,
    checkout_branch,
    current_branch,
    delete_local_branch,
    set_upstream,
)
from bbcli.services.git.commits import commit_subjects
from bbcli.services.git.fetch import fetch
from bbcli.services.git.remotes import list_remotes, parse_remotes
from bbcli.services.git.working_copy import DEFAULT_REMOTE, GitWorkingCopy, WorkingCopy

__all__ = [
    "DEFAULT_REMOTE",
    "GitRunnerError",
    "GitWorkingCopy",
    "WorkingCopy",
    "branch_exists_locally",
    "checkout_branch",
    "commit_subjects",
    "current_branch",
    "delete_local_branch",
    "fetch",
    "list_remotes",
    "parse_remotes",
    "set_upstream",
]
