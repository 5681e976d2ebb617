"""Merge a pull request.

Steps: resolve the selector, require state OPEN, pick the strategy,
confirm unless told not to, then call the merge endpoint. The state check
and the merge call are not atomic; a concurrent change surfaces as the
service's error response.
"""

import logging
from enum import Enum

from pydantic import BaseModel

from bbcli.app import AppContext
from bbcli.errors import MergeCancelledError, MergeStateInvalidError
from bbcli.models import PRState, PullRequest, RepoRef
from bbcli.services.pr_selector import resolve_pr_selector

logger = logging.getLogger(__name__)


class MergeStrategy(str, Enum):
    MERGE_COMMIT = "merge_commit"
    SQUASH = "squash"
    FAST_FORWARD = "fast_forward"


class MergeOptions(BaseModel):
    """Flags of `pr merge`."""

    squash: bool = False
    rebase: bool = False
    delete_branch: bool = False
    message: str = ""
    auto: bool = False
    yes: bool = False


def choose_strategy(squash: bool = False, rebase: bool = False) -> MergeStrategy:
    """--squash wins over --rebase; default is a merge commit."""
    if squash:
        return MergeStrategy.SQUASH
    if rebase:
        return MergeStrategy.FAST_FORWARD
    return MergeStrategy.MERGE_COMMIT


def _describe(pr: PullRequest, strategy: MergeStrategy) -> list[str]:
    return [
        f"Pull request #{pr.id}: {pr.title}",
        f"  {pr.source_branch} -> {pr.destination_branch}",
        f"  Merge strategy: {strategy.value}",
    ]


def merge_pull_request(
    app: AppContext,
    repo: RepoRef,
    selector: str = "",
    opts: MergeOptions | None = None,
) -> PullRequest:
    """Merge the selected pull request and return it as fetched before merging.

    Raises:
        MergeStateInvalidError: the pull request is not OPEN.
        MergeCancelledError: confirmation was declined or impossible.
    """
    opts = opts or MergeOptions()
    streams = app.streams
    pr_id = resolve_pr_selector(app, repo, selector)
    pr = app.client.get_pull_request(repo, pr_id)
    if pr.state != PRState.OPEN.value:
        raise MergeStateInvalidError(f"pull request #{pr_id} is not open (state: {pr.state})")

    strategy = choose_strategy(opts.squash, opts.rebase)
    if strategy is MergeStrategy.FAST_FORWARD:
        streams.warning("Note: Rebase merge maps to fast-forward and may be rejected by the repository")

    if not opts.yes:
        for line in _describe(pr, strategy):
            streams.info(line)
        if not streams.confirm("Merge this pull request?"):
            raise MergeCancelledError("merge cancelled")

    if opts.auto:
        streams.warning(
            "Auto-merge is not directly supported via API. "
            "Consider enabling it in the Bitbucket web interface."
        )
        return pr

    logger.info("Merging #%d in %s with %s", pr_id, repo, strategy.value)
    app.client.merge_pull_request(
        repo,
        pr_id,
        merge_strategy=strategy.value,
        message=opts.message,
        close_source_branch=opts.delete_branch,
    )
    streams.success(f"Merged pull request #{pr_id}")
    if opts.delete_branch:
        streams.success(f"Deleted branch {pr.source_branch}")
    return pr
