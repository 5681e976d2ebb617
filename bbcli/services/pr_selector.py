"""Turn a pull request selector into a pull request id.

A selector is one of: nothing (the current branch), a number, a
bitbucket.org pull request URL, or a branch name.
"""

import logging
import re

from bbcli.adapters import BitbucketAdapter
from bbcli.app import AppContext
from bbcli.errors import InvalidPRNumberError, NoPRForCurrentBranchError, UnrecognizedURLError
from bbcli.models import RepoRef
from bbcli.urls import SERVICE_HOST

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"[0-9]+")
_PR_URL_RE = re.compile(r"/pull-requests/(\d+)")


def parse_pr_number(value: str) -> int:
    """Parse a positional pull request number."""
    value = value.strip()
    if not _NUMBER_RE.fullmatch(value):
        raise InvalidPRNumberError(f"invalid pull request number: {value}")
    number = int(value)
    if number <= 0:
        raise InvalidPRNumberError("invalid pull request number: must be a positive integer")
    return number


def pr_number_from_url(url: str) -> int:
    m = _PR_URL_RE.search(url)
    if not m:
        raise UnrecognizedURLError(f"could not extract PR number from URL: {url}")
    return int(m.group(1))


def find_pr_for_branch(client: BitbucketAdapter, repo: RepoRef, branch: str) -> int:
    """Id of the newest open pull request from branch."""
    prs = client.find_open_pull_requests(repo, branch, limit=1)
    if not prs:
        raise NoPRForCurrentBranchError(f'no open pull request found for branch "{branch}"')
    return prs[0].id


def resolve_pr_selector(app: AppContext, repo: RepoRef, selector: str = "") -> int:
    """Resolve selector to a pull request id (no existence check for numbers)."""
    selector = selector.strip()
    if not selector:
        branch = app.working_copy.current_branch()
        logger.debug("Resolving pull request for current branch %s", branch)
        return find_pr_for_branch(app.client, repo, branch)
    if _NUMBER_RE.fullmatch(selector):
        return parse_pr_number(selector)
    if SERVICE_HOST in selector:
        return pr_number_from_url(selector)
    return find_pr_for_branch(app.client, repo, selector)
