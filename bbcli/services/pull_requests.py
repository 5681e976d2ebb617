"""Pull request operations: list, view, create, edit, checkout, close,
reopen, comment, review, diff, checks.

Each operation takes the resolved repository and, where it acts on one
pull request, a selector resolved through pr_selector. Progress and
warnings go to app.streams; results are returned for the CLI to render.
"""

import logging
import re
from typing import Any

from pydantic import BaseModel, Field

from bbcli.app import AppContext
from bbcli.errors import (
    ApiError,
    ConflictError,
    DetachedHeadError,
    GitRunnerError,
    InputError,
    InvalidStateError,
    MalformedResponseError,
    NonInteractiveError,
    NothingToEditError,
    OperationError,
    PullRequestStateError,
    WorkingCopyError,
)
from bbcli.models import CommitStatus, PRState, PullRequest, RepoRef, User
from bbcli.services.git import DEFAULT_REMOTE
from bbcli.services.pr_selector import resolve_pr_selector

logger = logging.getLogger(__name__)

PROTECTED_BRANCHES = ("main", "master")
DRAFT_MARKER = "[DRAFT]"
FALLBACK_BASE = "main"

BODY_TEMPLATE = """

<!--
Describe the changes in this pull request above.
Lines inside HTML comments are removed.
-->
"""

COMMENT_TEMPLATE = """

<!-- Write your comment above. Lines inside HTML comments are removed. -->
"""

_HTML_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)


def clean_body(text: str) -> str:
    """Strip HTML comments left over from an editor template."""
    return _HTML_COMMENT_RE.sub("", text).strip()


def normalize_state(state: str) -> str:
    """Upper-case and validate a state filter."""
    value = state.strip().upper()
    if value not in {s.value for s in PRState}:
        raise InvalidStateError(f"invalid state: {state} (must be OPEN, MERGED, or DECLINED)")
    return value


def comment_url(repo: RepoRef, pr_id: int, comment_id: int | None = None) -> str:
    url = f"{repo.html_url}/pull-requests/{pr_id}"
    return f"{url}#comment-{comment_id}" if comment_id else url


def _compose(app: AppContext, template: str, what: str) -> str:
    if not app.streams.is_stdin_tty:
        raise NonInteractiveError(f"{what} is required when not running interactively")
    return clean_body(app.editor.edit(template))


def post_comment(app: AppContext, repo: RepoRef, pr_id: int, body: str) -> str:
    """Post a comment and return its link.

    The link is rebuilt locally when the service's reply cannot be parsed;
    the comment itself was created either way.
    """
    try:
        comment = app.client.add_comment(repo, pr_id, body)
    except MalformedResponseError as e:
        logger.debug("Comment posted but response not understood: %s", e)
        return comment_url(repo, pr_id)
    return comment.links.html.href or comment_url(repo, pr_id, comment.id)


# List / view


def list_pull_requests(
    app: AppContext,
    repo: RepoRef,
    state: str = "OPEN",
    author: str | None = None,
    limit: int = 30,
) -> list[PullRequest]:
    state = normalize_state(state)
    return app.client.list_pull_requests(repo, state=state, author=author, limit=limit)


def view_pull_request(app: AppContext, repo: RepoRef, selector: str = "") -> PullRequest:
    pr_id = resolve_pr_selector(app, repo, selector)
    return app.client.get_pull_request(repo, pr_id)


# Create


class CreateOptions(BaseModel):
    """Inputs of `pr create`."""

    title: str = ""
    body: str = ""
    base: str = ""
    head: str = ""
    reviewers: list[str] = Field(default_factory=list)
    draft: bool = False
    fill: bool = False
    web: bool = False


def _match_member(members: list[User], name: str) -> str:
    for user in members:
        if name in (user.username, user.nickname) and user.uuid:
            return user.uuid
    return ""


def resolve_reviewers(app: AppContext, workspace: str, usernames: list[str]) -> list[str]:
    """Map usernames to account UUIDs; unknown names are dropped with a warning.

    Workspace members are searched first, then the global user lookup.
    """
    names = [n.strip().lstrip("@") for n in usernames if n.strip()]
    if not names:
        return []
    try:
        members = app.client.list_workspace_members(workspace)
    except ApiError as e:
        logger.debug("Could not list members of %s: %s", workspace, e)
        members = []

    uuids: list[str] = []
    for name in names:
        uuid = _match_member(members, name)
        if not uuid:
            try:
                uuid = app.client.get_user(name).uuid
            except ApiError as e:
                logger.debug("User lookup for %s failed: %s", name, e)
        if not uuid:
            app.streams.warning(f"Could not find reviewer '{name}'; skipping")
            continue
        if uuid not in uuids:
            uuids.append(uuid)
    return uuids


def _service_remote_name(app: AppContext) -> str:
    try:
        return app.working_copy.default_service_remote().name
    except WorkingCopyError:
        return DEFAULT_REMOTE


def create_pull_request(app: AppContext, repo: RepoRef, opts: CreateOptions) -> PullRequest:
    """Open a pull request from opts.head (default: current branch)."""
    streams = app.streams
    head = opts.head or app.working_copy.current_branch()
    if head in PROTECTED_BRANCHES:
        raise InputError(
            f'cannot create a pull request from branch "{head}"',
            hint="Switch to a feature branch first",
        )
    title = opts.title.strip()
    body = opts.body.strip()
    if not title and not opts.fill and not streams.is_stdin_tty:
        raise NonInteractiveError("--title is required when not running interactively")

    client = app.client
    base = opts.base
    if not base:
        base = client.get_default_branch(repo)
        if not base:
            streams.warning(f"Could not determine the default branch, using '{FALLBACK_BASE}'")
            base = FALLBACK_BASE

    existing = client.find_open_pull_requests(repo, head, limit=1)
    if existing:
        raise ConflictError(f'a pull request already exists for branch "{head}": {existing[0].html_url}')

    if opts.fill and (not title or not body):
        subjects = app.working_copy.commit_subjects(base, head, remote=_service_remote_name(app))
        if subjects and not title:
            title = subjects[0]
        if len(subjects) > 1 and not body:
            body = "\n".join(f"- {s}" for s in subjects[1:])

    if not title:
        if not streams.is_stdin_tty:
            raise NonInteractiveError("--title is required when not running interactively")
        title = streams.prompt("Title: ").strip()
        if not title:
            raise InputError("title is required")

    if not body and not opts.fill and streams.is_stdin_tty and app.config.prompt == "enabled":
        body = clean_body(app.editor.edit(BODY_TEMPLATE))

    if opts.draft and not title.startswith(DRAFT_MARKER):
        title = f"{DRAFT_MARKER} {title}"

    reviewer_uuids = resolve_reviewers(app, repo.workspace, opts.reviewers)
    logger.info("Creating pull request %s -> %s in %s", head, base, repo)
    pr = client.create_pull_request(
        repo,
        title=title,
        source_branch=head,
        destination_branch=base,
        description=body,
        reviewer_uuids=reviewer_uuids,
    )
    if opts.web and pr.html_url:
        app.browser.open(pr.html_url)
    return pr


# Edit


def edit_pull_request(
    app: AppContext,
    repo: RepoRef,
    selector: str = "",
    title: str = "",
    body: str = "",
    base: str = "",
) -> PullRequest:
    """Update only the given fields."""
    fields: dict[str, Any] = {}
    if title:
        fields["title"] = title
    if body:
        fields["description"] = body
    if base:
        fields["destination"] = {"branch": {"name": base}}
    if not fields:
        raise NothingToEditError("nothing to edit: specify --title, --body, or --base")
    pr_id = resolve_pr_selector(app, repo, selector)
    return app.client.update_pull_request(repo, pr_id, fields)


# Checkout


def checkout_pull_request(app: AppContext, repo: RepoRef, selector: str = "", force: bool = False) -> str:
    """Check out the pull request's source branch; return its name."""
    pr_id = resolve_pr_selector(app, repo, selector)
    pr = app.client.get_pull_request(repo, pr_id)
    branch = pr.source_branch
    if not branch:
        raise OperationError(f"pull request #{pr_id} has no source branch")

    wc = app.working_copy
    exists = wc.branch_exists_locally(branch)
    if exists and not force:
        raise ConflictError(f"branch '{branch}' already exists locally. Use --force to overwrite")

    remote = wc.default_service_remote()
    if exists:
        try:
            current = wc.current_branch()
        except DetachedHeadError:
            current = ""
        if current == branch:
            raise ConflictError(f"cannot overwrite branch '{branch}' while it is checked out")
        wc.delete_local_branch(branch, force=True)

    wc.fetch(remote.name, f"{branch}:{branch}")
    try:
        wc.set_upstream(branch, remote.name)
    except GitRunnerError as e:
        app.streams.warning(f"Could not set upstream tracking: {e}")
    wc.checkout(branch)
    app.streams.success(f"Switched to branch '{branch}'")
    return branch


# Close / reopen


def close_pull_request(app: AppContext, repo: RepoRef, selector: str = "", comment: str = "") -> int:
    """Decline the pull request, after posting comment if given."""
    pr_id = resolve_pr_selector(app, repo, selector)
    if comment:
        post_comment(app, repo, pr_id, comment)
    app.client.decline_pull_request(repo, pr_id)
    app.streams.success(f"Closed pull request #{pr_id}")
    return pr_id


def reopen_pull_request(app: AppContext, repo: RepoRef, selector: str = "") -> int:
    """Reopen a declined pull request. Merged ones cannot be reopened."""
    pr_id = resolve_pr_selector(app, repo, selector)
    pr = app.client.get_pull_request(repo, pr_id)
    if pr.state != PRState.DECLINED.value:
        raise PullRequestStateError(f"pull request #{pr_id} is not declined (current state: {pr.state})")
    app.client.reopen_pull_request(repo, pr_id)
    app.streams.success(f"Reopened pull request #{pr_id}")
    return pr_id


# Comment / review


def comment_on_pull_request(app: AppContext, repo: RepoRef, selector: str = "", body: str = "") -> str:
    """Post a comment (from the editor when body is empty); return its link."""
    pr_id = resolve_pr_selector(app, repo, selector)
    body = body.strip() or _compose(app, COMMENT_TEMPLATE, "--body")
    if not body:
        raise InputError("comment body is required")
    return post_comment(app, repo, pr_id, body)


def review_pull_request(
    app: AppContext,
    repo: RepoRef,
    selector: str = "",
    approve: bool = False,
    request_changes: bool = False,
    comment: bool = False,
    body: str = "",
) -> int:
    """Approve, request changes or comment; a body is posted first."""
    if not (approve or request_changes or comment):
        raise InputError("please specify an action: --approve, --request-changes, or --comment")
    if approve and request_changes:
        raise InputError("cannot use --approve and --request-changes together")

    pr_id = resolve_pr_selector(app, repo, selector)
    body = body.strip()
    if comment and not body:
        body = _compose(app, COMMENT_TEMPLATE, "--body")
        if not body:
            raise InputError("comment body is required")
    if body:
        post_comment(app, repo, pr_id, body)

    if approve:
        app.client.approve_pull_request(repo, pr_id)
        app.streams.success(f"Approved pull request #{pr_id}")
    elif request_changes:
        app.client.request_changes(repo, pr_id)
        app.streams.success(f"Requested changes on pull request #{pr_id}")
    else:
        app.streams.success(f"Added review comment to pull request #{pr_id}")
    return pr_id


# Diff / checks


def pull_request_diff(app: AppContext, repo: RepoRef, selector: str = "") -> str:
    pr_id = resolve_pr_selector(app, repo, selector)
    pr = app.client.get_pull_request(repo, pr_id)
    return app.client.get_diff(repo, pr)


def pull_request_checks(app: AppContext, repo: RepoRef, selector: str = "") -> tuple[int, list[CommitStatus]]:
    """Commit statuses of the pull request, with its resolved id."""
    pr_id = resolve_pr_selector(app, repo, selector)
    return pr_id, app.client.list_statuses(repo, pr_id)
