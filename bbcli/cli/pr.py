"""`bb pr` sub-commands."""

import argparse

from bbcli.app import AppContext
from bbcli.cli.common import json_parent, limit_argument, repo_parent, target_repo
from bbcli.cli.formatting import (
    CHECK_LABELS,
    PR_STATE_COLORS,
    colorize_diff,
    print_json,
    print_table,
    pull_request_lines,
    truncate,
)
from bbcli.services import pull_requests
from bbcli.services.merge import MergeOptions, merge_pull_request
from bbcli.services.pull_requests import CreateOptions


def _selector(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "selector",
        nargs="?",
        default="",
        help="Pull request number, URL or branch (default: current branch)",
    )


def run_list(app: AppContext, args: argparse.Namespace) -> int:
    repo = target_repo(app, args)
    prs = pull_requests.list_pull_requests(app, repo, state=args.state, author=args.author, limit=args.limit)
    if args.json:
        print_json(app.streams, [pr.to_summary() for pr in prs])
        return 0
    if not prs:
        app.streams.println(f"No {args.state.lower()} pull requests found in {repo}")
        return 0
    rows = [
        [
            f"#{pr.id}",
            truncate(pr.title, 50),
            truncate(pr.source_branch, 30),
            truncate(pr.author.handle, 20),
            (pr.state, PR_STATE_COLORS.get(pr.state, "")),
        ]
        for pr in prs
    ]
    print_table(app.streams, ["ID", "TITLE", "BRANCH", "AUTHOR", "STATUS"], rows)
    return 0


def run_view(app: AppContext, args: argparse.Namespace) -> int:
    repo = target_repo(app, args)
    pr = pull_requests.view_pull_request(app, repo, args.selector)
    if args.web:
        app.streams.info(f"Opening {pr.html_url} in your browser.")
        app.browser.open(pr.html_url)
        return 0
    if args.json:
        print_json(app.streams, pr.to_summary())
        return 0
    for line in pull_request_lines(app.streams, pr):
        app.streams.println(line)
    return 0


def run_create(app: AppContext, args: argparse.Namespace) -> int:
    repo = target_repo(app, args)
    opts = CreateOptions(
        title=args.title,
        body=args.body,
        base=args.base,
        head=args.head,
        reviewers=args.reviewer or [],
        draft=args.draft,
        fill=args.fill,
        web=args.web,
    )
    pr = pull_requests.create_pull_request(app, repo, opts)
    if args.json:
        print_json(app.streams, pr.to_summary())
        return 0
    app.streams.success(f"Created pull request #{pr.id}")
    app.streams.println(pr.html_url)
    return 0


def run_edit(app: AppContext, args: argparse.Namespace) -> int:
    repo = target_repo(app, args)
    pr = pull_requests.edit_pull_request(app, repo, args.selector, title=args.title, body=args.body, base=args.base)
    app.streams.success(f"Updated pull request #{pr.id}")
    if pr.html_url:
        app.streams.println(pr.html_url)
    return 0


def run_checkout(app: AppContext, args: argparse.Namespace) -> int:
    repo = target_repo(app, args)
    pull_requests.checkout_pull_request(app, repo, args.selector, force=args.force)
    return 0


def run_merge(app: AppContext, args: argparse.Namespace) -> int:
    repo = target_repo(app, args)
    opts = MergeOptions(
        squash=args.squash,
        rebase=args.rebase,
        delete_branch=args.delete_branch,
        message=args.message,
        auto=args.auto,
        yes=args.yes,
    )
    merge_pull_request(app, repo, args.selector, opts)
    return 0


def run_close(app: AppContext, args: argparse.Namespace) -> int:
    repo = target_repo(app, args)
    pull_requests.close_pull_request(app, repo, args.selector, comment=args.comment)
    return 0


def run_reopen(app: AppContext, args: argparse.Namespace) -> int:
    repo = target_repo(app, args)
    pull_requests.reopen_pull_request(app, repo, args.selector)
    return 0


def run_comment(app: AppContext, args: argparse.Namespace) -> int:
    repo = target_repo(app, args)
    url = pull_requests.comment_on_pull_request(app, repo, args.selector, body=args.body)
    app.streams.println(url)
    return 0


def run_review(app: AppContext, args: argparse.Namespace) -> int:
    repo = target_repo(app, args)
    pull_requests.review_pull_request(
        app,
        repo,
        args.selector,
        approve=args.approve,
        request_changes=args.request_changes,
        comment=args.comment,
        body=args.body,
    )
    return 0


def run_diff(app: AppContext, args: argparse.Namespace) -> int:
    repo = target_repo(app, args)
    text = pull_requests.pull_request_diff(app, repo, args.selector)
    if app.streams.color_enabled and not args.no_color:
        text = colorize_diff(app.streams, text)
    app.streams.stdout.write(text if text.endswith("\n") or not text else text + "\n")
    return 0


def run_checks(app: AppContext, args: argparse.Namespace) -> int:
    repo = target_repo(app, args)
    pr_id, statuses = pull_requests.pull_request_checks(app, repo, args.selector)
    if args.json:
        print_json(app.streams, [s.model_dump(mode="json") for s in statuses])
        return 0
    if not statuses:
        app.streams.println(f"No status checks found for PR #{pr_id}")
        return 0
    rows = []
    for status in statuses:
        label, color = CHECK_LABELS.get(status.state, (f"{status.symbol} {status.state.lower()}", ""))
        rows.append([(label, color), truncate(status.label, 40), truncate(status.description, 60)])
    print_table(app.streams, ["STATUS", "NAME", "DESCRIPTION"], rows)
    return 0


def register(subparsers: argparse._SubParsersAction) -> None:
    """Add `pr` and its sub-commands."""
    repo, as_json = repo_parent(), json_parent()
    pr = subparsers.add_parser("pr", help="Work with pull requests")
    sub = pr.add_subparsers(dest="pr_command", metavar="<command>", required=True)

    p = sub.add_parser("list", aliases=["ls"], parents=[repo, as_json], help="List pull requests")
    p.add_argument("-s", "--state", default="OPEN", help="OPEN, MERGED or DECLINED (default OPEN)")
    p.add_argument("-a", "--author", default=None, help="Filter by author username")
    limit_argument(p)
    p.set_defaults(handler=run_list)

    p = sub.add_parser("view", parents=[repo, as_json], help="Show a pull request")
    _selector(p)
    p.add_argument("-w", "--web", action="store_true", help="Open in the browser")
    p.set_defaults(handler=run_view)

    p = sub.add_parser("create", parents=[repo, as_json], help="Create a pull request")
    p.add_argument("-t", "--title", default="", help="Title")
    p.add_argument("-b", "--body", default="", help="Description")
    p.add_argument("-B", "--base", default="", help="Destination branch (default: repository main branch)")
    p.add_argument("-H", "--head", default="", help="Source branch (default: current branch)")
    p.add_argument("-r", "--reviewer", action="append", metavar="USERNAME", help="Request a review (repeatable)")
    p.add_argument("-f", "--fill", action="store_true", help="Use commit subjects for title and body")
    p.add_argument("-d", "--draft", action="store_true", help="Mark the title as [DRAFT]")
    p.add_argument("-w", "--web", action="store_true", help="Open the new pull request in the browser")
    p.set_defaults(handler=run_create)

    p = sub.add_parser("edit", parents=[repo], help="Edit title, description or base")
    _selector(p)
    p.add_argument("-t", "--title", default="", help="New title")
    p.add_argument("-b", "--body", default="", help="New description")
    p.add_argument("-B", "--base", default="", help="New destination branch")
    p.set_defaults(handler=run_edit)

    p = sub.add_parser("checkout", aliases=["co"], parents=[repo], help="Check out a pull request's branch")
    _selector(p)
    p.add_argument("-f", "--force", action="store_true", help="Replace an existing local branch")
    p.set_defaults(handler=run_checkout)

    p = sub.add_parser("merge", parents=[repo], help="Merge a pull request")
    _selector(p)
    p.add_argument("-s", "--squash", action="store_true", help="Squash commits")
    p.add_argument("-r", "--rebase", action="store_true", help="Fast-forward merge")
    p.add_argument("-d", "--delete-branch", action="store_true", help="Close the source branch after merging")
    p.add_argument("-m", "--message", default="", help="Merge commit message")
    p.add_argument("--auto", action="store_true", help="Merge when checks pass (not supported by the API)")
    p.add_argument("-y", "--yes", action="store_true", help="Skip confirmation")
    p.set_defaults(handler=run_merge)

    p = sub.add_parser("close", parents=[repo], help="Decline a pull request")
    _selector(p)
    p.add_argument("-c", "--comment", default="", help="Leave a comment before closing")
    p.set_defaults(handler=run_close)

    p = sub.add_parser("reopen", parents=[repo], help="Reopen a declined pull request")
    _selector(p)
    p.set_defaults(handler=run_reopen)

    p = sub.add_parser("comment", parents=[repo], help="Comment on a pull request")
    _selector(p)
    p.add_argument("-b", "--body", default="", help="Comment text (default: open the editor)")
    p.set_defaults(handler=run_comment)

    p = sub.add_parser("review", parents=[repo], help="Approve, request changes or comment")
    _selector(p)
    p.add_argument("-a", "--approve", action="store_true", help="Approve")
    p.add_argument("-r", "--request-changes", action="store_true", help="Request changes")
    p.add_argument("-c", "--comment", action="store_true", help="Comment only")
    p.add_argument("-b", "--body", default="", help="Review comment text")
    p.set_defaults(handler=run_review)

    p = sub.add_parser("diff", parents=[repo], help="Show the diff of a pull request")
    _selector(p)
    p.add_argument("--no-color", action="store_true", help="Disable colour")
    p.set_defaults(handler=run_diff)

    p = sub.add_parser("checks", parents=[repo, as_json], help="Show build statuses")
    _selector(p)
    p.set_defaults(handler=run_checks)
