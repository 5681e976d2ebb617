"""`bb branch` sub-commands."""

import argparse

from bbcli.app import AppContext
from bbcli.cli.common import json_parent, limit_argument, repo_parent, target_repo
from bbcli.cli.formatting import one_line, print_json, print_table
from bbcli.models import Branch
from bbcli.services import branches


def _summary(b: Branch) -> dict:
    return {"name": b.name, "commit": b.target.hash, "message": b.target.message.strip()}


def run_list(app: AppContext, args: argparse.Namespace) -> int:
    repo = target_repo(app, args)
    items = branches.list_branches(app, repo, limit=args.limit)
    if args.json:
        print_json(app.streams, [_summary(b) for b in items])
        return 0
    if not items:
        app.streams.println(f"No branches found in {repo}")
        return 0
    print_table(
        app.streams,
        ["NAME", "COMMIT", "MESSAGE"],
        [[b.name, b.short_hash, one_line(b.target.message, 50)] for b in items],
    )
    return 0


def run_create(app: AppContext, args: argparse.Namespace) -> int:
    repo = target_repo(app, args)
    created = branches.create_branch(app, repo, args.name, args.target)
    if args.json:
        print_json(app.streams, _summary(created))
    return 0


def run_delete(app: AppContext, args: argparse.Namespace) -> int:
    repo = target_repo(app, args)
    branches.delete_branch(app, repo, args.name, force=args.force)
    return 0


def register(subparsers: argparse._SubParsersAction) -> None:
    """Add `branch` and its sub-commands."""
    repo, as_json = repo_parent(), json_parent()
    branch = subparsers.add_parser("branch", help="Work with remote branches")
    sub = branch.add_subparsers(dest="branch_command", metavar="<command>", required=True)

    p = sub.add_parser("list", aliases=["ls"], parents=[repo, as_json], help="List branches")
    limit_argument(p)
    p.set_defaults(handler=run_list)

    p = sub.add_parser("create", parents=[repo, as_json], help="Create a branch on Bitbucket")
    p.add_argument("name", help="Branch name")
    p.add_argument("-t", "--target", required=True, help="Branch, tag or commit to branch from")
    p.set_defaults(handler=run_create)

    p = sub.add_parser("delete", aliases=["rm"], parents=[repo], help="Delete a branch on Bitbucket")
    p.add_argument("name", help="Branch name")
    p.add_argument("-f", "--force", action="store_true", help="Skip confirmation")
    p.set_defaults(handler=run_delete)
