"""`bb browse`: open the repository in the browser."""

import argparse

from bbcli.app import AppContext
from bbcli.cli.common import repo_parent, target_repo
from bbcli.errors import WorkingCopyError
from bbcli.models import RepoRef


def browse_url(
    repo: RepoRef,
    path: str = "",
    branch: str = "",
    commit: str = "",
    prs: bool = False,
    settings: bool = False,
    current_branch: str = "",
) -> str:
    """Web URL for the requested page of repo."""
    base = repo.html_url
    if settings:
        return f"{base}/admin"
    if prs:
        return f"{base}/pull-requests"
    if commit:
        return f"{base}/commits/{commit}"
    if path:
        ref = branch or current_branch or "HEAD"
        return f"{base}/src/{ref}/{path.lstrip('/')}"
    if branch:
        return f"{base}/src/{branch}"
    return base


def run_browse(app: AppContext, args: argparse.Namespace) -> int:
    repo = target_repo(app, args)
    current = ""
    if args.path and not args.branch:
        try:
            current = app.working_copy.current_branch()
        except WorkingCopyError:
            current = ""
    url = browse_url(
        repo,
        path=args.path,
        branch=args.branch,
        commit=args.commit,
        prs=args.prs,
        settings=args.settings,
        current_branch=current,
    )
    if args.no_browser:
        app.streams.println(url)
        return 0
    app.streams.info(f"Opening {url} in your browser.")
    app.browser.open(url)
    return 0


def register(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser("browse", parents=[repo_parent()], help="Open the repository in the browser")
    p.add_argument("path", nargs="?", default="", help="File or directory to open")
    p.add_argument("-b", "--branch", default="", help="Open a branch")
    p.add_argument("-c", "--commit", default="", help="Open a commit")
    p.add_argument("--prs", action="store_true", help="Open the pull requests page")
    p.add_argument("-s", "--settings", action="store_true", help="Open repository settings")
    p.add_argument("-n", "--no-browser", action="store_true", help="Print the URL instead of opening it")
    p.set_defaults(handler=run_browse)
