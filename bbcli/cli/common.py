"""Arguments shared by sub-commands."""

import argparse

from bbcli.app import AppContext
from bbcli.models import RepoRef
from bbcli.services.repo_context import resolve_repository


def repo_parent() -> argparse.ArgumentParser:
    """--repo/-R, accepted by every sub-command."""
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "-R",
        "--repo",
        default="",
        metavar="WORKSPACE/REPO",
        help="Target repository (default: detected from the git remote)",
    )
    return parent


def json_parent() -> argparse.ArgumentParser:
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument("--json", action="store_true", help="Output JSON")
    return parent


def limit_argument(parser: argparse.ArgumentParser, default: int = 30) -> None:
    parser.add_argument("-l", "-L", "--limit", type=int, default=default, help=f"Maximum number of items (default {default})")


def target_repo(app: AppContext, args: argparse.Namespace) -> RepoRef:
    return resolve_repository(app.working_copy, repo_flag=args.repo)
