"""`bb project` sub-commands."""

import argparse

from bbcli.app import AppContext
from bbcli.cli.common import json_parent, limit_argument, repo_parent
from bbcli.cli.formatting import print_json, print_table, time_ago, truncate
from bbcli.errors import OperationError
from bbcli.iostreams import BOLD
from bbcli.models import Project
from bbcli.services import projects


def _workspace(app: AppContext, args: argparse.Namespace) -> str:
    return projects.resolve_workspace(app, workspace_flag=args.workspace, repo_flag=args.repo)


def _dump(project: Project) -> dict:
    return project.model_dump(mode="json")


def run_list(app: AppContext, args: argparse.Namespace) -> int:
    workspace = _workspace(app, args)
    items = projects.list_projects(app, workspace, limit=args.limit)
    if args.json:
        print_json(app.streams, [_dump(p) for p in items])
        return 0
    if not items:
        app.streams.println(f"No projects found in workspace {workspace}")
        return 0
    rows = [[p.key, truncate(p.name, 30), truncate(p.description, 40), p.visibility] for p in items]
    print_table(app.streams, ["KEY", "NAME", "DESCRIPTION", "VISIBILITY"], rows)
    return 0


def run_view(app: AppContext, args: argparse.Namespace) -> int:
    workspace = _workspace(app, args)
    project = projects.view_project(app, workspace, args.key or args.key_flag)
    if args.web:
        url = project.links.html.href
        if not url:
            raise OperationError(f"project {project.key} has no web link")
        app.browser.open(url)
        app.streams.success(f"Opened {url} in your browser")
        return 0
    if args.json:
        print_json(app.streams, _dump(project))
        return 0
    out = app.streams
    out.println(out.colorize(f"{project.name} ({project.key})", BOLD))
    out.println()
    if project.description:
        out.println(f"Description: {project.description}")
    out.println(f"Visibility: {project.visibility}")
    out.println(f"UUID: {project.uuid}")
    if project.created_on:
        out.println(f"Created: {time_ago(project.created_on)}")
    if project.updated_on:
        out.println(f"Updated: {time_ago(project.updated_on)}")
    if project.links.html.href:
        out.println()
        out.println(f"View in browser: {project.links.html.href}")
    return 0


def run_create(app: AppContext, args: argparse.Namespace) -> int:
    workspace = _workspace(app, args)
    project = projects.create_project(
        app,
        workspace,
        key=args.key,
        name=args.name,
        description=args.description,
        private=args.private,
    )
    if args.json:
        print_json(app.streams, _dump(project))
    elif project.links.html.href:
        app.streams.println(project.links.html.href)
    return 0


def register(subparsers: argparse._SubParsersAction) -> None:
    """Add `project` and its sub-commands."""
    repo, as_json = repo_parent(), json_parent()
    workspace = argparse.ArgumentParser(add_help=False)
    workspace.add_argument("-w", "--workspace", default="", help="Workspace slug")

    project = subparsers.add_parser("project", help="Work with workspace projects")
    sub = project.add_subparsers(dest="project_command", metavar="<command>", required=True)

    p = sub.add_parser("list", aliases=["ls"], parents=[repo, workspace, as_json], help="List projects")
    limit_argument(p)
    p.set_defaults(handler=run_list)

    p = sub.add_parser("view", parents=[repo, workspace, as_json], help="Show a project")
    p.add_argument("key", nargs="?", default="", help="Project key")
    p.add_argument("-k", "--key", dest="key_flag", default="", help=argparse.SUPPRESS)
    p.add_argument("--web", action="store_true", help="Open the project in the browser")
    p.set_defaults(handler=run_view)

    p = sub.add_parser("create", parents=[repo, workspace, as_json], help="Create a project")
    p.add_argument("-k", "--key", default="", help="Project key (e.g. PROJ)")
    p.add_argument("-n", "--name", default="", help="Project name")
    p.add_argument("-d", "--description", default="", help="Description")
    visibility = p.add_mutually_exclusive_group()
    visibility.add_argument("--private", dest="private", action="store_true", default=True, help="Private (default)")
    visibility.add_argument("--public", dest="private", action="store_false", help="Public")
    p.set_defaults(handler=run_create)
