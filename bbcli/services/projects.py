"""Workspace project operations."""

from bbcli.app import AppContext
from bbcli.errors import InputError
from bbcli.models import Project
from bbcli.services.repo_context import resolve_repository


def _require_key(key: str) -> str:
    key = key.strip().upper()
    if not key:
        raise InputError("project key is required. Use --key or -k to specify")
    return key


def resolve_workspace(app: AppContext, workspace_flag: str = "", repo_flag: str = "") -> str:
    """--workspace, else the --repo workspace, else the default, else detection."""
    if workspace_flag:
        return workspace_flag
    repo = resolve_repository(
        app.working_copy,
        repo_flag=repo_flag,
        default_workspace=app.config.default_workspace,
        workspace_only=True,
    )
    return repo.workspace


def list_projects(app: AppContext, workspace: str, limit: int = 30) -> list[Project]:
    return app.client.list_projects(workspace, limit=limit)


def view_project(app: AppContext, workspace: str, key: str) -> Project:
    return app.client.get_project(workspace, _require_key(key))


def create_project(
    app: AppContext,
    workspace: str,
    key: str,
    name: str,
    description: str = "",
    private: bool = True,
) -> Project:
    key = _require_key(key)
    if not name.strip():
        raise InputError("project name is required. Use --name or -n to specify")
    project = app.client.create_project(workspace, key, name.strip(), description=description, is_private=private)
    app.streams.success(f"Created project {project.key} in workspace {workspace}")
    return project
