"""Data models for repositories, pull requests, branches, projects (Pydantic)."""

from bbcli.models.branch import Branch, Commit
from bbcli.models.comment import Comment, CommentContent
from bbcli.models.links import Link, Links
from bbcli.models.page import Page
from bbcli.models.project import Project
from bbcli.models.pull_request import PRState, PullRequest
from bbcli.models.repo import RemoteEntry, RepoRef
from bbcli.models.repository import Repository
from bbcli.models.status import STATE_SYMBOLS, CommitStatus
from bbcli.models.user import Participant, User, WorkspaceMembership

__all__ = [
    "Branch",
    "Comment",
    "CommentContent",
    "Commit",
    "CommitStatus",
    "Link",
    "Links",
    "Page",
    "Participant",
    "PRState",
    "Project",
    "PullRequest",
    "RemoteEntry",
    "RepoRef",
    "Repository",
    "STATE_SYMBOLS",
    "User",
    "WorkspaceMembership",
]
