"""Pull request model."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from bbcli.models.links import Links
from bbcli.models.user import Participant, User


class PRState(str, Enum):
    """States a pull request can be listed by."""

    OPEN = "OPEN"
    MERGED = "MERGED"
    DECLINED = "DECLINED"


class BranchName(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""


class Endpoint(BaseModel):
    """Source or destination of a pull request."""

    model_config = ConfigDict(extra="ignore")

    branch: BranchName = Field(default_factory=BranchName)


class PullRequest(BaseModel):
    """Pull request as returned by /pullrequests endpoints."""

    model_config = ConfigDict(extra="ignore")

    id: int
    title: str = ""
    description: str = ""
    state: str = PRState.OPEN.value
    author: User = Field(default_factory=User)
    source: Endpoint = Field(default_factory=Endpoint)
    destination: Endpoint = Field(default_factory=Endpoint)
    reviewers: list[User] = Field(default_factory=list)
    participants: list[Participant] = Field(default_factory=list)
    comment_count: int = 0
    task_count: int = 0
    close_source_branch: bool = False
    created_on: datetime | None = None
    updated_on: datetime | None = None
    links: Links = Field(default_factory=Links)

    @property
    def source_branch(self) -> str:
        return self.source.branch.name

    @property
    def destination_branch(self) -> str:
        return self.destination.branch.name

    @property
    def html_url(self) -> str:
        return self.links.html.href

    def to_summary(self) -> dict[str, Any]:
        """Flat JSON form printed by --json."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "state": self.state,
            "author": self.author.handle,
            "source_branch": self.source_branch,
            "destination_branch": self.destination_branch,
            "created_on": self.created_on.isoformat() if self.created_on else None,
            "updated_on": self.updated_on.isoformat() if self.updated_on else None,
            "url": self.html_url,
            "close_source_branch": self.close_source_branch,
            "comment_count": self.comment_count,
            "task_count": self.task_count,
        }
