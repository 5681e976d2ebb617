"""Bitbucket accounts and pull request participants."""

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """Account as embedded in API responses."""

    model_config = ConfigDict(extra="ignore")

    uuid: str = ""
    account_id: str = ""
    username: str = ""
    nickname: str = ""
    display_name: str = ""

    @property
    def name(self) -> str:
        """Best human-readable name."""
        return self.display_name or self.username or self.nickname or "unknown"

    @property
    def handle(self) -> str:
        """Login-like name for @-mentions."""
        return self.username or self.nickname or self.display_name or "unknown"


class Participant(BaseModel):
    """Reviewer or participant of a pull request."""

    model_config = ConfigDict(extra="ignore")

    user: User = Field(default_factory=User)
    role: str = "PARTICIPANT"
    approved: bool = False
    state: str | None = None


class WorkspaceMembership(BaseModel):
    """Entry of /workspaces/{ws}/members."""

    model_config = ConfigDict(extra="ignore")

    user: User = Field(default_factory=User)
