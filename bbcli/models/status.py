"""Commit status (build/check) model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

# Display symbol per status state
STATE_SYMBOLS = {
    "SUCCESSFUL": "✓",
    "FAILED": "✗",
    "INPROGRESS": "○",
    "STOPPED": "◌",
}


class CommitStatus(BaseModel):
    """Build status reported against a pull request's commits."""

    model_config = ConfigDict(extra="ignore")

    key: str = ""
    name: str = ""
    state: str = ""
    description: str = ""
    url: str = ""
    created_on: datetime | None = None
    updated_on: datetime | None = None

    @property
    def symbol(self) -> str:
        return STATE_SYMBOLS.get(self.state, "?")

    @property
    def label(self) -> str:
        """Name, or key when the status has no name."""
        return self.name or self.key
