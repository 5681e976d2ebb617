"""Branch model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Commit(BaseModel):
    model_config = ConfigDict(extra="ignore")

    hash: str = ""
    message: str = ""
    date: datetime | None = None


class Branch(BaseModel):
    """Branch under /refs/branches."""

    model_config = ConfigDict(extra="ignore")

    name: str
    target: Commit = Field(default_factory=Commit)

    @property
    def short_hash(self) -> str:
        return self.target.hash[:7]
