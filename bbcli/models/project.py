"""Workspace project model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from bbcli.models.links import Links


class Project(BaseModel):
    """Project within a workspace, identified by its key."""

    model_config = ConfigDict(extra="ignore")

    key: str
    name: str = ""
    description: str = ""
    is_private: bool = True
    uuid: str = ""
    created_on: datetime | None = None
    updated_on: datetime | None = None
    links: Links = Field(default_factory=Links)

    @property
    def visibility(self) -> str:
        return "private" if self.is_private else "public"
