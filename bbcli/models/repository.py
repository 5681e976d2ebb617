"""Repository resource (only what the client reads)."""

from pydantic import BaseModel, ConfigDict, Field

from bbcli.models.links import Links
from bbcli.models.pull_request import BranchName


class Repository(BaseModel):
    model_config = ConfigDict(extra="ignore")

    full_name: str = ""
    mainbranch: BranchName | None = None
    links: Links = Field(default_factory=Links)
