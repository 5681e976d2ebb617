"""Hypermedia links embedded in API objects."""

from pydantic import BaseModel, ConfigDict, Field


class Link(BaseModel):
    model_config = ConfigDict(extra="ignore")

    href: str = ""


class Links(BaseModel):
    """The subset of ``links`` the client follows."""

    model_config = ConfigDict(extra="ignore")

    html: Link = Field(default_factory=Link)
    diff: Link = Field(default_factory=Link)
