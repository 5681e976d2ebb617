"""Pull request comment model."""

from pydantic import BaseModel, ConfigDict, Field

from bbcli.models.links import Links


class CommentContent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    raw: str = ""


class Comment(BaseModel):
    """Comment on a pull request."""

    model_config = ConfigDict(extra="ignore")

    id: int
    content: CommentContent = Field(default_factory=CommentContent)
    links: Links = Field(default_factory=Links)
