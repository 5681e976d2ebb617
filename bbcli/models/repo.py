"""Repository references and working-copy remotes."""

from pydantic import BaseModel, ConfigDict


class RepoRef(BaseModel):
    """A remote repository: (workspace, repo slug).

    The slug is empty for workspace-only contexts (project commands).
    """

    model_config = ConfigDict(frozen=True)

    workspace: str
    slug: str = ""

    def __str__(self) -> str:
        if not self.slug:
            return self.workspace
        return f"{self.workspace}/{self.slug}"

    @property
    def api_path(self) -> str:
        return f"/repositories/{self.workspace}/{self.slug}"

    @property
    def html_url(self) -> str:
        return f"https://bitbucket.org/{self.workspace}/{self.slug}"


class RemoteEntry(BaseModel):
    """A configured remote of the local checkout."""

    model_config = ConfigDict(frozen=True)

    name: str
    fetch_url: str = ""
    push_url: str = ""
    repo: RepoRef | None = None
