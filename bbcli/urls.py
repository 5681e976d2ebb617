"""Parse and build Bitbucket git remote URLs.

Recognised shapes:

- SSH: ``git@bitbucket.org:<workspace>/<repo>[.git]``
- HTTPS: ``https://[<userinfo>@]bitbucket.org/<workspace>/<repo>[.git]``
"""

import re

from bbcli.errors import MalformedURLError
from bbcli.models import RepoRef

SERVICE_HOST = "bitbucket.org"

_SSH_RE = re.compile(r"^git@bitbucket\.org:([^/]+)/([^/]+?)(?:\.git)?$")
_HTTPS_RE = re.compile(r"^https://(?:[^@/]+@)?bitbucket\.org/([^/]+)/([^/]+?)(?:\.git)?$")


def is_service_url(url: str) -> bool:
    """True if the URL mentions the Bitbucket host at all."""
    return SERVICE_HOST in url


def parse_remote_url(url: str) -> RepoRef:
    """Extract (workspace, repo) from an SSH or HTTPS remote URL.

    Raises:
        MalformedURLError: URL has neither recognised shape.
    """
    url = url.strip()
    for pattern in (_SSH_RE, _HTTPS_RE):
        m = pattern.match(url)
        if m:
            return RepoRef(workspace=m.group(1), slug=m.group(2))
    raise MalformedURLError(f"not a Bitbucket repository URL: {url}")


def format_remote_url(repo: RepoRef, protocol: str = "ssh") -> str:
    """Clone URL for repo; protocol is "ssh" or "https"."""
    if protocol == "https":
        return f"https://{SERVICE_HOST}/{repo.workspace}/{repo.slug}.git"
    return f"git@{SERVICE_HOST}:{repo.workspace}/{repo.slug}.git"
