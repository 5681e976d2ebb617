"""Fetch from a remote."""

import logging
from pathlib import Path

from bbcli.services.git._run import _run_git


def fetch(
    remote: str,
    refspec: str = "",
    repo_dir: Path | None = None,
    log: logging.Logger | None = None,
) -> None:
    """Run git fetch <remote> [<refspec>] in the repository."""
    cwd = Path(repo_dir) if repo_dir is not None else Path.cwd()
    args = ["fetch", remote]
    if refspec:
        args.append(refspec)
    _run_git(args, cwd=cwd, log=log, timeout=120)
    if log:
        log.info("Fetched %s from %s", refspec or "all refs", remote)
