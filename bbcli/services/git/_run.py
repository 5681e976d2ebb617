"""Internal helpers: run git commands, GitRunnerError."""

import logging
import subprocess
from pathlib import Path

from bbcli.errors import GitRunnerError, NotAWorkingCopyError

__all__ = ["GitRunnerError", "_run_git"]


def _run_git(args: list[str], cwd: Path, log: logging.Logger | None = None, timeout: int = 60) -> str:
    """Run git command and return its stdout; raise GitRunnerError on non-zero exit."""
    cmd = ["git"] + args
    if log:
        log.debug("Running %s in %s", " ".join(cmd), cwd)
    try:
        result = subprocess.run(cmd, cwd=cwd, check=True, capture_output=True, text=True, timeout=timeout)
    except subprocess.CalledProcessError as e:
        err = (e.stderr or e.stdout or "").strip()
        if "not a git repository" in err.lower():
            raise NotAWorkingCopyError("not a git repository (or any of the parent directories)") from e
        if log:
            log.warning("Git %s failed: %s", args, err)
        raise GitRunnerError(f"git {' '.join(args)}: {err}") from e
    except subprocess.TimeoutExpired as e:
        raise GitRunnerError(f"git {' '.join(args)}: timed out after {timeout}s") from e
    except FileNotFoundError as e:
        raise GitRunnerError("git not found") from e
    return result.stdout
