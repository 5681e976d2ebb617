"""Compose text in the user's editor."""

import logging
import os
import shlex
import subprocess
import tempfile
from pathlib import Path

from bbcli.config import Config, EnvSettings
from bbcli.errors import ExternalToolError

logger = logging.getLogger(__name__)

DEFAULT_EDITOR = "vi"


def editor_command(settings: EnvSettings, config: Config) -> str:
    """BB_EDITOR, config editor, VISUAL, EDITOR, then vi."""
    return settings.bb_editor or config.editor or settings.visual or settings.editor or DEFAULT_EDITOR


class Editor:
    """Runs an editor on a scratch file and returns what the user saved."""

    def __init__(self, command: str = DEFAULT_EDITOR) -> None:
        self._command = command

    def edit(self, initial: str = "") -> str:
        """Open initial text in the editor; return the saved text, stripped.

        The scratch file is removed whether or not the editor succeeds.
        """
        fd, name = tempfile.mkstemp(prefix="bb-", suffix=".md")
        path = Path(name)
        try:
            with os.fdopen(fd, "w") as f:
                f.write(initial)
            cmd = shlex.split(self._command) + [str(path)]
            logger.debug("Running editor: %s", cmd)
            subprocess.run(cmd, check=True)
            return path.read_text().strip()
        except subprocess.CalledProcessError as e:
            raise ExternalToolError(f"editor exited with status {e.returncode}") from e
        except FileNotFoundError as e:
            raise ExternalToolError(f"editor not found: {self._command}") from e
        finally:
            path.unlink(missing_ok=True)
