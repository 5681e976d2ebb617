"""Open web pages."""

import logging
import shlex
import subprocess
import webbrowser

from bbcli.config import Config, EnvSettings
from bbcli.errors import ExternalToolError

logger = logging.getLogger(__name__)


def browser_command(settings: EnvSettings, config: Config) -> str | None:
    """BB_BROWSER, config browser, BROWSER; None means the system default."""
    return settings.bb_browser or config.browser or settings.browser or None


class Browser:
    def __init__(self, command: str | None = None) -> None:
        self._command = command

    def open(self, url: str) -> None:
        """Open url without waiting for the browser to exit."""
        if not self._command:
            if not webbrowser.open(url):
                raise ExternalToolError(f"could not open browser for {url}")
            return
        cmd = shlex.split(self._command) + [url]
        logger.debug("Running browser: %s", cmd)
        try:
            subprocess.Popen(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        except OSError as e:
            raise ExternalToolError(f"could not open browser: {e}") from e
