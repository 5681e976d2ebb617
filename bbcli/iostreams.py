"""Terminal input/output: colour decision, status lines, prompts."""

import sys
from typing import TextIO

from bbcli.config import EnvSettings

RESET = "\033[0m"
BOLD = "\033[1m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
MAGENTA = "\033[35m"
CYAN = "\033[36m"
BOLD_BLUE = "\033[1;34m"


def _isatty(stream: TextIO) -> bool:
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


class IOStreams:
    """stdin/stdout/stderr of one invocation plus their terminal state.

    TTY flags and the colour decision can be forced, so tests can drive
    interactive and non-interactive paths with StringIO streams.
    """

    def __init__(
        self,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
        stdin_tty: bool | None = None,
        stdout_tty: bool | None = None,
        color_enabled: bool | None = None,
    ) -> None:
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr
        self.is_stdin_tty = _isatty(self.stdin) if stdin_tty is None else stdin_tty
        self.is_stdout_tty = _isatty(self.stdout) if stdout_tty is None else stdout_tty
        self.color_enabled = self.is_stdout_tty if color_enabled is None else color_enabled

    @classmethod
    def system(cls, settings: EnvSettings) -> "IOStreams":
        """Process streams; colour off when NO_COLOR, BB_NO_COLOR or TERM=dumb."""
        streams = cls()
        if settings.color_disabled:
            streams.color_enabled = False
        return streams

    def colorize(self, text: str, color: str) -> str:
        if not self.color_enabled:
            return text
        return f"{color}{text}{RESET}"

    def println(self, text: str = "") -> None:
        print(text, file=self.stdout)

    def success(self, message: str) -> None:
        print(f"{self.colorize('✓', GREEN)} {message}", file=self.stdout)

    def warning(self, message: str) -> None:
        print(f"{self.colorize('!', YELLOW)} {message}", file=self.stderr)

    def error(self, message: str) -> None:
        print(f"{self.colorize('✗', RED)} {message}", file=self.stderr)

    def info(self, message: str) -> None:
        print(message, file=self.stderr)

    def prompt(self, label: str) -> str:
        """Print label to stderr and read one line; "" on end of input."""
        self.stderr.write(label)
        self.stderr.flush()
        line = self.stdin.readline()
        return line.rstrip("\r\n")

    def confirm(self, question: str) -> bool:
        """Ask a yes/no question; False when stdin is not a terminal."""
        if not self.is_stdin_tty:
            return False
        answer = self.prompt(f"{question} [y/N]: ").strip().lower()
        return answer in ("y", "yes")
