"""Human-readable rendering: tables, relative times, diffs, JSON."""

import json
from datetime import datetime, timezone
from typing import Any, Sequence

from bbcli.iostreams import BOLD, BOLD_BLUE, CYAN, GREEN, MAGENTA, RED, YELLOW, IOStreams
from bbcli.models import Participant, PullRequest

# Cell: plain text, or (text, ANSI colour) coloured after padding
Cell = str | tuple[str, str]

PR_STATE_COLORS = {
    "OPEN": GREEN,
    "MERGED": MAGENTA,
    "DECLINED": RED,
}

CHECK_LABELS = {
    "SUCCESSFUL": ("✓ pass", GREEN),
    "FAILED": ("✗ fail", RED),
    "INPROGRESS": ("○ running", YELLOW),
    "STOPPED": ("◌ stopped", ""),
}


def truncate(text: str, width: int) -> str:
    """Cut text to width characters, ending in "..." when cut."""
    if len(text) <= width:
        return text
    if width <= 3:
        return text[:width]
    return text[: width - 3] + "..."


def one_line(text: str, width: int = 50) -> str:
    """Collapse newlines and runs of spaces, then truncate."""
    return truncate(" ".join(text.split()), width)


def time_ago(when: datetime | None, now: datetime | None = None) -> str:
    if when is None:
        return ""
    now = now or datetime.now(timezone.utc)
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    seconds = int((now - when).total_seconds())
    if seconds < 60:
        return "just now"
    for unit, size in (("year", 365 * 86400), ("month", 30 * 86400), ("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds >= size:
            n = seconds // size
            return f"{n} {unit}{'s' if n != 1 else ''} ago"
    return "just now"


def print_json(streams: IOStreams, data: Any) -> None:
    """Compact JSON on one line."""
    streams.println(json.dumps(data, ensure_ascii=False, separators=(",", ":"), default=str))


def print_table(streams: IOStreams, headers: Sequence[str], rows: Sequence[Sequence[Cell]]) -> None:
    """Left-aligned columns separated by two spaces."""
    plain = [[c if isinstance(c, str) else c[0] for c in row] for row in rows]
    widths = [len(h) for h in headers]
    for row in plain:
        for i, text in enumerate(row):
            widths[i] = max(widths[i], len(text))

    def line(cells: Sequence[Cell]) -> str:
        out = []
        for i, cell in enumerate(cells):
            text, color = (cell, "") if isinstance(cell, str) else cell
            padded = text.ljust(widths[i]) if i < len(cells) - 1 else text
            out.append(streams.colorize(padded, color) if color else padded)
        return "  ".join(out).rstrip()

    streams.println(line([(h, BOLD) for h in headers]))
    for row in rows:
        streams.println(line(row))


def colorize_diff(streams: IOStreams, text: str) -> str:
    """Colour unified diff lines by their prefix."""
    lines = []
    for raw in text.splitlines():
        if raw.startswith(("+++ ", "--- ")):
            lines.append(streams.colorize(raw, BOLD))
        elif raw.startswith("+"):
            lines.append(streams.colorize(raw, GREEN))
        elif raw.startswith("-"):
            lines.append(streams.colorize(raw, RED))
        elif raw.startswith("@@"):
            lines.append(streams.colorize(raw, CYAN))
        elif raw.startswith("diff "):
            lines.append(streams.colorize(raw, BOLD_BLUE))
        else:
            lines.append(raw)
    return "\n".join(lines)


def _review_state(participant: Participant) -> str:
    if participant.approved:
        return "approved"
    if participant.state == "changes_requested":
        return "changes requested"
    return "pending"


def pull_request_lines(streams: IOStreams, pr: PullRequest) -> list[str]:
    """Detail view of one pull request."""
    lines = [
        f"{streams.colorize('Title:', BOLD)} {pr.title}",
        f"{streams.colorize('State:', BOLD)} {streams.colorize(pr.state, PR_STATE_COLORS.get(pr.state, ''))}",
        f"{streams.colorize('Author:', BOLD)} {pr.author.name}",
        "",
        pr.description or "(No description)",
        "",
    ]
    reviewers = [p for p in pr.participants if p.role == "REVIEWER"]
    if reviewers:
        lines.append(streams.colorize("Reviewers:", BOLD))
        lines.extend(f"  @{p.user.handle} ({_review_state(p)})" for p in reviewers)
        lines.append("")
    elif pr.reviewers:
        lines.append(streams.colorize("Reviewers:", BOLD))
        lines.extend(f"  @{u.handle} (pending)" for u in pr.reviewers)
        lines.append("")
    lines.append(f"{streams.colorize('Base:', BOLD)} {pr.destination_branch} <- {pr.source_branch}")
    lines.append(f"{streams.colorize('Comments:', BOLD)} {pr.comment_count}")
    if pr.created_on:
        lines.append(f"{streams.colorize('Created:', BOLD)} {time_ago(pr.created_on)}")
    if pr.html_url:
        lines.append("")
        lines.append(f"View in browser: {pr.html_url}")
    return lines
