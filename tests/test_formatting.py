"""Tests for terminal rendering helpers."""

import io
from datetime import datetime, timedelta, timezone

import pytest
from conftest import pr_payload

from bbcli.cli.formatting import colorize_diff, one_line, print_json, print_table, pull_request_lines, time_ago, truncate
from bbcli.iostreams import GREEN, RESET, IOStreams
from bbcli.models import PullRequest

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def _streams(color: bool = False) -> IOStreams:
    return IOStreams(stdin=io.StringIO(), stdout=io.StringIO(), stderr=io.StringIO(), color_enabled=color)


def test_truncate() -> None:
    assert truncate("short", 10) == "short"
    assert truncate("a long pull request title", 10) == "a long ..."
    assert len(truncate("x" * 100, 50)) == 50


def test_one_line() -> None:
    assert one_line("first\nsecond   third") == "first second third"


@pytest.mark.parametrize(
    "delta,expected",
    [
        (timedelta(seconds=30), "just now"),
        (timedelta(minutes=1), "1 minute ago"),
        (timedelta(hours=5), "5 hours ago"),
        (timedelta(days=1), "1 day ago"),
        (timedelta(days=65), "2 months ago"),
        (timedelta(days=800), "2 years ago"),
    ],
)
def test_time_ago(delta: timedelta, expected: str) -> None:
    assert time_ago(NOW - delta, now=NOW) == expected


def test_time_ago_missing() -> None:
    assert time_ago(None) == ""


def test_print_json_is_compact() -> None:
    streams = _streams()
    print_json(streams, [{"id": 1, "title": "Ünïcode"}])
    assert streams.stdout.getvalue() == '[{"id":1,"title":"Ünïcode"}]\n'


def test_print_table_pads_columns() -> None:
    streams = _streams()
    print_table(streams, ["ID", "TITLE"], [["#1", "First"], ["#100", "Second"]])
    assert streams.stdout.getvalue().splitlines() == [
        "ID    TITLE",
        "#1    First",
        "#100  Second",
    ]


def test_print_table_colours_after_padding() -> None:
    streams = _streams(color=True)
    print_table(streams, ["STATE", "X"], [[("OPEN", GREEN), "y"]])
    row = streams.stdout.getvalue().splitlines()[1]
    assert row == f"{GREEN}OPEN {RESET}  y"


def test_colorize_diff() -> None:
    text = "diff --git a/f b/f\n--- a/f\n+++ b/f\n@@ -1 +1 @@\n-old\n+new\n ctx"
    assert colorize_diff(_streams(), text) == text
    coloured = colorize_diff(_streams(color=True), text).splitlines()
    assert coloured[5] == f"{GREEN}+new{RESET}"
    assert coloured[6] == " ctx"


def test_pull_request_lines() -> None:
    pr = PullRequest.model_validate(
        pr_payload(
            5,
            description="",
            comment_count=2,
            participants=[
                {"user": {"username": "bob"}, "role": "REVIEWER", "approved": True},
                {"user": {"username": "carol"}, "role": "REVIEWER", "state": "changes_requested"},
                {"user": {"username": "dave"}, "role": "PARTICIPANT"},
            ],
        )
    )
    lines = pull_request_lines(_streams(), pr)
    assert lines[0] == "Title: Pull request 5"
    assert lines[1] == "State: OPEN"
    assert lines[2] == "Author: Alice"
    assert "(No description)" in lines
    assert "  @bob (approved)" in lines
    assert "  @carol (changes requested)" in lines
    assert not any("dave" in line for line in lines)
    assert "Base: main <- feature/x" in lines
    assert "Comments: 2" in lines
    assert lines[-1] == "View in browser: https://bitbucket.org/acme/widgets/pull-requests/5"
