"""Command-line interface: argparse sub-command trees and output rendering."""

from bbcli.cli import branch, browse, completion, config_cmd, pr, project

__all__ = ["branch", "browse", "completion", "config_cmd", "pr", "project"]
