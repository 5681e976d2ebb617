"""`bb config`: read and change config.yml."""

import argparse

from bbcli.app import AppContext
from bbcli.cli.common import repo_parent
from bbcli.config import CONFIG_KEYS, get_config_value, save_config, set_config_value


def run_list(app: AppContext, args: argparse.Namespace) -> int:
    for key in CONFIG_KEYS:
        app.streams.println(f"{key}={get_config_value(app.config, key)}")
    return 0


def run_get(app: AppContext, args: argparse.Namespace) -> int:
    app.streams.println(get_config_value(app.config, args.key))
    return 0


def run_set(app: AppContext, args: argparse.Namespace) -> int:
    set_config_value(app.config, args.key, args.value)
    save_config(app.config, settings=app.settings)
    app.streams.success(f"Set {args.key} to {args.value}")
    return 0


def register(subparsers: argparse._SubParsersAction) -> None:
    """Add `config` and its sub-commands."""
    repo = repo_parent()
    config = subparsers.add_parser("config", help="Manage configuration")
    sub = config.add_subparsers(dest="config_command", metavar="<command>", required=True)

    p = sub.add_parser("list", aliases=["ls"], parents=[repo], help="Print all settings")
    p.set_defaults(handler=run_list)

    p = sub.add_parser("get", parents=[repo], help="Print one setting")
    p.add_argument("key", help=", ".join(CONFIG_KEYS))
    p.set_defaults(handler=run_get)

    p = sub.add_parser("set", parents=[repo], help="Change one setting")
    p.add_argument("key", help=", ".join(CONFIG_KEYS))
    p.add_argument("value")
    p.set_defaults(handler=run_set)
