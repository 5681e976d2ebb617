"""bb entry point.

Usage: bb <command> [<subcommand>] [flags]. Commands: pr, branch,
project, browse, config, completion. Every command accepts
--repo WORKSPACE/REPO; errors go to stderr and exit with status 1.
"""

import argparse
import logging
import sys

from bbcli import __version__
from bbcli.app import AppContext
from bbcli.cli import branch, browse, completion, config_cmd, pr, project
from bbcli.config import EnvSettings, load_config
from bbcli.errors import BbError
from bbcli.iostreams import IOStreams
from bbcli.logging import BbLogging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bb",
        description="Work with Bitbucket Cloud pull requests, branches and projects from the command line.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--debug", action="store_true", help="Log git commands and HTTP requests to stderr")
    subparsers = parser.add_subparsers(dest="command", metavar="<command>", required=True)
    pr.register(subparsers)
    branch.register(subparsers)
    project.register(subparsers)
    browse.register(subparsers)
    config_cmd.register(subparsers)
    completion.register(subparsers, parser)
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    argv = argv if argv is not None else sys.argv[1:]
    return build_parser().parse_args(argv)


def _report(streams: IOStreams, error: BbError) -> None:
    streams.error(str(error))
    if error.hint:
        streams.info(error.hint)


def main(argv: list[str] | None = None, app: AppContext | None = None) -> int:
    """Run one command; return the process exit status."""
    args = parse_args(argv)
    settings = app.settings if app is not None else EnvSettings()
    streams = app.streams if app is not None else IOStreams.system(settings)
    try:
        if app is None:
            config = load_config(settings=settings)
            BbLogging(config.logging, debug=args.debug).setup()
            app = AppContext.from_environment(settings, config)
        else:
            BbLogging(app.config.logging, debug=args.debug).setup()
        return args.handler(app, args)
    except BbError as e:
        _report(streams, e)
        return 1
    except KeyboardInterrupt:
        streams.info("")
        return 130
    except Exception as e:
        logging.getLogger("bbcli.main").exception("Fatal error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
