"""`bb completion`: shell completion scripts generated from the parser tree."""

import argparse
from functools import partial

from bbcli.app import AppContext
from bbcli.cli.common import repo_parent

SHELLS = ("bash", "zsh")

BASH_TEMPLATE = """# __PROG__ completion for bash; load with: eval "$(__PROG__ completion bash)"
___PROG___completion() {
    local cur word candidate path opts
    cur="${COMP_WORDS[COMP_CWORD]}"
    path=""
    for word in "${COMP_WORDS[@]:1:COMP_CWORD-1}"; do
        [[ "$word" == -* ]] && continue
        candidate="${path:+$path }$word"
        case "$candidate" in
            __KNOWN__) path="$candidate" ;;
        esac
    done
    case "$path" in
__CASES__
    esac
    COMPREPLY=($(compgen -W "$opts" -- "$cur"))
}
complete -F ___PROG___completion __PROG__
"""

ZSH_PREAMBLE = "autoload -U +X bashcompinit && bashcompinit\n"


def command_tree(parser: argparse.ArgumentParser) -> dict[str, argparse.ArgumentParser]:
    """Map command paths ("", "pr", "pr list", ...) to their parsers."""
    tree = {"": parser}

    def walk(prefix: str, node: argparse.ArgumentParser) -> None:
        for action in node._actions:
            if isinstance(action, argparse._SubParsersAction):
                for name, child in action.choices.items():
                    path = f"{prefix} {name}".strip()
                    tree[path] = child
                    walk(path, child)

    walk("", parser)
    return tree


def _words(tree: dict[str, argparse.ArgumentParser], path: str) -> list[str]:
    depth = len(path.split()) + 1 if path else 1
    prefix = f"{path} " if path else ""
    children = [p.split()[-1] for p in tree if p and len(p.split()) == depth and p.startswith(prefix)]
    options = [opt for action in tree[path]._actions for opt in action.option_strings]
    return children + options


def bash_script(parser: argparse.ArgumentParser) -> str:
    prog = parser.prog
    tree = command_tree(parser)
    known = "|".join(f'"{p}"' for p in tree if p)
    cases = "\n".join(f'        "{p}") opts="{" ".join(_words(tree, p))}" ;;' for p in tree)
    return (
        BASH_TEMPLATE.replace("__KNOWN__", known)
        .replace("__CASES__", cases)
        .replace("__PROG__", prog)
    )


def completion_script(parser: argparse.ArgumentParser, shell: str = "bash") -> str:
    script = bash_script(parser)
    if shell == "zsh":
        return ZSH_PREAMBLE + script
    return script


def run_completion(root: argparse.ArgumentParser, app: AppContext, args: argparse.Namespace) -> int:
    app.streams.stdout.write(completion_script(root, args.shell))
    return 0


def register(subparsers: argparse._SubParsersAction, root: argparse.ArgumentParser) -> None:
    p = subparsers.add_parser("completion", parents=[repo_parent()], help="Print a shell completion script")
    p.add_argument("shell", nargs="?", default="bash", choices=SHELLS)
    p.set_defaults(handler=partial(run_completion, root))
