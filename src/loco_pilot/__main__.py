from __future__ import annotations
import argparse
import logging
import sys
from . import __version__
from .branches import BranchError, copy_text, list_branches, select_branch
from .config import ConfigStore, UnknownConfigKey
from .git import GitProber, commit_sha
from .info import EnvironmentCache
from .prompt import PromptStyle, generate_prompt
from .styles import ANSIStyler, BashStyler, Painter, ZshStyler, theme_from_colors


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="loco-pilot",
        description="A customizable, Git-aware bash/zsh prompt",
    )
    parser.add_argument(
        "--ansi",
        action="store_const",
        dest="stylecls",
        const=ANSIStyler,
        help="Format prompt for direct display",
    )
    parser.add_argument(
        "--bash",
        action="store_const",
        dest="stylecls",
        const=BashStyler,
        help="Format prompt for Bash's PS1 (default)",
    )
    parser.add_argument(
        "--gbc",
        action="store_true",
        help="Print the name of the current Git branch for copying",
    )
    parser.add_argument(
        "--gbs",
        action="store_true",
        help="Pick a local Git branch from a menu and print its name for copying",
    )
    parser.add_argument(
        "-l",
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Set the level of diagnostics written to stderr  [default: WARNING]",
    )
    parser.add_argument(
        "-s",
        "--style",
        metavar="NAME",
        help=(
            "Prompt style to use: default, info, emoji, or minimal"
            "  [default: the configured style]"
        ),
    )
    parser.add_argument(
        "--zsh",
        action="store_const",
        dest="stylecls",
        const=ZshStyler,
        help="Format prompt for zsh's PS1",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    subparsers = parser.add_subparsers(title="commands", dest="command")
    config_parser = subparsers.add_parser(
        "config",
        help="Show or change settings",
        description=(
            "With no arguments, show all settings.  With KEY, show that"
            " setting.  With KEY and VALUE, change it.  Keys are style,"
            " show_git, and color.{username,hostname,directory,git_branch,"
            "git_dirty,time}."
        ),
    )
    config_parser.add_argument("key", nargs="?")
    config_parser.add_argument("value", nargs="?")
    subparsers.add_parser("version", help="Show detailed version information")
    subparsers.add_parser(
        "git-branch-copy", help="Print the name of the current Git branch"
    )
    subparsers.add_parser(
        "git-branch-select",
        help="Pick a local Git branch from a menu and print its name",
    )
    args = parser.parse_args(argv)
    logging.basicConfig(
        format="%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        level=getattr(logging, args.log_level),
        stream=sys.stderr,
    )

    store = ConfigStore()
    prober = GitProber()

    if args.gbc or args.command == "git-branch-copy":
        branch_copy(prober)
    elif args.gbs or args.command == "git-branch-select":
        branch_select()
    elif args.command == "config":
        configure(store, args.key, args.value)
    elif args.command == "version":
        version = __version__
        if sha := commit_sha():
            version += f" ({sha})"
        print(f"Version: {version}")
    else:
        config = store.load()
        style = PromptStyle.from_name(args.style or config.style)
        styler = (args.stylecls or BashStyler)()
        paint = Painter(styler=styler, theme=theme_from_colors(config.colors))
        print(generate_prompt(style, config, EnvironmentCache(), prober, paint))


def branch_copy(prober: GitProber) -> None:
    if (gs := prober.probe()) is not None:
        copy_text(gs.branch)
        print(f"Git branch name: '{gs.branch}'")
    else:
        print(
            "Not in a git repository or unable to determine current branch",
            file=sys.stderr,
        )


def branch_select() -> None:
    try:
        branches = list_branches()
    except BranchError as e:
        print(f"Failed to get git branches: {e}", file=sys.stderr)
        return
    if not branches:
        print("No git branches found", file=sys.stderr)
        return
    if (branch := select_branch(branches)) is not None:
        copy_text(branch)
        print(f"Selected git branch: '{branch}'")
    else:
        print("No branch selected", file=sys.stderr)


def configure(store: ConfigStore, key: str | None, value: str | None) -> None:
    config = store.load()
    if key is None:
        print("Current configuration:")
        for k, v in config.items():
            print(f"  {k} = {v}")
        return
    try:
        if value is None:
            print(f"  {key} = {config.get(key)}")
            return
        config = store.set(key, value)
    except UnknownConfigKey as e:
        print(e, file=sys.stderr)
        return
    except OSError as e:
        print(f"Failed to save configuration: {e}", file=sys.stderr)
        return
    print(f"{key} set to: {config.get(key)}")
    print("Configuration saved successfully")


if __name__ == "__main__":
    main()
