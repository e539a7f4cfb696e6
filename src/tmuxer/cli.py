"""CLI entry point for tmuxer.

All tmuxer.* imports are lazy (inside functions) so that ``tmuxer --help``
and argument parsing stay fast.  Only the stdlib modules needed by the
arg parser are imported at module level.

Workflow:
    tmuxer -b '~/code/**'     # pick a project under ~/code, open/attach tmux
    tmuxer projects           # list discovered projects as JSON
"""

from __future__ import annotations

import argparse
import json
import os
import sys


def _json_out(obj) -> None:
    """Print JSON to stdout."""
    json.dump(obj, sys.stdout, indent=2)
    print()


def _build_config(args: argparse.Namespace):
    """Load the config file, merge flag values and normalize the bases."""
    from tmuxer.config import load_config, merge_flags, normalize_config
    from tmuxer.paths import config_file
    from tmuxer.patterns import normalize_path

    config_path = args.config
    if config_path is None:
        config_path = str(config_file())
    elif config_path not in ("", "-"):
        config_path = normalize_path(config_path)

    config = merge_flags(
        load_config(config_path),
        bases=args.base,
        markers=args.marker,
        ignore=args.ignore,
    )
    return normalize_config(config)


def _discover(args: argparse.Namespace):
    from tmuxer.discovery import resolve_projects
    from tmuxer.errors import TmuxerError

    projects = resolve_projects(_build_config(args))
    if not projects:
        raise TmuxerError("No projects found under the configured base paths")
    return projects


def cmd_open(args: argparse.Namespace) -> None:
    """Pick a project and attach to (or create) its tmux session."""
    from tmuxer.app import pick_project
    from tmuxer.session import ensure_session
    from tmuxer.tmux import TmuxClient

    projects = _discover(args)
    project = pick_project(projects)
    print(f"Starting selected project: {project.name}")
    ensure_session(
        project,
        TmuxClient(),
        inside_client=bool(os.environ.get("TMUX")),
    )


def cmd_projects(args: argparse.Namespace) -> None:
    """List discovered projects as JSON."""
    _json_out([p.to_dict() for p in _discover(args)])


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tmuxer",
        description=(
            "Fuzzy-pick a project directory and open a tmux session for it.\n\n"
            "With no subcommand, discovers projects, shows the picker and then\n"
            "attaches to the project's session (creating it if needed), or\n"
            "switches to it when already inside tmux.\n\n"
            "Base paths are glob patterns:\n"
            "  ~/code/**            every directory containing a marker (.git)\n"
            "  ~/code/**/{.git}     same, with the marker spelled out\n"
            "  ~/code/*/{.git}      every direct child of ~/code holding a .git\n"
            "  ~/dotfiles           exactly this directory\n\n"
            "A glob in the last segment names the match's parent directory as\n"
            "the project, so a bare '~/code/*' yields ~/code itself."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-b", "--base",
        action="append",
        metavar="PATTERN",
        help="Base directory pattern where projects are located (repeatable)",
    )
    parser.add_argument(
        "-m", "--marker",
        action="append",
        metavar="NAME",
        help=(
            "Directories containing any of these entries are projects when a "
            "base ends in '**' (repeatable, default: .git)"
        ),
    )
    parser.add_argument(
        "-i", "--ignore",
        action="append",
        metavar="PATTERN",
        help="Gitignore-style pattern of project paths to skip (repeatable)",
    )
    parser.add_argument(
        "-c", "--config",
        metavar="PATH",
        help=(
            "Path to the configuration file "
            "(default: $XDG_CONFIG_HOME/tmux/tmuxer.yaml; '-' for none)"
        ),
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log discovery and tmux details to stderr",
    )

    sub = parser.add_subparsers(dest="command")
    sub.add_parser(
        "projects",
        help="List discovered projects as JSON",
        description=(
            "Print every discovered project (name, full_path, home_path, "
            "session_name) as a JSON array without opening the picker."
        ),
    )
    return parser


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    from tmuxer.errors import SelectionCancelledError, TmuxerError
    from tmuxer.log import setup_logging

    setup_logging(args.verbose)

    try:
        if args.command is None:
            cmd_open(args)
        elif args.command == "projects":
            cmd_projects(args)
    except SelectionCancelledError as exc:
        print(str(exc), file=sys.stderr)
        raise SystemExit(1)
    except TmuxerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
