"""CLI entry point for todox."""

import argparse
from pathlib import Path

from . import __version__
from .cli.commands import add_subcommands, run_command
from .cli.output import warning
from .config import Settings
from .host import TerminalHost
from .logging import setup_logging
from .services import ConfigService


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="todox",
        description="Manage todo.txt task files: sort, archive, prioritise and tag tasks",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to todox.yml (default: ~/.config/todox/todox.yml)",
    )
    parser.add_argument(
        "--generate",
        action="store_true",
        help="Generate default todox.yml and the todo/done files it names, then exit",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (-v for INFO, -vv for DEBUG)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Path to write logs to file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    add_subcommands(parser)
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Build settings from CLI args
    settings_kwargs: dict = {}
    if args.config:
        settings_kwargs["config_file"] = args.config.expanduser()
    if args.verbose:
        settings_kwargs["verbose"] = args.verbose
    if args.log_file:
        settings_kwargs["log_file"] = args.log_file

    settings = Settings(**settings_kwargs)

    setup_logging(settings.verbose, settings.log_file)

    if args.generate:
        from .cli.generate import run_generate

        raise SystemExit(run_generate(settings.config_file))

    if args.command is None:
        parser.print_help()
        raise SystemExit(2)

    config_service = ConfigService(settings.config_file)
    config = config_service.get_config()
    if config_service.has_config_error:
        warning(f"{config_service.config_error}; using defaults")

    raise SystemExit(run_command(args, config, TerminalHost()))


if __name__ == "__main__":
    main()
