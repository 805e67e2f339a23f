"""
Main CLI entry point for envview.

Inspects and edits annotated configuration files from the command line.
"""

import argparse
import sys
from pathlib import Path

from envview.logging import configure_logging_from_args, get_logger


def build_parser() -> argparse.ArgumentParser:
    """
    Build the main argument parser with subcommands.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="envview",
        description="envview - structured view over annotated .env files",
        epilog="Use 'envview <command> --help' for more information on a specific command.",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a JSON/YAML configuration file (defaults apply when omitted)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output (DEBUG level)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set logging level (overrides --verbose)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Write logs to file",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="Available commands",
    )

    show_parser = subparsers.add_parser(
        "show",
        help="Show template keys, constraints, modes and diagnostics",
    )
    show_parser.add_argument("file", type=Path, help="Annotated file to read")
    show_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the model as JSON",
    )

    set_parser = subparsers.add_parser(
        "set",
        help="Set one template value and save the file",
    )
    set_parser.add_argument("file", type=Path, help="Annotated file to edit")
    set_parser.add_argument("key", help="Template key")
    set_parser.add_argument("value", help="New value")

    mode_parser = subparsers.add_parser(
        "mode",
        help="Apply a mode preset and save the file",
    )
    mode_parser.add_argument("file", type=Path, help="Annotated file to edit")
    mode_parser.add_argument("mode", help="Mode as <scope>.<mode>")

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the envview CLI.

    Args:
        argv: Command-line arguments (for testing)

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging_from_args(
        verbose=args.verbose,
        log_level=args.log_level,
        log_file=str(args.log_file) if args.log_file else None,
    )

    logger = get_logger(__name__)
    logger.debug(f"Parsed arguments: {args}")

    if not args.command:
        parser.print_help()
        return 1

    from envview.config import load_config_from_file
    from envview.config.models import EnvViewConfig

    if args.config is not None:
        cfg_path = Path(args.config).expanduser().resolve()
        if not cfg_path.exists():
            logger.error(f"Config file not found: {cfg_path}")
            print(f"Error: Configuration file not found: {cfg_path}")
            return 1
        logger.info(f"Loading configuration from: {cfg_path}")
        config = load_config_from_file(cfg_path)
    else:
        config = EnvViewConfig()

    # Config file logging settings apply when no CLI flag overrides them
    if not args.verbose and not args.log_level and not args.log_file:
        configure_logging_from_args(
            log_level=config.logging.level,
            log_file=str(config.logging.file) if config.logging.file else None,
        )

    try:
        if not Path(args.file).expanduser().exists():
            print(f"Error: File not found: {args.file}")
            return 1

        if args.command == "show":
            from envview.commands.show_cmd import run_show
            return run_show(args, config)
        if args.command == "set":
            from envview.commands.edit_cmd import run_set
            return run_set(args, config)
        if args.command == "mode":
            from envview.commands.edit_cmd import run_mode
            return run_mode(args, config)

        parser.print_help()
        return 1

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        print("\nInterrupted by user.")
        return 130

    except Exception as e:
        logger.exception("Unhandled exception in main")
        print(f"\nError: {e}", file=sys.stderr)
        if args.verbose:
            raise
        return 1


if __name__ == "__main__":
    sys.exit(main())
