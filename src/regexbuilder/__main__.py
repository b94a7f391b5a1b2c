"""Main entry point for the RegexBuilder command-line interface."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from . import __version__, paths
from .config import BuilderConfig, load_config
from .engine import MatchEngine, RegexPrimitive
from .errors import ImportFormatError
from .flags import decode
from .library import JsonFileStorage, PatternLibrary, default_builtin_patterns, load_builtin_patterns
from .logging_utils import setup_logging
from .reporters import ConsoleReporter, JsonReporter, SummaryReporter
from .session import SessionResult, TestSession
from .sharing import build_share_url, decode_share, encode_share, parse_share_url
from .templates import DEFAULT_CONFIG_YAML

logger = logging.getLogger(__name__)

DEFAULT_SHARE_BASE_URL = "https://regex-builder.local/"


def _add_text_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the sample-text arguments shared by 'test' and 'open'."""
    parser.add_argument("text", nargs="?", help="The sample text. Read from --file or stdin when omitted.")
    parser.add_argument("--file", type=Path, help="Read the sample text from a file.")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON.")
    parser.add_argument("--pretty", action="store_true", help="Print the highlighted text in a panel.")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments for the RegexBuilder CLI.

    Returns:
        argparse.Namespace: An object containing the parsed command-line arguments.

    """
    parser = argparse.ArgumentParser(description="RegexBuilder - Build, test, and debug regular expressions")
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"RegexBuilder {__version__}",
        help="Show the version number and exit.",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug level logging.")
    parser.add_argument("--config", type=Path, help="Path to a configuration file (default: the data directory's main.yaml).")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("init", help="Write a default configuration file.")

    test_parser = subparsers.add_parser("test", help="Run a pattern against sample text.")
    test_parser.add_argument("pattern", nargs="?", help="The regular expression pattern (default: from configuration).")
    test_parser.add_argument("--flags", help="Flag string such as 'gi' (default: from configuration).")
    _add_text_arguments(test_parser)

    share_parser = subparsers.add_parser("share", help="Print a shareable link for a pattern.")
    share_parser.add_argument("pattern", help="The regular expression pattern.")
    share_parser.add_argument("--flags", default="", help="Flag string such as 'gi'.")
    share_parser.add_argument("--base-url", default=DEFAULT_SHARE_BASE_URL, help="Base URL of the shared link.")

    open_parser = subparsers.add_parser("open", help="Run a pattern from a shareable link or token.")
    open_parser.add_argument("link", help="A shareable link or its encoded token.")
    _add_text_arguments(open_parser)

    library_parser = subparsers.add_parser("library", help="Manage the pattern library.")
    library_sub = library_parser.add_subparsers(dest="library_command", required=True)

    list_parser = library_sub.add_parser("list", help="List patterns grouped by category.")
    list_parser.add_argument("query", nargs="?", help="Case-insensitive search text.")

    add_parser = library_sub.add_parser("add", help="Add a user pattern.")
    add_parser.add_argument("name")
    add_parser.add_argument("pattern")
    add_parser.add_argument("--description", default="")
    add_parser.add_argument("--category")
    add_parser.add_argument("--flags")

    update_parser = library_sub.add_parser("update", help="Edit a user pattern.")
    update_parser.add_argument("id")
    update_parser.add_argument("--name")
    update_parser.add_argument("--pattern")
    update_parser.add_argument("--description")
    update_parser.add_argument("--category")
    update_parser.add_argument("--flags")

    remove_parser = library_sub.add_parser("remove", help="Delete a user pattern.")
    remove_parser.add_argument("id")

    export_parser = library_sub.add_parser("export", help="Export user patterns as JSON.")
    export_parser.add_argument("file", nargs="?", type=Path, help="Output file (default: stdout).")

    import_parser = library_sub.add_parser("import", help="Import user patterns from a JSON file.")
    import_parser.add_argument("file", type=Path)

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help(sys.stderr)
        sys.exit(1)
    return args


def _load_config(config_path: Path | None) -> BuilderConfig | None:
    """
    Load the configuration, falling back to defaults when no file exists.

    Returns:
        A BuilderConfig object if loading is successful, otherwise None.

    """
    path = config_path or paths.find_config_file()
    if path is None:
        logger.debug("No configuration file found. Using defaults.")
        return BuilderConfig()
    try:
        logger.debug("Loading configuration from: %s", path)
        return load_config(str(path))
    except FileNotFoundError:
        logger.exception("Could not find a valid configuration file.")
        return None
    except Exception:
        logger.exception("An unexpected error occurred while loading the configuration.")
        return None


def _init_config() -> None:
    """Write the default configuration file unless one already exists."""
    config_file = paths.get_config_file_path()
    if config_file.exists():
        logger.warning("Configuration file already exists at: %s", config_file)
        return
    try:
        paths.ensure_dir_exists(config_file.parent)
        config_file.write_text(DEFAULT_CONFIG_YAML, encoding="utf-8")
        logger.info("Created default configuration at: %s", config_file)
    except OSError:
        logger.exception("Failed to write default configuration")
        sys.exit(1)


def _read_sample_text(args: argparse.Namespace) -> str:
    """Return the sample text from the positional argument, --file, or stdin."""
    if args.text is not None:
        return args.text
    if args.file is not None:
        return args.file.read_text(encoding="utf-8")
    return sys.stdin.read()


def _build_library(config: BuilderConfig) -> PatternLibrary:
    """Create the pattern library described by the configuration."""
    storage = JsonFileStorage(Path(config.storage_file) if config.storage_file else None)
    builtins = load_builtin_patterns(Path(config.builtin_patterns_file)) if config.builtin_patterns_file else default_builtin_patterns()
    return PatternLibrary(storage, builtins=builtins, storage_key=config.storage_key)


async def _settle(session: TestSession, pattern: str | None, sample_text: str) -> SessionResult | None:
    """Feed the inputs to the session and run the pending match at once."""
    session.set_sample_text(sample_text)
    if pattern is not None:
        session.set_pattern(pattern)
    return session.flush()


def _run_pattern(config: BuilderConfig, pattern: str | None, flags: str, args: argparse.Namespace) -> int:
    """Match a pattern against the sample text and report the result."""
    engine = MatchEngine(RegexPrimitive(timeout=config.match_timeout))
    session = TestSession(engine, pattern=config.default_pattern, flags=decode(flags), debounce_ms=config.debounce_ms)
    result = asyncio.run(_settle(session, pattern, _read_sample_text(args)))
    if result is None:
        return 0

    if args.json:
        sys.stdout.write(JsonReporter().generate(result) + "\n")
    elif args.pretty:
        ConsoleReporter().generate(result)
    else:
        SummaryReporter().generate(result)
    return 0 if result.run.valid else 1


def _run_library(config: BuilderConfig, args: argparse.Namespace) -> int:
    """Dispatch a 'library' subcommand."""
    library = _build_library(config)
    command = args.library_command

    if command == "list":
        grouped = library.list_patterns(args.query)
        if not grouped:
            logger.info("No patterns found.")
        for category, entries in grouped.items():
            logger.info("%s (%d)", category, len(entries))
            for entry in entries:
                logger.info("  %-28s %-40s %s", entry.id, entry.name, entry.pattern)
        return 0

    if command == "add":
        entry = library.create(args.name, args.pattern, args.description, args.category, args.flags)
        if entry is None:
            logger.error("A pattern needs both a name and a pattern.")
            return 1
        logger.info("Added '%s' with id %s", entry.name, entry.id)
        return 0

    if command == "update":
        fields = {key: getattr(args, key) for key in ("name", "pattern", "description", "category", "flags") if getattr(args, key) is not None}
        if library.update(args.id, **fields) is None:
            logger.error("Pattern '%s' cannot be edited. Only user patterns can be changed.", args.id)
            return 1
        return 0

    if command == "remove":
        if not library.delete(args.id):
            logger.error("Pattern '%s' cannot be deleted. Only user patterns can be removed.", args.id)
            return 1
        return 0

    if command == "export":
        payload = library.export_all()
        if args.file is None:
            sys.stdout.write(payload + "\n")
        else:
            args.file.write_text(payload, encoding="utf-8")
            logger.info("Exported %d patterns to %s", len(library.user_patterns), args.file)
        return 0

    if command == "import":
        try:
            added = library.import_many(args.file.read_bytes())
        except (OSError, ImportFormatError):
            logger.exception("Failed to import patterns from %s", args.file)
            return 1
        logger.info("Imported %d patterns from %s", len(added), args.file)
        return 0

    logger.error("Unknown library command: %s", command)
    return 1


def _dispatch(config: BuilderConfig, args: argparse.Namespace) -> int:
    """Run the selected command and return the process exit code."""
    if args.command == "test":
        flags = args.flags if args.flags is not None else config.default_flags
        return _run_pattern(config, args.pattern, flags, args)

    if args.command == "share":
        sys.stdout.write(build_share_url(args.base_url, args.pattern, args.flags) + "\n")
        logger.debug("Token: %s", encode_share(args.pattern, args.flags))
        return 0

    if args.command == "open":
        shared = parse_share_url(args.link) if "?" in args.link else decode_share(args.link)
        if shared is None:
            logger.error("The link does not contain a valid shared pattern.")
            return 1
        return _run_pattern(config, shared.pattern, shared.flags, args)

    if args.command == "library":
        return _run_library(config, args)

    logger.error("Unknown command: %s", args.command)
    return 1


def main(argv: list[str] | None = None) -> None:
    """
    Run the main entry point for the RegexBuilder command-line interface.

    Orchestrates the entire process:
    1. Parses command-line arguments.
    2. Loads the configuration.
    3. Runs the selected command.
    """
    try:
        args = _parse_args(argv)
        setup_logging(version=__version__, debug=args.debug)

        if args.command == "init":
            _init_config()
            return

        config = _load_config(args.config)
        if config is None:
            logger.critical("Failed to load configuration. Aborting.")
            sys.exit(1)

        exit_code = _dispatch(config, args)
    except Exception:
        logger.exception("An unexpected error occurred")
        logger.critical("An unrecoverable error occurred. Please check the logs for details.")
        sys.exit(1)

    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
