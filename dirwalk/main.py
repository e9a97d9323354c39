"""Command line entry point for dirwalk."""

import argparse
import sys
from collections.abc import Sequence
from typing import TextIO

import structlog

from dirwalk.config import Settings, settings
from dirwalk.discovery import DirectoryWalker, create_filesystem
from dirwalk.logging_config import configure_logging
from dirwalk.models import WalkReport

logger = structlog.get_logger()

# Past the last WalkResult code
EXIT_FATAL = 5
EXIT_INTERRUPTED = 130


class WalkRunner:
    """Runs one walk from settings and prints the matched paths."""

    def __init__(
        self,
        config: Settings | None = None,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ):
        """Initialize runner with configuration.

        Args:
            config: Settings instance (uses global settings if None)
            out: Stream for matched paths (stdout if None)
            err: Stream for the summary and error listing (stderr if None)
        """
        self.config = config or settings
        self.out = out or sys.stdout
        self.err = err or sys.stderr
        self.report: WalkReport | None = None

    def run(self, show_errors: bool = False) -> WalkReport:
        """Run the walk.

        Args:
            show_errors: Also list every accumulated error after the summary

        Returns:
            WalkReport with final results
        """
        configure_logging(
            log_level=self.config.log_level,
            log_file=self.config.log_file,
            format_type=self.config.log_format,
        )

        walker = DirectoryWalker(
            options=self.config.walk_options(),
            filesystem=create_filesystem(self.config.filesystem),
            max_path_length=self.config.max_path_length,
        )

        self.report = walker.walk(self.config.root, self._emit)

        print(self.report.summary(), file=self.err)
        if show_errors:
            for error in self.report.errors:
                print(
                    f"  {error.kind.name}: {error.path}"
                    + (f" ({error.message})" if error.message else ""),
                    file=self.err,
                )

        return self.report

    def _emit(self, path: str) -> None:
        print(path, file=self.out)


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="dirwalk",
        description="List filesystem entries beneath a directory",
        epilog=(
            "Exit status: 0 ok, 1 name too long, 2 cannot open, 3 cannot stat, "
            f"4 I/O error, {EXIT_FATAL} fatal error, {EXIT_INTERRUPTED} interrupted."
        ),
    )
    parser.add_argument(
        "root",
        nargs="?",
        default=None,
        help="Directory to walk (default: from env/config)",
    )
    parser.add_argument(
        "-r",
        "--recursive",
        action="store_true",
        default=None,
        help="Descend into subdirectories",
    )
    parser.add_argument(
        "-L",
        "--follow-symlinks",
        action="store_true",
        default=None,
        help="Traverse symlinked directories instead of skipping symlinks",
    )
    parser.add_argument(
        "-a",
        "--all",
        dest="include_dotfiles",
        action="store_true",
        default=None,
        help="Include entries whose name starts with '.'",
    )
    parser.add_argument(
        "-d",
        "--directories",
        dest="match_directories",
        action="store_true",
        default=None,
        help="Print directories themselves, not only files",
    )
    parser.add_argument(
        "--max-path-length",
        type=int,
        default=None,
        help="Maximum path length in bytes (256-65536)",
    )
    parser.add_argument(
        "--show-errors",
        action="store_true",
        help="List every error met during the walk",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Logging level",
    )
    parser.add_argument(
        "--log-format",
        choices=["console", "json"],
        default=None,
        help="Log format",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="JSON log file path",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for CLI.

    Returns:
        The walk's result code, EXIT_FATAL on a fatal error, EXIT_INTERRUPTED on interrupt
    """
    args = build_parser().parse_args(argv)

    # Route early failures to stderr; the runner reconfigures from settings
    configure_logging(
        log_level=args.log_level or "WARNING",
        format_type=args.log_format or "console",
    )

    # Override settings with CLI args
    overrides = {
        key: value
        for key, value in vars(args).items()
        if key != "show_errors" and value is not None
    }

    try:
        config = Settings(**overrides)
        runner = WalkRunner(config)
        report = runner.run(show_errors=args.show_errors)
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.error("walk_failed", error=str(e), exc_info=True)
        print(f"\nFatal error: {e}", file=sys.stderr)
        return EXIT_FATAL

    return int(report.result)


if __name__ == "__main__":
    sys.exit(main())
