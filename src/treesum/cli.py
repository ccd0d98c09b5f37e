#!/usr/bin/env python3
"""
treesum CLI — Command line interface for checksum manifest generation.
Takes positional arguments as search_path [save_path] [file_extension] [tag]
and hands a RunConfig to the engine.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
from typing import List, Optional, NoReturn
import logging

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    from send2trash import send2trash
except ImportError:
    _MISSING_DEPS.append("send2trash")

try:
    import xxhash
except ImportError:
    _MISSING_DEPS.append("xxhash")

if _MISSING_DEPS:
    print("Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from treesum.core.models import ALL_FILES, OutputMode, RunConfig, RunResult, RunState
from treesum.core.errors import NamingError, PathError, UsageError
from treesum.commands import ManifestCommand
from treesum.aliases import (
    ALGORITHM_CHOICES, ALGORITHM_HELP_TEXT,
    OUTPUT_MODE_CHOICES, OUTPUT_MODE_HELP_TEXT,
    EPILOG_TEXT, USAGE_TEXT
)

HELP_WORDS = ("-h", "-H", "-help", "--help")


class ConsoleProgressSink:
    """Writes "<p>% complete" on one stderr line, overwritten with a carriage return."""

    def __init__(self, stream=None, enabled: bool = True):
        self.stream = stream or sys.stderr
        self.enabled = enabled
        self._width = 0

    def on_percent(self, percent: int) -> None:
        if not self.enabled:
            return
        text = f"\r{percent}% complete"
        self._width = len(text)
        self.stream.write(text)
        self.stream.flush()

    def on_summary(self, summary: str) -> None:
        # The summary itself is printed on stdout by the application
        if self.enabled and self._width:
            self.stream.write("\r" + " " * self._width + "\r")
            self.stream.flush()
            self._width = 0


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False

    @staticmethod
    def build_parser() -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="treesum",
            description="treesum — checksum every file under a directory into manifest files",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        # Positional arguments: search_path [save_path] [file_extension] [tag]
        parser.add_argument(
            "search_path",
            nargs="?",
            help="Directory to search recursively (required)"
        )
        parser.add_argument(
            "save_path",
            nargs="?",
            default=None,
            help="Directory the manifests are written to. Default: current directory"
        )
        parser.add_argument(
            "file_extension",
            nargs="?",
            default=ALL_FILES,
            help="Only checksum *.<file_extension> files (case-insensitive). \"**\" = all files"
        )
        parser.add_argument(
            "tag",
            nargs="?",
            default="",
            help="Suffix added to manifest names as _<tag>. Default: none"
        )

        # Output options
        parser.add_argument(
            "--mode", "-m",
            choices=OUTPUT_MODE_CHOICES,
            default="aggregate",
            type=str,
            metavar="MODE",
            help=OUTPUT_MODE_HELP_TEXT
        )
        parser.add_argument(
            "--algorithm", "-a",
            choices=ALGORITHM_CHOICES,
            default="md5",
            type=str,
            help=ALGORITHM_HELP_TEXT
        )
        parser.add_argument(
            "--binary", "-b",
            action="store_true",
            help="Write binary mode lines (\"<hex> *<name>\") instead of text mode"
        )
        parser.add_argument(
            "--external-tool",
            default=None,
            type=str,
            metavar="TOOL",
            help="Run an external digest tool (e.g. md5sum) per file instead of hashing in-process"
        )
        parser.add_argument(
            "--jobs", "-j",
            default=1,
            type=int,
            metavar="N",
            help="Hash N files concurrently; manifests are still written in order. Default: 1"
        )
        parser.add_argument(
            "--allow-merge",
            action="store_true",
            help="Let unrelated directories that map to the same manifest name share it\n"
                 "(default: stop with a naming collision error)"
        )
        parser.add_argument(
            "--clear",
            action="store_true",
            help="Move per-directory/per-file manifests from earlier runs to the trash\n"
                 "before writing to them"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show detailed progress and debug logging"
        )
        return parser

    def parse_args(self, args: Optional[List[str]] = None) -> argparse.Namespace:
        """Parse command-line arguments; missing search path or a help word shows usage."""
        raw = sys.argv[1:] if args is None else list(args)
        if not raw or raw[0] in HELP_WORDS:
            self.show_usage()

        parsed = self.build_parser().parse_args(raw)
        if not parsed.search_path:
            self.show_usage()
        return parsed

    @staticmethod
    def usage_text() -> str:
        return USAGE_TEXT % {"prog": "treesum", "save_path": os.getcwd()}

    def show_usage(self) -> NoReturn:
        """Print the usage block and exit without error."""
        print(self.usage_text())
        sys.exit(0)

    def configure_logging(self) -> None:
        level = logging.WARNING
        if self.quiet:
            level = logging.ERROR
        if self.verbose:
            level = logging.DEBUG
        logging.getLogger().setLevel(level)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate option combinations before any filesystem work."""
        if args.jobs < 1:
            self.error_exit("--jobs must be at least 1", code=2)

        if args.clear and args.mode in ("aggregate", "single"):
            self.warning("--clear has no effect in aggregate mode (existing manifest is kept as .bak)")

        if args.external_tool and args.algorithm != "md5":
            self.warning("--algorithm is ignored when --external-tool is used")

    def create_config(self, args: argparse.Namespace) -> RunConfig:
        """Create RunConfig from CLI arguments."""
        try:
            return RunConfig.from_human_readable(
                search_path=args.search_path,
                save_path=args.save_path,
                extension_filter=args.file_extension,
                tag=args.tag,
                mode=args.mode,
                binary=args.binary,
                algorithm=args.algorithm,
                allow_merge=args.allow_merge,
                clear_existing=args.clear,
                workers=args.jobs,
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}", code=2)

    def run_manifest(self, config: RunConfig, external_tool: Optional[str] = None) -> RunResult:
        """Execute the manifest workflow and translate engine errors into exit codes."""
        command = ManifestCommand(external_tool=external_tool)
        sink = ConsoleProgressSink(enabled=not self.quiet)

        try:
            return command.execute(config, sink=sink)
        except UsageError as e:
            print(self.usage_text(), file=sys.stderr)
            self.error_exit(str(e), code=2)
        except (PathError, NamingError) as e:
            sink.on_summary("")
            partial = command.engine.result if command.engine else None
            if partial is not None and partial.processed_count:
                self.warning(
                    f"{partial.processed_count} files were written before the error; "
                    f"manifests are left on disk"
                )
            self.error_exit(str(e))

    def output_results(self, config: RunConfig, result: RunResult) -> None:
        """Report what was written."""
        if result.state == RunState.NO_FILES_FOUND:
            print(result.message)
            return

        if not self.quiet:
            for backup in result.backups:
                print(f"Existing output file moved to: {backup}")
            if config.output_mode == OutputMode.AGGREGATE:
                for target in result.targets:
                    print(f"Output file: {target}")
            else:
                print(f"{len(result.targets)} manifest files written to: {config.save_path}")
                if self.verbose:
                    for target in result.targets:
                        print(f"   {target}")
            if result.skipped_count:
                print(f"{result.skipped_count} unreadable files skipped")
            if result.failed_count:
                print(f"{result.failed_count} files failed with unrecognized digest output")

        print(result.summary)

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"Warning: {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, args: Optional[List[str]] = None) -> None:
        """Main entry point with conditional output behavior."""
        parsed = self.parse_args(args)
        self.verbose = parsed.verbose
        self.quiet = parsed.quiet
        self.configure_logging()

        self.validate_args(parsed)
        config = self.create_config(parsed)

        if not self.quiet:
            print(f"Search path: {config.search_path}")
            if self.verbose:
                mode = config.output_mode
                print(f"Mode: {mode.display_name} ({mode.description})")

        result = self.run_manifest(config, external_tool=parsed.external_tool)
        self.output_results(config, result)

        if self.verbose:
            print(f"\nCompleted in {time.time() - self.start_time:.2f} seconds")


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\nOperation cancelled by user (Ctrl+C)", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
