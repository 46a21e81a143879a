"""Main CLI entry point for the xml-pretty-printer command-line tool.

Formats XML files in place or to stdout, and checks whether files are
already formatted (for use in CI).
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from xml_pretty_printer import __version__
from xml_pretty_printer.api import XMLFormatter
from xml_pretty_printer.shared import (
    ConfigError,
    FormatterConfig,
    XMLPrettyPrinterError,
    configure_logging,
    get_logger,
)

XML_SUFFIXES = frozenset({".xml", ".xsl", ".xslt", ".svg", ".xhtml"})

PRESETS = {
    "strict": FormatterConfig.strict,
    "readable": FormatterConfig.readable,
    "canonical": FormatterConfig.canonical,
}

# Command-line option destination -> FormatterConfig override key
OPTION_OVERRIDES = {
    "quote_attributes": "printer__quote_attributes",
    "whitespace_sensitivity": "printer__whitespace_sensitivity",
    "sort_attributes": "printer__sort_attributes",
    "single_attribute_per_line": "printer__single_attribute_per_line",
    "bracket_same_line": "printer__bracket_same_line",
    "self_closing_space": "printer__self_closing_space",
    "print_width": "layout__print_width",
    "tab_width": "layout__tab_width",
    "use_tabs": "layout__use_tabs",
    "end_of_line": "layout__end_of_line",
}


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self, formatter_config: Optional[FormatterConfig] = None) -> None:
        self.formatter_config = formatter_config or FormatterConfig()

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        The file holds a ``FormatterConfig`` dictionary, optionally with a
        ``preset`` key naming the base configuration.

        Raises:
            ConfigError: If the file cannot be read or holds invalid settings
        """
        try:
            with config_path.open(encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigError(f"Could not load config file {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {config_path} must contain a JSON object")

        preset = data.pop("preset", None)
        if preset is None:
            return cls(FormatterConfig.from_dict(data))
        if preset not in PRESETS:
            raise ConfigError(f"Unknown preset in {config_path}: {preset}")

        base = PRESETS[preset]()
        overrides: Dict[str, Any] = {}
        for component in ("printer", "layout"):
            for key, value in data.pop(component, {}).items():
                overrides[f"{component}__{key}"] = value
        overrides.update(data)
        return cls(base.override(**overrides) if overrides else base)

    def apply_arguments(self, args: argparse.Namespace) -> None:
        """Apply preset and option overrides given on the command line."""
        if getattr(args, "preset", None):
            self.formatter_config = PRESETS[args.preset]()

        overrides = {
            key: getattr(args, option)
            for option, key in OPTION_OVERRIDES.items()
            if getattr(args, option, None) is not None
        }
        if overrides:
            self.formatter_config = self.formatter_config.override(**overrides)


class XMLFileProcessor:
    """Core file processing logic for CLI operations."""

    def __init__(self, config: CLIConfig) -> None:
        self.config = config
        self.formatter = XMLFormatter(config.formatter_config)
        self.logger = get_logger(__name__, None, "cli_processor")

    def find_xml_files(self, path: Path, recursive: bool = False) -> Iterator[Path]:
        """Find XML files in path.

        Files named explicitly are always yielded; directories are searched
        for known XML suffixes.
        """
        if path.is_file():
            yield path
        elif path.is_dir():
            pattern = "**/*" if recursive else "*"
            for candidate in sorted(path.glob(pattern)):
                if candidate.is_file() and candidate.suffix.lower() in XML_SUFFIXES:
                    yield candidate

    def collect_files(self, paths: List[Path], recursive: bool = False) -> List[Path]:
        """Expand paths into the list of files to process."""
        files: List[Path] = []
        for path in paths:
            if not path.exists():
                self.logger.warning("Path not found", extra={"path": str(path)})
                continue
            files.extend(self.find_xml_files(path, recursive))
        return files

    def process_single_file(self, file_path: Path, write: bool = False) -> Dict[str, Any]:
        """Format a single XML file and return a result summary."""
        try:
            result = self.formatter.format_file(file_path)
            if write and result.changed:
                with file_path.open("w", encoding="utf-8", newline="") as f:
                    f.write(result.formatted)

            return {
                "file": str(file_path),
                "success": True,
                "changed": result.changed,
                "written": write and result.changed,
                "formatted": result.formatted,
                "processing_time_ms": result.metrics.processing_time_ms,
                "diagnostics": [
                    {
                        "severity": diag.severity.name,
                        "message": diag.message,
                        "component": diag.component,
                    } for diag in result.diagnostics
                ],
            }

        except (XMLPrettyPrinterError, OSError, UnicodeDecodeError) as e:
            self.logger.debug("Failed to format file", extra={"file": str(file_path), "error": str(e)})
            return {
                "file": str(file_path),
                "success": False,
                "changed": False,
                "error": str(e),
            }


def _add_style_options(parser: argparse.ArgumentParser) -> None:
    """Add the options shared by the format and check commands."""
    parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files or directories"
    )
    parser.add_argument(
        "--recursive", "-r",
        action="store_true",
        help="Recursively search directories"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="JSON configuration file"
    )
    parser.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        help="Base configuration preset"
    )
    parser.add_argument(
        "--quote-attributes",
        choices=["double", "single", "preserve"],
        help="Quote style for attribute values"
    )
    parser.add_argument(
        "--whitespace-sensitivity",
        choices=["strict", "ignore", "preserve"],
        help="How whitespace inside elements is treated"
    )
    parser.add_argument(
        "--sort-attributes",
        action="store_true",
        default=None,
        help="Sort attributes (xmlns first, then prefixed, then plain names)"
    )
    parser.add_argument(
        "--single-attribute-per-line",
        action="store_true",
        default=None,
        help="Put each attribute on its own line when a tag breaks"
    )
    parser.add_argument(
        "--bracket-same-line",
        action="store_true",
        default=None,
        help="Keep the closing bracket of a broken tag on the last attribute line"
    )
    parser.add_argument(
        "--no-self-closing-space",
        dest="self_closing_space",
        action="store_false",
        default=None,
        help="Omit the space before '/>'"
    )
    parser.add_argument(
        "--print-width",
        type=int,
        help="Line width the printer tries to stay within (default: 80)"
    )
    parser.add_argument(
        "--tab-width",
        type=int,
        help="Spaces per indentation level (default: 2)"
    )
    parser.add_argument(
        "--use-tabs",
        action="store_true",
        default=None,
        help="Indent with tabs"
    )
    parser.add_argument(
        "--end-of-line",
        choices=["lf", "crlf", "cr"],
        help="Line ending of the output (default: lf)"
    )


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="xml-pretty-printer",
        description="Opinionated XML formatter"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Format command
    format_parser = subparsers.add_parser("format", help="Format XML files")
    _add_style_options(format_parser)
    format_parser.add_argument(
        "--write", "-w",
        action="store_true",
        help="Rewrite files in place instead of printing to stdout"
    )

    # Check command
    check_parser = subparsers.add_parser("check", help="Check that XML files are formatted")
    _add_style_options(check_parser)
    check_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format"
    )

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def _load_config(args: argparse.Namespace) -> CLIConfig:
    config = CLIConfig()
    if args.config:
        config = CLIConfig.from_file(args.config)
    config.apply_arguments(args)
    return config


def _setup_logging(args: argparse.Namespace, config: CLIConfig) -> None:
    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")
    else:
        configure_logging(config.formatter_config.logging_level)


def cmd_format(args: argparse.Namespace) -> int:
    """Handle format command."""
    config = _load_config(args)
    _setup_logging(args, config)

    processor = XMLFileProcessor(config)
    files = processor.collect_files(args.paths, args.recursive)
    if not files:
        print("No XML files found", file=sys.stderr)
        return 1

    failures = 0
    for file_path in files:
        result = processor.process_single_file(file_path, write=args.write)
        if not result["success"]:
            failures += 1
            print(f"Error: {result['file']}: {result['error']}", file=sys.stderr)
        elif args.write:
            if result["written"] and not args.quiet:
                print(f"Formatted: {result['file']}", file=sys.stderr)
        else:
            sys.stdout.write(result["formatted"])

    return 1 if failures else 0


def cmd_check(args: argparse.Namespace) -> int:
    """Handle check command."""
    config = _load_config(args)
    _setup_logging(args, config)

    processor = XMLFileProcessor(config)
    files = processor.collect_files(args.paths, args.recursive)
    if not files:
        print("No XML files found", file=sys.stderr)
        return 1

    results = []
    for file_path in files:
        result = processor.process_single_file(file_path)
        result.pop("formatted", None)
        results.append(result)

    unformatted = [r for r in results if r["changed"]]
    failed = [r for r in results if not r["success"]]

    if args.format == "json":
        print(json.dumps(results, indent=2))
    elif not args.quiet:
        print(f"Checked {len(results)} files, {len(unformatted)} need formatting")
        print("-" * 50)
        for result in results:
            if not result["success"]:
                print(f"✗ {result['file']}")
                print(f"   Error: {result['error']}")
            elif result["changed"]:
                print(f"✗ {result['file']}")
            else:
                print(f"✓ {result['file']}")

    return 1 if unformatted or failed else 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Route to appropriate command handler
    try:
        if args.command == "format":
            return cmd_format(args)
        elif args.command == "check":
            return cmd_check(args)
        else:
            print(f"Unknown command: {args.command}", file=sys.stderr)
            return 1

    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
