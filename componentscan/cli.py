"""componentscan command-line interface."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from componentscan.config import ScannerConfig


def _add_scan_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("path", nargs="?", help="Directory to crawl (overrides crawlFrom)")
    p.add_argument("-c", "--config", help="Path to a JSON config file")
    p.add_argument(
        "--components",
        help="Comma-separated component names to report (default: all)",
    )
    p.add_argument(
        "--include-sub-components",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Report dotted components like Menu.Item (overrides the config file)",
    )
    p.add_argument(
        "--imported-from",
        help="Only report components imported from this module (or /regex/)",
    )
    p.add_argument(
        "--processor",
        action="append",
        dest="processors",
        help="Processor to run, repeatable (default: count-components-and-props)",
    )
    p.add_argument("-o", "--output", help="Write processor output to this file")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="componentscan",
        description="componentscan: report where and how UI components are used",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- run --
    p_run = subparsers.add_parser("run", help="Scan a project and print the report")
    _add_scan_arguments(p_run)

    # -- watch --
    p_watch = subparsers.add_parser("watch", help="Rescan whenever source files change")
    _add_scan_arguments(p_watch)

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    handlers = {
        "run": cmd_run,
        "watch": cmd_watch,
    }
    handlers[args.command](args)


def build_config(args: argparse.Namespace) -> ScannerConfig:
    """Load the config file (if any) and apply command-line overrides."""
    from componentscan.config import ScannerConfig, parse_pattern
    from componentscan.models import ConfigError
    from componentscan.processors import ProcessorSpec

    if args.config:
        config = ScannerConfig.load(args.config)
        if args.path:
            config.crawl_from = Path(args.path).resolve()
    elif args.path:
        config = ScannerConfig(crawl_from=Path(args.path).resolve())
    else:
        raise ConfigError("Give a directory to crawl or a config file (-c)")

    if args.components:
        config.components = [c.strip() for c in args.components.split(",") if c.strip()]
    if args.include_sub_components is not None:
        config.include_sub_components = args.include_sub_components
    if args.imported_from:
        config.imported_from = parse_pattern(args.imported_from)
    if args.processors:
        config.processors = [ProcessorSpec.parse(name) for name in args.processors]
    if args.output:
        config.processors = [
            ProcessorSpec(spec.name, Path(args.output).resolve())
            for spec in config.processors
        ]

    return config


def cmd_run(args: argparse.Namespace) -> None:
    import componentscan

    try:
        config = build_config(args)
        result = componentscan.run(config)
    except componentscan.ScanError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(result.stats.format_summary(), file=sys.stderr)


def cmd_watch(args: argparse.Namespace) -> None:
    try:
        from watchdog.events import FileSystemEventHandler
        from watchdog.observers import Observer
    except ImportError:
        print(
            "Watch dependencies not installed. Install with:\n"
            "  pip install componentscan[watch]",
            file=sys.stderr,
        )
        sys.exit(1)

    import time

    import componentscan
    from componentscan.discovery import DEFAULT_GLOBS

    try:
        config = build_config(args)
        result = componentscan.run(config)
    except componentscan.ScanError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(result.stats.format_summary(), file=sys.stderr)

    extensions = tuple(pattern.rsplit("*", 1)[-1] for pattern in DEFAULT_GLOBS)

    class RescanHandler(FileSystemEventHandler):  # type: ignore[misc]
        def __init__(self) -> None:
            self._pending = False

        def _flag(self, event: object) -> None:
            if hasattr(event, "src_path") and str(event.src_path).endswith(extensions):  # type: ignore[union-attr]
                self._pending = True

        def on_modified(self, event: object) -> None:
            self._flag(event)

        def on_created(self, event: object) -> None:
            self._flag(event)

        def on_deleted(self, event: object) -> None:
            self._flag(event)

    handler = RescanHandler()
    observer = Observer()
    observer.schedule(handler, str(config.crawl_from), recursive=True)
    observer.start()

    print(f"Watching {config.crawl_from} for changes... (Ctrl+C to stop)", file=sys.stderr)
    try:
        while True:
            time.sleep(1)
            if handler._pending:
                handler._pending = False
                try:
                    result = componentscan.run(config)
                    print(result.stats.format_summary(), file=sys.stderr)
                except componentscan.ScanError as e:
                    print(f"Scan error: {e}", file=sys.stderr)
    except KeyboardInterrupt:
        observer.stop()
    observer.join()


if __name__ == "__main__":
    main()
