#!/usr/bin/env python3
"""
CLI for watching a directory and printing its changes.

Usage:
    python -m src.cli ./documents
    python -m src.cli ./documents --polling -v
"""

import argparse
import logging
import signal
import sys
import time
from pathlib import Path
from typing import List, Optional, TextIO

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.dirwatch import (
    DirListener,
    DirWatcher,
    DirWatcherConfig,
    DirWatchError,
    WatchEvent,
)


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("cli")


class GracefulShutdown:
    """Handle graceful shutdown on SIGINT/SIGTERM."""

    def __init__(self):
        self.should_exit = False
        signal.signal(signal.SIGINT, self._handler)
        signal.signal(signal.SIGTERM, self._handler)

    def _handler(self, signum, frame):
        logger.info("Received shutdown signal, stopping...")
        self.should_exit = True


class ConsoleListener(DirListener):
    """Listener that prints one line per event."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout

    def _print(self, event: WatchEvent, is_directory: bool) -> None:
        entry = "Directory" if is_directory else "File"
        print(f"{event.kind.value.upper()} {entry}: {event.path}", file=self.stream, flush=True)

    def on_create(self, event: WatchEvent) -> None:
        self._print(event, event.is_directory)

    def on_modify(self, event: WatchEvent) -> None:
        self._print(event, event.is_directory)

    def on_delete(self, event: WatchEvent, is_directory: bool) -> None:
        self._print(event, is_directory)

    def on_overflow(self, event: WatchEvent) -> None:
        print(f"OVERFLOW: {event.count} event(s) dropped", file=self.stream, flush=True)


def cmd_watch(args):
    """Watch a directory until interrupted."""
    path = Path(args.path)

    if not path.exists():
        logger.error(f"Directory not found: {path}")
        sys.exit(1)
    if not path.is_dir():
        logger.error(f"Not a directory: {path}")
        sys.exit(1)

    config = DirWatcherConfig(
        use_polling=args.polling,
        polling_interval=args.interval,
        follow_symlinks=args.follow_symlinks,
        ignore_patterns=args.ignore or [],
    )

    try:
        watcher = DirWatcher(path, config)
    except DirWatchError as e:
        logger.error(f"Could not watch {path}: {e}")
        sys.exit(1)

    shutdown = GracefulShutdown()

    with watcher:
        watcher.add_listener(ConsoleListener())
        watcher.start_watch()

        logger.info(f"Watching {watcher.root} ({len(watcher.registered_directories)} directories)")
        logger.info("Press Ctrl+C to stop")

        while not shutdown.should_exit and watcher.is_started():
            time.sleep(0.2)

    logger.info("Watcher stopped")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Watch a directory and its subdirectories for changes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Watch a folder with the native observer
  python -m src.cli ./documents

  # Watch a network share by polling every 2 seconds
  python -m src.cli /mnt/share --polling --interval 2
        """,
    )
    parser.add_argument("path", help="Directory to watch")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--polling", action="store_true", help="Use the polling observer")
    parser.add_argument("--interval", type=float, default=1.0, help="Polling interval in seconds")
    parser.add_argument("--follow-symlinks", action="store_true", help="Register symlinked subdirectories")
    parser.add_argument("--ignore", nargs="+", help="Glob patterns to ignore")
    parser.set_defaults(func=cmd_watch)
    return parser


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    args.func(args)


if __name__ == "__main__":
    main()
