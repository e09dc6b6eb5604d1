#!/usr/bin/env python3
"""
Directory watcher demo.

This example demonstrates:
1. Watching a folder that already has a subdirectory
2. Receiving create, modify and delete callbacks
3. Stopping, restarting and closing the watcher

Usage:
    python examples/watch_demo.py
"""

import sys
import tempfile
import time
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.dirwatch import DirListener, DirWatcher, WatchEvent


class PrintListener(DirListener):
    """Prints every callback with an icon."""

    def on_create(self, event: WatchEvent) -> None:
        print(f"[LISTENER] ➕ CREATE: {event.path}")

    def on_modify(self, event: WatchEvent) -> None:
        print(f"[LISTENER] 📝 MODIFY: {event.path}")

    def on_delete(self, event: WatchEvent, is_directory: bool) -> None:
        kind = "directory" if is_directory else "file"
        print(f"[LISTENER] ❌ DELETE ({kind}): {event.path}")

    def on_overflow(self, event: WatchEvent) -> None:
        print(f"[LISTENER] ⚠️  OVERFLOW: {event.count} event(s) dropped")


def main():
    with tempfile.TemporaryDirectory() as tmp:
        demo_dir = Path(tmp) / "watched"
        (demo_dir / "existing").mkdir(parents=True)

        with DirWatcher(demo_dir) as watcher:
            watcher.add_listener(PrintListener())
            watcher.start_watch()
            print(f"[DEMO] Watching {watcher.root}")
            time.sleep(0.5)

            print("\n[DEMO] Creating files...")
            (demo_dir / "hello.txt").write_text("Hello, World!")
            (demo_dir / "existing" / "nested.txt").write_text("inside a subdirectory")
            time.sleep(0.5)

            print("\n[DEMO] Modifying hello.txt...")
            (demo_dir / "hello.txt").write_text("Hello, Updated World!")
            time.sleep(0.5)

            print("\n[DEMO] Stopping; this change is buffered and reported after the restart...")
            watcher.stop_watch()
            (demo_dir / "unseen.txt").write_text("x")
            time.sleep(0.5)

            print("\n[DEMO] Restarting and deleting...")
            watcher.start_watch()
            (demo_dir / "hello.txt").unlink()
            (demo_dir / "existing" / "nested.txt").unlink()
            (demo_dir / "existing").rmdir()
            time.sleep(0.5)

        print("\n[DEMO] Watcher closed")


if __name__ == "__main__":
    main()
