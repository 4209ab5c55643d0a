#!/usr/bin/env python3
"""
Download a torrent with transmission_py.

Adds a .torrent file or magnet link to a session, prints progress until the
download completes and then seeds until interrupted.
"""

import logging
import sys
import threading
import time
from pathlib import Path

from transmission_py import (
    ClientConfig, Completeness, Session, TransmissionError
)


def on_completeness(completeness: Completeness, was_running: bool, done: threading.Event):
    """Called from an engine thread when the torrent becomes complete."""
    if completeness != Completeness.LEECH:
        print(f"✓ Download complete ({completeness.name.lower()})")
        done.set()


def print_stats(torrent):
    stats = torrent.stats()
    print(f"📊 {stats.state.name:<16} {stats.percent_done * 100:6.2f}%  "
          f"↓ {stats.piece_download_speed_kbps:8.1f} KB/s  "
          f"↑ {stats.piece_upload_speed_kbps:8.1f} KB/s  "
          f"peers: {stats.peers_connected}")
    if stats.has_error:
        print(f"⚠ {stats.error.name}: {stats.error_string}")


def main():
    if len(sys.argv) != 4:
        print("Usage: python download_torrent.py <torrent file or magnet> <config dir> <download dir>")
        print("Example: python download_torrent.py alpine.torrent ~/.config/example ~/Downloads")
        sys.exit(1)

    source, config_dir, download_dir = sys.argv[1:]
    logging.basicConfig(level=logging.INFO)

    config = ClientConfig(
        app_name="transmission_py-example",
        config_dir=Path(config_dir).expanduser(),
        download_dir=Path(download_dir).expanduser(),
    )

    try:
        with Session(config) as session:
            if source.startswith("magnet:"):
                torrent = session.add_torrent_magnet(source)
            else:
                torrent = session.add_torrent_file(source)

            done = threading.Event()
            torrent.set_completeness_callback(
                lambda completeness, was_running: on_completeness(completeness, was_running, done)
            )
            torrent.start()
            print(f"🚀 Downloading {torrent.name} (torrent {torrent.id})")

            while not done.is_set():
                print_stats(torrent)
                done.wait(2)

            print("🌱 Seeding, press Ctrl+C to stop")
            while True:
                time.sleep(10)
                print_stats(torrent)

    except TransmissionError as e:
        print(f"❌ Error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        print("\n👋 Interrupted by user")


if __name__ == "__main__":
    main()
