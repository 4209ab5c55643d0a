#!/usr/bin/env python3
"""
Create a .torrent file with transmission_py.

Hashes a file or folder, announcing to the given trackers, and prints the
metainfo of the result.
"""

import logging
import sys

from transmission_py import TorrentBuilder, TransmissionError


def on_progress(done: int, total: int):
    """Called while pieces are hashed."""
    if total:
        print(f"\r🔨 Hashing pieces: {done}/{total}", end="", flush=True)


def main():
    if len(sys.argv) < 2:
        print("Usage: python create_torrent.py <file or folder> [tracker url ...]")
        print("Example: python create_torrent.py hello.txt udp://tracker.example.org:1337")
        sys.exit(1)

    source, trackers = sys.argv[1], sys.argv[2:]
    logging.basicConfig(level=logging.WARNING)

    builder = TorrentBuilder().set_trackers(trackers).set_progress_callback(on_progress)
    try:
        info = builder.set_file(source).set_comment("Created with transmission_py").build_info()
    except TransmissionError as e:
        print(f"\n❌ Error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        print("\n👋 Interrupted by user")
        sys.exit(1)

    print(f"\n✓ Created {builder.output_path}")
    print(f"  name:     {info.name}")
    print(f"  hash:     {info.hash_string}")
    print(f"  files:    {info.file_count} ({info.total_size} bytes)")
    print(f"  pieces:   {info.piece_count} x {info.piece_size} bytes")
    for tracker in info.trackers:
        print(f"  tracker:  [{tracker.tier}] {tracker.announce}")


if __name__ == "__main__":
    main()
