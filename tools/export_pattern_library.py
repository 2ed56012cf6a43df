"""CLI helper that writes the stored pattern library to a portable JSON file."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from domain.library_transfer import LibraryTransfer
from domain.persistence import LibraryFileAdapter
from domain.store import PatternStore
from sequencer.settings import ReplaySettings, SettingsError


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Export every recorded workout pattern into a single JSON document.",
    )
    parser.add_argument(
        "--library-path",
        type=Path,
        help="Library JSON to read. Defaults to the WORKOUT_PATTERNS_* environment configuration.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path.cwd(),
        help="Directory receiving the exported file.",
    )
    parser.add_argument(
        "--filename",
        help="Override the default workout_patterns_<date>.json filename.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable INFO logging.")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(message)s",
    )
    if args.library_path is not None:
        port = LibraryFileAdapter(args.library_path.expanduser().resolve())
    else:
        try:
            port = ReplaySettings.from_environment().build_port()
        except SettingsError as exc:
            raise SystemExit(str(exc)) from exc

    store = PatternStore(port)
    store.load()
    transfer = LibraryTransfer(store)
    destination = transfer.export_file(args.output_dir.expanduser().resolve(), args.filename)

    print(f"Exported {store.library.song_count} patterns to {destination}")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
