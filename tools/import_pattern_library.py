"""CLI entry point for :meth:`domain.library_transfer.LibraryTransfer.import_file`."""
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Sequence

from domain.library_transfer import LibraryTransfer
from domain.persistence import LibraryFileAdapter
from domain.store import PatternStore
from sequencer.settings import ReplaySettings, SettingsError


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Validate an exported pattern library and replace the stored library with it.",
    )
    parser.add_argument(
        "--source",
        type=Path,
        required=True,
        help="Exported library JSON document.",
    )
    parser.add_argument(
        "--library-path",
        type=Path,
        help="Library JSON to replace. Defaults to the WORKOUT_PATTERNS_* environment configuration.",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.WARNING, format="[%(levelname)s] %(message)s")
    if args.library_path is not None:
        port = LibraryFileAdapter(args.library_path.expanduser().resolve())
    else:
        try:
            port = ReplaySettings.from_environment().build_port()
        except SettingsError as exc:
            raise SystemExit(str(exc)) from exc

    store = PatternStore(port)
    store.load()
    result = LibraryTransfer(store).import_file(args.source.expanduser().resolve())

    summary = {
        "source": str(args.source),
        "accepted": result.accepted,
        "song_count": result.song_count,
        "error": result.error,
    }
    print(json.dumps(summary, indent=2))
    return 0 if result else 1


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
