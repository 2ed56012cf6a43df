"""Summarise recorded patterns and optionally delete one of them."""
from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Sequence

from domain.persistence import LibraryFileAdapter
from domain.store import PatternStore
from sequencer.settings import ReplaySettings, SettingsError


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Print a JSON report of the stored pattern library.",
    )
    parser.add_argument(
        "--library-path",
        type=Path,
        help="Library JSON to inspect. Defaults to the WORKOUT_PATTERNS_* environment configuration.",
    )
    parser.add_argument(
        "--delete",
        metavar="TRACK_ID",
        action="append",
        default=[],
        help="Remove the pattern recorded for TRACK_ID before reporting.",
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
    deleted = [track_id for track_id in args.delete if store.delete_song(track_id)]
    missing = [track_id for track_id in args.delete if track_id not in deleted]

    report = {
        "version": store.library.version,
        "song_count": store.library.song_count,
        "default_event_count": len(store.library.default_pattern),
        "songs": [asdict(summary) for summary in store.song_summaries()],
        "deleted": deleted,
        "missing": missing,
    }
    print(json.dumps(report, indent=2, ensure_ascii=False))
    return 0 if not missing else 1


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
