import argparse
import logging
import os
import sys
import tempfile
from datetime import date
from pathlib import Path

import requests

from lastfm_top9.aggregate import aggregate
from lastfm_top9.config import Settings, load_settings
from lastfm_top9.errors import Top9Error
from lastfm_top9.imaging import compose_grid
from lastfm_top9.lastfm import fetch_scrobbles
from lastfm_top9.report import emit_report, write_collage
from lastfm_top9.tiles import resolve_tiles
from lastfm_top9.window import last_completed_week


def setup_logging() -> None:
    level = logging.DEBUG if os.environ.get("LOG_LEVEL", "").upper() == "DEBUG" else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    for name in ("urllib3", "requests", "PIL"):
        logging.getLogger(name).setLevel(logging.WARNING)


def parse_arguments(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="lastfm-top9",
        description=(
            "Build a 3x3 collage of last week's most played albums on Last.fm. "
            "Configured through LASTFM_USER, LASTFM_API_KEY, TILE_SIZE, "
            "GRID_COLS, GRID_ROWS and OUT_DIR (environment or .env)."
        ),
    )
    return parser.parse_args(argv)


def run(
    settings: Settings,
    today: date | None = None,
    session: requests.Session | None = None,
) -> Path | None:
    """
    Build and write the collage for the last completed week.

    Returns the written image path, or None when the week has no scrobbles.
    """
    if session is None:
        with requests.Session() as http:
            return run(settings, today, http)

    window = last_completed_week(today)
    print(f"Building Top {settings.grid_count} for {window} …")

    records = fetch_scrobbles(settings.user, settings.api_key, window, session=session)
    if not records:
        print(f"No scrobbles found in the range {window}.")
        return None

    stats, top_albums = aggregate(records, limit=settings.grid_count)
    logging.info("Ranked %d album(s) from %d scrobbles", len(top_albums), stats.scrobble_count)

    with tempfile.TemporaryDirectory(prefix="lastfmweek.") as work_dir:
        tiles = resolve_tiles(
            top_albums, settings.tile_size, settings.grid_count, Path(work_dir), session=session
        )
        collage = compose_grid(
            [t.image_path for t in tiles], settings.cols, settings.rows, settings.tile_size
        )

    out_path = write_collage(collage, settings.out_path)
    emit_report(window, stats, out_path, top_n=settings.grid_count)
    return out_path


def main(argv=None) -> int:
    parse_arguments(argv)
    setup_logging()
    try:
        settings = load_settings()
        run(settings)
    except Top9Error as exc:
        logging.debug("Run aborted", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
