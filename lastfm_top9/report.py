import logging
import shutil
import subprocess
from pathlib import Path

from PIL import Image

from lastfm_top9.aggregate import TOP_N, WeeklyStats
from lastfm_top9.errors import OutputError
from lastfm_top9.window import TimeWindow

# First one found on PATH wins.
CLIPBOARD_COMMANDS = (
    ["pbcopy"],
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
    ["clip"],
)


def format_stats(stats: WeeklyStats) -> str:
    return (
        f"The Stats: {stats.unique_artists} artists, {stats.unique_albums} albums, "
        f"{stats.unique_tracks} tracks ({stats.scrobble_count} scrobbles)"
    )


def write_collage(im: Image.Image, out_path: Path) -> Path:
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        im.save(out_path, format="PNG", optimize=True)
    except OSError as exc:
        raise OutputError(f"Could not write {out_path}: {exc}") from exc
    return out_path


def copy_to_clipboard(text: str) -> bool:
    """Best effort: returns False instead of raising when the clipboard is unavailable."""
    for command in CLIPBOARD_COMMANDS:
        if shutil.which(command[0]) is None:
            continue
        try:
            subprocess.run(command, input=text, text=True, check=True, timeout=5)
            return True
        except (OSError, subprocess.SubprocessError) as exc:
            logging.warning("Copying to clipboard with %s failed: %s", command[0], exc)
            return False
    logging.info("No clipboard tool found; stats not copied.")
    return False


def emit_report(
    window: TimeWindow, stats: WeeklyStats, out_path: Path, top_n: int = TOP_N
) -> str:
    stats_line = format_stats(stats)
    print(f"Top {top_n} saved to: {out_path}")
    print(f"Timeframe: {window}")
    print(stats_line)
    copy_to_clipboard(stats_line)
    return stats_line
