import logging
from dataclasses import dataclass

import requests

from lastfm_top9.errors import IngestionError
from lastfm_top9.window import TimeWindow

API_ROOT = "https://ws.audioscrobbler.com/2.0/"
PAGE_LIMIT = 200
REQUEST_TIMEOUT = 20
USER_AGENT = "lastfm-top9/0.1"
ARTWORK_SIZES = ("extralarge", "large", "medium")


@dataclass(frozen=True)
class ScrobbleRecord:
    artist: str
    album: str
    track: str
    artwork_url: str = ""


def lastfm_get_recent_tracks(
    session: requests.Session,
    user: str,
    api_key: str,
    window: TimeWindow,
    page: int,
) -> dict:
    """Fetch one page of user.getRecentTracks bounded by the window."""
    params = {
        "method": "user.getRecentTracks",
        "user": user,
        "from": str(window.start_epoch),
        "to": str(window.end_epoch),
        "limit": str(PAGE_LIMIT),
        "page": str(page),
        "api_key": api_key,
        "format": "json",
    }
    try:
        r = session.get(
            API_ROOT,
            params=params,
            headers={"User-Agent": USER_AGENT},
            timeout=REQUEST_TIMEOUT,
        )
        r.raise_for_status()
        data = r.json()
    except requests.RequestException as exc:
        raise IngestionError(f"Fetching page {page} failed: {exc}") from exc
    except ValueError as exc:
        raise IngestionError(f"Page {page} is not valid JSON") from exc

    if not isinstance(data, dict):
        raise IngestionError(f"Page {page} has an unexpected shape")
    if "error" in data:
        raise IngestionError(
            f"Last.fm API error {data.get('error')}: "
            f"{data.get('message', 'unknown error')}"
        )
    if not isinstance(data.get("recenttracks"), dict):
        raise IngestionError(f"Page {page} has no recenttracks")
    return data


def total_pages(recenttracks: dict) -> int:
    attr = recenttracks.get("@attr")
    if not isinstance(attr, dict):
        return 1
    try:
        return int(attr.get("totalPages"))
    except (TypeError, ValueError):
        return 1


def pick_artwork_url(track: dict) -> str:
    """
    Prefer extralarge, then large, then medium. Last.fm often lists every
    size with an empty #text, so empty entries count as missing.
    """
    images = track.get("image") or []
    by_size = {}
    for item in images:
        if not isinstance(item, dict):
            continue
        url = item.get("#text")
        if url and item.get("size") not in by_size:
            by_size[item.get("size")] = url
    for size in ARTWORK_SIZES:
        if size in by_size:
            return by_size[size]
    return ""


def _text(value) -> str:
    if isinstance(value, dict):
        return value.get("#text") or ""
    return value or ""


def is_now_playing(track: dict) -> bool:
    attr = track.get("@attr") or {}
    if not isinstance(attr, dict):
        raise IngestionError("Track @attr has an unexpected shape")
    return attr.get("nowplaying") == "true"


def to_record(track: dict) -> ScrobbleRecord:
    return ScrobbleRecord(
        artist=_text(track.get("artist")),
        album=_text(track.get("album")),
        track=track.get("name") or "",
        artwork_url=pick_artwork_url(track),
    )


def fetch_scrobbles(
    user: str,
    api_key: str,
    window: TimeWindow,
    session: requests.Session,
) -> list[ScrobbleRecord]:
    """
    Collect every completed scrobble inside the window, in the order Last.fm
    returns them. Any page failure raises IngestionError; nothing partial is
    returned.
    """
    records: list[ScrobbleRecord] = []

    page = 1
    pages = 1
    while page <= pages:
        data = lastfm_get_recent_tracks(session, user, api_key, window, page)
        recenttracks = data["recenttracks"]
        pages = total_pages(recenttracks)

        tracks = recenttracks.get("track") or []
        if isinstance(tracks, dict):
            tracks = [tracks]
        if not isinstance(tracks, list) or not all(isinstance(t, dict) for t in tracks):
            raise IngestionError(f"Page {page} has an unexpected shape")
        kept = [to_record(t) for t in tracks if not is_now_playing(t)]
        records.extend(kept)
        logging.debug("Page %d/%d: %d scrobbles", page, pages, len(kept))
        page += 1

    logging.info("Fetched %d scrobbles for %s (%s)", len(records), user, window)
    return records
