from dataclasses import dataclass
from typing import Iterable

from lastfm_top9.lastfm import ScrobbleRecord

TOP_N = 9
KEY_SEPARATOR = " — "


@dataclass(frozen=True)
class WeeklyStats:
    unique_artists: int
    unique_albums: int
    unique_tracks: int
    scrobble_count: int


@dataclass(frozen=True)
class RankedAlbum:
    artist: str
    album: str
    play_count: int
    artwork_url: str = ""

    @property
    def key(self) -> str:
        return f"{self.artist}{KEY_SEPARATOR}{self.album}"


def weekly_stats(records: list[ScrobbleRecord]) -> WeeklyStats:
    # A track is identified by artist + title, regardless of album.
    return WeeklyStats(
        unique_artists=len({r.artist for r in records}),
        unique_albums=len({(r.artist, r.album) for r in records}),
        unique_tracks=len({(r.artist, r.track) for r in records}),
        scrobble_count=len(records),
    )


def rank_albums(records: Iterable[ScrobbleRecord], limit: int = TOP_N) -> list[RankedAlbum]:
    """
    Count plays per (artist, album) and return the `limit` most played.

    Artwork is the first non-empty URL seen for an album. Albums with equal
    play counts stay in the order they were first scrobbled.
    """
    counts: dict[tuple[str, str], int] = {}
    artwork: dict[tuple[str, str], str] = {}

    for r in records:
        key = (r.artist, r.album)
        counts[key] = counts.get(key, 0) + 1
        if r.artwork_url and key not in artwork:
            artwork[key] = r.artwork_url

    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [
        RankedAlbum(artist, album, plays, artwork.get((artist, album), ""))
        for (artist, album), plays in ranked[:limit]
    ]


def aggregate(
    records: list[ScrobbleRecord], limit: int = TOP_N
) -> tuple[WeeklyStats, list[RankedAlbum]]:
    return weekly_stats(records), rank_albums(records, limit)
