import logging
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Sequence

import requests
from PIL import Image

from lastfm_top9.aggregate import RankedAlbum
from lastfm_top9.imaging import blank_tile, fit_square, text_tile
from lastfm_top9.lastfm import REQUEST_TIMEOUT


@dataclass(frozen=True)
class Tile:
    image_path: Path
    index: int


def download_and_fit(session: requests.Session, url: str, tile_size: int) -> Image.Image:
    """Download cover art and crop it to a square tile. Raises on any failure."""
    resp = session.get(url, timeout=REQUEST_TIMEOUT)
    resp.raise_for_status()
    with Image.open(BytesIO(resp.content)) as im:
        return fit_square(im, tile_size)


def album_tile(session: requests.Session, album: RankedAlbum, tile_size: int) -> Image.Image:
    if album.artwork_url:
        try:
            return download_and_fit(session, album.artwork_url, tile_size)
        except Exception as exc:
            logging.warning("Cover download failed for %s: %s", album.key, exc)
    return fit_square(text_tile(f"{album.artist}\n{album.album}", tile_size), tile_size)


def resolve_tiles(
    albums: Sequence[RankedAlbum],
    tile_size: int,
    grid_count: int,
    work_dir: Path,
    session: requests.Session,
) -> list[Tile]:
    """
    Write one tile per album (in rank order) into work_dir, then pad with
    blank tiles so exactly grid_count tiles come back.
    """
    tiles: list[Tile] = []

    for i, album in enumerate(albums[:grid_count], start=1):
        save = work_dir / f"tile_{i}.jpg"
        album_tile(session, album, tile_size).save(save, quality=92)
        tiles.append(Tile(save, len(tiles)))

    while len(tiles) < grid_count:
        pad = work_dir / f"blank_{len(tiles)}.jpg"
        blank_tile(tile_size).save(pad)
        tiles.append(Tile(pad, len(tiles)))

    return tiles
