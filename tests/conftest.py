"""
Shared fixtures for lastfm_top9 tests.

HTTP is faked with Mock sessions whose get() returns canned responses.
"""

from io import BytesIO
from unittest.mock import Mock

import pytest
import requests
from PIL import Image


def make_response(json_data=None, status=200, content=b""):
    response = Mock()
    response.status_code = status
    response.content = content
    response.json.return_value = json_data
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} Error")
    return response


def make_track(artist, album, name, image=None, nowplaying=False):
    track = {
        "artist": {"#text": artist},
        "album": {"#text": album},
        "name": name,
        "image": image if image is not None else [],
    }
    if nowplaying:
        track["@attr"] = {"nowplaying": "true"}
    return track


def make_page(tracks, total_pages="1", page="1"):
    return {
        "recenttracks": {
            "track": tracks,
            "@attr": {"page": page, "totalPages": total_pages},
        }
    }


def png_bytes(size=(64, 32), color=(200, 30, 30)):
    buf = BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def session():
    return Mock(spec=requests.Session)
