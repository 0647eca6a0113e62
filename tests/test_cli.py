"""
End-to-end tests for the CLI driver with faked HTTP.
"""

from datetime import date
from unittest.mock import patch

import pytest
from PIL import Image

from conftest import make_page, make_response, make_track, png_bytes
from lastfm_top9 import cli
from lastfm_top9.config import Settings
from lastfm_top9.errors import IngestionError
from lastfm_top9.lastfm import ScrobbleRecord

SATURDAY = date(2024, 6, 8)


@pytest.fixture
def settings(tmp_path):
    return Settings(user="alice", api_key="key", tile_size=16, out_dir=tmp_path / "out")


@pytest.fixture(autouse=True)
def no_clipboard():
    with patch("lastfm_top9.report.copy_to_clipboard", return_value=False) as copy:
        yield copy


class TestRun:
    """Tests for run."""

    def test_zero_scrobbles_writes_nothing(self, session, settings, capsys):
        session.get.return_value = make_response(make_page([], total_pages="0"))

        result = cli.run(settings, today=SATURDAY, session=session)

        assert result is None
        assert not settings.out_path.exists()
        assert "No scrobbles found in the range 2024-06-01 → 2024-06-07." in capsys.readouterr().out

    def test_only_now_playing_counts_as_zero(self, session, settings):
        page = make_page([make_track("A", "X", "t", nowplaying=True)])
        session.get.return_value = make_response(page)

        assert cli.run(settings, today=SATURDAY, session=session) is None

    def test_builds_collage(self, session, settings, capsys, no_clipboard):
        image = [{"size": "extralarge", "#text": "http://img/cover.png"}]
        tracks = [make_track("A", "X", f"t{i}", image=image) for i in range(3)]
        tracks += [make_track("B", "Y", "u")]
        cover = make_response(content=png_bytes())

        def get(url, **kwargs):
            if url == "http://img/cover.png":
                return cover
            return make_response(make_page(tracks))

        session.get.side_effect = get

        result = cli.run(settings, today=SATURDAY, session=session)

        assert result == settings.out_path
        with Image.open(result) as im:
            assert im.size == (3 * 16, 3 * 16)
        out = capsys.readouterr().out
        assert "Building Top 9 for 2024-06-01 → 2024-06-07" in out
        assert "The Stats: 2 artists, 2 albums, 4 tracks (4 scrobbles)" in out
        no_clipboard.assert_called_once_with(
            "The Stats: 2 artists, 2 albums, 4 tracks (4 scrobbles)"
        )

    def test_ingestion_error_writes_nothing(self, session, settings):
        session.get.return_value = make_response(status=503)

        with pytest.raises(IngestionError):
            cli.run(settings, today=SATURDAY, session=session)
        assert not settings.out_path.exists()

    def test_workspace_removed(self, session, settings, tmp_path):
        session.get.return_value = make_response(make_page([make_track("A", "X", "t")]))
        work = tmp_path / "work"
        work.mkdir()

        with patch("lastfm_top9.cli.tempfile.TemporaryDirectory") as tmpdir:
            tmpdir.return_value.__enter__.return_value = str(work)
            cli.run(settings, today=SATURDAY, session=session)

        tmpdir.return_value.__exit__.assert_called_once()

    def test_own_session_is_closed(self, settings):
        with patch("lastfm_top9.cli.requests.Session") as session_cls:
            http = session_cls.return_value.__enter__.return_value
            http.get.return_value = make_response(make_page([]))
            cli.run(settings, today=SATURDAY)

        session_cls.return_value.__exit__.assert_called_once()

    def test_label_follows_grid_size(self, session, tmp_path, capsys):
        settings = Settings(
            user="alice", api_key="key", tile_size=16, cols=2, rows=2, out_dir=tmp_path
        )
        session.get.return_value = make_response(make_page([make_track("A", "X", "t")]))

        result = cli.run(settings, today=SATURDAY, session=session)

        out = capsys.readouterr().out
        assert "Building Top 4 for" in out
        assert "Top 4 saved to:" in out
        with Image.open(result) as im:
            assert im.size == (32, 32)


class TestMain:
    """Tests for main."""

    def test_missing_api_key_exits_nonzero(self, monkeypatch, tmp_path, capsys):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("LASTFM_USER", "alice")
        monkeypatch.setenv("LASTFM_API_KEY", "")

        with patch("lastfm_top9.cli.run") as run:
            assert cli.main([]) == 1
        run.assert_not_called()
        assert "LASTFM_API_KEY" in capsys.readouterr().err

    def test_ingestion_error_exits_nonzero(self, monkeypatch, tmp_path, capsys):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("LASTFM_USER", "alice")
        monkeypatch.setenv("LASTFM_API_KEY", "key")

        with patch("lastfm_top9.cli.run", side_effect=IngestionError("boom")):
            assert cli.main([]) == 1
        assert "Error: boom" in capsys.readouterr().err

    def test_unwritable_output_exits_nonzero(self, monkeypatch, tmp_path, capsys):
        blocker = tmp_path / "desktop"
        blocker.write_text("")
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("LASTFM_USER", "alice")
        monkeypatch.setenv("LASTFM_API_KEY", "key")
        monkeypatch.setenv("TILE_SIZE", "16")
        monkeypatch.setenv("OUT_DIR", str(blocker / "out"))
        records = [ScrobbleRecord("A", "X", "t")]

        with patch("lastfm_top9.cli.fetch_scrobbles", return_value=records):
            assert cli.main([]) == 1
        assert "Error: Could not write" in capsys.readouterr().err

    def test_success_exits_zero(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("LASTFM_USER", "alice")
        monkeypatch.setenv("LASTFM_API_KEY", "key")

        with patch("lastfm_top9.cli.run", return_value=None):
            assert cli.main([]) == 0
