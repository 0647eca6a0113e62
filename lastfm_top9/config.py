import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from dotenv import load_dotenv

from lastfm_top9.errors import StartupError

DEFAULT_TILE_SIZE = 256
DEFAULT_COLS = 3
DEFAULT_ROWS = 3
DEFAULT_OUT_DIR = "~/Desktop"
OUT_FILENAME = "lastfm_weekly_collage.png"


@dataclass(frozen=True)
class Settings:
    """Everything a run needs, built once at startup."""

    user: str
    api_key: str
    tile_size: int = DEFAULT_TILE_SIZE
    cols: int = DEFAULT_COLS
    rows: int = DEFAULT_ROWS
    out_dir: Path = Path(DEFAULT_OUT_DIR).expanduser()

    @property
    def grid_count(self) -> int:
        return self.cols * self.rows

    @property
    def out_path(self) -> Path:
        return self.out_dir / OUT_FILENAME


def _required(env: Mapping[str, str], name: str) -> str:
    value = (env.get(name) or "").strip()
    if not value:
        raise StartupError(
            f"{name} is not set. Export it or add it to .env, e.g.:\n"
            f'export {name}="..."'
        )
    return value


def _positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise StartupError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise StartupError(f"{name} must be positive, got {value}")
    return value


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """
    Build Settings from the environment.

    When no mapping is given, a .env file in the working directory is loaded
    first; variables already present in the process environment take precedence.
    """
    if environ is None:
        load_dotenv(Path.cwd() / ".env")
        environ = os.environ

    out_dir = (environ.get("OUT_DIR") or "").strip() or DEFAULT_OUT_DIR
    return Settings(
        user=_required(environ, "LASTFM_USER"),
        api_key=_required(environ, "LASTFM_API_KEY"),
        tile_size=_positive_int(environ, "TILE_SIZE", DEFAULT_TILE_SIZE),
        cols=_positive_int(environ, "GRID_COLS", DEFAULT_COLS),
        rows=_positive_int(environ, "GRID_ROWS", DEFAULT_ROWS),
        out_dir=Path(out_dir).expanduser(),
    )
