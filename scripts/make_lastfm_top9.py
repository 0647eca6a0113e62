"""
Build last week's top 9 album collage from Last.fm.

Reads LASTFM_USER and LASTFM_API_KEY from the environment (or .env) and
writes lastfm_weekly_collage.png to OUT_DIR (default ~/Desktop).
"""
import sys

from lastfm_top9.cli import main

if __name__ == "__main__":
    sys.exit(main())
