"""Weekly Last.fm top-9 album collage."""

__version__ = "0.1.0"
