class Top9Error(Exception):
    """Base class for errors that end a run."""


class StartupError(Top9Error):
    """Missing or invalid configuration, raised before any network activity."""


class IngestionError(Top9Error):
    """A recent-tracks page could not be fetched or understood."""


class OutputError(Top9Error):
    """The collage could not be written to its destination."""
