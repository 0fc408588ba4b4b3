"""Exceptions raised by the merge-and-tag pipeline.

Every failure is fatal for the run; the CLI turns these into exit status 1.
"""


class BamAddRgError(Exception):
    """Base class for all bamaddrg errors."""


class ConfigurationError(BamAddRgError, ValueError):
    """Bad or missing options: no inputs, bad region, missing index."""


class OpenError(BamAddRgError, OSError):
    """The merged reader or the writer could not be opened."""


class TagError(BamAddRgError):
    """The RG tag could not be set on a record."""

    def __init__(self, read_name, reason):
        super().__init__(
            f"could not add or edit RG tag on alignment {read_name}: {reason}"
        )
        self.read_name = read_name


class WriteError(BamAddRgError):
    """The writer rejected a record."""

    def __init__(self, read_name, reason):
        super().__init__(f"could not write alignment {read_name}: {reason}")
        self.read_name = read_name


class ReadError(BamAddRgError, OSError):
    """An input file failed partway through the stream."""

    def __init__(self, filename, reason):
        super().__init__(f"could not read from {filename}: {reason}")
        self.filename = filename
