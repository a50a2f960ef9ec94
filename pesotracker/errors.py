"""Error types raised by the Peso Tracker core."""

from __future__ import annotations


class PesoTrackerError(Exception):
    """Base class for all core failures."""


class PersistenceError(PesoTrackerError):
    """The underlying storage could not be read or written."""


class ImportFormatError(PesoTrackerError):
    """An imported document is not a sequence of records."""
