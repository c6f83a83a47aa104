"""Exceptions raised by the catalog collaborators.

The normalization and evaluation core never raises; these errors belong to
the layers around it (source fetching, syncing and storage).
"""


class CatalogError(Exception):
    """Base class for model catalog errors."""


class SourceFetchError(CatalogError):
    """A source could not be fetched after all retries."""

    def __init__(self, source: str, message: str):
        self.source = source
        self.message = message
        super().__init__(f"Failed to fetch from {source}: {message}")


class SyncError(CatalogError):
    """No source could be synced."""


class FilterNotFoundError(CatalogError):
    """Requested filter does not exist in storage."""

    def __init__(self, filter_id: str):
        self.filter_id = filter_id
        super().__init__(f"Filter not found: {filter_id}")


class FilterRunNotFoundError(CatalogError):
    """Requested filter run does not exist in storage."""

    def __init__(self, run_id: str):
        self.run_id = run_id
        super().__init__(f"Filter run not found: {run_id}")
