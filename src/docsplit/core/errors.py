"""Error taxonomy.

Fatal conditions are exceptions and abort the whole call. Non-fatal ones are
absorbed where they occur and only show up as omissions in the output; they
are named by ``SkipReason`` in log records.
"""

from __future__ import annotations

from enum import Enum

_MIB = 1024 * 1024


class DocsplitError(Exception):
    """Base for all fatal errors raised by this package."""


class SizeLimitExceeded(DocsplitError):
    """The source stream grew past the configured byte ceiling."""

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(
            f"PDF file too large ({round(size / _MIB)}MB). "
            f"Maximum size is {round(limit / _MIB)}MB."
        )


class SourceLoadFailure(DocsplitError):
    """The source bytes could not be opened as a PDF."""


class ArtifactNotFound(DocsplitError):
    """The storage collaborator has nothing at the requested locator."""


class SkipReason(str, Enum):
    MALFORMED_REGION = "malformed_region"
    MISSING_PAGE = "missing_page"
    EMPTY_GROUP = "empty_group"
