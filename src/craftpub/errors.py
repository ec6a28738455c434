"""Exception types raised by the publishing pipeline"""


class CraftpubError(Exception):
    """Base class for pipeline failures that should abort the run."""


class FetchError(CraftpubError):
    """An HTTP request to Craft or an image host returned a non-success status."""


class UnexpectedResponseError(CraftpubError):
    """A remote API returned a payload with an unrecognized shape."""


class DocumentNotFoundError(CraftpubError):
    """No Craft document title contains the search query."""

    def __init__(self, query: str, available: list[str]):
        super().__init__(f'Document with title containing "{query}" not found')
        self.query = query
        self.available = available
