"""
Exceptions and failure conditions for the document tree helper.

Provider implementations raise ``ProviderError`` subclasses. The query client
and the bootstrapper never let those cross into the caller: they turn them into
the condition types below, log them and hand them to listeners.
"""
from typing import Optional


class DocTreeError(Exception):
    """Base class for every doctree exception."""


class InvalidLocation(DocTreeError, ValueError):
    """A content URI could not be parsed into a Location."""


# Raised by providers

class ProviderError(DocTreeError):
    """A provider round-trip failed."""


class ProviderPermissionDenied(ProviderError):
    """The provider refused access to a document."""


class ProviderUnavailable(ProviderError):
    """Transient provider fault; the call may succeed if retried."""


class MalformedResponse(ProviderError):
    """The provider answered with rows the client cannot decode."""


# Recorded conditions

class ProviderQueryFailed(DocTreeError):
    """Listing a folder failed; the folder is treated as empty."""

    def __init__(self, location, cause: Optional[BaseException] = None):
        self.location = location
        self.cause = cause
        super().__init__(f"Query failed for {location}: {cause}")


class ProviderCreateFailed(DocTreeError):
    """Creating a child returned no usable Location."""

    def __init__(self, parent, name: str, cause: Optional[BaseException] = None):
        self.parent = parent
        self.name = name
        self.cause = cause
        reason = cause if cause is not None else "provider returned no location"
        super().__init__(f"Could not create '{name}' under {parent}: {reason}")


class NotADirectoryConflict(DocTreeError):
    """A required folder name is taken by something that is not a directory."""

    def __init__(self, parent, name: str, location=None):
        self.parent = parent
        self.name = name
        self.location = location
        super().__init__(f"'{name}' under {parent} exists but is not a directory")
