"""
Provider interface for tree-structured document storage.

The helper never sees real paths. A provider only answers child listings and
creates children; everything else is built from document ids.
"""
from abc import ABC, abstractmethod
from typing import Any, Iterable, Iterator, Optional, Sequence, Tuple

from .models import Location

# Column names understood by providers
COLUMN_DOCUMENT_ID = "document_id"
COLUMN_MIME_TYPE = "mime_type"
COLUMN_DISPLAY_NAME = "display_name"
COLUMN_SIZE = "size"

ALL_COLUMNS = (COLUMN_DOCUMENT_ID, COLUMN_MIME_TYPE, COLUMN_DISPLAY_NAME, COLUMN_SIZE)


class RowCursor:
    """
    Result set of one provider query.

    Rows are tuples ordered like ``columns``. A cursor can be iterated once
    and must be closed; use it as a context manager.
    """

    def __init__(self, columns: Sequence[str], rows: Iterable[Tuple[Any, ...]]):
        self.columns: Tuple[str, ...] = tuple(columns)
        self._rows: Iterator[Tuple[Any, ...]] = iter(rows)
        self.closed: bool = False

    def __iter__(self) -> Iterator[Tuple[Any, ...]]:
        return self

    def __next__(self) -> Tuple[Any, ...]:
        if self.closed:
            raise ValueError("Cursor is closed")
        return next(self._rows)

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "RowCursor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class DocumentProvider(ABC):
    """Port implemented by concrete storage providers."""

    @abstractmethod
    def query(self, children: Location, projection: Sequence[str]) -> RowCursor:
        """
        List the children of a folder.

        Args:
            children: Children endpoint of the folder (``Location.children``)
            projection: Columns to return, in order

        Returns:
            Open cursor over one row per child, in provider order

        Raises:
            ProviderError: On any failure
        """

    @abstractmethod
    def create_child(self, parent: Location, name: str, as_directory: bool) -> Optional[Location]:
        """
        Create a child document.

        Args:
            parent: Folder to create in
            name: Requested display name
            as_directory: Create a folder rather than an empty file

        Returns:
            Location of the new document, or None if nothing was created

        Raises:
            ProviderError: On any failure
        """
