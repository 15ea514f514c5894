"""
Query client for document providers.

Every call is one fresh round-trip: the cursor is opened, drained into memory
and closed before the method returns. Failures never propagate; they are
logged and reported to an optional listener, and the caller sees an empty
listing (or no location for creates).
"""
import logging
from typing import Any, Callable, List, Optional, Sequence, Tuple

from .errors import (
    DocTreeError,
    MalformedResponse,
    ProviderCreateFailed,
    ProviderError,
    ProviderQueryFailed,
)
from .identifiers import children_location
from .models import ListingRow, Location
from .provider import COLUMN_DOCUMENT_ID, COLUMN_MIME_TYPE, DocumentProvider
from .utils.retries import with_retry

# Configure logger
logger = logging.getLogger(__name__)

FailureListener = Callable[[DocTreeError], None]


class ProviderQueryClient:
    """Lists and creates documents through a ``DocumentProvider``."""

    def __init__(self, provider: DocumentProvider, on_failure: Optional[FailureListener] = None):
        """
        Args:
            provider: Provider to talk to
            on_failure: Called with each query/create failure condition
        """
        self.provider = provider
        self.on_failure = on_failure

    def list_children(self, folder: Location) -> List[ListingRow]:
        """
        List the children of a folder with their MIME types.

        Args:
            folder: Folder location

        Returns:
            Rows in provider order; empty if the query failed
        """
        rows = self._query(folder, (COLUMN_DOCUMENT_ID, COLUMN_MIME_TYPE))
        return [ListingRow(document_id, mime_type) for document_id, mime_type in rows]

    def list_children_ids(self, folder: Location) -> List[str]:
        """List only the document ids of a folder's children."""
        rows = self._query(folder, (COLUMN_DOCUMENT_ID,))
        return [row[0] for row in rows]

    def create_child(self, parent: Location, name: str, as_directory: bool) -> Optional[Location]:
        """
        Create a folder or empty file under ``parent``.

        Not retried: a create that failed half-way may still have created the
        document, and a second attempt would add a duplicate.

        Returns:
            Location of the created document, or None on failure
        """
        kind = "folder" if as_directory else "file"
        try:
            location = self.provider.create_child(parent, name, as_directory)
        except (ProviderError, OSError) as e:
            self._report(ProviderCreateFailed(parent, name, e))
            return None

        if location is None:
            self._report(ProviderCreateFailed(parent, name))
            return None

        logger.info(f"Created {kind} '{name}' at {location.uri}")
        return location

    def _query(self, folder: Location, projection: Sequence[str]) -> List[Tuple[Any, ...]]:
        try:
            return self._fetch_rows(children_location(folder), tuple(projection))
        except (ProviderError, OSError) as e:
            self._report(ProviderQueryFailed(folder, e))
            return []

    @with_retry()
    def _fetch_rows(self, children: Location, projection: Tuple[str, ...]) -> List[Tuple[Any, ...]]:
        rows = []
        cursor = self.provider.query(children, projection)
        if cursor is None:
            raise MalformedResponse(f"No cursor returned for {children.uri}")

        with cursor:
            if tuple(cursor.columns) != projection:
                raise MalformedResponse(f"Asked for {projection}, got {tuple(cursor.columns)}")
            for row in cursor:
                rows.append(self._decode_row(row, projection))
        logger.debug(f"Listed {len(rows)} children of {children.uri}")
        return rows

    @staticmethod
    def _decode_row(row: Sequence[Any], projection: Tuple[str, ...]) -> Tuple[Any, ...]:
        if not isinstance(row, (tuple, list)):
            raise MalformedResponse(f"Row is not a sequence: {row!r}")
        if len(row) != len(projection):
            raise MalformedResponse(f"Expected {len(projection)} columns, got {len(row)}")

        values = tuple(row)
        document_id = values[0]
        if not isinstance(document_id, str):
            raise MalformedResponse(f"Bad document id: {document_id!r}")
        if len(values) > 1 and values[1] is not None and not isinstance(values[1], str):
            raise MalformedResponse(f"Bad MIME type for {document_id}: {values[1]!r}")
        return values

    def _report(self, condition: DocTreeError) -> None:
        logger.error(f"{type(condition).__name__}: {condition}")
        if self.on_failure is not None:
            self.on_failure(condition)
