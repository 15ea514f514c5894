"""
Find children of a folder by display name.

Providers only offer enumeration, so every lookup is a linear scan of a fresh
listing. Names are compared exactly. If a folder holds two children with the
same name, only the first one in provider order is ever found.
"""
import logging
from typing import Optional, Tuple

from .identifiers import child_location, is_directory_mime_type, name_of
from .models import Document, ListingRow, Location
from .query_client import ProviderQueryClient

logger = logging.getLogger(__name__)


class NameResolver:
    """Name lookups on top of a ``ProviderQueryClient``."""

    def __init__(self, client: ProviderQueryClient):
        self.client = client

    def find_location(self, folder: Location, name: str) -> Optional[Location]:
        """
        Location of the first child of ``folder`` named ``name``.

        Returns:
            The child location, or None if no child matches
        """
        row = self._find_row(folder, name)
        if row is None:
            return None
        return child_location(folder, row.document_id)

    def find_location_and_is_directory(self, folder: Location, name: str) -> Tuple[Optional[Location], bool]:
        """
        Like ``find_location`` but also tells whether the match is a directory.

        Returns:
            (location, is_directory); (None, False) if no child matches
        """
        row = self._find_row(folder, name)
        if row is None:
            return None, False
        return child_location(folder, row.document_id), is_directory_mime_type(row.mime_type)

    def find_document(self, folder: Location, name: str) -> Optional[Document]:
        row = self._find_row(folder, name)
        if row is None:
            return None
        return Document(
            child_location(folder, row.document_id),
            name_of(row.document_id),
            is_directory_mime_type(row.mime_type),
            row.mime_type,
        )

    def _find_row(self, folder: Location, name: str) -> Optional[ListingRow]:
        for row in self.client.list_children(folder):
            if name_of(row.document_id) == name:
                return row

        logger.debug(f"No child named '{name}' in {folder.uri}")
        return None
