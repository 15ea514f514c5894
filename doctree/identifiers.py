"""
Conversions between provider document ids, display names and locations.
None of these functions talk to the provider.
"""
from typing import Optional

from .config import DIRECTORY_MIME_TYPE
from .models import Location


def name_of(document_id: Optional[str]) -> str:
    """
    Display name of a document id.

    Args:
        document_id: Id as returned by a listing (e.g. "primary:easyrpg/rtp")

    Returns:
        Text after the last "/", the whole id if it has none, "" for None
    """
    if document_id is None:
        return ""
    return document_id[document_id.rfind("/") + 1:]


def child_location(parent: Location, document_id: str) -> Location:
    """
    Location of a document listed under ``parent``'s tree.

    The document does not have to exist yet.
    """
    return Location(parent.authority, parent.tree_id, document_id)


def children_location(folder: Location) -> Location:
    """Listing endpoint for the children of ``folder``."""
    return Location(folder.authority, folder.tree_id, folder.document_id, children=True)


def is_directory_mime_type(mime_type: Optional[str]) -> bool:
    if mime_type is None:
        return False
    return mime_type == DIRECTORY_MIME_TYPE
