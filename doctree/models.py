"""
Models for the document tree helper.
Contains Location, listing rows, folder specs and the bootstrap report.
"""
from typing import Dict, List, Optional, Sequence, Tuple
from urllib.parse import quote, unquote, urlsplit

from .errors import DocTreeError, InvalidLocation


class Location:
    """
    Addressable handle to one node of a provider tree.

    A root location is handed to us by the application and has
    ``document_id == tree_id``. Derived locations are built from a parent and
    a document id and must not outlive the call chain that built them.
    """

    def __init__(self, authority: str, tree_id: str, document_id: Optional[str] = None,
                 children: bool = False):
        self.authority: str = authority
        self.tree_id: str = tree_id
        self.document_id: str = tree_id if document_id is None else document_id
        # True for the "list my children" endpoint of a folder
        self.children: bool = children

    @property
    def is_root(self) -> bool:
        return self.document_id == self.tree_id and not self.children

    @property
    def uri(self) -> str:
        uri = (
            f"content://{self.authority}/tree/{quote(self.tree_id, safe='')}"
            f"/document/{quote(self.document_id, safe='')}"
        )
        if self.children:
            uri += "/children"
        return uri

    @classmethod
    def from_uri(cls, uri: str) -> "Location":
        """
        Parse a content URI.

        Accepts the bare tree form (``content://auth/tree/<id>``) as well as
        the document and children forms produced by ``uri``.
        """
        parts = urlsplit(uri)
        if parts.scheme != "content" or not parts.netloc:
            raise InvalidLocation(f"Not a content URI: {uri!r}")

        segments = parts.path.strip("/").split("/")
        if len(segments) < 2 or segments[0] != "tree" or not segments[1]:
            raise InvalidLocation(f"Not a tree URI: {uri!r}")
        tree_id = unquote(segments[1])

        if len(segments) == 2:
            return cls(parts.netloc, tree_id)

        if segments[2] != "document" or len(segments) < 4 or len(segments) > 5:
            raise InvalidLocation(f"Unexpected tree URI layout: {uri!r}")
        children = len(segments) == 5
        if children and segments[4] != "children":
            raise InvalidLocation(f"Unexpected tree URI layout: {uri!r}")

        return cls(parts.netloc, tree_id, unquote(segments[3]), children=children)

    def _key(self) -> Tuple[str, str, str, bool]:
        return (self.authority, self.tree_id, self.document_id, self.children)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Location):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return f"Location({self.uri!r})"

    def __str__(self) -> str:
        return self.uri


class ListingRow:
    """One row of a child listing."""

    def __init__(self, document_id: str, mime_type: Optional[str] = None):
        self.document_id: str = document_id
        self.mime_type: Optional[str] = mime_type

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ListingRow):
            return NotImplemented
        return (self.document_id, self.mime_type) == (other.document_id, other.mime_type)

    def __repr__(self) -> str:
        return f"ListingRow({self.document_id!r}, {self.mime_type!r})"


class Document:
    """A resolved child: its location, decoded name and type at lookup time."""

    def __init__(self, location: Location, name: str, is_directory: bool,
                 mime_type: Optional[str] = None):
        self.location: Location = location
        self.name: str = name
        self.is_directory: bool = is_directory
        self.mime_type: Optional[str] = mime_type

    def __repr__(self) -> str:
        kind = "dir" if self.is_directory else "file"
        return f"Document({self.name!r}, {kind}, {self.location.uri!r})"


class FolderSpec:
    """A required folder and the folders required inside it."""

    def __init__(self, name: str, children: Sequence["FolderSpec"] = (), publish: bool = False):
        self.name: str = name
        self.children: Tuple["FolderSpec", ...] = tuple(children)
        # Location of this folder goes to the settings store once built
        self.publish: bool = publish

    def __repr__(self) -> str:
        return f"FolderSpec({self.name!r}, children={list(self.children)!r})"


# Folders the player expects under the user-chosen root.
# "rtp" is lowercase on purpose: older installs may already have it and
# folder creation is case-insensitive on device storage, so "RTP" would end
# up as "RTP (1)" on every start.
EASYRPG_FOLDERS: Tuple[FolderSpec, ...] = (
    FolderSpec("rtp", children=(FolderSpec("2000"), FolderSpec("2003")), publish=True),
    FolderSpec("games"),
    FolderSpec("soundfonts"),
    FolderSpec("saves"),
)


class BootstrapReport:
    """Outcome of one bootstrap pass over a root."""

    def __init__(self, root: Location):
        self.root: Location = root
        # Relative folder path ("rtp/2000") -> resolved location
        self.locations: Dict[str, Location] = {}
        self.created: List[str] = []
        self.reused: List[str] = []
        self.conditions: List[DocTreeError] = []
        # Relative paths of folders that could not be built
        self.failed: List[str] = []
        self.marker_created: bool = False
        self.published: Optional[Location] = None

    @property
    def ready(self) -> bool:
        return self.published is not None and not self.failed
