"""
Document provider backed by a directory on the local filesystem.

Mirrors the external storage provider found on devices: document ids are
"<volume>:<relative path>", a tree only grants access to ids below its root,
and name clashes are resolved case-insensitively by appending " (n)".
"""
import logging
import mimetypes
import os
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple

from .config import DEFAULT_AUTHORITY, DEFAULT_FILE_MIME_TYPE, DEFAULT_VOLUME, DIRECTORY_MIME_TYPE
from .errors import ProviderError, ProviderPermissionDenied
from .models import Location
from .provider import (
    ALL_COLUMNS,
    COLUMN_DISPLAY_NAME,
    COLUMN_DOCUMENT_ID,
    COLUMN_MIME_TYPE,
    COLUMN_SIZE,
    DocumentProvider,
    RowCursor,
)

logger = logging.getLogger(__name__)

MAX_UNIQUE_SUFFIX = 32


def _wrap_os_error(e: OSError, action: str) -> ProviderError:
    if isinstance(e, PermissionError):
        return ProviderPermissionDenied(f"{action}: {e}")
    return ProviderError(f"{action}: {e}")


class LocalDocumentProvider(DocumentProvider):
    """Provider over one storage volume rooted at ``storage_dir``."""

    def __init__(self, storage_dir: Path, volume: str = DEFAULT_VOLUME,
                 authority: str = DEFAULT_AUTHORITY):
        self.storage_dir = Path(storage_dir).resolve()
        self.volume = volume
        self.authority = authority

    def root_location(self, folder: str = "") -> Location:
        """
        Tree location for a folder of the volume, as granted by a folder picker.

        Args:
            folder: Path relative to the volume root ("" for the whole volume)
        """
        folder = folder.strip("/")
        return Location(self.authority, f"{self.volume}:{folder}")

    def document_id_for(self, path: Path) -> str:
        # Paths are built under storage_dir; symlinks are not followed
        rel = Path(path).relative_to(self.storage_dir).as_posix()
        if rel == ".":
            rel = ""
        return f"{self.volume}:{rel}"

    def path_for(self, location: Location) -> Path:
        """
        Filesystem path of a location.

        Raises:
            ProviderPermissionDenied: If the document is outside the tree
        """
        if location.authority != self.authority:
            raise ProviderPermissionDenied(f"Unknown authority {location.authority}")

        tree_rel = self._relative_part(location.tree_id)
        doc_rel = self._relative_part(location.document_id)

        # A tree only grants access to itself and its descendants
        if tree_rel and doc_rel != tree_rel and not doc_rel.startswith(tree_rel + "/"):
            raise ProviderPermissionDenied(
                f"{location.document_id} is not inside tree {location.tree_id}"
            )

        parts = [part for part in doc_rel.split("/") if part]
        if any(part in (".", "..") for part in parts):
            raise ProviderPermissionDenied(f"Invalid document id {location.document_id}")
        return self.storage_dir.joinpath(*parts)

    def query(self, children: Location, projection: Sequence[str]) -> RowCursor:
        unknown = [column for column in projection if column not in ALL_COLUMNS]
        if unknown:
            raise ProviderError(f"Unknown columns: {', '.join(unknown)}")

        folder = self.path_for(children)
        if not folder.is_dir():
            raise ProviderError(f"Not a folder: {children.document_id}")

        try:
            with os.scandir(folder) as it:
                entries = sorted(it, key=lambda entry: entry.name)
                rows = [self._row(entry, projection) for entry in entries]
        except OSError as e:
            raise _wrap_os_error(e, f"Listing {children.document_id}") from e

        return RowCursor(projection, rows)

    def create_child(self, parent: Location, name: str, as_directory: bool) -> Optional[Location]:
        if not name or "/" in name or name in (".", ".."):
            raise ProviderError(f"Invalid display name {name!r}")

        folder = self.path_for(parent)
        if not folder.is_dir():
            raise ProviderError(f"Not a folder: {parent.document_id}")

        try:
            target = folder / self._unique_name(folder, name, as_directory)
            if as_directory:
                target.mkdir()
            else:
                # Never overwrite
                with open(target, "xb"):
                    pass
        except OSError as e:
            raise _wrap_os_error(e, f"Creating {name} in {parent.document_id}") from e

        if target.name != name:
            logger.info(f"'{name}' is taken in {parent.document_id}, created '{target.name}'")
        return Location(self.authority, parent.tree_id, self.document_id_for(target))

    def _relative_part(self, document_id: str) -> str:
        prefix = f"{self.volume}:"
        if not document_id.startswith(prefix):
            raise ProviderPermissionDenied(f"{document_id} is not on volume {self.volume}")
        return document_id[len(prefix):].strip("/")

    def _row(self, entry: os.DirEntry, projection: Sequence[str]) -> Tuple[Any, ...]:
        is_dir = entry.is_dir()
        values: Dict[str, Any] = {
            COLUMN_DOCUMENT_ID: self.document_id_for(Path(entry.path)),
            COLUMN_MIME_TYPE: DIRECTORY_MIME_TYPE if is_dir else self._guess_mime_type(entry.name),
            COLUMN_DISPLAY_NAME: entry.name,
            COLUMN_SIZE: None if is_dir else entry.stat().st_size,
        }
        return tuple(values[column] for column in projection)

    @staticmethod
    def _guess_mime_type(name: str) -> str:
        mime_type, _ = mimetypes.guess_type(name)
        return mime_type or DEFAULT_FILE_MIME_TYPE

    @staticmethod
    def _unique_name(folder: Path, name: str, as_directory: bool) -> str:
        taken = {child.lower() for child in os.listdir(folder)}
        if name.lower() not in taken:
            return name

        # Files keep their extension at the end: "save (1).lsd"
        base, ext = name, ""
        if not as_directory:
            stem, dot, suffix = name.rpartition(".")
            if stem and dot:
                base, ext = stem, f".{suffix}"

        for n in range(1, MAX_UNIQUE_SUFFIX + 1):
            candidate = f"{base} ({n}){ext}"
            if candidate.lower() not in taken:
                return candidate
        raise ProviderError(f"Too many documents named {name!r}")
