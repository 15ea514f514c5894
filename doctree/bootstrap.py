"""
Creates the player's folder layout under a user-chosen root.

A pass walks the required folders depth-first. Existing directories are
reused, missing ones are created, and a ``.nomedia`` marker is added to the
root. Running a pass again on a complete tree creates nothing.
"""
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from .config import NOMEDIA_FILENAME
from .errors import NotADirectoryConflict
from .models import EASYRPG_FOLDERS, BootstrapReport, FolderSpec, Location
from .provider import DocumentProvider
from .query_client import ProviderQueryClient
from .resolver import NameResolver
from .settings import SettingsStore

# Configure logger
logger = logging.getLogger(__name__)


def _walk(specs: Iterable[FolderSpec]) -> Iterable[FolderSpec]:
    for spec in specs:
        yield spec
        yield from _walk(spec.children)


def _subtree_paths(spec: FolderSpec, path: str) -> List[str]:
    paths = []
    for child in spec.children:
        child_path = f"{path}/{child.name}"
        paths.append(child_path)
        paths.extend(_subtree_paths(child, child_path))
    return paths


class FolderBootstrapper:
    """
    Ensures a folder hierarchy exists under a root location.

    Not safe to run twice at the same time on the same root: both passes may
    decide a folder is missing and each create one.
    """

    def __init__(
        self,
        provider: DocumentProvider,
        settings: SettingsStore,
        folders: Sequence[FolderSpec] = EASYRPG_FOLDERS,
        marker_name: Optional[str] = NOMEDIA_FILENAME
    ):
        """
        Args:
            provider: Storage provider holding the root
            settings: Receives the published folder location
            folders: Required top-level folders, in creation order
            marker_name: Empty file to place in the root (None to skip)
        """
        published = [spec.name for spec in _walk(folders) if spec.publish]
        if len(published) > 1:
            raise ValueError(f"Only one folder can be published, got {published}")

        self.provider = provider
        self.settings = settings
        self.folders: Tuple[FolderSpec, ...] = tuple(folders)
        self.marker_name = marker_name

    def bootstrap(self, root: Location) -> BootstrapReport:
        """
        Run one pass over ``root``.

        Provider failures never propagate; they end up in the report and
        leave the affected branch unbuilt.

        Args:
            root: Root folder chosen by the user

        Returns:
            Report of what was reused, created and published
        """
        report = BootstrapReport(root)
        client = ProviderQueryClient(self.provider, on_failure=report.conditions.append)
        resolver = NameResolver(client)

        logger.info(f"Bootstrapping folders under {root.uri}")
        to_publish: List[Location] = []
        for spec in self.folders:
            self._ensure_folder(client, resolver, root, spec, "", report, to_publish)

        if self.marker_name:
            self._ensure_marker(client, resolver, root, report)

        for location in to_publish:
            self._publish(location, report)

        if report.failed:
            logger.warning(f"Bootstrap incomplete, missing: {', '.join(report.failed)}")
        else:
            logger.info(f"Bootstrap complete: {len(report.created)} created, {len(report.reused)} reused")
        return report

    def _ensure_folder(
        self,
        client: ProviderQueryClient,
        resolver: NameResolver,
        parent: Location,
        spec: FolderSpec,
        prefix: str,
        report: BootstrapReport,
        to_publish: List[Location]
    ) -> bool:
        """
        Resolve or create ``spec`` under ``parent``, then its children.

        Returns:
            True if the folder and its whole subtree exist
        """
        path = f"{prefix}/{spec.name}" if prefix else spec.name

        location, is_directory = resolver.find_location_and_is_directory(parent, spec.name)
        if location is not None and is_directory:
            logger.debug(f"Reusing folder {path} at {location.uri}")
            report.reused.append(path)
        else:
            if location is not None:
                # Left in place; the provider decides what creating next to it does
                conflict = NotADirectoryConflict(parent, spec.name, location)
                logger.warning(f"NotADirectoryConflict: {conflict}")
                report.conditions.append(conflict)

            location = client.create_child(parent, spec.name, as_directory=True)
            if location is None:
                skipped = _subtree_paths(spec, path)
                if skipped:
                    logger.error(f"Problem creating folder {path}, skipping {', '.join(skipped)}")
                else:
                    logger.error(f"Problem creating folder {path}")
                report.failed.append(path)
                report.failed.extend(skipped)
                return False
            report.created.append(path)

        report.locations[path] = location

        complete = True
        for child in spec.children:
            if not self._ensure_folder(client, resolver, location, child, path, report, to_publish):
                complete = False

        if spec.publish:
            if complete:
                to_publish.append(location)
            else:
                logger.error(f"Not publishing {path}: its sub-folders are incomplete")
        return complete

    def _ensure_marker(
        self,
        client: ProviderQueryClient,
        resolver: NameResolver,
        root: Location,
        report: BootstrapReport
    ) -> None:
        if resolver.find_location(root, self.marker_name) is not None:
            logger.debug(f"Marker {self.marker_name} already present")
            return

        report.marker_created = client.create_child(root, self.marker_name, as_directory=False) is not None

    def _publish(self, location: Location, report: BootstrapReport) -> None:
        try:
            self.settings.store_rtp_folder_location(location)
        except Exception as e:
            logger.error(f"Failed to store RTP folder {location.uri}: {e.__class__.__name__}: {e}")
            return
        report.published = location
