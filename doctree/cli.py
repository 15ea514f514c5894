"""
CLI entry point for the document tree helper.
Bootstraps the player's folders and inspects a local storage volume.
"""
import logging
import sys
from pathlib import Path
from typing import List, Optional

import click

from .bootstrap import FolderBootstrapper
from .config import DEFAULT_ROOT_FOLDER, DEFAULT_SETTINGS_FILE, LOG_FILE
from .errors import DocTreeError, InvalidLocation
from .identifiers import child_location, is_directory_mime_type, name_of
from .local_provider import LocalDocumentProvider
from .models import Location
from .query_client import ProviderQueryClient
from .resolver import NameResolver
from .settings import JsonSettingsStore

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]

storage_dir_argument = click.argument(
    "storage_dir",
    metavar="STORAGE_DIR",
    type=click.Path(exists=True, file_okay=False, path_type=Path)
)
folder_option = click.option(
    "--folder",
    default=DEFAULT_ROOT_FOLDER,
    show_default=True,
    help="Root folder, relative to the storage volume"
)


def setup_logging(log_level: str, log_file: Path = LOG_FILE) -> None:
    """
    Send doctree logs to ``log_file`` and stdout.

    Provider diagnostics (failed queries, failed creates, name conflicts) are
    only visible here, so the log file is always written.
    """
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))
    except OSError as e:
        click.echo(f"Cannot write log file {log_file}: {e}", err=True)

    logging.basicConfig(
        level=logging.getLevelName(log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )
    logger.debug(f"Logging to {log_file} at level {log_level.upper()}")


def target_location(root, value: Optional[str]):
    """
    Folder named on the command line: the root, a document id of its tree,
    or a content URI as stored in the settings file.
    """
    if value is None:
        return root
    if not value.startswith("content://"):
        return child_location(root, value)

    try:
        location = Location.from_uri(value)
    except InvalidLocation as e:
        raise click.ClickException(str(e)) from e
    if (location.authority, location.tree_id) != (root.authority, root.tree_id):
        raise click.ClickException(f"{value} is not inside {root.uri}")
    return location


def open_root(storage_dir: Path, folder: str):
    """Provider for ``storage_dir`` and the root location of ``folder``."""
    provider = LocalDocumentProvider(storage_dir)
    root = provider.root_location(folder)
    try:
        path = provider.path_for(root)
    except DocTreeError as e:
        raise click.ClickException(str(e)) from e
    if not path.is_dir():
        raise click.ClickException(f"Root folder '{folder}' does not exist in {storage_dir}")
    return provider, root


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="INFO",
    show_default=True,
    help="Logging verbosity"
)
def main(log_level: str) -> None:
    """Manage the player's document tree on a storage volume."""
    setup_logging(log_level)


@main.command()
@storage_dir_argument
@folder_option
@click.option(
    "--settings",
    "settings_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_SETTINGS_FILE,
    show_default=True,
    help="JSON settings file receiving the RTP folder"
)
def bootstrap(storage_dir: Path, folder: str, settings_path: Path) -> None:
    """Create the rtp, games, soundfonts and saves folders."""
    provider, root = open_root(storage_dir, folder)

    bootstrapper = FolderBootstrapper(provider, JsonSettingsStore(settings_path))
    report = bootstrapper.bootstrap(root)

    for path in report.created:
        click.echo(f"created  {path}")
    for path in report.reused:
        click.echo(f"reused   {path}")
    for path in report.failed:
        click.echo(f"missing  {path}")
    for condition in report.conditions:
        click.echo(f"warning  {condition}")
    if report.marker_created:
        click.echo(f"created  {bootstrapper.marker_name}")

    if not report.ready:
        click.echo("Storage is not ready.", err=True)
        sys.exit(1)
    click.echo(f"RTP folder: {report.published.uri}")


@main.command(name="ls")
@storage_dir_argument
@click.argument("document_id", required=False)
@folder_option
def list_command(storage_dir: Path, document_id: Optional[str], folder: str) -> None:
    """List a folder of the tree (the root by default)."""
    provider, root = open_root(storage_dir, folder)
    target = target_location(root, document_id)

    failures: List[DocTreeError] = []
    client = ProviderQueryClient(provider, on_failure=failures.append)
    rows = client.list_children(target)
    if failures:
        raise click.ClickException(str(failures[0]))

    for row in rows:
        kind = "d" if is_directory_mime_type(row.mime_type) else "-"
        click.echo(f"{kind} {name_of(row.document_id)}\t{row.document_id}")


@main.command()
@storage_dir_argument
@click.argument("name")
@click.option("--in", "document_id", help="Folder document id or content URI to search (the root by default)")
@folder_option
def find(storage_dir: Path, name: str, document_id: Optional[str], folder: str) -> None:
    """Print the URI of the child called NAME."""
    provider, root = open_root(storage_dir, folder)
    target = target_location(root, document_id)

    document = NameResolver(ProviderQueryClient(provider)).find_document(target, name)
    if document is None:
        click.echo(f"{name}: not found", err=True)
        sys.exit(1)

    kind = "folder" if document.is_directory else "file"
    click.echo(f"{document.location.uri} ({kind})")


if __name__ == "__main__":
    main()
