"""
Scenario tests for bootstrap.py using the in-memory provider.
"""
import logging
from unittest.mock import MagicMock

import pytest

from doctree.bootstrap import FolderBootstrapper
from doctree.config import NOMEDIA_FILENAME
from doctree.errors import (
    MalformedResponse,
    NotADirectoryConflict,
    ProviderCreateFailed,
    ProviderError,
    ProviderPermissionDenied,
    ProviderQueryFailed,
)
from doctree.models import FolderSpec
from doctree.settings import InMemorySettingsStore, SettingsStore
from doctree.tests.fixtures.constants import EXPECTED_FOLDERS, TEST_TREE_ID
from doctree.tests.fixtures.mock_provider import MockDocumentProvider

RTP_ID = "primary:easyrpg/rtp"


@pytest.fixture
def provider():
    return MockDocumentProvider()


@pytest.fixture
def settings():
    return InMemorySettingsStore()


@pytest.fixture
def bootstrapper(provider, settings):
    return FolderBootstrapper(provider, settings)


def test_empty_root(provider, settings, bootstrapper):
    """Everything is created in order, then rtp is published once."""
    report = bootstrapper.bootstrap(provider.root)

    assert provider.creates == [
        (TEST_TREE_ID, "rtp", True),
        (RTP_ID, "2000", True),
        (RTP_ID, "2003", True),
        (TEST_TREE_ID, "games", True),
        (TEST_TREE_ID, "soundfonts", True),
        (TEST_TREE_ID, "saves", True),
        (TEST_TREE_ID, NOMEDIA_FILENAME, False),
    ]
    assert report.created == EXPECTED_FOLDERS
    assert report.reused == []
    assert report.marker_created is True
    assert settings.stored == [provider.location(RTP_ID)]
    assert report.published == provider.location(RTP_ID)
    assert report.ready
    assert report.conditions == []


def test_publish_happens_last(provider):
    """The settings write comes after every folder and the marker."""
    creates_at_publish = []

    class RecordingSettings(SettingsStore):
        def store_rtp_folder_location(self, location):
            creates_at_publish.append(len(provider.creates))

    FolderBootstrapper(provider, RecordingSettings()).bootstrap(provider.root)

    assert creates_at_publish == [7]


def test_existing_rtp_is_reused(provider, settings, bootstrapper):
    existing = provider.add_folder(TEST_TREE_ID, "rtp")

    report = bootstrapper.bootstrap(provider.root)

    assert report.reused == ["rtp"]
    assert report.created == ["rtp/2000", "rtp/2003", "games", "soundfonts", "saves"]
    assert (TEST_TREE_ID, "rtp", True) not in provider.creates
    assert provider.names_in(existing) == ["2000", "2003"]
    assert report.marker_created is True
    assert settings.stored == [provider.location(existing)]


def test_file_named_like_folder(provider, settings, bootstrapper, caplog):
    """
    A file called "games" is left alone and creation is still attempted.

    What the provider makes of that is up to it; the device provider (and the
    mock) create "games (1)" next to the file. This is accepted behaviour.
    """
    provider.add_file(TEST_TREE_ID, "games")

    with caplog.at_level(logging.WARNING):
        report = bootstrapper.bootstrap(provider.root)

    conflicts = [c for c in report.conditions if isinstance(c, NotADirectoryConflict)]
    assert len(conflicts) == 1
    assert conflicts[0].name == "games"
    assert conflicts[0].location == provider.location("primary:easyrpg/games")
    assert "NotADirectoryConflict" in caplog.text

    assert (TEST_TREE_ID, "games", True) in provider.creates
    assert report.locations["games"] == provider.location("primary:easyrpg/games (1)")
    # Remaining siblings and the marker are unaffected
    assert provider.names_in(TEST_TREE_ID) == [
        "games", "rtp", "games (1)", "soundfonts", "saves", NOMEDIA_FILENAME
    ]
    assert report.ready
    assert len(settings.stored) == 1


def test_file_conflict_is_not_idempotent(provider, bootstrapper):
    """Accepted ambiguity: each pass creates another folder beside the file."""
    provider.add_file(TEST_TREE_ID, "games")

    bootstrapper.bootstrap(provider.root)
    bootstrapper.bootstrap(provider.root)

    assert provider.names_in(TEST_TREE_ID).count("games (2)") == 1


def test_idempotent(provider, settings, bootstrapper):
    first = bootstrapper.bootstrap(provider.root)
    creates_after_first = list(provider.creates)

    second = bootstrapper.bootstrap(provider.root)

    assert provider.creates == creates_after_first
    assert second.created == []
    assert second.reused == EXPECTED_FOLDERS
    assert second.marker_created is False
    assert second.locations == first.locations
    assert settings.stored == [provider.location(RTP_ID), provider.location(RTP_ID)]


def test_existing_marker_is_kept(provider, bootstrapper):
    provider.add_file(TEST_TREE_ID, NOMEDIA_FILENAME, "")

    report = bootstrapper.bootstrap(provider.root)

    assert report.marker_created is False
    assert (TEST_TREE_ID, NOMEDIA_FILENAME, False) not in provider.creates
    assert provider.names_in(TEST_TREE_ID).count(NOMEDIA_FILENAME) == 1


def test_failed_rtp_skips_its_children(provider, settings, bootstrapper, caplog):
    provider.create_failures.add("rtp")

    with caplog.at_level(logging.ERROR):
        report = bootstrapper.bootstrap(provider.root)

    created_names = [name for _, name, _ in provider.creates]
    assert "2000" not in created_names
    assert "2003" not in created_names
    assert report.failed == ["rtp", "rtp/2000", "rtp/2003"]
    assert report.created == ["games", "soundfonts", "saves"]
    assert report.marker_created is True
    assert any(isinstance(c, ProviderCreateFailed) and c.name == "rtp" for c in report.conditions)
    assert "Problem creating folder rtp" in caplog.text

    # Nothing published, storage not ready
    assert settings.stored == []
    assert report.published is None
    assert not report.ready


def test_partial_rtp_is_not_published(provider, settings, bootstrapper):
    provider.create_failures.add("2000")

    report = bootstrapper.bootstrap(provider.root)

    assert report.failed == ["rtp/2000"]
    assert "rtp/2003" in report.created
    assert settings.stored == []
    assert not report.ready


def test_create_errors_do_not_escape(provider, settings, bootstrapper):
    provider.create_errors["games"] = ProviderError("disk full")

    report = bootstrapper.bootstrap(provider.root)

    assert report.failed == ["games"]
    assert "soundfonts" in report.created
    # rtp itself is complete, so it is still published
    assert len(settings.stored) == 1


def test_unreadable_root(provider, settings, bootstrapper):
    """Nothing can be listed or created: the pass still finishes."""
    provider.query_errors[TEST_TREE_ID] = ProviderPermissionDenied("revoked")
    for name in ("rtp", "games", "soundfonts", "saves", NOMEDIA_FILENAME):
        provider.create_errors[name] = ProviderPermissionDenied("revoked")

    report = bootstrapper.bootstrap(provider.root)

    assert report.failed == EXPECTED_FOLDERS
    assert report.marker_created is False
    assert report.locations == {}
    assert settings.stored == []


@pytest.mark.parametrize("error", [OSError("read-only"), ValueError("bad JSON"), TypeError("not serializable")])
def test_settings_failure_does_not_escape(provider, error, caplog):
    settings = MagicMock(spec=SettingsStore)
    settings.store_rtp_folder_location.side_effect = error

    with caplog.at_level(logging.ERROR):
        report = FolderBootstrapper(provider, settings).bootstrap(provider.root)

    settings.store_rtp_folder_location.assert_called_once()
    assert report.published is None
    assert not report.ready
    assert type(error).__name__ in caplog.text


def test_provider_without_cursor(provider, settings, bootstrapper):
    """A provider answering queries with no cursor reads as empty folders."""
    provider.query = MagicMock(return_value=None)

    report = bootstrapper.bootstrap(provider.root)

    assert report.created == EXPECTED_FOLDERS
    query_failures = [c for c in report.conditions if isinstance(c, ProviderQueryFailed)]
    assert query_failures
    assert all(isinstance(c.cause, MalformedResponse) for c in query_failures)


def test_custom_layout(provider, settings):
    folders = [FolderSpec("data", children=[FolderSpec("cache", publish=True)])]
    bootstrapper = FolderBootstrapper(provider, settings, folders=folders, marker_name=None)

    report = bootstrapper.bootstrap(provider.root)

    assert report.created == ["data", "data/cache"]
    # No marker file requested
    assert all(as_directory for _, _, as_directory in provider.creates)
    assert settings.stored == [provider.location("primary:easyrpg/data/cache")]


def test_only_one_published_folder():
    folders = [FolderSpec("a", publish=True), FolderSpec("b", children=[FolderSpec("c", publish=True)])]

    with pytest.raises(ValueError):
        FolderBootstrapper(MockDocumentProvider(), InMemorySettingsStore(), folders=folders)
