"""
Settings collaborators that receive the RTP folder location.
"""
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import DEFAULT_SETTINGS_FILE, RTP_FOLDER_KEY
from .models import Location

logger = logging.getLogger(__name__)


class SettingsStore(ABC):
    """Write-only view of the application settings used by the bootstrapper."""

    @abstractmethod
    def store_rtp_folder_location(self, location: Location) -> None:
        """Remember where the RTP folder lives."""


class InMemorySettingsStore(SettingsStore):
    """Keeps every stored location in memory."""

    def __init__(self):
        self.stored: List[Location] = []

    def store_rtp_folder_location(self, location: Location) -> None:
        self.stored.append(location)

    @property
    def rtp_folder_location(self) -> Optional[Location]:
        return self.stored[-1] if self.stored else None


class JsonSettingsStore(SettingsStore):
    """Settings kept as a flat JSON object on disk."""

    def __init__(self, path: Path = DEFAULT_SETTINGS_FILE):
        self.path = Path(path)

    def load(self) -> Dict[str, Any]:
        """
        Read the settings file.

        Returns:
            Stored settings; empty if the file is missing or unreadable
        """
        if not self.path.exists():
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable settings file {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring settings file {self.path}: not a JSON object")
            return {}
        return data

    def store_rtp_folder_location(self, location: Location) -> None:
        settings = self.load()
        settings[RTP_FOLDER_KEY] = location.uri

        # Ensure directory exists
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(settings, f, indent=2)

        logger.info(f"Stored RTP folder {location.uri} in {self.path}")
