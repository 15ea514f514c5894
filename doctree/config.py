"""
Configuration settings for the document tree helper.
"""
import os
from pathlib import Path

# Base directories
BASE_DIR = Path(os.environ.get("DOCTREE_HOME", Path.home() / ".doctree"))
DATA_DIR = BASE_DIR / "data"
LOG_DIR = BASE_DIR / "logs"

# Default files
DEFAULT_SETTINGS_FILE = DATA_DIR / "settings.json"
LOG_FILE = LOG_DIR / "doctree.log"

# Provider settings
DEFAULT_AUTHORITY = "com.android.externalstorage.documents"
DEFAULT_VOLUME = "primary"
DEFAULT_ROOT_FOLDER = "easyrpg"

# Document types
DIRECTORY_MIME_TYPE = "vnd.android.document/directory"
DEFAULT_FILE_MIME_TYPE = "application/octet-stream"

# Media scanners skip any folder holding this file
NOMEDIA_FILENAME = ".nomedia"

# Settings keys
RTP_FOLDER_KEY = "rtp_folder_uri"

# Query retry settings
QUERY_RETRIES = 2
RETRY_BACKOFF_FACTOR = 2  # For exponential backoff
