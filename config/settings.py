"""Project-wide settings and defaults."""

import os

from dotenv import load_dotenv

load_dotenv()  # Load .env file if present

# Key generation defaults
DEFAULT_EDITION = os.environ.get("KEYGEN_DEFAULT_EDITION", "extreme").lower()
DEFAULT_SEATS = int(os.environ.get("KEYGEN_DEFAULT_SEATS", "1"))
MAX_BATCH_SIZE = int(os.environ.get("KEYGEN_MAX_BATCH", "500"))
KEY_SEPARATORS = os.environ.get("KEYGEN_SEPARATORS", "true").lower() == "true"

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "WARNING")
LOG_FORMAT = os.environ.get(
    "LOG_FORMAT", "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)
