"""
config.py - Configuration Management
=====================================
This module handles loading and validating configuration from environment variables.
It reads settings from a .env file and makes them available to the rest of the application.

Environment Variables Used:
---------------------------
- CHECKIN_LOOKUP_URL       : (Required) The deployed web-app URL used for lookups
- CHECKIN_SUBMIT_URL       : (Optional) Web-app URL for check-in submissions (default: lookup URL)
- CHECKIN_TIMEOUT_SEC      : (Optional) Request timeout in seconds (default: 20)
- CHECKIN_SUGGESTION_LIMIT : (Optional) Max autocomplete suggestions, 0 = no limit (default: 0)

Example .env file:
------------------
CHECKIN_LOOKUP_URL=https://script.google.com/macros/s/AKfy.../exec
CHECKIN_TIMEOUT_SEC=15
"""

from dataclasses import dataclass
import os
from pathlib import Path
from dotenv import load_dotenv


# =============================================================================
# SETTINGS DATACLASS
# =============================================================================

@dataclass
class Settings:
    """Container for all application configuration values."""

    # Required: where GET lookups go (search and the name index)
    lookup_url: str

    # Optional: where check-in POSTs go. Falls back to lookup_url.
    submit_url: str | None = None

    # Optional: how long to wait for the web app before giving up
    timeout_sec: int = 20

    # Optional: cap on autocomplete suggestions (0 = show every match)
    suggestion_limit: int = 0

    def __post_init__(self):
        if not self.submit_url:
            self.submit_url = self.lookup_url


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def _clean(v: str | None) -> str | None:
    """
    Clean and normalize an environment variable value.

    Examples:
        _clean('  hello  ')     -> 'hello'
        _clean('"quoted"')      -> 'quoted'
        _clean("'quoted'")      -> 'quoted'
        _clean('')              -> None
        _clean(None)            -> None
    """
    if v is None:
        return None

    v = v.strip()

    if (v.startswith('"') and v.endswith('"')) or (v.startswith("'") and v.endswith("'")):
        v = v[1:-1]

    return v if v else None


def _normalize_url(url: str | None) -> str | None:
    """Add a missing https:// scheme and drop a trailing slash."""
    if not url:
        return None
    if not url.startswith("http"):
        url = "https://" + url
    return url.rstrip("/")


def _int_setting(name: str, default: int) -> int:
    raw = _clean(os.getenv(name))
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


# =============================================================================
# MAIN CONFIGURATION LOADER
# =============================================================================

def load_settings(env_file: Path | None = None) -> Settings:
    """
    Load application configuration from environment variables.

    This function:
    1. Finds and loads the .env file from the project root
    2. Reads all CHECKIN_* environment variables
    3. Cleans and validates the values
    4. Returns a Settings object with all configuration

    Args:
        env_file: Optional path to a .env file (default: <project root>/.env)

    Returns:
        Settings: A dataclass containing all configuration values

    Raises:
        RuntimeError: If CHECKIN_LOOKUP_URL is not set (it's required)
        ValueError: If a numeric setting is not an integer
    """
    # ---------------------------------------------------------------------
    # STEP 1: Load the .env file
    # ---------------------------------------------------------------------
    # Values already present in the environment win over the file.
    root_env = env_file or Path(__file__).resolve().parents[1] / ".env"
    load_dotenv(dotenv_path=root_env)

    # ---------------------------------------------------------------------
    # STEP 2: Read and validate the lookup URL (required)
    # ---------------------------------------------------------------------
    lookup = _normalize_url(_clean(os.getenv("CHECKIN_LOOKUP_URL")))

    if not lookup:
        raise RuntimeError(
            "CHECKIN_LOOKUP_URL is not set in environment. "
            "Please add it to your .env file."
        )

    # ---------------------------------------------------------------------
    # STEP 3: Build and return the Settings object
    # ---------------------------------------------------------------------
    return Settings(
        lookup_url=lookup,
        submit_url=_normalize_url(_clean(os.getenv("CHECKIN_SUBMIT_URL"))),
        timeout_sec=_int_setting("CHECKIN_TIMEOUT_SEC", 20),
        suggestion_limit=_int_setting("CHECKIN_SUGGESTION_LIMIT", 0),
    )
