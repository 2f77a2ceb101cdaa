"""
http_client.py - HTTP Client for the Check-In Web App
======================================================
This module handles all HTTP communication with the spreadsheet-backed
web app, including:
- Lookups (GET with a single query parameter)
- Check-in submissions (POST with a JSON text body)
- Managing the HTTP session and headers

Features:
---------
- One attempt per call: no automatic retry
- Configurable timeouts
- Every transport problem surfaces as a single TransportError
"""

import json
import logging

import requests

from .config import Settings


logger = logging.getLogger(__name__)

# The web app rejects preflighted content types, so the JSON goes as plain text
SUBMIT_CONTENT_TYPE = "text/plain;charset=utf-8"

# How much of a bad body to keep for the log
BODY_SNIPPET_CHARS = 200


class TransportError(RuntimeError):
    """Network failure, HTTP error status or a body that is not a JSON object."""


# =============================================================================
# HTTP CLIENT CLASS
# =============================================================================

class HttpClient:
    """
    HTTP client for communicating with the check-in web app.

    Usage:
        client = HttpClient(settings)

        body = client.get_json({"email": "alice@example.com"})
        body = client.post_json({"uniqueIds": ["AB12", "AB13"]})

        client.close()
    """

    def __init__(self, settings: Settings, session: requests.Session | None = None):
        """
        Initialize the HTTP client.

        Args:
            settings: Configuration object containing URLs and timeout
            session: Optional pre-built session (mainly for tests)
        """
        self.settings = settings
        self.s = session or requests.Session()
        self.s.headers.update({"Accept": "application/json"})

        self.lookup_url = settings.lookup_url
        self.submit_url = settings.submit_url
        self.timeout = settings.timeout_sec

    # -------------------------------------------------------------------------
    # API REQUEST METHODS
    # -------------------------------------------------------------------------

    def get_json(self, params: dict) -> dict:
        """
        Make a GET request to the lookup URL.

        Args:
            params: Query parameters, e.g. {"uniqueId": "AB12"} or {"name": "ALL"}

        Returns:
            The decoded JSON object

        Raises:
            TransportError: On network failure, timeout, HTTP error or bad JSON
        """
        logger.debug(f"GET {self.lookup_url} params={params}")
        try:
            r = self.s.get(self.lookup_url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"GET failed: {type(e).__name__}: {e}") from e
        return self._parse(r)

    def post_json(self, payload: dict) -> dict:
        """
        POST a JSON payload to the submit URL.

        The payload is serialized here and sent as text; redirects are
        followed because the web app answers from a redirected location.

        Args:
            payload: e.g. {"uniqueIds": ["AB12", "AB13"]}

        Returns:
            The decoded JSON object

        Raises:
            TransportError: On network failure, timeout, HTTP error or bad JSON
        """
        logger.debug(f"POST {self.submit_url} payload={payload}")
        try:
            r = self.s.post(
                self.submit_url,
                data=json.dumps(payload).encode("utf-8"),
                headers={"Content-Type": SUBMIT_CONTENT_TYPE},
                timeout=self.timeout,
                allow_redirects=True,
            )
        except requests.RequestException as e:
            raise TransportError(f"POST failed: {type(e).__name__}: {e}") from e
        return self._parse(r)

    def _parse(self, r: requests.Response) -> dict:
        snippet = (r.text or "")[:BODY_SNIPPET_CHARS].strip()

        if not r.ok:
            raise TransportError(f"HTTP {r.status_code}: {snippet}")

        try:
            data = r.json()
        except ValueError as e:
            raise TransportError(f"Invalid JSON response ({e}): {snippet}") from e

        if not isinstance(data, dict):
            raise TransportError(f"Expected a JSON object, got {type(data).__name__}")
        return data

    # -------------------------------------------------------------------------
    # CLEANUP METHODS
    # -------------------------------------------------------------------------

    def close(self):
        """Close the HTTP session and release resources."""
        self.s.close()
