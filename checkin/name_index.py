"""
name_index.py - Responder Name Index
=====================================
Holds every known responder name for autocomplete. The names are fetched
once per session with the reserved query name=ALL and never change after
that. A failed load leaves the index empty: autocomplete simply has nothing
to offer, and searching keeps working.
"""

import asyncio
import logging
from typing import Optional, Tuple

from .http_client import HttpClient, TransportError
from .models import Failure, MalformedResponse, decode_names
from .selector import NAME_INDEX_QUERY


logger = logging.getLogger(__name__)


class NameIndex:
    """Ordered, load-once sequence of responder names."""

    def __init__(self, names=()):
        self._names: Tuple[str, ...] = tuple(names)
        self._loaded = bool(self._names)

    @property
    def names(self) -> Tuple[str, ...]:
        return self._names

    @property
    def loaded(self) -> bool:
        return self._loaded

    def __len__(self):
        return len(self._names)

    def __iter__(self):
        return iter(self._names)

    async def load(self, client: HttpClient, timeout: Optional[float] = None) -> bool:
        """
        Fetch all names once.

        Returns True when the index was filled. Any failure, including running
        past `timeout` seconds, is logged and swallowed; the caller never has
        to handle it. Later calls do nothing.
        """
        if self._loaded:
            return bool(self._names)
        self._loaded = True

        try:
            call = asyncio.to_thread(client.get_json, dict(NAME_INDEX_QUERY))
            body = await (call if timeout is None else asyncio.wait_for(call, timeout))
            outcome = decode_names(body)
        except (TransportError, MalformedResponse, asyncio.TimeoutError) as e:
            logger.warning(f"Name index unavailable: {type(e).__name__}: {e}")
            return False

        if isinstance(outcome, Failure):
            logger.warning(f"Name index unavailable: {outcome.message}")
            return False

        self._names = tuple(outcome.payload)
        logger.info(f"Loaded {len(self._names)} responder names")
        return True
