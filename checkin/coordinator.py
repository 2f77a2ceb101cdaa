"""
coordinator.py - Lookup & Check-In Coordination
================================================
This module owns the client-side state of a check-in session and the rules
that change it:

- Search: validates the term, performs one remote lookup and replaces the
  attendee list wholesale (the selection starts empty again).
- Selection: attendees already checked in can never be selected.
- Check-in: submits the selected UniqueIds as one batch and, on success,
  looks the same criteria/term up again so the server's statuses show.

Concurrency:
------------
Everything runs on one asyncio event loop; network calls run in a worker
thread and the coroutine waits at that point. At most one search and one
submission are in flight at a time. A user-triggered call made while the
coordinator is busy is refused with BUSY_MESSAGE and changes nothing. The
refresh that follows a successful check-in waits for the search slot instead.

Error Handling:
---------------
- Validation problems (empty term, reserved name, empty selection) never
  reach the network.
- Server-reported failures show the server's own message.
- Transport failures show a fixed message; the detail only goes to the log.
- A failed search clears the list. A failed check-in leaves list and
  selection as they were so the same batch can be retried.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Tuple

from .http_client import HttpClient, TransportError
from .models import (
    Attendee,
    Failure,
    MalformedResponse,
    Outcome,
    SearchCriteria,
    decode_check_in,
    decode_search,
)
from .selector import RESERVED_ALL_NAMES, build_query


logger = logging.getLogger(__name__)


# =============================================================================
# USER-FACING MESSAGES
# =============================================================================

FETCH_ERROR = "Error fetching data."
SUBMIT_ERROR = "Error submitting check-in."
NAME_NOT_FOUND = "Name not found."
EMPTY_SELECTION = "Please select at least one attendee to check in."
NO_ATTENDEES = "No attendees found."
BUSY_MESSAGE = "Busy, please wait."


def empty_term_message(criteria: SearchCriteria) -> str:
    return f"Please enter a {criteria.label}."


# =============================================================================
# COORDINATOR
# =============================================================================

class CheckInCoordinator:
    """
    Search, selection and batch check-in for one session.

    Usage:
        coordinator = CheckInCoordinator(client)
        await coordinator.resolve(SearchCriteria.EMAIL, "alice@example.com")
        coordinator.toggle("AB12")
        await coordinator.submit()
        print(coordinator.message)
    """

    def __init__(self, client: HttpClient, timeout: Optional[float] = None):
        """
        Args:
            client: HTTP client for the web app
            timeout: Overall deadline in seconds for one remote call (None = rely
                on the client's own timeout)
        """
        self.client = client
        self.timeout = timeout

        # Active lookup: the last criteria/term that was actually sent
        self.criteria = SearchCriteria.UNIQUE_ID
        self.term = ""

        # Snapshot of the last successful lookup, replaced wholesale
        self.attendees: Tuple[Attendee, ...] = ()
        self.message = ""

        # Insertion-ordered set of selected UniqueIds
        self._selected: Dict[str, None] = {}

        self._search_lock = asyncio.Lock()
        self._submit_lock = asyncio.Lock()

    # -------------------------------------------------------------------------
    # STATE QUERIES
    # -------------------------------------------------------------------------

    @property
    def busy(self) -> bool:
        return self._search_lock.locked() or self._submit_lock.locked()

    @property
    def selected_ids(self) -> List[str]:
        return list(self._selected)

    def is_selected(self, unique_id: str) -> bool:
        return unique_id in self._selected

    def find(self, unique_id: str) -> Optional[Attendee]:
        for attendee in self.attendees:
            if attendee.unique_id == unique_id:
                return attendee
        return None

    def eligible(self, unique_id: str) -> bool:
        """Only attendees in the current list who are not checked in yet."""
        attendee = self.find(unique_id)
        return attendee is not None and not attendee.is_checked_in

    # -------------------------------------------------------------------------
    # SEARCH
    # -------------------------------------------------------------------------

    async def resolve(self, criteria: Optional[SearchCriteria] = None,
                      term: Optional[str] = None) -> Outcome:
        """
        Look attendees up by criteria and term.

        Args:
            criteria: Field to search by (default: the active criteria)
            term: Search term (default: the active term)

        Returns:
            Success(list of attendees) or Failure(message shown to the user)
        """
        # One operation at a time; user calls are refused, not queued
        if self.busy:
            return Failure(BUSY_MESSAGE)

        criteria = criteria or self.criteria
        term = (self.term if term is None else term).strip()
        self.message = ""

        # ---------------------------------------------------------------------
        # Local validation, no network call
        # ---------------------------------------------------------------------
        if not term:
            return self._fail_search(empty_term_message(criteria))
        if criteria is SearchCriteria.NAME and term == RESERVED_ALL_NAMES:
            return self._fail_search(NAME_NOT_FOUND)

        # ---------------------------------------------------------------------
        # Remote lookup; this pair is what a post-check-in refresh repeats
        # ---------------------------------------------------------------------
        self.criteria = criteria
        self.term = term
        async with self._search_lock:
            return await self._fetch(criteria, term)

    async def refresh(self) -> Outcome:
        """Run the active lookup again."""
        return await self.resolve(self.criteria, self.term)

    async def _fetch(self, criteria: SearchCriteria, term: str,
                     keep_message: bool = False) -> Outcome:
        logger.info(f"Looking up {criteria.value}={term!r}")

        # Transport problems: fixed message for the user, detail for the log
        try:
            body = await self._call(self.client.get_json, build_query(criteria, term))
            outcome = decode_search(body)
        except (TransportError, MalformedResponse, asyncio.TimeoutError) as e:
            logger.error(f"Error fetching data for {criteria.value}={term!r}: "
                         f"{type(e).__name__}: {e}")
            return self._fail_search(FETCH_ERROR)

        # Server-reported problems are shown verbatim
        if isinstance(outcome, Failure):
            logger.info(f"Lookup refused by server: {outcome.message}")
            return self._fail_search(outcome.message)

        if not outcome.payload:
            return self._fail_search(NO_ATTENDEES)

        # New snapshot, new (empty) selection
        self.attendees = tuple(outcome.payload)
        self._selected.clear()
        if not keep_message:
            self.message = ""
        logger.info(f"Fetched {len(self.attendees)} attendee(s)")
        return outcome

    def _fail_search(self, message: str) -> Failure:
        self.message = message
        self.attendees = ()
        self._selected.clear()
        return Failure(message)

    # -------------------------------------------------------------------------
    # SELECTION
    # -------------------------------------------------------------------------

    def toggle(self, unique_id: str) -> bool:
        """
        Flip an attendee in or out of the selection.

        Returns False, changing nothing, while a search or check-in is in
        flight, and for ids that are not in the current list or belong to
        someone already checked in.
        """
        if self.busy or not self.eligible(unique_id):
            return False

        if unique_id in self._selected:
            del self._selected[unique_id]
        else:
            self._selected[unique_id] = None
        return True

    def select_all_eligible(self) -> int:
        if self.busy:
            return len(self._selected)
        for attendee in self.attendees:
            if not attendee.is_checked_in:
                self._selected[attendee.unique_id] = None
        return len(self._selected)

    def clear_selection(self):
        if not self.busy:
            self._selected.clear()

    # -------------------------------------------------------------------------
    # CHECK-IN
    # -------------------------------------------------------------------------

    async def submit(self) -> Outcome:
        """
        Check the selected attendees in as one batch.

        Returns:
            Success(server message) or Failure(message shown to the user)
        """
        if self.busy:
            return Failure(BUSY_MESSAGE)

        # ---------------------------------------------------------------------
        # STEP 1: Local validation, no network call
        # ---------------------------------------------------------------------
        self.message = ""
        if not self._selected:
            self.message = EMPTY_SELECTION
            return Failure(EMPTY_SELECTION)

        # ---------------------------------------------------------------------
        # STEP 2: Post the batch (selection order, no duplicates)
        # ---------------------------------------------------------------------
        unique_ids = list(self._selected)
        async with self._submit_lock:
            logger.info(f"Submitting check-in for {len(unique_ids)} attendee(s)")
            try:
                body = await self._call(self.client.post_json, {"uniqueIds": unique_ids})
                outcome = decode_check_in(body)
            except (TransportError, MalformedResponse, asyncio.TimeoutError) as e:
                logger.error(f"Error submitting check-in for {unique_ids}: "
                             f"{type(e).__name__}: {e}")
                # List and selection stay as they were so the batch can be retried
                self.message = SUBMIT_ERROR
                return Failure(SUBMIT_ERROR)

            if isinstance(outcome, Failure):
                logger.info(f"Check-in refused by server: {outcome.message}")
                self.message = outcome.message
                return outcome

            # -----------------------------------------------------------------
            # STEP 3: Pull the server's statuses for the same lookup
            # -----------------------------------------------------------------
            # Waits for the search slot instead of being refused
            self.message = outcome.payload
            async with self._search_lock:
                await self._fetch(self.criteria, self.term, keep_message=True)
            return outcome

    async def _call(self, func, arg) -> dict:
        # The blocking requests call runs in a worker thread; the deadline
        # bounds the whole call, not just each socket operation
        call = asyncio.to_thread(func, arg)
        if self.timeout is None:
            return await call
        return await asyncio.wait_for(call, self.timeout)
