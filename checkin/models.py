"""
models.py - Attendee Records and Decoded Responses
===================================================
Data types shared across the package, plus the functions that turn the
web app's JSON bodies into them.

Every response from the web app carries a "status" field. Anything other
than "success" is a server-reported failure with a "message". Rather than
probing that string at each call site, bodies are decoded here into either
Success(payload) or Failure(message).

Wire Format (attendee record):
------------------------------
    {
        "Timestamp": "...", "Email": "...", "Responder Name": "...",
        "Number of Guests": "2", "Name": "...", "Meal Preference": "...",
        "Allergy & Restrictions": "...", "CheckIn": "Y", "UniqueId": "AB12",
        "Table No": "7"
    }
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar, Union


T = TypeVar("T")

# Status value the web app uses for a successful call
STATUS_SUCCESS = "success"

# Used when a failure response arrives without a message
UNKNOWN_ERROR = "Unknown error."


class MalformedResponse(ValueError):
    """The body parsed as JSON but does not have the expected shape."""


# =============================================================================
# ENUMERATIONS
# =============================================================================

class CheckInStatus(Enum):
    # Values as the sheet writes them; only "Y" is ever read back
    CHECKED_IN = "Y"
    NOT_CHECKED_IN = "N"

    @classmethod
    def from_wire(cls, value: Any) -> "CheckInStatus":
        """Only a literal "Y" means checked in; anything else does not."""
        return cls.CHECKED_IN if value == "Y" else cls.NOT_CHECKED_IN


class SearchCriteria(Enum):
    """The field used to look attendees up. The value is the query parameter."""

    UNIQUE_ID = "uniqueId"
    NAME = "name"
    EMAIL = "email"

    @property
    def label(self) -> str:
        return _CRITERIA_LABELS[self]

    @classmethod
    def parse(cls, text: str) -> "SearchCriteria":
        """
        Accept either the parameter name or a loose spelling of it.

        Examples:
            SearchCriteria.parse("uniqueId")   -> SearchCriteria.UNIQUE_ID
            SearchCriteria.parse("unique-id")  -> SearchCriteria.UNIQUE_ID
            SearchCriteria.parse("EMAIL")      -> SearchCriteria.EMAIL
        """
        key = text.strip().lower().replace("-", "").replace("_", "").replace(" ", "")
        for criteria in cls:
            if criteria.value.lower() == key:
                return criteria
        raise ValueError(
            f"Unknown search criteria {text!r}. "
            f"Expected one of: {', '.join(c.value for c in cls)}"
        )


_CRITERIA_LABELS = {
    SearchCriteria.UNIQUE_ID: "Unique ID",
    SearchCriteria.NAME: "Name",
    SearchCriteria.EMAIL: "Email Address",
}


# =============================================================================
# ATTENDEE RECORD
# =============================================================================

@dataclass(frozen=True)
class Attendee:
    """One row of the guest list as returned by a lookup."""

    # Only field guaranteed unique; the selection and submission key
    unique_id: str

    # Display fields. Name and email may repeat across a party of guests
    name: str = ""
    email: str = ""
    responder_name: str = ""
    number_of_guests: str = ""
    meal_preference: str = ""
    allergy_restrictions: str = ""

    # When the RSVP was submitted, as the sheet shows it
    timestamp: str = ""

    # "Y" on the wire means checked in
    check_in_status: CheckInStatus = CheckInStatus.NOT_CHECKED_IN

    # Assigned by the server at check-in; None until then (or if blank)
    table_no: str | None = None

    @property
    def is_checked_in(self) -> bool:
        return self.check_in_status is CheckInStatus.CHECKED_IN

    @classmethod
    def from_record(cls, record: dict) -> "Attendee":
        """
        Build an Attendee from one wire record.

        Spreadsheets hand back numbers for some columns (guest count, table
        number), so scalar values are turned into strings. A record without a
        UniqueId is rejected.
        """
        # Every record must be an object carrying its UniqueId
        if not isinstance(record, dict):
            raise MalformedResponse(f"Attendee record is not an object: {record!r}")

        unique_id = _text(record.get("UniqueId"))
        if not unique_id:
            raise MalformedResponse(f"Attendee record has no UniqueId: {record!r}")

        # Wire names are case-sensitive and include spaces and "&"
        return cls(
            unique_id=unique_id,
            name=_text(record.get("Name")),
            email=_text(record.get("Email")),
            responder_name=_text(record.get("Responder Name")),
            number_of_guests=_text(record.get("Number of Guests")),
            meal_preference=_text(record.get("Meal Preference")),
            allergy_restrictions=_text(record.get("Allergy & Restrictions")),
            timestamp=_text(record.get("Timestamp")),
            check_in_status=CheckInStatus.from_wire(record.get("CheckIn")),
            table_no=_text(record.get("Table No")) or None,
        )


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


# =============================================================================
# DECODED RESPONSES
# =============================================================================

@dataclass(frozen=True)
class Success(Generic[T]):
    payload: T


@dataclass(frozen=True)
class Failure:
    message: str


Outcome = Union[Success[T], Failure]


def _decode(body: Any, key: str, convert, required: bool = True) -> Outcome:
    """Shared status check for every response shape."""
    if not isinstance(body, dict):
        raise MalformedResponse(f"Response is not a JSON object: {body!r}")

    # Anything but "success" is a server-reported failure
    if body.get("status") != STATUS_SUCCESS:
        return Failure(_text(body.get("message")) or UNKNOWN_ERROR)

    # An optional payload that is missing is converted from None
    if key not in body and required:
        raise MalformedResponse(f"Success response is missing '{key}'")
    return Success(convert(body.get(key)))


def _attendees(data: Any) -> list[Attendee]:
    if not isinstance(data, list):
        raise MalformedResponse(f"'data' is not a list: {data!r}")
    return [Attendee.from_record(record) for record in data]


def _names(names: Any) -> list[str]:
    if not isinstance(names, list):
        raise MalformedResponse(f"'names' is not a list: {names!r}")
    return [_text(n) for n in names if _text(n)]


def decode_search(body: Any) -> Outcome:
    """{"status": "success", "data": [...]} -> Success(list[Attendee])"""
    return _decode(body, "data", _attendees)


def decode_names(body: Any) -> Outcome:
    """{"status": "success", "names": [...]} -> Success(list[str])"""
    return _decode(body, "names", _names)


def decode_check_in(body: Any) -> Outcome:
    """
    {"status": "success", "message": "..."} -> Success(str)

    The guests are checked in whether or not a message comes back, so a
    missing message decodes as "".
    """
    return _decode(body, "message", _text, required=False)
