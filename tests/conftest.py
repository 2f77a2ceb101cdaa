"""Shared test fixtures."""

import threading

import pytest

from checkin.config import Settings


def attendee_record(unique_id, name="Guest", email="alice@example.com", check_in="",
                    table_no="", meal="Veg"):
    """One attendee record in the web app's wire format."""
    return {
        "Timestamp": "2024-05-01 10:00:00",
        "Email": email,
        "Responder Name": "Alice Example",
        "Number of Guests": 2,
        "Name": name,
        "Meal Preference": meal,
        "Allergy & Restrictions": "None",
        "CheckIn": check_in,
        "UniqueId": unique_id,
        "Table No": table_no,
    }


def search_ok(*records):
    return {"status": "success", "data": list(records)}


class FakeClient:
    """
    Stands in for HttpClient. Each call pops the next scripted response;
    an Exception instance is raised instead of returned.
    """

    def __init__(self, get=(), post=(), names=None):
        self.get_responses = list(get)
        self.post_responses = list(post)
        self.get_calls = []
        self.post_calls = []
        # Separate answer for name=ALL, which may run alongside other lookups
        self.names = names
        self.names_gate = threading.Event()
        self.names_gate.set()

    def get_json(self, params):
        if self.names is not None and params == {"name": "ALL"}:
            self.names_gate.wait(5.0)
            self.get_calls.append(dict(params))
            if isinstance(self.names, Exception):
                raise self.names
            return self.names
        self.get_calls.append(dict(params))
        return self._next(self.get_responses)

    def post_json(self, payload):
        self.post_calls.append(payload)
        return self._next(self.post_responses)

    @property
    def calls(self):
        return len(self.get_calls) + len(self.post_calls)

    @staticmethod
    def _next(queue):
        result = queue.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class GatedClient(FakeClient):
    """FakeClient whose calls wait until `gate` is set."""

    def __init__(self, get=(), post=(), wait=5.0):
        super().__init__(get, post)
        self.gate = threading.Event()
        self.wait = wait

    def get_json(self, params):
        self.gate.wait(self.wait)
        return super().get_json(params)

    def post_json(self, payload):
        self.gate.wait(self.wait)
        return super().post_json(payload)


@pytest.fixture(name="settings")
def settings_fixture() -> Settings:
    return Settings(lookup_url="https://script.example.com/exec", timeout_sec=5)


@pytest.fixture(name="two_guests")
def two_guests_fixture():
    """Two attendees sharing one email, neither checked in."""
    return search_ok(
        attendee_record("AB12", name="Alice Example"),
        attendee_record("AB13", name="Bob Example", meal="Fish"),
    )
