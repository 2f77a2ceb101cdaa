"""Tests for attendee list rendering."""

from checkin.models import Attendee
from checkin.report import attendee_status, attendees_frame, render_attendees
from conftest import attendee_record


def make(unique_id, **kwargs):
    return Attendee.from_record(attendee_record(unique_id, **kwargs))


class TestAttendeeStatus:
    def test_not_checked_in(self):
        assert attendee_status(make("AB12")) == "Not Checked In"

    def test_checked_in_with_table(self):
        assert attendee_status(make("AB12", check_in="Y", table_no="7")) == "Checked In | Table: 7"

    def test_checked_in_without_table(self):
        assert attendee_status(make("AB12", check_in="Y")) == "Checked In"

    def test_table_ignored_until_checked_in(self):
        assert attendee_status(make("AB12", table_no="7")) == "Not Checked In"


class TestRender:
    def test_frame_rows(self):
        attendees = [make("AB12", name="Alice"), make("AB13", name="Bob", check_in="Y"),
                     make("AB14", name="Cara", meal="")]

        frame = attendees_frame(attendees, ["AB12"])

        assert list(frame.columns) == ["Sel", "UniqueId", "Name", "Status"]
        assert frame["Sel"].tolist() == ["[x]", "[-]", "[ ]"]
        assert frame["Name"].tolist() == ["Alice (Veg)", "Bob (Veg)", "Cara"]

    def test_heading_uses_first_email(self):
        text = render_attendees([make("AB12", email="alice@example.com"),
                                 make("AB13", email="other@example.com")])
        assert text.splitlines()[0] == "Attendees for Email: alice@example.com"
        assert "AB13" in text

    def test_nothing_to_show(self):
        assert render_attendees([]) == ""
