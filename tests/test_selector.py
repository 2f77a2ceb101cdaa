"""Tests for deep-link selection."""

from checkin.models import SearchCriteria
from checkin.selector import DeepLink, build_query, parse_query, select_deep_link


class TestParseQuery:
    def test_full_url(self):
        params = parse_query("https://example.org/checkin?uniqueId=AB12&name=Bob")
        assert params == {"uniqueId": "AB12", "name": "Bob"}

    def test_bare_query_string(self):
        assert parse_query("?email=alice%40example.com") == {"email": "alice@example.com"}
        assert parse_query("name=John+Doe") == {"name": "John Doe"}

    def test_repeated_parameter_keeps_first(self):
        assert parse_query("?name=Ann&name=Bob") == {"name": "Ann"}

    def test_no_query(self):
        assert parse_query("https://example.org/checkin") == {}
        assert parse_query("") == {}


class TestSelectDeepLink:
    def test_unique_id_beats_name(self):
        link = select_deep_link({"uniqueId": "XYZ", "name": "Bob"})
        assert link == DeepLink(SearchCriteria.UNIQUE_ID, "XYZ")

    def test_name_beats_email(self):
        link = select_deep_link({"email": "bob@example.com", "name": "Bob"})
        assert link == DeepLink(SearchCriteria.NAME, "Bob")

    def test_email_alone(self):
        link = select_deep_link({"email": "bob@example.com"})
        assert link == DeepLink(SearchCriteria.EMAIL, "bob@example.com")

    def test_blank_parameter_counts_as_absent(self):
        link = select_deep_link({"uniqueId": "", "email": "bob@example.com"})
        assert link.criteria is SearchCriteria.EMAIL

    def test_nothing_to_look_up(self):
        assert select_deep_link({}) is None
        assert select_deep_link({"utm_source": "mail"}) is None


def test_build_query_uses_one_parameter():
    assert build_query(SearchCriteria.NAME, "John Doe") == {"name": "John Doe"}
