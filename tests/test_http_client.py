"""Tests for the HTTP client."""

import json

import pytest
import requests

from checkin import http_client
from checkin.http_client import SUBMIT_CONTENT_TYPE, HttpClient, TransportError


class StubResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self.text = text if text is not None else json.dumps(body)

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return json.loads(self.text)


class StubSession:
    def __init__(self, response=None, error=None):
        self.headers = {}
        self.response = response
        self.error = error
        self.requests = []
        self.closed = False

    def get(self, url, **kwargs):
        return self._send("GET", url, kwargs)

    def post(self, url, **kwargs):
        return self._send("POST", url, kwargs)

    def close(self):
        self.closed = True

    def _send(self, method, url, kwargs):
        self.requests.append((method, url, kwargs))
        if self.error:
            raise self.error
        return self.response


class TestHttpClient:
    def test_get_sends_single_parameter(self, settings):
        session = StubSession(StubResponse(body={"status": "success", "data": []}))
        client = HttpClient(settings, session=session)

        assert client.get_json({"email": "a@example.com"}) == {"status": "success", "data": []}

        method, url, kwargs = session.requests[0]
        assert (method, url) == ("GET", "https://script.example.com/exec")
        assert kwargs["params"] == {"email": "a@example.com"}
        assert kwargs["timeout"] == 5
        assert session.headers["Accept"] == "application/json"

    def test_post_sends_json_as_text(self, settings):
        session = StubSession(StubResponse(body={"status": "success", "message": "ok"}))
        client = HttpClient(settings, session=session)

        client.post_json({"uniqueIds": ["AB12"]})

        method, url, kwargs = session.requests[0]
        assert method == "POST"
        assert url == settings.submit_url
        assert json.loads(kwargs["data"]) == {"uniqueIds": ["AB12"]}
        assert kwargs["headers"]["Content-Type"] == SUBMIT_CONTENT_TYPE
        assert kwargs["allow_redirects"] is True

    def test_network_error(self, settings):
        client = HttpClient(settings, session=StubSession(error=requests.Timeout("slow")))
        with pytest.raises(TransportError, match="Timeout"):
            client.get_json({"uniqueId": "AB12"})

    def test_http_error_status(self, settings):
        client = HttpClient(settings, session=StubSession(StubResponse(500, text="oops")))
        with pytest.raises(TransportError, match="HTTP 500"):
            client.post_json({"uniqueIds": ["AB12"]})

    def test_invalid_json(self, settings):
        client = HttpClient(settings, session=StubSession(StubResponse(text="<html>")))
        with pytest.raises(TransportError, match="Invalid JSON"):
            client.get_json({"uniqueId": "AB12"})

    def test_json_that_is_not_an_object(self, settings):
        client = HttpClient(settings, session=StubSession(StubResponse(body=[1, 2])))
        with pytest.raises(TransportError, match="JSON object"):
            client.get_json({"uniqueId": "AB12"})

    def test_default_session_and_close(self, settings, monkeypatch):
        monkeypatch.setattr(http_client.requests, "Session", StubSession)
        client = HttpClient(settings)

        client.close()

        assert isinstance(client.s, StubSession)
        assert client.s.closed
