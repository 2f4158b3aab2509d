"""
Tests for the poll server client.

The server is replaced by an httpx.MockTransport, so every test
checks both the request that went out and how the reply is read.
"""

import json

import httpx
import pytest

from classwallet.services.errors import PollServerError
from classwallet.services.poll_client import PollClient

BASE_URL = "http://polls.test"


def make_client(handler, token=None):
    return PollClient(
        base_url=BASE_URL, token=token, transport=httpx.MockTransport(handler)
    )


def unreachable(request):
    raise httpx.ConnectError("connection refused", request=request)


class TestReads:

    def test_get_my_polls_sends_creator_name(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=[{"id": 1, "title": "Field trip"}])

        polls = make_client(handler).get_my_polls("Ada Lovelace")

        assert polls == [{"id": 1, "title": "Field trip"}]
        assert seen[0].url.path == "/api/polls/my-polls"
        assert seen[0].url.params["creatorName"] == "Ada Lovelace"

    def test_get_active_polls_sends_audience(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=[])

        assert make_client(handler).get_active_polls("STUDENTS") == []
        assert seen[0].url.params["audience"] == "STUDENTS"

    def test_get_poll_and_results(self):
        def handler(request):
            if request.url.path == "/api/polls/7/results":
                return httpx.Response(200, json={"total": 3})
            return httpx.Response(200, json={"id": 7})

        client = make_client(handler)

        assert client.get_poll(7) == {"id": 7}
        assert client.get_results(7) == {"total": 3}

    def test_bearer_token_attached(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={})

        make_client(handler, token="abc").get_poll(1)

        assert seen[0].headers["Authorization"] == "Bearer abc"

    def test_no_token_no_auth_header(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={})

        make_client(handler).get_poll(1)

        assert "Authorization" not in seen[0].headers

    def test_unreachable_server_reads_empty(self):
        client = make_client(unreachable)

        assert client.get_my_polls("Ada") == []
        assert client.get_active_polls("ALL") == []
        assert client.get_poll(1) == {}
        assert client.get_results(1) == {}
        assert client.has_responded(1, 2, "STUDENT") is False

    def test_error_status_reads_empty(self):
        client = make_client(lambda request: httpx.Response(500, text="boom"))

        assert client.get_active_polls("ALL") == []
        assert client.get_poll(1) == {}

    def test_malformed_body_reads_empty(self):
        client = make_client(lambda request: httpx.Response(200, text="not json"))
        assert client.get_my_polls("Ada") == []

    def test_wrong_shape_reads_empty(self):
        client = make_client(lambda request: httpx.Response(200, json={"id": 1}))
        assert client.get_active_polls("ALL") == []


class TestHasResponded:

    def test_true_body(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, text="true")

        assert make_client(handler).has_responded(4, 12, "STUDENT") is True
        assert seen[0].url.path == "/api/polls/4/has-responded"
        assert seen[0].url.params["userId"] == "12"
        assert seen[0].url.params["userType"] == "STUDENT"

    def test_false_body(self):
        client = make_client(lambda request: httpx.Response(200, text="false"))
        assert client.has_responded(4, 12, "STUDENT") is False

    def test_error_status_is_false(self):
        client = make_client(lambda request: httpx.Response(404))
        assert client.has_responded(4, 12, "STUDENT") is False


class TestWrites:

    def test_create_poll_posts_json(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(201, json={"id": 9, **json.loads(request.content)})

        created = make_client(handler).create_poll({"title": "Lunch"})

        assert created == {"id": 9, "title": "Lunch"}
        assert seen[0].method == "POST"
        assert seen[0].url.path == "/api/polls"

    @pytest.mark.parametrize("action, path", [
        ("publish_poll", "/api/polls/3/publish"),
        ("close_poll", "/api/polls/3/close"),
    ])
    def test_state_changes(self, action, path):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"id": 3})

        assert getattr(make_client(handler), action)(3) == {"id": 3}
        assert seen[0].method == "POST"
        assert seen[0].url.path == path

    def test_submit_response(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"accepted": True})

        result = make_client(handler).submit_response(5, {"answer": "B"})

        assert result == {"accepted": True}
        assert seen[0].url.path == "/api/polls/5/respond"
        assert json.loads(seen[0].content) == {"answer": "B"}

    def test_rejected_write_raises(self):
        client = make_client(lambda request: httpx.Response(400, text="bad poll"))

        with pytest.raises(PollServerError, match="400"):
            client.create_poll({"title": ""})

    def test_unreachable_write_raises(self):
        with pytest.raises(PollServerError):
            make_client(unreachable).publish_poll(1)


class TestDelete:

    def test_delete_sends_request(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(204)

        make_client(handler).delete_poll(8)

        assert seen[0].method == "DELETE"
        assert seen[0].url.path == "/api/polls/8"

    def test_delete_failure_is_logged_not_raised(self, caplog):
        make_client(unreachable).delete_poll(8)
        assert "Failed to delete poll 8" in caplog.text


def test_base_url_from_settings(monkeypatch):
    from classwallet.config import get_settings

    monkeypatch.setattr(get_settings(), "ADMIN_SERVER_URL", "http://admin.test:9590/")

    client = PollClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))

    assert client.base_url == "http://admin.test:9590"
