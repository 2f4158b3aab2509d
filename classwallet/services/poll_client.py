"""
Poll client: a thin wrapper over the remote poll server.

The poll server owns polls, responses and results; this client
only moves JSON back and forth. Reads fail soft (an unreachable
or unhappy server yields an empty result and a logged error) so
the client stays usable offline. Writes raise PollServerError,
because the caller has to know that nothing was stored.
"""

import httpx

from classwallet.config import get_settings
from classwallet.logging_setup import get_logger
from classwallet.services.errors import PollServerError

logger = get_logger(__name__)


class PollClient:

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.ADMIN_SERVER_URL).rstrip("/")
        self.token = token
        self.client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.POLL_TIMEOUT_SECONDS,
            transport=transport,
        )

    def close(self) -> None:
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    # --- Reads ---

    def get_my_polls(self, creator_name: str) -> list[dict]:
        return self._fetch_list("/api/polls/my-polls", {"creatorName": creator_name})

    def get_active_polls(self, audience: str) -> list[dict]:
        return self._fetch_list("/api/polls/active", {"audience": audience})

    def get_poll(self, poll_id: int) -> dict:
        return self._fetch_map(f"/api/polls/{poll_id}")

    def get_results(self, poll_id: int) -> dict:
        return self._fetch_map(f"/api/polls/{poll_id}/results")

    def has_responded(self, poll_id: int, user_id: int, user_type: str) -> bool:
        """False unless the server positively says so."""
        try:
            response = self.client.get(
                f"/api/polls/{poll_id}/has-responded",
                params={"userId": user_id, "userType": user_type},
                headers=self._headers(),
            )
        except httpx.HTTPError:
            logger.exception("Failed to check response status for poll %s", poll_id)
            return False
        if response.status_code != 200:
            return False
        return response.text.strip().lower() == "true"

    def _fetch_list(self, path: str, params: dict | None = None) -> list[dict]:
        data = self._fetch(path, params)
        return data if isinstance(data, list) else []

    def _fetch_map(self, path: str) -> dict:
        data = self._fetch(path)
        return data if isinstance(data, dict) else {}

    def _fetch(self, path: str, params: dict | None = None):
        try:
            response = self.client.get(path, params=params, headers=self._headers())
            if response.status_code == 200:
                return response.json()
            logger.error("GET %s failed with status %s", path, response.status_code)
        except (httpx.HTTPError, ValueError):
            logger.exception("Failed to fetch from %s", path)
        return None

    # --- Writes ---

    def create_poll(self, poll: dict) -> dict:
        return self._post("/api/polls", poll)

    def publish_poll(self, poll_id: int) -> dict:
        return self._post(f"/api/polls/{poll_id}/publish")

    def close_poll(self, poll_id: int) -> dict:
        return self._post(f"/api/polls/{poll_id}/close")

    def submit_response(self, poll_id: int, answers: dict) -> dict:
        return self._post(f"/api/polls/{poll_id}/respond", answers)

    def delete_poll(self, poll_id: int) -> None:
        """Best effort. Failures are logged, not raised."""
        try:
            response = self.client.delete(
                f"/api/polls/{poll_id}", headers=self._headers()
            )
        except httpx.HTTPError:
            logger.exception("Failed to delete poll %s", poll_id)
            return
        if response.status_code >= 400:
            logger.error(
                "DELETE poll %s failed with status %s", poll_id, response.status_code
            )

    def _post(self, path: str, body: dict | None = None) -> dict:
        try:
            response = self.client.post(path, json=body, headers=self._headers())
        except httpx.HTTPError as e:
            logger.exception("Failed to POST to %s", path)
            raise PollServerError(f"Request failed: {e}") from e

        if response.status_code not in (200, 201):
            logger.error(
                "POST to %s failed with status %s: %s",
                path, response.status_code, response.text,
            )
            raise PollServerError(f"Server returned {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise PollServerError(f"Unreadable response from {path}") from e
