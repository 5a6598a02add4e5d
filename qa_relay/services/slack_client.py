"""
Slack Web API client.

Thin async wrapper over the handful of Web API methods the relay needs.
Every call is a JSON POST authenticated with the bot token; failures are
raised as SlackAPIError and never retried.
"""

import time
from typing import Any, Dict, Optional

import httpx

from qa_relay.errors import SlackAPIError
from qa_relay.utils.logging import get_logger, log_api_call

logger = get_logger(__name__)


class SlackClient:
    """Async client for the Slack Web API."""

    def __init__(
        self,
        token: str,
        http_client: httpx.AsyncClient,
        base_url: str = "https://slack.com/api",
    ):
        self._token = token
        self._http = http_client
        self._base_url = base_url.rstrip("/")

    async def call(self, api_method: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """
        Invoke a Web API method.

        Args:
            api_method: Method name, e.g. ``conversations.replies``
            body: JSON arguments

        Returns:
            Decoded response payload

        Raises:
            SlackAPIError: On non-2xx status or a payload without ``ok``
        """
        started = time.monotonic()
        response = await self._http.post(
            f"{self._base_url}/{api_method}",
            json=body,
            headers={
                "Authorization": f"Bearer {self._token}",
                "Content-Type": "application/json; charset=utf-8",
            },
        )
        duration_ms = (time.monotonic() - started) * 1000

        if not response.is_success:
            log_api_call(
                logger, "slack", api_method, "POST",
                status_code=response.status_code,
                duration_ms=duration_ms,
                error=response.reason_phrase,
            )
            raise SlackAPIError(api_method, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict) or not data.get("ok"):
            error = str(data.get("error", "unknown")) if isinstance(data, dict) else "unknown"
            log_api_call(
                logger, "slack", api_method, "POST",
                status_code=response.status_code,
                duration_ms=duration_ms,
                error=error,
            )
            raise SlackAPIError(api_method, error=error)

        log_api_call(
            logger, "slack", api_method, "POST",
            status_code=response.status_code,
            duration_ms=duration_ms,
        )
        return data

    async def fetch_parent_message(self, channel: str, ts: str) -> Optional[Dict[str, Any]]:
        """Return the message at ``ts`` (the thread parent), or None."""
        data = await self.call(
            "conversations.replies",
            {"channel": channel, "ts": ts, "limit": 1, "inclusive": True},
        )
        messages = data.get("messages") or []
        if not messages or not isinstance(messages[0], dict):
            return None
        return messages[0]

    async def post_thread_message(self, channel: str, thread_ts: str, text: str) -> None:
        """Reply in a thread."""
        await self.call(
            "chat.postMessage",
            {"channel": channel, "thread_ts": thread_ts, "text": text},
        )

    async def get_user_info(self, user_id: str) -> Dict[str, Any]:
        """Return the ``user`` object of ``users.info``."""
        data = await self.call("users.info", {"user": user_id})
        user = data.get("user")
        return user if isinstance(user, dict) else {}
