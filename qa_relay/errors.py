"""Exceptions raised by the downstream API clients."""

from typing import Optional


class RelayError(Exception):
    """Base class for downstream API failures."""


class SlackAPIError(RelayError):
    """Raised when a Slack Web API call fails at HTTP or application level.

    Attributes:
        api_method: Slack method name, e.g. ``chat.postMessage``.
        status_code: HTTP status when the transport call failed.
        error: Slack ``error`` code when the payload was not ``ok``.
    """

    def __init__(
        self,
        api_method: str,
        status_code: Optional[int] = None,
        error: Optional[str] = None,
    ):
        self.api_method = api_method
        self.status_code = status_code
        self.error = error
        if status_code is not None:
            message = f"Slack API {api_method} failed ({status_code})"
        else:
            message = f"Slack API {api_method} error: {error or 'unknown'}"
        super().__init__(message)


class GitHubAPIError(RelayError):
    """Raised when a GitHub REST call returns a non-2xx status.

    Attributes:
        path: Request path relative to the API base URL.
        status_code: HTTP status code from the response.
        response_body: Raw response body.
    """

    def __init__(self, path: str, status_code: int, response_body: str = ""):
        self.path = path
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(f"GitHub API {path} failed ({status_code}): {response_body}")
