"""
GitHub REST client for QA label, comment and issue changes.

Every operation is addressed by an IssueRef (owner, repo, number); pull
requests share the issues API for labels and comments. Operations are
idempotent where GitHub allows it: removing an absent label is a no-op.
"""

import time
from typing import Any, Dict, FrozenSet, List, Optional
from urllib.parse import quote

import httpx

from qa_relay.errors import GitHubAPIError
from qa_relay.models.qa_context import QAContext
from qa_relay.models.tracker import CreatedIssue, IssueRef, MutationKind
from qa_relay.utils.logging import get_logger, log_api_call

logger = get_logger(__name__)

BUG_ISSUE_LABELS = ["bug", "qa"]

# (label, QAContext attribute) rendered into bug issue bodies, in order
ISSUE_BODY_FIELDS = (
    ("Commit", "commit"),
    ("Channel", "channel"),
    ("iOS Build ID", "ios_build_id"),
    ("Android Build ID", "android_build_id"),
    ("iOS Update Group ID", "ios_update_group_id"),
    ("Android Update Group ID", "android_update_group_id"),
    ("Runtime iOS", "runtime_ios"),
    ("Runtime Android", "runtime_android"),
)


def build_bug_issue_title(qa: QAContext) -> str:
    return f"QA bug - PR #{qa.pr_number} ({qa.app or 'unknown'})"


def build_bug_issue_body(qa: QAContext, actor: str, description: str) -> str:
    """
    Render the body of a QA bug issue.

    Present QA fields are listed one per line, absent ones are skipped;
    the description follows a blank line, verbatim.
    """
    lines = [f"Reported by: @{actor}", f"PR: #{qa.pr_number}"]
    if qa.pr_url:
        lines.append(f"PR URL: {qa.pr_url}")
    for label, attr in ISSUE_BODY_FIELDS:
        value = getattr(qa, attr)
        if value:
            lines.append(f"{label}: {value}")
    lines.append("")
    lines.append(description)
    return "\n".join(lines)


class GitHubClient:
    """Async GitHub REST client used as the QA tracker."""

    def __init__(
        self,
        token: str,
        http_client: httpx.AsyncClient,
        base_url: str = "https://api.github.com",
        user_agent: str = "qa-relay",
    ):
        self._token = token
        self._http = http_client
        self._base_url = base_url.rstrip("/")
        self._user_agent = user_agent

    async def request(
        self,
        method: str,
        path: str,
        body: Optional[Dict[str, Any]] = None,
        expected_statuses: FrozenSet[int] = frozenset(),
    ) -> Dict[str, Any]:
        """
        Send a request to the GitHub API.

        Args:
            method: HTTP method
            path: Path relative to the API base URL
            body: Optional JSON body
            expected_statuses: Non-2xx statuses the caller handles itself;
                these are logged at debug level instead of error

        Returns:
            Decoded JSON object, or an empty dict for 204 responses

        Raises:
            GitHubAPIError: On any non-2xx status
        """
        started = time.monotonic()
        response = await self._http.request(
            method,
            f"{self._base_url}{path}",
            json=body,
            headers={
                "Authorization": f"Bearer {self._token}",
                "Accept": "application/vnd.github+json",
                "User-Agent": self._user_agent,
            },
        )
        duration_ms = (time.monotonic() - started) * 1000

        if response.status_code in expected_statuses:
            logger.debug(
                f"API call returned expected status: {method} {path}",
                extra={"service": "github", "status_code": response.status_code},
            )
            raise GitHubAPIError(path, response.status_code, response.text)

        if not response.is_success:
            log_api_call(
                logger, "github", path, method,
                status_code=response.status_code,
                duration_ms=duration_ms,
                error=response.text[:500],
            )
            raise GitHubAPIError(path, response.status_code, response.text)

        log_api_call(
            logger, "github", path, method,
            status_code=response.status_code,
            duration_ms=duration_ms,
        )

        if response.status_code == 204 or not response.content:
            return {}
        data = response.json()
        return data if isinstance(data, dict) else {"items": data}

    async def add_labels(self, ref: IssueRef, labels: List[str]) -> None:
        logger.info(
            f"Adding labels {labels} to {ref.owner}/{ref.repo}#{ref.number}",
            extra={"mutation": MutationKind.ADD_LABELS.value, "pr_number": ref.number},
        )
        await self.request("POST", f"{ref.path}/labels", {"labels": labels})

    async def remove_label(self, ref: IssueRef, name: str) -> None:
        """Remove a label; an already-absent label (404) is not an error."""
        logger.info(
            f"Removing label {name} from {ref.owner}/{ref.repo}#{ref.number}",
            extra={"mutation": MutationKind.REMOVE_LABEL.value, "pr_number": ref.number},
        )
        try:
            await self.request(
                "DELETE",
                f"{ref.path}/labels/{quote(name, safe='')}",
                expected_statuses=frozenset({404}),
            )
        except GitHubAPIError as e:
            if e.status_code == 404:
                logger.debug(f"Label {name} not present on {ref.owner}/{ref.repo}#{ref.number}")
                return
            raise

    async def create_comment(self, ref: IssueRef, body: str) -> None:
        logger.info(
            f"Commenting on {ref.owner}/{ref.repo}#{ref.number}",
            extra={"mutation": MutationKind.CREATE_COMMENT.value, "pr_number": ref.number},
        )
        await self.request("POST", f"{ref.path}/comments", {"body": body})

    async def create_bug_issue(self, qa: QAContext, actor: str, description: str) -> CreatedIssue:
        """
        Open a QA bug issue and cross-link it from the pull request.

        Args:
            qa: Context of the QA thread
            actor: Display name of the reporter
            description: Bug description, copied verbatim

        Returns:
            The created issue
        """
        logger.info(
            f"Creating QA bug issue for {qa.owner}/{qa.repo}#{qa.pr_number}",
            extra={"mutation": MutationKind.CREATE_ISSUE.value, "pr_number": qa.pr_number},
        )
        data = await self.request(
            "POST",
            f"/repos/{qa.owner}/{qa.repo}/issues",
            {
                "title": build_bug_issue_title(qa),
                "body": build_bug_issue_body(qa, actor, description),
                "labels": list(BUG_ISSUE_LABELS),
            },
        )

        try:
            number = int(data.get("number") or 0)
        except (TypeError, ValueError):
            number = 0
        issue = CreatedIssue(number=number, html_url=str(data.get("html_url") or ""))

        if issue.number > 0:
            await self.create_comment(
                qa.pull_request,
                "\n".join([
                    "## QA bug reported from Slack",
                    "",
                    f"Issue: {issue.html_url}",
                    "",
                    description,
                ]),
            )

        return issue
