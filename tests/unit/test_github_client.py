"""
Unit tests for the GitHub tracker client.
"""

import json
import logging
from typing import Any, Dict, List, Tuple

import httpx
import pytest

from qa_relay.errors import GitHubAPIError
from qa_relay.models import IssueRef, QAContext
from qa_relay.services.github_client import (
    GitHubClient,
    build_bug_issue_body,
    build_bug_issue_title,
)

PR = IssueRef(owner="acme", repo="app", number=42)


def make_client(
    responses: List[Tuple[int, Any]],
) -> Tuple[GitHubClient, List[httpx.Request]]:
    """Build a client whose transport replays ``responses`` in order."""
    requests: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        status, payload = responses[len(requests) - 1]
        if payload is None:
            return httpx.Response(status_code=status)
        return httpx.Response(status_code=status, json=payload)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = GitHubClient(
        "gh-token",
        http_client,
        base_url="https://api.example.test",
        user_agent="qa-relay-tests",
    )
    return client, requests


def body_of(request: httpx.Request) -> Dict[str, Any]:
    return json.loads(request.content.decode("utf-8"))


@pytest.mark.asyncio
async def test_add_labels_posts_label_list():
    client, requests = make_client([(200, [{"name": "qa:approved"}])])

    await client.add_labels(PR, ["qa:approved"])

    request = requests[0]
    assert request.method == "POST"
    assert request.url.path == "/repos/acme/app/issues/42/labels"
    assert body_of(request) == {"labels": ["qa:approved"]}
    assert request.headers["Authorization"] == "Bearer gh-token"
    assert request.headers["Accept"] == "application/vnd.github+json"
    assert request.headers["User-Agent"] == "qa-relay-tests"


@pytest.mark.asyncio
async def test_add_labels_raises_on_error():
    client, _ = make_client([(422, {"message": "Validation Failed"})])

    with pytest.raises(GitHubAPIError) as exc_info:
        await client.add_labels(PR, ["qa:approved"])

    assert exc_info.value.status_code == 422
    assert exc_info.value.path == "/repos/acme/app/issues/42/labels"
    assert "Validation Failed" in str(exc_info.value)


@pytest.mark.asyncio
async def test_remove_label_deletes_by_name():
    client, requests = make_client([(200, [])])

    await client.remove_label(PR, "qa:changes-requested")

    request = requests[0]
    assert request.method == "DELETE"
    assert request.url.path == "/repos/acme/app/issues/42/labels/qa:changes-requested"


@pytest.mark.asyncio
async def test_remove_label_treats_404_as_success(caplog):
    client, requests = make_client([(404, {"message": "Label does not exist"})])

    with caplog.at_level(logging.DEBUG, logger="qa_relay"):
        await client.remove_label(PR, "qa:needed")

    assert len(requests) == 1
    assert [r for r in caplog.records if r.levelno >= logging.ERROR] == []


@pytest.mark.asyncio
async def test_remove_label_raises_on_500(caplog):
    client, _ = make_client([(500, {"message": "Server Error"})])

    with pytest.raises(GitHubAPIError) as exc_info:
        await client.remove_label(PR, "qa:needed")

    assert exc_info.value.status_code == 500
    assert any(r.levelno == logging.ERROR for r in caplog.records)


@pytest.mark.asyncio
async def test_204_yields_empty_result():
    client, _ = make_client([(204, None)])

    assert await client.request("DELETE", "/repos/acme/app/issues/42/labels") == {}


@pytest.mark.asyncio
async def test_create_comment():
    client, requests = make_client([(201, {"id": 1})])

    await client.create_comment(PR, "hello")

    assert requests[0].url.path == "/repos/acme/app/issues/42/comments"
    assert body_of(requests[0]) == {"body": "hello"}


@pytest.mark.asyncio
async def test_create_bug_issue_creates_issue_then_cross_links():
    qa = QAContext(owner="acme", repo="app", pr_number=42, app="mobile", commit="abc123")
    client, requests = make_client([
        (201, {"number": 77, "html_url": "https://github.com/acme/app/issues/77"}),
        (201, {"id": 5}),
    ])

    issue = await client.create_bug_issue(qa, "alice", "crashes on launch")

    assert issue.number == 77
    assert issue.html_url == "https://github.com/acme/app/issues/77"
    assert len(requests) == 2

    issue_request, comment_request = requests
    assert issue_request.url.path == "/repos/acme/app/issues"
    issue_body = body_of(issue_request)
    assert issue_body["title"] == "QA bug - PR #42 (mobile)"
    assert issue_body["labels"] == ["bug", "qa"]
    assert issue_body["body"].endswith("\n\ncrashes on launch")

    assert comment_request.url.path == "/repos/acme/app/issues/42/comments"
    comment = body_of(comment_request)["body"]
    assert "https://github.com/acme/app/issues/77" in comment
    assert "crashes on launch" in comment


@pytest.mark.asyncio
async def test_create_bug_issue_skips_comment_without_issue_number():
    qa = QAContext(owner="acme", repo="app", pr_number=42)
    client, requests = make_client([(201, {"html_url": ""})])

    issue = await client.create_bug_issue(qa, "alice", "crash")

    assert issue.number == 0
    assert len(requests) == 1


def test_bug_issue_body_lists_present_fields_only():
    qa = QAContext(
        owner="acme",
        repo="app",
        pr_number=42,
        pr_url="https://github.com/acme/app/pull/42",
        commit="abc123",
        android_build_id="and-1",
        runtime_ios="1.0.0",
    )

    body = build_bug_issue_body(qa, "alice", "Tapping login\ncrashes")

    assert body.split("\n") == [
        "Reported by: @alice",
        "PR: #42",
        "PR URL: https://github.com/acme/app/pull/42",
        "Commit: abc123",
        "Android Build ID: and-1",
        "Runtime iOS: 1.0.0",
        "",
        "Tapping login",
        "crashes",
    ]


def test_bug_issue_title_defaults_app():
    qa = QAContext(owner="acme", repo="app", pr_number=5)
    assert build_bug_issue_title(qa) == "QA bug - PR #5 (unknown)"
