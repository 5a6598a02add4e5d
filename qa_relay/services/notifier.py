"""
Thread confirmations posted back to Slack.
"""

from qa_relay.services.slack_client import SlackClient


class ChatNotifier:
    """Posts QA workflow confirmations into the originating thread."""

    def __init__(self, slack: SlackClient):
        self._slack = slack

    async def approved(self, channel: str, thread_ts: str, actor: str, pr_number: int) -> None:
        await self._slack.post_thread_message(
            channel,
            thread_ts,
            f":white_check_mark: QA approved by @{actor}. "
            f"Label `qa:approved` applied to PR #{pr_number}.",
        )

    async def changes_requested(self, channel: str, thread_ts: str, actor: str) -> None:
        await self._slack.post_thread_message(
            channel,
            thread_ts,
            "\n".join([
                f":x: QA changes requested by @{actor}.",
                "Reply in this thread with: `qa-feedback: <details>`",
                "The feedback will be copied to the PR automatically.",
            ]),
        )

    async def bug_prompt(self, channel: str, thread_ts: str, actor: str) -> None:
        await self._slack.post_thread_message(
            channel,
            thread_ts,
            "\n".join([
                f":bug: Bug reported by @{actor}.",
                "Reply in this thread with: `qa-bug: <bug description>`",
                "A GitHub issue with the build metadata will be created automatically.",
            ]),
        )

    async def feedback_recorded(self, channel: str, thread_ts: str) -> None:
        await self._slack.post_thread_message(
            channel,
            thread_ts,
            ":memo: Feedback copied to the PR and label `qa:changes-requested` applied.",
        )

    async def issue_created(self, channel: str, thread_ts: str, issue_url: str) -> None:
        await self._slack.post_thread_message(
            channel,
            thread_ts,
            f":bug: Issue created: {issue_url}",
        )
