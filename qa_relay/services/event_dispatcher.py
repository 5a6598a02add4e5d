"""
Slack event dispatcher.

Routes acknowledged Slack deliveries to the reaction and thread-message
handlers. It runs as a detached background task after the HTTP response has
been sent: nothing is returned to the caller, nothing is retried, and every
failure ends here as a log record.
"""

from typing import Any, Dict, Optional, Tuple

from pydantic import ValidationError

from qa_relay.models.qa_context import QAContext
from qa_relay.models.slack_event import ReactionAddedEvent, SlackEnvelope, ThreadMessageEvent
from qa_relay.services.actor_resolver import ActorResolver
from qa_relay.services.github_client import GitHubClient
from qa_relay.services.notifier import ChatNotifier
from qa_relay.services.qa_context import QAContextResolver
from qa_relay.services.slack_client import SlackClient
from qa_relay.utils.logging import get_logger, log_error_with_context, log_slack_event

logger = get_logger(__name__)

APPROVE_REACTIONS = frozenset({"white_check_mark", "heavy_check_mark", "check_mark"})
REJECT_REACTION = "x"
BUG_REACTION = "bug"

LABEL_NEEDED = "qa:needed"
LABEL_APPROVED = "qa:approved"
LABEL_CHANGES_REQUESTED = "qa:changes-requested"

FEEDBACK_PREFIX = "qa-feedback:"
BUG_PREFIX = "qa-bug:"

FEEDBACK_COMMENT_HEADER = "## QA feedback from Slack"


def split_command(text: str) -> Optional[Tuple[str, str]]:
    """
    Match a QA command prefix, case-insensitively.

    Returns:
        (prefix, trimmed remainder), or None when no prefix matches
    """
    stripped = text.strip()
    lowered = stripped.lower()
    for prefix in (FEEDBACK_PREFIX, BUG_PREFIX):
        if lowered.startswith(prefix):
            return prefix, stripped[len(prefix):].strip()
    return None


class EventDispatcher:
    """Classifies Slack events and applies the QA workflow."""

    def __init__(
        self,
        slack: SlackClient,
        github: GitHubClient,
        resolver: QAContextResolver,
        actors: ActorResolver,
        notifier: ChatNotifier,
    ):
        self._slack = slack
        self._github = github
        self._resolver = resolver
        self._actors = actors
        self._notifier = notifier

    async def dispatch(self, payload: Dict[str, Any]) -> None:
        """
        Handle an ``event_callback`` body. Never raises.

        Args:
            payload: Parsed request body
        """
        try:
            envelope = SlackEnvelope.model_validate(payload)
            if envelope.type != "event_callback" or not envelope.event:
                return

            event = envelope.event
            event_type = event.get("type")

            if event_type == "reaction_added":
                await self.handle_reaction_added(ReactionAddedEvent.model_validate(event))
            elif (
                event_type == "message"
                and event.get("channel_type") == "channel"
                and not event.get("subtype")
            ):
                await self.handle_thread_message(ThreadMessageEvent.model_validate(event))
            else:
                logger.debug(f"Ignoring Slack event type: {event_type}")
        except ValidationError as e:
            log_error_with_context(logger, "Malformed Slack event payload", e)
        except Exception as e:
            log_error_with_context(logger, "Slack event processing failed", e)

    async def _load_context(self, channel: str, ts: str) -> Optional[QAContext]:
        parent = await self._slack.fetch_parent_message(channel, ts)
        if not parent or not parent.get("text"):
            return None
        return self._resolver.resolve(str(parent["text"]))

    async def handle_reaction_added(self, event: ReactionAddedEvent) -> None:
        """Apply approve / reject / bug reactions to the thread's pull request."""
        channel, ts, reaction = event.item.channel, event.item.ts, event.reaction
        if not channel or not ts or not reaction:
            return
        if reaction not in APPROVE_REACTIONS and reaction not in (REJECT_REACTION, BUG_REACTION):
            return

        log_slack_event(logger, "reaction_added", channel, event.user)

        qa = await self._load_context(channel, ts)
        if qa is None:
            return

        actor = await self._actors.resolve(event.user)
        pr = qa.pull_request
        log = logger.with_context(channel=channel, pr_number=qa.pr_number)

        if reaction in APPROVE_REACTIONS:
            log.info(f"QA approved by {actor}")
            await self._github.remove_label(pr, LABEL_NEEDED)
            await self._github.remove_label(pr, LABEL_CHANGES_REQUESTED)
            await self._github.add_labels(pr, [LABEL_APPROVED])
            await self._notifier.approved(channel, ts, actor, qa.pr_number)
        elif reaction == REJECT_REACTION:
            log.info(f"QA changes requested by {actor}")
            await self._github.remove_label(pr, LABEL_APPROVED)
            await self._github.remove_label(pr, LABEL_NEEDED)
            await self._github.add_labels(pr, [LABEL_CHANGES_REQUESTED])
            await self._notifier.changes_requested(channel, ts, actor)
        else:
            await self._notifier.bug_prompt(channel, ts, actor)

    async def handle_thread_message(self, event: ThreadMessageEvent) -> None:
        """Turn ``qa-feedback:`` and ``qa-bug:`` thread replies into GitHub changes."""
        if event.subtype:
            return

        text = event.text.strip()
        if not event.thread_ts or not event.channel or not text or not event.user:
            return

        command = split_command(text)
        if command is None:
            return
        prefix, argument = command
        if not argument:
            return

        log_slack_event(logger, "message", event.channel, event.user)

        qa = await self._load_context(event.channel, event.thread_ts)
        if qa is None:
            return

        actor = await self._actors.resolve(event.user)
        pr = qa.pull_request
        log = logger.with_context(channel=event.channel, pr_number=qa.pr_number)

        if prefix == FEEDBACK_PREFIX:
            log.info(f"QA feedback from {actor}")
            await self._github.remove_label(pr, LABEL_APPROVED)
            await self._github.remove_label(pr, LABEL_NEEDED)
            await self._github.add_labels(pr, [LABEL_CHANGES_REQUESTED])
            await self._github.create_comment(
                pr,
                "\n".join([FEEDBACK_COMMENT_HEADER, "", f"Reported by: @{actor}", "", argument]),
            )
            await self._notifier.feedback_recorded(event.channel, event.thread_ts)
        else:
            log.info(f"QA bug from {actor}")
            issue = await self._github.create_bug_issue(qa, actor, argument)
            await self._notifier.issue_created(event.channel, event.thread_ts, issue.html_url)
