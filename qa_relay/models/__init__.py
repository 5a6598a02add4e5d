"""Data models for the QA relay."""

from .qa_context import QAContext
from .slack_event import (
    ReactionAddedEvent,
    ReactionItem,
    SlackEnvelope,
    ThreadMessageEvent,
)
from .tracker import CreatedIssue, IssueRef, MutationKind

__all__ = [
    # Slack models
    "SlackEnvelope",
    "ReactionItem",
    "ReactionAddedEvent",
    "ThreadMessageEvent",
    # QA models
    "QAContext",
    # Tracker models
    "MutationKind",
    "IssueRef",
    "CreatedIssue",
]
