"""Business logic services package."""

from qa_relay.services.actor_resolver import ActorResolver
from qa_relay.services.event_dispatcher import EventDispatcher
from qa_relay.services.github_client import GitHubClient
from qa_relay.services.notifier import ChatNotifier
from qa_relay.services.qa_context import QAContextResolver
from qa_relay.services.slack_client import SlackClient

__all__ = [
    'ActorResolver',
    'ChatNotifier',
    'EventDispatcher',
    'GitHubClient',
    'QAContextResolver',
    'SlackClient',
]
