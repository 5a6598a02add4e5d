"""
Slack user display-name lookup.
"""

import httpx

from qa_relay.errors import SlackAPIError
from qa_relay.services.slack_client import SlackClient
from qa_relay.utils.logging import get_logger

logger = get_logger(__name__)

UNKNOWN_ACTOR = "unknown"


class ActorResolver:
    """Maps Slack user ids to display names, best-effort."""

    def __init__(self, slack: SlackClient):
        self._slack = slack

    async def resolve(self, user_id: str) -> str:
        """
        Return the display name of a Slack user.

        Falls back to the profile name, then to the raw user id when the
        lookup fails for any reason.
        """
        if not user_id:
            return UNKNOWN_ACTOR

        try:
            user = await self._slack.get_user_info(user_id)
        except (SlackAPIError, httpx.HTTPError) as e:
            logger.warning(f"Could not resolve Slack user {user_id}: {e}")
            return user_id

        profile = user.get("profile")
        display_name = profile.get("display_name") if isinstance(profile, dict) else None
        name = display_name or user.get("name")
        return str(name) if name else user_id
