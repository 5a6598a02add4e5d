"""Slack Events API data models."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class SlackEnvelope(BaseModel):
    """Outer body of a Slack Events API delivery."""

    model_config = ConfigDict(extra="ignore")

    type: str = ""  # 'url_verification', 'event_callback'
    challenge: Optional[str] = None
    event: Optional[Dict[str, Any]] = None


class ReactionItem(BaseModel):
    """Message a reaction was added to."""

    model_config = ConfigDict(extra="ignore")

    channel: str = ""
    ts: str = ""


class ReactionAddedEvent(BaseModel):
    """`reaction_added` event."""

    model_config = ConfigDict(extra="ignore")

    type: str = "reaction_added"
    reaction: str = ""
    user: str = ""
    item: ReactionItem = Field(default_factory=ReactionItem)


class ThreadMessageEvent(BaseModel):
    """`message` event posted in a public channel, usually a thread reply."""

    model_config = ConfigDict(extra="ignore")

    type: str = "message"
    channel: str = ""
    channel_type: str = ""
    user: str = ""
    text: str = ""
    thread_ts: str = ""
    subtype: Optional[str] = None
