"""QA context parsed from a Slack thread's parent message."""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from .tracker import IssueRef


class QAContext(BaseModel):
    """Pull request identity and build metadata of a QA thread."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    pr_number: int
    pr_url: Optional[str] = None
    app: Optional[str] = None
    commit: Optional[str] = None
    channel: Optional[str] = None
    ios_build_id: Optional[str] = None
    android_build_id: Optional[str] = None
    ios_update_group_id: Optional[str] = None
    android_update_group_id: Optional[str] = None
    runtime_ios: Optional[str] = None
    runtime_android: Optional[str] = None

    @property
    def pull_request(self) -> IssueRef:
        """Issue reference of the pull request under QA."""
        return IssueRef(owner=self.owner, repo=self.repo, number=self.pr_number)
