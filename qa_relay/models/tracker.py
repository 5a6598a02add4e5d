"""Issue tracker data models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class MutationKind(str, Enum):
    """Kind of change applied to a GitHub issue or pull request."""

    ADD_LABELS = "add_labels"
    REMOVE_LABEL = "remove_label"
    CREATE_COMMENT = "create_comment"
    CREATE_ISSUE = "create_issue"


class IssueRef(BaseModel):
    """Address of an issue or pull request."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    number: int

    @property
    def path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}/issues/{self.number}"


class CreatedIssue(BaseModel):
    """Issue returned by GitHub after creation."""

    number: int = 0
    html_url: str = ""
