"""
QA context resolution.

Parses the parent message of a Slack QA thread, as posted by the build
pipeline, into a QAContext. A typical message looks like::

    QA needed for PR #42 https://github.com/acme/app/pull/42
    App: mobile
    Commit: abc123
    Channel: preview
    iOS Build ID: 1f0c...

Resolution is pure: the same text always yields the same context, and most
channel messages resolve to None because they are not QA threads at all.
"""

import re
from typing import Dict, Optional, Tuple

from qa_relay.models.qa_context import QAContext

PR_NUMBER_PATTERN = re.compile(r"PR #(\d+)", re.IGNORECASE)
PR_URL_PATTERN = re.compile(
    r"https://github\.com/([^/\s]+)/([^/\s]+)/pull/(\d+)", re.IGNORECASE
)

# (label as written in the message, QAContext attribute)
QA_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("App", "app"),
    ("Commit", "commit"),
    ("Channel", "channel"),
    ("iOS Build ID", "ios_build_id"),
    ("Android Build ID", "android_build_id"),
    ("iOS Update Group ID", "ios_update_group_id"),
    ("Android Update Group ID", "android_update_group_id"),
    ("Runtime iOS", "runtime_ios"),
    ("Runtime Android", "runtime_android"),
)

_FIELD_PATTERNS: Dict[str, "re.Pattern[str]"] = {
    label: re.compile(rf"{re.escape(label)}:\s*(.+)$", re.IGNORECASE | re.MULTILINE)
    for label, _ in QA_FIELDS
}


def extract_field(text: str, label: str) -> Optional[str]:
    """Return the trimmed value of the first ``<label>: value`` line, if any."""
    pattern = _FIELD_PATTERNS.get(label)
    if pattern is None:
        pattern = re.compile(rf"{re.escape(label)}:\s*(.+)$", re.IGNORECASE | re.MULTILINE)
    match = pattern.search(text)
    if not match:
        return None
    return match.group(1).strip() or None


def parse_repository(value: Optional[str]) -> Optional[Tuple[str, str]]:
    """Split an ``owner/repo`` string; None when absent or malformed."""
    if not value:
        return None
    parts = value.strip().split("/")
    if len(parts) != 2 or not all(parts):
        return None
    return parts[0], parts[1]


class QAContextResolver:
    """Resolves QA contexts, falling back to a default repository."""

    def __init__(self, default_repository: Optional[str] = None):
        self._default_repository = parse_repository(default_repository)

    def resolve(self, text: str) -> Optional[QAContext]:
        """
        Parse a QA context out of free-form message text.

        Args:
            text: Parent message text

        Returns:
            QAContext, or None when the text does not reference a pull
            request in a resolvable repository
        """
        if not text:
            return None

        pr_match = PR_NUMBER_PATTERN.search(text)
        if not pr_match:
            return None

        try:
            pr_number = int(pr_match.group(1))
        except ValueError:
            return None
        if pr_number <= 0:
            return None

        url_match = PR_URL_PATTERN.search(text)
        if url_match:
            owner, repo = url_match.group(1), url_match.group(2)
            pr_url: Optional[str] = url_match.group(0)
        elif self._default_repository:
            owner, repo = self._default_repository
            pr_url = None
        else:
            return None

        fields = {attr: extract_field(text, label) for label, attr in QA_FIELDS}

        return QAContext(
            owner=owner,
            repo=repo,
            pr_number=pr_number,
            pr_url=pr_url,
            **fields,
        )
