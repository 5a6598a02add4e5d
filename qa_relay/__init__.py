"""Slack to GitHub relay for thread-based pull request QA."""

__version__ = "0.1.0"
