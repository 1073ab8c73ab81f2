"""
Comment Publisher

Formats reviewer feedback as a pull request comment and posts it.
"""

import logging
from typing import Optional

from ..config import DEFAULT_BANNER
from ..github.client import GitHubClient
from ..models.review import NO_FEEDBACK_FALLBACK


logger = logging.getLogger(__name__)


class CommentPublisher:
    """Posts review feedback as a single issue comment on a pull request."""

    def __init__(self, client: GitHubClient, banner: Optional[str] = DEFAULT_BANNER):
        self.client = client
        self.banner = banner

    def format_body(self, feedback: str) -> str:
        """Build the comment body; never empty."""
        text = feedback if feedback and feedback.strip() else NO_FEEDBACK_FALLBACK
        if self.banner:
            return f"{self.banner}\n\n{text}"
        return text

    def publish(self, owner: str, repo: str, pr_number: int, feedback: str) -> str:
        """
        Post feedback on a pull request.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number
            feedback: Review feedback text

        Returns:
            URL of the created comment, or an empty string

        Raises:
            UpstreamFailed: If GitHub rejects the comment
        """
        comment = self.client.create_issue_comment(owner, repo, pr_number, self.format_body(feedback))
        url = comment.get('html_url', '') if isinstance(comment, dict) else ''
        logger.info(f"Posted review comment on {owner}/{repo}#{pr_number} {url}".rstrip())
        return url
