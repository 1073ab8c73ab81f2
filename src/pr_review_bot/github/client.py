"""
GitHub API Client

Handles GitHub API authentication and communication.
Provides methods for PR file listing, file content retrieval
and issue comment posting.
"""

import base64
import binascii
import logging
from typing import Dict, List, Optional
from urllib.parse import quote

import requests

from ..config import GitHubConfig
from ..errors import UpstreamFailed
from ..models.review import FileContent


logger = logging.getLogger(__name__)


class GitHubAPIError(UpstreamFailed):
    """GitHub API related errors"""


class GitHubClient:
    """
    GitHub API client with authentication and error handling.

    Provides methods for:
    - PR changed file listing
    - File content retrieval at a specific revision
    - Posting comments on a pull request
    """

    def __init__(self, config: Optional[GitHubConfig] = None):
        """
        Initialize GitHub client.

        Args:
            config: GitHub settings (token, base URL, timeout, user agent)
        """
        self.config = config or GitHubConfig()
        self.base_url = self.config.api_base_url.rstrip('/')
        self.timeout = self.config.timeout_seconds
        self.session = self._create_session()

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self.session.headers)

    def _create_session(self) -> requests.Session:
        """Create requests session with authentication headers."""
        session = requests.Session()
        session.headers.update({
            'Authorization': f'Bearer {self.config.token}',
            'Accept': 'application/vnd.github+json',
            'User-Agent': self.config.user_agent,
        })
        return session

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Make authenticated request to GitHub API.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (without base URL)
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            GitHubAPIError: For transport errors and non-success responses
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        kwargs.setdefault('timeout', self.timeout)

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Request failed: {method} {endpoint}: {e}")
            raise GitHubAPIError(f"GitHub request failed: {e}") from e

        if not response.ok:
            raise GitHubAPIError(
                f"GitHub API error: {response.status_code} - {response.text}",
                status_code=response.status_code,
                response_body=response.text,
            )

        return response

    def list_pull_request_files(self, owner: str, repo: str, pr_number: int) -> List[Dict]:
        """
        Get files changed in a pull request, in listing order.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
            List of file records with 'filename' and optional 'patch'
        """
        logger.info(f"Fetching PR files for {owner}/{repo}#{pr_number}")

        files = []
        page = 1
        per_page = 100

        while True:
            response = self._make_request(
                'GET',
                f'/repos/{owner}/{repo}/pulls/{pr_number}/files',
                params={'page': page, 'per_page': per_page}
            )

            try:
                page_files = response.json()
            except ValueError as e:
                raise GitHubAPIError(f"GitHub API returned invalid JSON for PR files: {e}") from e

            if not isinstance(page_files, list):
                raise GitHubAPIError(
                    "GitHub API returned an unexpected PR files payload",
                    status_code=response.status_code,
                    response_body=response.text,
                )

            files.extend(page_files)

            if len(page_files) < per_page:
                break

            page += 1

        logger.info(f"Found {len(files)} changed files")
        return files

    def get_file_content(self, owner: str, repo: str, path: str, ref: str) -> FileContent:
        """
        Get the decoded text of a file at a revision.

        Failures never raise; they come back as a FileContent without content.

        Args:
            owner: Repository owner
            repo: Repository name
            path: File path within the repository
            ref: Commit SHA to read the file at

        Returns:
            FileContent for the path
        """
        endpoint = f'/repos/{owner}/{repo}/contents/{quote(path, safe="/")}'

        try:
            response = self._make_request('GET', endpoint, params={'ref': ref})
            data = response.json()
        except GitHubAPIError as e:
            logger.warning(f"Skipping full content for {path}: {e}")
            return FileContent(path=path, reason=str(e))
        except ValueError:
            logger.warning(f"Skipping full content for {path}: invalid JSON")
            return FileContent(path=path, reason="invalid JSON")

        if not isinstance(data, dict) or data.get('encoding') != 'base64':
            logger.debug(f"No base64 content for {path}")
            return FileContent(path=path, reason="content is not base64 encoded")

        encoded = data.get('content')
        if not encoded or not isinstance(encoded, str):
            return FileContent(path=path, reason="content is empty")

        try:
            text = base64.b64decode(encoded).decode('utf-8')
        except (binascii.Error, UnicodeDecodeError) as e:
            logger.warning(f"Skipping full content for {path}: not decodable text ({e})")
            return FileContent(path=path, reason="content is not decodable text")

        return FileContent(path=path, content=text)

    def create_issue_comment(self, owner: str, repo: str, pr_number: int, body: str) -> Dict:
        """
        Post a comment on a pull request.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number
            body: Markdown comment body

        Returns:
            Created comment data
        """
        logger.info(f"Posting comment on {owner}/{repo}#{pr_number}")

        response = self._make_request(
            'POST',
            f'/repos/{owner}/{repo}/issues/{pr_number}/comments',
            json={'body': body}
        )
        try:
            return response.json()
        except ValueError:
            return {}

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
