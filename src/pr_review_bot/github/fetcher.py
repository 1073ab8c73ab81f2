"""
Repository Content Fetcher

Collects the changed files of a pull request together with their
patches and their full text at the head revision.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional

from ..models.review import ChangedFile, FetchedChanges, FileContent
from .client import GitHubClient


logger = logging.getLogger(__name__)


class RepositoryContentFetcher:
    """
    Fetches diff and full-content data for a pull request.

    The changed-file listing is fatal on failure. Per-file content
    lookups are tolerated: a failed lookup only drops that file's
    full-content fragment.
    """

    def __init__(self, client: GitHubClient, max_workers: int = 4):
        self.client = client
        self.max_workers = max(1, max_workers)

    def fetch(self, owner: str, repo: str, pr_number: int, head_sha: str) -> FetchedChanges:
        """
        Fetch changed files for a pull request.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number
            head_sha: Head commit SHA the full contents are read at

        Returns:
            FetchedChanges in listing order

        Raises:
            UpstreamFailed: If the changed-file listing fails
        """
        records = self.client.list_pull_request_files(owner, repo, pr_number)
        paths = [self._filename(record) for record in records]

        contents = self._fetch_contents(owner, repo, paths, head_sha)

        files = tuple(
            ChangedFile(
                path=path,
                patch=self._patch(record),
                full_content=content.content,
            )
            for path, record, content in zip(paths, records, contents)
        )

        available = sum(1 for content in contents if content.available)
        logger.info(f"Fetched {len(files)} changed files ({available} with full content)")
        return FetchedChanges(files=files)

    def _fetch_contents(self, owner: str, repo: str, paths: List[str], ref: str) -> List[FileContent]:
        """Fetch file contents concurrently; results keep the order of paths."""
        if not paths:
            return []

        def fetch_one(path: str) -> FileContent:
            if not path:
                return FileContent(path=path, reason="missing filename")
            return self.client.get_file_content(owner, repo, path, ref)

        if self.max_workers == 1 or len(paths) == 1:
            return [fetch_one(path) for path in paths]

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(paths))) as executor:
            # map() yields in submission order regardless of completion order
            return list(executor.map(fetch_one, paths))

    @staticmethod
    def _filename(record: Dict) -> str:
        filename = record.get('filename') if isinstance(record, dict) else None
        return filename if isinstance(filename, str) else ""

    @staticmethod
    def _patch(record: Dict) -> Optional[str]:
        patch = record.get('patch') if isinstance(record, dict) else None
        return patch if isinstance(patch, str) else None
