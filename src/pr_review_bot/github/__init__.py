"""
GitHub Integration Layer

This module provides GitHub API integration for PR file listing,
file content retrieval, and comment posting.
"""

from .client import GitHubClient, GitHubAPIError
from .fetcher import RepositoryContentFetcher

__all__ = ['GitHubClient', 'GitHubAPIError', 'RepositoryContentFetcher']
