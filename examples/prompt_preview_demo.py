#!/usr/bin/env python3
"""
Prompt Preview Demo

Fetches a pull request's diffs and full file contents and prints the
review prompt that would be sent to the completion endpoint.
No completion request is made and nothing is posted.

Usage:
    python examples/prompt_preview_demo.py <owner> <repo> <pr_number> <head_sha>

Example:
    GITHUB_TOKEN=... python examples/prompt_preview_demo.py octocat hello-world 42 abc123
"""

import sys
import logging

from pr_review_bot.config import AppConfig, setup_logging
from pr_review_bot.errors import UpstreamFailed
from pr_review_bot.github import GitHubClient, RepositoryContentFetcher
from pr_review_bot.llm import ReviewPromptComposer


def main():
    """Main demo function."""
    config = AppConfig.from_env()
    setup_logging(config.logging)
    logger = logging.getLogger(__name__)

    if len(sys.argv) != 5:
        print("Usage: python prompt_preview_demo.py <owner> <repo> <pr_number> <head_sha>")
        sys.exit(1)

    owner, repo, pr_arg, head_sha = sys.argv[1:]
    try:
        pr_number = int(pr_arg)
    except ValueError:
        print("Error: PR number must be an integer")
        sys.exit(1)

    if not config.github.token:
        print("Warning: GITHUB_TOKEN is not set; only public repositories will work.")

    with GitHubClient(config.github) as client:
        fetcher = RepositoryContentFetcher(client, max_workers=config.review.content_fetch_workers)
        try:
            changes = fetcher.fetch(owner, repo, pr_number, head_sha)
        except UpstreamFailed as e:
            logger.error(f"Could not list PR files: {e}")
            sys.exit(1)

    print(f"\n📁 {len(changes.files)} changed files")
    for changed in changes.files:
        flags = []
        if changed.patch is not None:
            flags.append("patch")
        if changed.full_content:
            flags.append("content")
        print(f"  - {changed.path} [{', '.join(flags) or 'nothing to review'}]")

    if changes.is_empty:
        print("\nNo changes to review.")
        return

    composer = ReviewPromptComposer(instructions=config.review.instructions)
    prompt = composer.compose(changes.diff_text, changes.full_files_text)
    print(f"\n📝 Prompt ({len(prompt)} chars):\n")
    print(prompt)


if __name__ == "__main__":
    main()
