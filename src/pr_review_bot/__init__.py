"""
PR Review Bot

Webhook-triggered pull request reviewer backed by an LLM completion endpoint.
"""

__version__ = "1.0.0"

from .api import PRReviewAPI

__all__ = ["PRReviewAPI"]
