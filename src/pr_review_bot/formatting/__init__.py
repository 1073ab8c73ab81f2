"""
Formatting Layer

Pull request comment formatting and publishing.
"""

from .comment import CommentPublisher

__all__ = ['CommentPublisher']
