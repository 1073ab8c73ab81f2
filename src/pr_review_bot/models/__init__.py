"""
Data Models

PR 리뷰 봇의 핵심 데이터 모델들
"""

from .webhook import PullRequestAction, WebhookEvent, WebhookPayload
from .review import (
    NO_FEEDBACK_FALLBACK,
    ChangedFile,
    FetchedChanges,
    FileContent,
    Outcome,
    PipelineState,
    ReviewResult,
)

__all__ = [
    "PullRequestAction",
    "WebhookEvent",
    "WebhookPayload",
    "NO_FEEDBACK_FALLBACK",
    "ChangedFile",
    "FetchedChanges",
    "FileContent",
    "Outcome",
    "PipelineState",
    "ReviewResult",
]
