"""
Review Data Models

PR 리뷰 파이프라인의 요청 단위 데이터 모델들
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .webhook import WebhookEvent


NO_FEEDBACK_FALLBACK = "No feedback generated."


class Outcome(str, Enum):
    """한 번의 호출에 대한 최종 결과"""
    IGNORED = "ignored"
    NO_CHANGES = "no_changes"
    REVIEWED = "reviewed"
    VALIDATION_FAILED = "validation_failed"
    UPSTREAM_FAILED = "upstream_failed"
    FAILED = "failed"

    @property
    def status_code(self) -> int:
        if self is Outcome.VALIDATION_FAILED:
            return 400
        if self in (Outcome.UPSTREAM_FAILED, Outcome.FAILED):
            return 500
        return 200


class PipelineState(str, Enum):
    """오케스트레이터 상태"""
    START = "start"
    VALIDATED = "validated"
    FETCHED = "fetched"
    COMPOSED = "composed"
    REVIEWED = "reviewed"
    PUBLISHED = "published"
    DONE = "done"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(frozen=True)
class FileContent:
    """파일 전체 내용 조회 결과 (실패 허용)"""
    path: str
    content: Optional[str] = None
    reason: Optional[str] = None

    @property
    def available(self) -> bool:
        return bool(self.content)


@dataclass(frozen=True)
class ChangedFile:
    """PR에서 변경된 파일"""
    path: str
    patch: Optional[str] = None
    full_content: Optional[str] = None

    @property
    def diff_fragment(self) -> str:
        if self.patch is None:
            return ""
        return f"File: {self.path}\n{self.patch}\n\n"

    @property
    def full_content_fragment(self) -> str:
        if not self.full_content:
            return ""
        return f"File: {self.path}\n{self.full_content}\n\n"


@dataclass(frozen=True)
class FetchedChanges:
    """변경 파일 목록과 두 텍스트 블록"""
    files: Tuple[ChangedFile, ...]

    @property
    def diff_text(self) -> str:
        return "".join(f.diff_fragment for f in self.files)

    @property
    def full_files_text(self) -> str:
        return "".join(f.full_content_fragment for f in self.files)

    @property
    def is_empty(self) -> bool:
        return not self.diff_text.strip() and not self.full_files_text.strip()


@dataclass
class ReviewResult:
    """파이프라인 결과"""
    outcome: Outcome
    message: str
    state: PipelineState
    event: Optional[WebhookEvent] = None
    files_reviewed: int = 0
    comment_url: Optional[str] = None
    processing_time: float = 0.0
    metadata: dict = field(default_factory=dict)

    @property
    def status_code(self) -> int:
        return self.outcome.status_code
