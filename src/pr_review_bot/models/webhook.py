"""
Webhook Data Models

GitHub pull_request 웹훅 이벤트 데이터 모델들
"""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator


class PullRequestAction(str, Enum):
    """pull_request 이벤트의 action 값"""
    OPENED = "opened"
    SYNCHRONIZE = "synchronize"
    EDITED = "edited"
    OTHER = "other"

    @classmethod
    def classify(cls, value) -> "PullRequestAction":
        """알 수 없는 값은 OTHER로 분류"""
        for action in (cls.OPENED, cls.SYNCHRONIZE, cls.EDITED):
            if value == action.value:
                return action
        return cls.OTHER

    @property
    def is_reviewable(self) -> bool:
        return self is not PullRequestAction.OTHER


@dataclass(frozen=True)
class WebhookEvent:
    """검증된 pull_request 웹훅 이벤트"""
    action: PullRequestAction
    pr_number: int
    repository_name: str
    repository_owner: str
    head_sha: str

    def __post_init__(self):
        """데이터 검증"""
        if self.pr_number <= 0:
            raise ValueError("PR number must be positive")
        for name in ('repository_name', 'repository_owner', 'head_sha'):
            if not getattr(self, name).strip():
                raise ValueError(f"{name} must be non-empty")

    @property
    def repository(self) -> str:
        return f"{self.repository_owner}/{self.repository_name}"


def _non_blank(v: str) -> str:
    if not v.strip():
        raise ValueError('must be a non-empty string')
    return v


# Pydantic models for payload shape validation
class PullRequestHead(BaseModel):
    """pull_request.head"""
    model_config = ConfigDict(extra='ignore')

    sha: StrictStr

    @field_validator('sha')
    @classmethod
    def validate_sha(cls, v):
        return _non_blank(v)


class PullRequestPayload(BaseModel):
    """pull_request 객체"""
    model_config = ConfigDict(extra='ignore')

    number: StrictInt = Field(gt=0)
    head: PullRequestHead


class RepositoryOwner(BaseModel):
    model_config = ConfigDict(extra='ignore')

    login: StrictStr

    @field_validator('login')
    @classmethod
    def validate_login(cls, v):
        return _non_blank(v)


class RepositoryPayload(BaseModel):
    """repository 객체"""
    model_config = ConfigDict(extra='ignore')

    name: StrictStr
    owner: RepositoryOwner

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return _non_blank(v)


class WebhookPayload(BaseModel):
    """웹훅 요청 본문 전체"""
    model_config = ConfigDict(extra='ignore')

    action: StrictStr
    pull_request: PullRequestPayload
    repository: RepositoryPayload

    def to_event(self) -> WebhookEvent:
        return WebhookEvent(
            action=PullRequestAction.classify(self.action),
            pr_number=self.pull_request.number,
            repository_name=self.repository.name,
            repository_owner=self.repository.owner.login,
            head_sha=self.pull_request.head.sha,
        )
