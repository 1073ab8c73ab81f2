"""
Configuration Management

시스템 설정 관리
"""

import os
import logging
from dataclasses import dataclass, field, asdict
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Dict, Any

import yaml


logger = logging.getLogger(__name__)

DEFAULT_INSTRUCTIONS = (
    "Review the following code changes for naming, structure, and readability. "
    "Give concise feedback."
)
DEFAULT_BANNER = "### 🤖 PR Review Bot"
AUTH_SCHEMES = {"bearer", "api-key"}


@dataclass(frozen=True)
class GitHubConfig:
    """GitHub API 설정"""
    token: str = ""
    api_base_url: str = "https://api.github.com"
    timeout_seconds: int = 30
    user_agent: str = "PRReviewerBot/1.0"


@dataclass(frozen=True)
class CompletionConfig:
    """LLM completion 엔드포인트 설정"""
    endpoint: str = ""
    api_key: str = ""
    model: Optional[str] = None
    max_tokens: int = 512
    auth_scheme: str = "bearer"
    timeout_seconds: int = 120


@dataclass(frozen=True)
class ReviewConfig:
    """리뷰 생성 설정"""
    instructions: str = DEFAULT_INSTRUCTIONS
    comment_banner: str = DEFAULT_BANNER
    content_fetch_workers: int = 4


@dataclass(frozen=True)
class LoggingConfig:
    """로깅 설정"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass(frozen=True)
class ServerConfig:
    """웹훅 서버 설정"""
    host: str = "0.0.0.0"
    port: int = 8000


@dataclass(frozen=True)
class AppConfig:
    """전체 애플리케이션 설정"""
    github: GitHubConfig = field(default_factory=GitHubConfig)
    completion: CompletionConfig = field(default_factory=CompletionConfig)
    review: ReviewConfig = field(default_factory=ReviewConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    debug: bool = False

    @classmethod
    def from_env(cls) -> "AppConfig":
        """환경 변수에서 설정 로드"""
        return cls(
            github=GitHubConfig(
                token=os.getenv("GITHUB_TOKEN", ""),
                api_base_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
                timeout_seconds=int(os.getenv("GITHUB_TIMEOUT", "30")),
            ),
            completion=CompletionConfig(
                endpoint=os.getenv("COMPLETION_ENDPOINT", ""),
                api_key=os.getenv("COMPLETION_API_KEY", ""),
                model=os.getenv("COMPLETION_MODEL") or None,
                max_tokens=int(os.getenv("COMPLETION_MAX_TOKENS", "512")),
                auth_scheme=os.getenv("COMPLETION_AUTH_SCHEME", "bearer").lower(),
                timeout_seconds=int(os.getenv("COMPLETION_TIMEOUT", "120")),
            ),
            review=ReviewConfig(
                instructions=os.getenv("REVIEW_INSTRUCTIONS", DEFAULT_INSTRUCTIONS),
                comment_banner=os.getenv("COMMENT_BANNER", DEFAULT_BANNER),
                content_fetch_workers=int(os.getenv("CONTENT_FETCH_WORKERS", "4")),
            ),
            logging=LoggingConfig(
                level=os.getenv("LOG_LEVEL", "INFO"),
                format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
                file_path=os.getenv("LOG_FILE"),
                max_file_size=int(os.getenv("LOG_MAX_SIZE", str(10 * 1024 * 1024))),
                backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5")),
            ),
            server=ServerConfig(
                host=os.getenv("HOST", "0.0.0.0"),
                port=int(os.getenv("PORT", "8000")),
            ),
            debug=os.getenv("DEBUG", "false").lower() == "true",
        )

    @classmethod
    def from_yaml(cls, config_path: str) -> "AppConfig":
        """YAML 파일에서 설정 로드"""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        return cls(
            github=GitHubConfig(**config_data.get('github', {})),
            completion=CompletionConfig(**config_data.get('completion', {})),
            review=ReviewConfig(**config_data.get('review', {})),
            logging=LoggingConfig(**config_data.get('logging', {})),
            server=ServerConfig(**config_data.get('server', {})),
            debug=config_data.get('debug', False),
        )

    def validate(self) -> None:
        """설정 유효성 검사"""
        errors = []

        # 인증 정보 누락은 첫 호출에서 인증 실패로 드러나므로 경고만 남김
        if not self.github.token:
            logger.warning("GitHub token is not configured")
        if not self.completion.endpoint:
            logger.warning("Completion endpoint is not configured")
        if not self.completion.api_key:
            logger.warning("Completion API key is not configured")

        if self.completion.max_tokens <= 0:
            errors.append("max_tokens must be positive")

        if self.completion.auth_scheme not in AUTH_SCHEMES:
            errors.append(f"Invalid auth scheme: {self.completion.auth_scheme}")

        if self.github.timeout_seconds <= 0 or self.completion.timeout_seconds <= 0:
            errors.append("Timeouts must be positive")

        if self.review.content_fetch_workers < 1:
            errors.append("content_fetch_workers must be at least 1")

        # 로그 레벨 검증
        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.logging.level.upper() not in valid_log_levels:
            errors.append(f"Invalid log level: {self.logging.level}")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        """설정을 딕셔너리로 변환"""
        data = asdict(self)
        # 보안상 토큰은 제외
        data['github'].pop('token')
        data['completion'].pop('api_key')
        return data


def setup_logging(config: LoggingConfig) -> None:
    """로깅 설정"""
    logging.basicConfig(
        level=getattr(logging, config.level.upper()),
        format=config.format,
    )

    # 파일 로깅이 설정된 경우 로테이션 설정
    if config.file_path:
        handler = RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
        )
        handler.setFormatter(logging.Formatter(config.format))
        logging.getLogger().addHandler(handler)


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """YAML 경로가 주어지면 파일에서, 아니면 환경 변수에서 설정 로드"""
    config = AppConfig.from_yaml(config_path) if config_path else AppConfig.from_env()
    config.validate()
    return config
