"""
Configuration Management

시스템 설정 관리
"""

import os
import yaml
from dataclasses import dataclass, field, fields, replace
from typing import Optional, Dict, Any
from pathlib import Path
import logging
from logging.handlers import RotatingFileHandler


DEFAULT_REPOSITORY = "graalvm/graalvm-community-jdk21u"
DEFAULT_UPSTREAM_REPOSITORY = "oracle/graal"
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class GitHubConfig:
    """GitHub API 설정"""
    token: Optional[str] = None
    api_base_url: str = "https://api.github.com"
    timeout_seconds: int = 30
    max_retries: int = 3


@dataclass
class ReviewConfig:
    """백포트 검토 설정"""
    repository: str = DEFAULT_REPOSITORY
    upstream_repository: str = DEFAULT_UPSTREAM_REPOSITORY
    tracking_repository: Optional[str] = None  # None이면 repository 사용
    max_workers: int = 1
    fail_on_mismatch: bool = False

    @property
    def issue_repository(self) -> str:
        """추적 이슈가 있는 저장소"""
        return self.tracking_repository or self.repository


@dataclass
class LoggingConfig:
    """로깅 설정"""
    level: str = "INFO"
    format: str = DEFAULT_LOG_FORMAT
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class AppConfig:
    """전체 애플리케이션 설정"""
    github: GitHubConfig = field(default_factory=GitHubConfig)
    review: ReviewConfig = field(default_factory=ReviewConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """환경 변수에서 설정 로드"""
        return cls(
            github=GitHubConfig(
                token=os.getenv("GITHUB_TOKEN"),
                api_base_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
                timeout_seconds=int(os.getenv("GITHUB_TIMEOUT", "30")),
                max_retries=int(os.getenv("GITHUB_MAX_RETRIES", "3")),
            ),
            review=ReviewConfig(
                repository=os.getenv("BACKPORT_REPOSITORY", DEFAULT_REPOSITORY),
                upstream_repository=os.getenv("UPSTREAM_REPOSITORY", DEFAULT_UPSTREAM_REPOSITORY),
                tracking_repository=os.getenv("TRACKING_REPOSITORY"),
                max_workers=int(os.getenv("REVIEW_MAX_WORKERS", "1")),
                fail_on_mismatch=_env_bool("FAIL_ON_MISMATCH"),
            ),
            logging=LoggingConfig(
                level=os.getenv("LOG_LEVEL", "INFO"),
                format=os.getenv("LOG_FORMAT", DEFAULT_LOG_FORMAT),
                file_path=os.getenv("LOG_FILE"),
                max_file_size=int(os.getenv("LOG_MAX_SIZE", str(10 * 1024 * 1024))),
                backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5")),
            ),
        )

    @classmethod
    def from_yaml(cls, config_path: str) -> "AppConfig":
        """YAML 파일에서 설정 로드"""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {config_path}: {e}") from e

        if not isinstance(config_data, dict):
            raise ValueError(f"Config file {config_path} must contain a mapping of sections")

        sections = {}
        for section, section_class in (('github', GitHubConfig), ('review', ReviewConfig), ('logging', LoggingConfig)):
            values = config_data.get(section, {})
            if not isinstance(values, dict):
                raise ValueError(f"Config section '{section}' must be a mapping")
            # 알 수 없는 키는 TypeError 대신 ValueError로 보고
            try:
                sections[section] = section_class(**values)
            except TypeError as e:
                raise ValueError(f"Invalid config section '{section}': {e}") from e

        return cls(**sections)

    def with_overrides(self, **kwargs) -> "AppConfig":
        """
        'section.field' 형식의 키로 일부 값을 덮어쓴 새 설정 반환

        값이 None인 항목은 무시한다 (지정되지 않은 CLI 옵션).
        """
        sections = {f.name: getattr(self, f.name) for f in fields(self)}
        for key, value in kwargs.items():
            if value is None:
                continue
            section, _, name = key.partition('.')
            if section not in sections or not name:
                raise KeyError(f"Unknown config key: {key}")
            sections[section] = replace(sections[section], **{name: value})
        return AppConfig(**sections)

    def validate(self) -> None:
        """설정 유효성 검사"""
        errors = []

        # 저장소 이름 형식 확인
        for label, name in (
            ("repository", self.review.repository),
            ("upstream_repository", self.review.upstream_repository),
            ("tracking_repository", self.review.issue_repository),
        ):
            owner, _, repo = (name or '').partition('/')
            if not owner or not repo or '/' in repo:
                errors.append(f"{label} must be in format 'owner/repo': {name!r}")

        if self.review.max_workers < 1:
            errors.append("max_workers must be at least 1")

        if self.github.timeout_seconds <= 0:
            errors.append("GitHub timeout must be positive")

        if self.github.max_retries < 0:
            errors.append("GitHub max_retries must be non-negative")

        # 로그 레벨 검증
        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.logging.level.upper() not in valid_log_levels:
            errors.append(f"Invalid log level: {self.logging.level}")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        """설정을 딕셔너리로 변환"""
        return {
            'github': {
                'api_base_url': self.github.api_base_url,
                'timeout_seconds': self.github.timeout_seconds,
                'max_retries': self.github.max_retries,
                # 보안상 토큰은 제외
            },
            'review': {
                'repository': self.review.repository,
                'upstream_repository': self.review.upstream_repository,
                'tracking_repository': self.review.tracking_repository,
                'max_workers': self.review.max_workers,
                'fail_on_mismatch': self.review.fail_on_mismatch,
            },
            'logging': {
                'level': self.logging.level,
                'format': self.logging.format,
                'file_path': self.logging.file_path,
                'max_file_size': self.logging.max_file_size,
                'backup_count': self.logging.backup_count,
            },
        }


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

        # 루트 로거에 핸들러 추가
        logging.getLogger().addHandler(handler)
