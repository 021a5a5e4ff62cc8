"""
Forge Data Models

GitHub에서 가져온 Pull Request, Commit, Issue 데이터 모델들
"""

import re
from dataclasses import dataclass
from typing import Optional
from pydantic import BaseModel, field_validator


COMMIT_SHA_PATTERN = re.compile(r'[a-f0-9]{40}')


def is_commit_sha(value: str) -> bool:
    """40자리 소문자 16진수 커밋 해시인지 확인"""
    return bool(COMMIT_SHA_PATTERN.fullmatch(value or ''))


def _validate_repository(repository: str) -> None:
    owner, _, name = repository.partition('/')
    if not owner or not name or '/' in name:
        raise ValueError("Repository must be in format 'owner/repo'")


@dataclass(frozen=True)
class Commit:
    """Pull Request에 포함된 개별 커밋"""
    sha: str
    message: str
    html_url: str

    def __post_init__(self):
        """데이터 검증"""
        if not is_commit_sha(self.sha):
            raise ValueError(f"Invalid commit sha: {self.sha!r}")

    @property
    def short_sha(self) -> str:
        return self.sha[:10]


@dataclass(frozen=True)
class PullRequest:
    """Pull Request"""
    repository: str
    number: int
    body: str
    html_url: str
    diff_url: str
    state: str = 'open'

    def __post_init__(self):
        """데이터 검증"""
        if self.number <= 0:
            raise ValueError("PR number must be positive")
        _validate_repository(self.repository)

    @property
    def reference(self) -> str:
        """'owner/repo#123' 형식의 참조 문자열"""
        return f"{self.repository}#{self.number}"


@dataclass(frozen=True)
class Issue:
    """백포트 추적 이슈"""
    repository: str
    number: int
    body: str
    html_url: str

    def __post_init__(self):
        """데이터 검증"""
        if self.number <= 0:
            raise ValueError("Issue number must be positive")
        _validate_repository(self.repository)


# Pydantic models for GitHub payload validation
class CommitDetailPayload(BaseModel):
    """GitHub API 응답의 commit 상세 부분"""
    message: str = ''


class CommitPayload(BaseModel):
    """GitHub API 응답용 Commit 모델"""
    sha: str
    html_url: str = ''
    commit: CommitDetailPayload

    @field_validator('sha')
    @classmethod
    def validate_sha(cls, v):
        if not is_commit_sha(v):
            raise ValueError('Commit sha must be 40 lowercase hex characters')
        return v


class RepositoryPayload(BaseModel):
    """GitHub API 응답용 Repository 모델"""
    full_name: str


class BranchPayload(BaseModel):
    """GitHub API 응답용 base/head 브랜치 모델"""
    repo: Optional[RepositoryPayload] = None


class PullRequestPayload(BaseModel):
    """GitHub API 응답용 PullRequest 모델"""
    number: int
    body: Optional[str] = None
    html_url: str
    diff_url: str
    state: str = 'open'
    base: Optional[BranchPayload] = None

    @field_validator('number')
    @classmethod
    def validate_number(cls, v):
        if v <= 0:
            raise ValueError('PR number must be positive')
        return v


class IssuePayload(BaseModel):
    """GitHub API 응답용 Issue 모델"""
    number: int
    body: Optional[str] = None
    html_url: str = ''

    @field_validator('number')
    @classmethod
    def validate_number(cls, v):
        if v <= 0:
            raise ValueError('Issue number must be positive')
        return v
