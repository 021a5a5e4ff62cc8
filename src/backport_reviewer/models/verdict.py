"""
Review Verdict Models

백포트 검사 결과 관련 데이터 모델들
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ReviewVerdict(Enum):
    """검사 결과 판정"""
    MATCH = "match"
    MISMATCH = "mismatch"
    NOT_FOUND = "not_found"
    FETCH_ERROR = "fetch_error"


class CheckName(Enum):
    """검사 종류"""
    UPSTREAM = "upstream"
    DIFF = "diff"
    COMMITS = "commits"
    ISSUE = "issue"


@dataclass(frozen=True)
class CheckResult:
    """개별 검사 결과"""
    check: CheckName
    verdict: ReviewVerdict
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """데이터 검증"""
        if not self.message.strip():
            raise ValueError("Message cannot be empty")

    @property
    def passed(self) -> bool:
        return self.verdict is ReviewVerdict.MATCH


@dataclass
class PRReview:
    """백포트 PR 하나에 대한 전체 검토 결과"""
    repository: str
    pr_number: int
    html_url: str
    upstream_pr_number: Optional[int] = None
    results: List[CheckResult] = field(default_factory=list)
    error: Optional[str] = None

    def __post_init__(self):
        """데이터 검증"""
        if self.pr_number <= 0:
            raise ValueError("PR number must be positive")
        if '/' not in self.repository:
            raise ValueError("Repository must be in format 'owner/repo'")

    @property
    def passed(self) -> bool:
        """모든 검사를 통과했는지 확인"""
        return self.error is None and bool(self.results) and all(r.passed for r in self.results)

    @property
    def failed_checks(self) -> List[CheckResult]:
        """통과하지 못한 검사 목록"""
        return [r for r in self.results if not r.passed]

    def get_result(self, check: CheckName) -> Optional[CheckResult]:
        """특정 검사의 결과 반환"""
        for result in self.results:
            if result.check is check:
                return result
        return None
