"""
Data Models

Backport Reviewer 시스템의 핵심 데이터 모델들
"""

from .forge import Commit, PullRequest, Issue, is_commit_sha
from .verdict import ReviewVerdict, CheckName, CheckResult, PRReview

__all__ = [
    "Commit",
    "PullRequest",
    "Issue",
    "is_commit_sha",
    "ReviewVerdict",
    "CheckName",
    "CheckResult",
    "PRReview",
]
