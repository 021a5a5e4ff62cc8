"""
GitHub Integration Layer

This module provides read-only GitHub API access for pull requests,
commits, issues and raw diffs.
"""

from .client import GitHubClient, GitHubRepository
from .exceptions import GitHubAPIError, RateLimitExceeded, ForgeDataError
from .parser import ForgePayloadParser

__all__ = [
    'GitHubClient',
    'GitHubRepository',
    'GitHubAPIError',
    'RateLimitExceeded',
    'ForgeDataError',
    'ForgePayloadParser',
]
