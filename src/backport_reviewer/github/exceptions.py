"""
GitHub integration errors.
"""

from datetime import datetime
from typing import Dict, Optional


class GitHubAPIError(Exception):
    """GitHub API related errors"""
    def __init__(self, message: str, status_code: Optional[int] = None, response_data: Optional[Dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class RateLimitExceeded(GitHubAPIError):
    """GitHub API rate limit exceeded"""
    def __init__(self, reset_time: datetime):
        super().__init__(f"Rate limit exceeded. Resets at {reset_time}", status_code=429)
        self.reset_time = reset_time


class ForgeDataError(GitHubAPIError):
    """GitHub returned a payload that does not match the expected shape"""
