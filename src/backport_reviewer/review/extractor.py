"""
Identifier Extractor

Locates the upstream pull request link and the backport tracking issue
link in a pull request description.
"""

import logging
import re
from typing import Optional, Pattern


logger = logging.getLogger(__name__)

GITHUB_URL = "https://github.com"


def pull_request_link_pattern(repository: str) -> Pattern:
    """Pattern for `https://github.com/<repository>/pull/<number>`."""
    return re.compile(rf"{re.escape(GITHUB_URL)}/{re.escape(repository)}/pull/(\d+)")


def issue_link_pattern(repository: str) -> Pattern:
    """Pattern for `https://github.com/<repository>/issues/<number>`."""
    return re.compile(rf"{re.escape(GITHUB_URL)}/{re.escape(repository)}/issues/(\d+)")


def _first_number(pattern: Pattern, text: Optional[str]) -> Optional[int]:
    if not text:
        return None
    match = pattern.search(text)
    if match is None:
        return None
    return int(match.group(1))


def extract_upstream_pr_number(description: Optional[str], upstream_repository: str) -> Optional[int]:
    """
    Find the upstream pull request a backport claims to port.

    Args:
        description: Backport pull request body
        upstream_repository: Upstream repository in 'owner/repo' format

    Returns:
        Number of the first upstream PR link in the description, or None
    """
    number = _first_number(pull_request_link_pattern(upstream_repository), description)
    if number is None:
        logger.debug(f"No {upstream_repository} PR link in description")
    return number


def extract_tracking_issue_number(description: Optional[str], tracking_repository: str) -> Optional[int]:
    """
    Find the backport tracking issue referenced by a pull request.

    Args:
        description: Backport pull request body
        tracking_repository: Repository holding the tracking issues

    Returns:
        Number of the first tracking issue link in the description, or None
    """
    number = _first_number(issue_link_pattern(tracking_repository), description)
    if number is None:
        logger.debug(f"No {tracking_repository} issue link in description")
    return number
