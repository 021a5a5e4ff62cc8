"""
Cross-Reference Resolver

Decides whether a backport tracking issue legitimizes a backport, either
by linking the upstream pull request or by linking an upstream commit
that the backport actually cherry-picks.
"""

import logging
import re
from typing import Optional, Sequence

from ..models.forge import Commit
from ..models.verdict import CheckName, CheckResult, ReviewVerdict
from .extractor import GITHUB_URL
from .provenance import cherry_pick_marker


logger = logging.getLogger(__name__)


def references_upstream_pr(body: Optional[str], upstream_repository: str, upstream_pr_number: int) -> bool:
    """
    Check whether `body` contains `https://github.com/<upstream>/pull/<number>`.

    This is a plain substring test, so a link to /pull/1234 also counts
    for PR 123.
    """
    if not body:
        return False
    return f"{GITHUB_URL}/{upstream_repository}/pull/{upstream_pr_number}" in body


def find_upstream_commit_reference(body: Optional[str], upstream_repository: str) -> Optional[str]:
    """
    Find the first `<upstream>/commit/<sha>` reference in `body`.

    Returns:
        The 40 hex character sha, or None
    """
    if not body:
        return None
    match = re.search(rf"{re.escape(upstream_repository)}/commit/([a-f0-9]{{40}})", body)
    return match.group(1) if match else None


def resolve_cross_reference(
    issue_body: Optional[str],
    upstream_repository: str,
    upstream_pr_number: int,
    backport_commits: Sequence[Commit],
) -> CheckResult:
    """
    Resolve the tracking issue of a backport against its upstream change.

    Args:
        issue_body: Body of the backport tracking issue
        upstream_repository: Upstream repository in 'owner/repo' format
        upstream_pr_number: Number of the resolved upstream PR
        backport_commits: Commits of the backport pull request

    Returns:
        MATCH via the PR link or via a cherry-picked commit link,
        otherwise MISMATCH carrying the issue body
    """
    if references_upstream_pr(issue_body, upstream_repository, upstream_pr_number):
        return CheckResult(
            CheckName.ISSUE,
            ReviewVerdict.MATCH,
            "Backport issue references upstream PR.",
            details={'via': 'pull_request'},
        )

    # Only the first commit link is considered.
    sha = find_upstream_commit_reference(issue_body, upstream_repository)
    if sha is not None:
        marker = cherry_pick_marker(sha)
        if any(marker in commit.message for commit in backport_commits):
            return CheckResult(
                CheckName.ISSUE,
                ReviewVerdict.MATCH,
                f"Backport issue references upstream commit: {sha}",
                details={'via': 'commit', 'sha': sha},
            )
        logger.debug(f"Issue references {sha}, which is not cherry-picked into the backport")

    return CheckResult(
        CheckName.ISSUE,
        ReviewVerdict.MISMATCH,
        "Backport issue does not reference upstream PR:",
        details={'issue_body': issue_body or '', 'commit_reference': sha},
    )
