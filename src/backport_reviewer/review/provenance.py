"""
Commit Provenance Reconciler

Matches every backport commit to the upstream commit it was cherry-picked
from, and checks that every upstream commit is accounted for exactly once.
"""

import logging
import re
from typing import List, Optional, Sequence

from ..models.forge import Commit
from ..models.verdict import CheckName, CheckResult, ReviewVerdict


logger = logging.getLogger(__name__)

CHERRY_PICK_PATTERN = re.compile(r'\(cherry picked from commit ([a-f0-9]{40})\)')


def cherry_pick_marker(sha: str) -> str:
    """The marker `git cherry-pick -x` appends for `sha`."""
    return f"(cherry picked from commit {sha})"


def extract_cherry_pick_sha(message: str) -> Optional[str]:
    """
    Extract the upstream sha from a commit message's cherry-pick marker.

    Args:
        message: Full commit message

    Returns:
        The 40 hex character sha of the first marker, or None
    """
    match = CHERRY_PICK_PATTERN.search(message or '')
    return match.group(1) if match else None


def reconcile_commits(upstream_commits: Sequence[Commit], backport_commits: Sequence[Commit]) -> CheckResult:
    """
    Reconcile backport commits against upstream commits.

    Each marker consumes one occurrence of its sha from the upstream list,
    so an upstream commit referenced twice makes the second reference
    invalid.

    Args:
        upstream_commits: Commits of the upstream pull request
        backport_commits: Commits of the backport pull request

    Returns:
        MATCH when every upstream commit is referenced exactly once and no
        backport commit references an unknown sha, otherwise MISMATCH
    """
    remaining: List[str] = [commit.sha for commit in upstream_commits]
    not_cherry_picks: List[str] = []
    invalid_references: List[dict] = []

    for commit in backport_commits:
        sha = extract_cherry_pick_sha(commit.message)
        if sha is None:
            logger.debug(f"Commit {commit.short_sha} has no cherry-pick marker")
            not_cherry_picks.append(commit.html_url)
            continue

        if sha in remaining:
            remaining.remove(sha)
        else:
            logger.debug(f"Commit {commit.short_sha} references unmatched upstream sha {sha}")
            invalid_references.append({'commit': commit.html_url, 'sha': sha})

    details = {
        'not_cherry_picks': not_cherry_picks,
        'invalid_references': invalid_references,
        'unreferenced': remaining,
    }

    if not remaining and not invalid_references:
        return CheckResult(
            CheckName.COMMITS,
            ReviewVerdict.MATCH,
            "All backport commits reference valid upstream commits.",
            details=details,
        )

    if remaining:
        message = f"Some upstream commits were not referenced in the backport PR: {remaining}"
    else:
        message = "Some backport commits do not reference a valid upstream commit."
    return CheckResult(CheckName.COMMITS, ReviewVerdict.MISMATCH, message, details=details)
