"""
Diff Normalizer & Comparator

Reduces unified diffs to their added and removed lines and compares
a backport diff with its upstream diff.
"""

import logging
import re

from ..models.verdict import CheckName, CheckResult, ReviewVerdict


logger = logging.getLogger(__name__)

LINE_BREAK = re.compile(r'\r\n|\r|\n')


def normalize_diff(patch: str) -> str:
    """
    Keep only the lines of a unified diff that start with '+' or '-'.

    Context lines, hunk headers and git metadata are dropped, so line
    offsets and unchanged surrounding code do not affect the comparison.
    File header lines ('--- a/...', '+++ b/...') start with '-'/'+' and
    are kept.

    Args:
        patch: Raw unified diff text

    Returns:
        Changed lines joined with '\\n' in their original order
    """
    lines = LINE_BREAK.split(patch)
    return '\n'.join(line for line in lines if line.startswith(('+', '-')))


def compare_diffs(pr_patch: str, upstream_patch: str) -> CheckResult:
    """
    Compare a backport diff with the upstream diff.

    Args:
        pr_patch: Raw diff of the backport pull request
        upstream_patch: Raw diff of the upstream pull request

    Returns:
        MATCH when the normalized diffs are equal, otherwise MISMATCH
        carrying both normalized diffs
    """
    pr_diff = normalize_diff(pr_patch)
    upstream_diff = normalize_diff(upstream_patch)

    if pr_diff == upstream_diff:
        return CheckResult(CheckName.DIFF, ReviewVerdict.MATCH, "Diffs match.")

    logger.debug(f"Normalized diffs differ ({len(pr_diff)} vs {len(upstream_diff)} chars)")
    return CheckResult(
        CheckName.DIFF,
        ReviewVerdict.MISMATCH,
        "Diffs do not match!",
        details={'pr_diff': pr_diff, 'upstream_diff': upstream_diff},
    )


def diff_fetch_error(error: Exception) -> CheckResult:
    """Result for a diff that could not be retrieved."""
    return CheckResult(
        CheckName.DIFF,
        ReviewVerdict.FETCH_ERROR,
        f"Failed to fetch or compare diffs: {error}",
        details={'error': str(error)},
    )
