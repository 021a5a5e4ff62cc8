"""
Console Formatter

Renders backport review results as labeled lines for terminal output,
with the raw context needed to investigate a failure.
"""

from typing import Iterable, List

from ..models.verdict import CheckName, CheckResult, PRReview


SUCCESS_MARKER = "✅"
FAILURE_MARKER = "❌"


class ConsoleFormatter:
    """
    Formats PRReview objects for standard output.

    Every check result becomes one line starting with a success or failure
    marker. Failures are followed by diff excerpts, offending commit links
    or the description text they were derived from.
    """

    def __init__(self, show_context: bool = True):
        """
        Initialize console formatter.

        Args:
            show_context: Include raw context (diffs, bodies) after failures
        """
        self.show_context = show_context

    def format_header(self, review: PRReview) -> str:
        return f"Reviewing PR: {review.html_url}"

    def format_review(self, review: PRReview) -> List[str]:
        """
        Format all results of a single PR review.

        Args:
            review: PRReview to render

        Returns:
            Output lines in check order
        """
        lines = []
        for result in review.results:
            lines.extend(self.format_result(result))

        if review.error is not None:
            lines.append(f"{FAILURE_MARKER} Review aborted: {review.error}")

        return lines

    def format_result(self, result: CheckResult) -> List[str]:
        """Format one check result."""
        if result.check is CheckName.COMMITS:
            lines = self._commit_findings(result)
        else:
            lines = []

        marker = SUCCESS_MARKER if result.passed else FAILURE_MARKER
        lines.append(f"{marker} {result.message}")

        if not result.passed and self.show_context:
            lines.extend(self._context(result))
        return lines

    def _commit_findings(self, result: CheckResult) -> List[str]:
        lines = []
        for url in result.details.get('not_cherry_picks', []):
            lines.append(f"{FAILURE_MARKER} Commit {url} is not a cherry-pick.")
        for reference in result.details.get('invalid_references', []):
            lines.append(
                f"{FAILURE_MARKER} Commit {reference['commit']} does not reference "
                f"a valid upstream commit: {reference['sha']}"
            )
        return lines

    def _context(self, result: CheckResult) -> List[str]:
        details = result.details
        if result.check is CheckName.DIFF and 'pr_diff' in details:
            return [
                f"PR Diff:\n{details['pr_diff']}",
                f"Upstream Diff:\n{details['upstream_diff']}",
            ]
        if 'issue_body' in details:
            lines = []
            if details.get('issue_url'):
                lines.append(f"Issue {details['issue_url']}:")
            lines.append(details['issue_body'])
            return lines
        if 'description' in details:
            return [details['description']]
        return []

    def format_summary(self, reviews: Iterable[PRReview]) -> str:
        """One-line summary over a batch of reviews."""
        reviews = list(reviews)
        failed = [r for r in reviews if not r.passed]
        if not failed:
            return f"{SUCCESS_MARKER} {len(reviews)} PR(s) reviewed, all checks passed."
        numbers = ", ".join(f"#{r.pr_number}" for r in failed)
        return f"{FAILURE_MARKER} {len(failed)} of {len(reviews)} PR(s) have findings: {numbers}"
