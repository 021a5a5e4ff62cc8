"""
Backport Reviewer

Main interface that orchestrates the review of backport pull requests:
upstream resolution, diff comparison, commit provenance and tracking
issue resolution.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator, List, Optional

from ..config import ReviewConfig
from ..github.client import GitHubClient
from ..github.exceptions import GitHubAPIError
from ..models.forge import Commit, PullRequest
from ..models.verdict import CheckName, CheckResult, PRReview, ReviewVerdict
from .crossref import resolve_cross_reference
from .diff import compare_diffs, diff_fetch_error
from .extractor import extract_tracking_issue_number, extract_upstream_pr_number
from .provenance import reconcile_commits


logger = logging.getLogger(__name__)


class BackportReviewer:
    """
    Reviews backport pull requests against their upstream pull requests.

    For every backport PR:
    1. Resolve the upstream PR from the description
    2. Compare the backport diff with the upstream diff
    3. Reconcile cherry-pick markers with the upstream commits
    4. Check that the tracking issue references the upstream change

    The GitHub client is injected so the checks can run against a mock.
    """

    def __init__(self, client: GitHubClient, config: Optional[ReviewConfig] = None):
        """
        Initialize backport reviewer.

        Args:
            client: GitHub client used for every read
            config: Review configuration (repositories, worker count)
        """
        self.client = client
        self.config = config or ReviewConfig()
        self.repository = client.get_repository(self.config.repository)
        self.upstream_repository = client.get_repository(self.config.upstream_repository)
        self.issue_repository = client.get_repository(self.config.issue_repository)

    def review_pull_request(self, number: int) -> PRReview:
        """
        Review a single backport pull request by number.

        A fetch failure after the pull request was loaded is recorded on
        `PRReview.error`; verdicts computed before it are kept.

        Raises:
            GitHubAPIError: When the pull request itself cannot be fetched
        """
        pull_request = self.repository.get_pull_request(number)
        return self._review_isolated(pull_request)

    def review_open_pull_requests(self) -> Iterator[PRReview]:
        """
        Review every open pull request of the backport repository.

        A fetch failure while reviewing one PR is recorded on that PR's
        review and does not stop the batch.

        Yields:
            PRReview objects in the order GitHub listed the pull requests
        """
        pull_requests = self.repository.get_pull_requests(state="open")
        logger.info(f"Reviewing {len(pull_requests)} open PRs in {self.config.repository}")

        if self.config.max_workers > 1 and len(pull_requests) > 1:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                yield from executor.map(self._review_isolated, pull_requests)
        else:
            for pull_request in pull_requests:
                yield self._review_isolated(pull_request)

    def _review_isolated(self, pull_request: PullRequest) -> PRReview:
        review = self._start_review(pull_request)
        try:
            self._run_checks(pull_request, review)
        except GitHubAPIError as e:
            logger.error(f"Review of {pull_request.reference} aborted: {e}")
            review.error = str(e)
        return review

    def review(self, pull_request: PullRequest) -> PRReview:
        """
        Run all checks for one backport pull request.

        Args:
            pull_request: Backport pull request

        Returns:
            PRReview with one result per check, or a single NOT_FOUND
            result when no upstream PR is referenced

        Raises:
            GitHubAPIError: When the upstream PR, a commit list or the
                tracking issue cannot be fetched
        """
        review = self._start_review(pull_request)
        self._run_checks(pull_request, review)
        return review

    def _start_review(self, pull_request: PullRequest) -> PRReview:
        logger.info(f"Reviewing {pull_request.reference}")
        return PRReview(
            repository=pull_request.repository,
            pr_number=pull_request.number,
            html_url=pull_request.html_url,
        )

    def _run_checks(self, pull_request: PullRequest, review: PRReview) -> None:
        """Append check results to `review` in order; fetch failures propagate."""
        upstream_number = extract_upstream_pr_number(pull_request.body, self.config.upstream_repository)
        if upstream_number is None:
            review.results.append(CheckResult(
                CheckName.UPSTREAM,
                ReviewVerdict.NOT_FOUND,
                "No upstream PR found in:",
                details={'description': pull_request.body},
            ))
            return

        review.upstream_pr_number = upstream_number
        upstream_pr = self.upstream_repository.get_pull_request(upstream_number)

        # 1. Compare patches
        review.results.append(self._check_diffs(pull_request, upstream_pr))

        # 2. Check that backport commits reference the upstream commits
        backport_commits = self.repository.list_commits(pull_request.number)
        upstream_commits = self.upstream_repository.list_commits(upstream_pr.number)
        review.results.append(reconcile_commits(upstream_commits, backport_commits))

        # 3. Check that the tracking issue references the upstream change
        review.results.append(self._check_tracking_issue(pull_request, upstream_pr, backport_commits))

        logger.info(
            f"Reviewed {pull_request.reference}: "
            + ", ".join(f"{r.check.value}={r.verdict.value}" for r in review.results)
        )

    def _check_diffs(self, pull_request: PullRequest, upstream_pr: PullRequest) -> CheckResult:
        """Fetch both diffs and compare them; fetch failures become a finding."""
        try:
            pr_patch = self.client.fetch_diff(pull_request)
            upstream_patch = self.client.fetch_diff(upstream_pr)
        except GitHubAPIError as e:
            logger.warning(f"Diff fetch failed for {pull_request.reference}: {e}")
            return diff_fetch_error(e)

        return compare_diffs(pr_patch, upstream_patch)

    def _check_tracking_issue(
        self,
        pull_request: PullRequest,
        upstream_pr: PullRequest,
        backport_commits: List[Commit],
    ) -> CheckResult:
        issue_number = extract_tracking_issue_number(pull_request.body, self.config.issue_repository)
        if issue_number is None:
            return CheckResult(
                CheckName.ISSUE,
                ReviewVerdict.NOT_FOUND,
                "No backport issue found in:",
                details={'description': pull_request.body},
            )

        issue = self.issue_repository.get_issue(issue_number)
        result = resolve_cross_reference(
            issue.body,
            self.config.upstream_repository,
            upstream_pr.number,
            backport_commits,
        )
        if not result.passed:
            result.details.setdefault('description', pull_request.body)
            result.details.setdefault('issue_url', issue.html_url)
        return result
