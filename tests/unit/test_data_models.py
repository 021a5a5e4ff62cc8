"""
Unit tests for data models.
"""

import pytest
from pydantic import ValidationError

from backport_reviewer.models.forge import (
    Commit,
    CommitPayload,
    Issue,
    PullRequest,
    PullRequestPayload,
    is_commit_sha,
)
from backport_reviewer.models.verdict import CheckName, CheckResult, PRReview, ReviewVerdict


SHA = "0123456789abcdef0123456789abcdef01234567"


class TestForgeModels:
    """Unit tests for forge data models."""

    def test_commit_creation(self):
        """Test Commit model creation."""
        commit = Commit(sha=SHA, message="Fix NPE", html_url="https://github.com/o/r/commit/" + SHA)

        assert commit.sha == SHA
        assert commit.short_sha == SHA[:10]

    @pytest.mark.parametrize("sha", [
        "",
        "abc123",
        SHA.upper(),
        SHA + "0",
        SHA[:-1] + "g",
        SHA + "\n",
    ])
    def test_commit_rejects_malformed_sha(self, sha):
        """Only 40 lowercase hex characters are a commit sha."""
        assert not is_commit_sha(sha)
        with pytest.raises(ValueError):
            Commit(sha=sha, message="msg", html_url="")

    def test_pull_request_validation(self):
        """Test PullRequest validation rules."""
        pr = PullRequest(
            repository="oracle/graal",
            number=12345,
            body="",
            html_url="https://github.com/oracle/graal/pull/12345",
            diff_url="https://github.com/oracle/graal/pull/12345.diff",
        )
        assert pr.reference == "oracle/graal#12345"
        assert pr.state == "open"

        with pytest.raises(ValueError):
            PullRequest(repository="oracle/graal", number=0, body="", html_url="", diff_url="")

        with pytest.raises(ValueError):
            PullRequest(repository="graal", number=1, body="", html_url="", diff_url="")

    def test_issue_validation(self):
        """Test Issue validation rules."""
        issue = Issue(repository="graalvm/graalvm-community-jdk21u", number=7, body="text", html_url="")
        assert issue.number == 7

        with pytest.raises(ValueError):
            Issue(repository="graalvm/graalvm-community-jdk21u", number=-1, body="", html_url="")


class TestPayloadModels:
    """Unit tests for pydantic payload models."""

    def test_commit_payload(self):
        payload = CommitPayload.model_validate({
            'sha': SHA,
            'html_url': 'https://github.com/o/r/commit/' + SHA,
            'commit': {'message': 'Fix NPE'},
        })
        assert payload.commit.message == 'Fix NPE'

    def test_commit_payload_invalid_sha(self):
        with pytest.raises(ValidationError):
            CommitPayload.model_validate({'sha': 'xyz', 'commit': {'message': ''}})

    def test_pull_request_payload_null_body(self):
        payload = PullRequestPayload.model_validate({
            'number': 3,
            'body': None,
            'html_url': 'https://github.com/o/r/pull/3',
            'diff_url': 'https://github.com/o/r/pull/3.diff',
        })
        assert payload.body is None
        assert payload.base is None


class TestVerdictModels:
    """Unit tests for verdict models."""

    def test_check_result_passed(self):
        match = CheckResult(CheckName.DIFF, ReviewVerdict.MATCH, "Diffs match.")
        mismatch = CheckResult(CheckName.DIFF, ReviewVerdict.MISMATCH, "Diffs do not match!")

        assert match.passed
        assert not mismatch.passed
        assert match.details == {}

    def test_check_result_requires_message(self):
        with pytest.raises(ValueError):
            CheckResult(CheckName.DIFF, ReviewVerdict.MATCH, "  ")

    def test_pr_review_passed(self):
        review = PRReview(repository="o/r", pr_number=1, html_url="")
        assert not review.passed  # no results yet

        review.results.append(CheckResult(CheckName.DIFF, ReviewVerdict.MATCH, "ok"))
        review.results.append(CheckResult(CheckName.COMMITS, ReviewVerdict.MATCH, "ok"))
        assert review.passed
        assert review.failed_checks == []

        review.results.append(CheckResult(CheckName.ISSUE, ReviewVerdict.NOT_FOUND, "missing"))
        assert not review.passed
        assert [r.check for r in review.failed_checks] == [CheckName.ISSUE]
        assert review.get_result(CheckName.ISSUE).verdict is ReviewVerdict.NOT_FOUND
        assert review.get_result(CheckName.UPSTREAM) is None

    def test_pr_review_error_fails(self):
        review = PRReview(
            repository="o/r",
            pr_number=1,
            html_url="",
            results=[CheckResult(CheckName.DIFF, ReviewVerdict.MATCH, "ok")],
            error="GitHub API error: 500",
        )
        assert not review.passed

    def test_pr_review_validation(self):
        with pytest.raises(ValueError):
            PRReview(repository="o/r", pr_number=0, html_url="")
        with pytest.raises(ValueError):
            PRReview(repository="repo", pr_number=1, html_url="")
