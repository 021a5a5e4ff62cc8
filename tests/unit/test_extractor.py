"""
Unit tests for upstream PR and tracking issue extraction.
"""

import pytest

from backport_reviewer.review.extractor import (
    extract_tracking_issue_number,
    extract_upstream_pr_number,
)


UPSTREAM = "oracle/graal"
TRACKING = "graalvm/graalvm-community-jdk21u"


class TestExtractUpstreamPRNumber:
    """Unit tests for extract_upstream_pr_number."""

    def test_finds_upstream_pr(self):
        description = "Backport of https://github.com/oracle/graal/pull/12345"
        assert extract_upstream_pr_number(description, UPSTREAM) == 12345

    def test_first_match_wins(self):
        description = (
            "Backports https://github.com/oracle/graal/pull/111\n"
            "See also https://github.com/oracle/graal/pull/222"
        )
        assert extract_upstream_pr_number(description, UPSTREAM) == 111

    @pytest.mark.parametrize("description", [
        "https://github.com/oracle/graalpython/pull/12345",
        "https://github.com/other/graal/pull/12345",
        "https://github.com/oracle/graal/issues/12345",
        "oracle/graal/pull/12345",
        "https://github.com/oracle/graal/pull/",
        "",
        None,
    ])
    def test_no_upstream_pr(self, description):
        assert extract_upstream_pr_number(description, UPSTREAM) is None

    def test_repository_name_is_literal(self):
        """Regex metacharacters in the repository name are not wildcards."""
        description = "https://github.com/acmeXlib/pull/5"
        assert extract_upstream_pr_number(description, "acme.lib") is None
        assert extract_upstream_pr_number("https://github.com/acme.lib/pull/5", "acme.lib") == 5


class TestExtractTrackingIssueNumber:
    """Unit tests for extract_tracking_issue_number."""

    def test_finds_tracking_issue(self):
        description = (
            "Backport of https://github.com/oracle/graal/pull/12345\n"
            "Closes https://github.com/graalvm/graalvm-community-jdk21u/issues/42"
        )
        assert extract_tracking_issue_number(description, TRACKING) == 42

    def test_ignores_other_repository(self):
        description = "https://github.com/graalvm/graalvm-community-jdk17u/issues/42"
        assert extract_tracking_issue_number(description, TRACKING) is None

    def test_ignores_pull_links(self):
        description = "https://github.com/graalvm/graalvm-community-jdk21u/pull/42"
        assert extract_tracking_issue_number(description, TRACKING) is None

    def test_missing_description(self):
        assert extract_tracking_issue_number(None, TRACKING) is None
