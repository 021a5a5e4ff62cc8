"""
GitHub Payload Parser

Parses GitHub REST API payloads into the immutable forge models
used by the review checks.
"""

import logging
from typing import Dict, List

from pydantic import ValidationError

from ..models.forge import (
    Commit,
    CommitPayload,
    Issue,
    IssuePayload,
    PullRequest,
    PullRequestPayload,
)
from .exceptions import ForgeDataError


logger = logging.getLogger(__name__)


class ForgePayloadParser:
    """
    Parser for GitHub pull request, commit and issue payloads.

    Validates raw JSON with pydantic before building model objects, so a
    malformed response fails loudly instead of producing partial data.
    """

    def parse_pull_request(self, repository: str, pr_data: Dict) -> PullRequest:
        """
        Parse a pull request payload.

        Args:
            repository: Full name of the repository the PR was requested from
            pr_data: Pull request data from GitHub API

        Returns:
            PullRequest object
        """
        try:
            payload = PullRequestPayload.model_validate(pr_data)
        except ValidationError as e:
            raise ForgeDataError(f"Invalid pull request payload from {repository}: {e}") from e

        if payload.base and payload.base.repo:
            repository = payload.base.repo.full_name

        return PullRequest(
            repository=repository,
            number=payload.number,
            body=payload.body or '',
            html_url=payload.html_url,
            diff_url=payload.diff_url,
            state=payload.state,
        )

    def parse_commits(self, commits_data: List[Dict]) -> List[Commit]:
        """
        Parse the commit list of a pull request.

        Args:
            commits_data: List of commit payloads from GitHub API

        Returns:
            Commits in the order GitHub returned them
        """
        commits = []
        for commit_data in commits_data:
            try:
                payload = CommitPayload.model_validate(commit_data)
            except ValidationError as e:
                raise ForgeDataError(f"Invalid commit payload: {e}") from e

            commits.append(Commit(
                sha=payload.sha,
                message=payload.commit.message,
                html_url=payload.html_url,
            ))

        logger.debug(f"Parsed {len(commits)} commits")
        return commits

    def parse_issue(self, repository: str, issue_data: Dict) -> Issue:
        """
        Parse an issue payload.

        Args:
            repository: Full name of the repository the issue belongs to
            issue_data: Issue data from GitHub API

        Returns:
            Issue object
        """
        try:
            payload = IssuePayload.model_validate(issue_data)
        except ValidationError as e:
            raise ForgeDataError(f"Invalid issue payload from {repository}: {e}") from e

        return Issue(
            repository=repository,
            number=payload.number,
            body=payload.body or '',
            html_url=payload.html_url,
        )
