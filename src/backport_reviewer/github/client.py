"""
GitHub API Client

Handles GitHub API authentication, rate limiting, and communication.
Provides read-only access to pull requests, commits, issues and diffs.
"""

import time
import logging
from typing import Dict, List, Optional, Tuple
from datetime import datetime
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..models.forge import Commit, Issue, PullRequest
from .exceptions import ForgeDataError, GitHubAPIError, RateLimitExceeded
from .parser import ForgePayloadParser


logger = logging.getLogger(__name__)

DIFF_MEDIA_TYPE = 'application/vnd.github.v3.diff'


class GitHubClient:
    """
    GitHub API client with authentication, rate limiting, and error handling.

    Provides methods for:
    - Repository handles for pull request, commit and issue lookups
    - Raw diff retrieval
    - API rate limit management
    """

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = "https://api.github.com",
        timeout: float = 30,
        max_retries: int = 3,
    ):
        """
        Initialize GitHub client.

        Args:
            token: GitHub personal access token (anonymous access when omitted)
            base_url: GitHub API base URL (default: https://api.github.com)
            timeout: Connect/read timeout in seconds for every request
            max_retries: Transport retries for 429 and 5xx responses
        """
        self.token = token
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.max_retries = max_retries
        self.session = self._create_session()
        self.rate_limit_remaining = 5000
        self.rate_limit_reset = datetime.now()
        self.parser = ForgePayloadParser()

    def _create_session(self) -> requests.Session:
        """Create requests session with retry strategy and authentication."""
        session = requests.Session()

        retry_strategy = Retry(
            total=self.max_retries,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update({
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'Backport-Reviewer/1.0'
        })
        if self.token:
            session.headers['Authorization'] = f'token {self.token}'

        return session

    def _check_rate_limit(self) -> None:
        """Check and handle GitHub API rate limits."""
        if self.rate_limit_remaining <= 0 and datetime.now() < self.rate_limit_reset:
            wait_time = (self.rate_limit_reset - datetime.now()).total_seconds()
            if wait_time > 0:
                logger.warning(f"Rate limit exhausted, resets in {wait_time:.1f}s")
                raise RateLimitExceeded(self.rate_limit_reset)

    def _update_rate_limit(self, response: requests.Response) -> None:
        """Update rate limit information from response headers."""
        if 'X-RateLimit-Remaining' in response.headers:
            self.rate_limit_remaining = int(response.headers['X-RateLimit-Remaining'])

        if 'X-RateLimit-Reset' in response.headers:
            reset_timestamp = int(response.headers['X-RateLimit-Reset'])
            self.rate_limit_reset = datetime.fromtimestamp(reset_timestamp)

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Make authenticated request to GitHub API with rate limiting.

        Args:
            method: HTTP method
            endpoint: API endpoint (without base URL) or absolute URL
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            GitHubAPIError: For API errors
            RateLimitExceeded: When rate limit is exceeded
        """
        self._check_rate_limit()

        if endpoint.startswith('http'):
            url = endpoint
        else:
            url = f"{self.base_url}/{endpoint.lstrip('/')}"
        kwargs.setdefault('timeout', self.timeout)

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Request failed: {e}")
            raise GitHubAPIError(f"Request failed: {str(e)}")

        self._update_rate_limit(response)

        if response.status_code == 429 or (
            response.status_code == 403 and response.headers.get('X-RateLimit-Remaining') == '0'
        ):
            reset_time = datetime.fromtimestamp(int(response.headers.get('X-RateLimit-Reset', time.time() + 3600)))
            raise RateLimitExceeded(reset_time)

        if not response.ok:
            try:
                error_data = response.json() if response.content else {}
            except ValueError:
                error_data = {}
            raise GitHubAPIError(
                f"GitHub API error: {response.status_code} - {error_data.get('message', 'Unknown error')} ({url})",
                status_code=response.status_code,
                response_data=error_data
            )

        return response

    def _json(self, response: requests.Response):
        """Decode a JSON response body; non-JSON bodies raise ForgeDataError."""
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Non-JSON response from {response.url}: {e}")
            raise ForgeDataError(
                f"GitHub returned a non-JSON response: {e} ({response.url})",
                status_code=response.status_code,
            ) from e

    def _get_paginated(self, endpoint: str, params: Optional[Dict] = None, per_page: int = 100) -> List[Dict]:
        """Collect every page of a list endpoint."""
        items = []
        page = 1
        params = dict(params or {})

        while True:
            params.update({'page': page, 'per_page': per_page})
            response = self._make_request('GET', endpoint, params=params)

            page_items = self._json(response)
            if not page_items:
                break

            items.extend(page_items)

            if len(page_items) < per_page:
                break

            page += 1

        return items

    def get_repository(self, full_name: str) -> "GitHubRepository":
        """
        Get a read-only handle for a repository.

        Args:
            full_name: Repository in 'owner/repo' format

        Returns:
            GitHubRepository bound to this client
        """
        owner, _, name = full_name.partition('/')
        if not owner or not name or '/' in name:
            raise ValueError(f"Repository must be in format 'owner/repo': {full_name!r}")
        return GitHubRepository(self, full_name)

    def fetch_diff(self, pull_request: PullRequest) -> str:
        """
        Fetch the unified diff of a pull request.

        The diff is requested from the API pull request endpoint with the
        diff media type, so the session token also covers private
        repositories (the github.com `diff_url` ignores it).

        Args:
            pull_request: Pull request whose diff is fetched

        Returns:
            Raw unified diff text
        """
        logger.info(f"Fetching diff for {pull_request.reference}")

        response = self._make_request(
            'GET',
            f'/repos/{pull_request.repository}/pulls/{pull_request.number}',
            headers={'Accept': DIFF_MEDIA_TYPE}
        )
        response.encoding = 'utf-8'
        return response.text

    def test_authentication(self) -> Tuple[bool, Dict]:
        """
        Test GitHub API authentication.

        Returns:
            Tuple of (success, user_info)
        """
        try:
            response = self._make_request('GET', '/user')
            user_data = self._json(response)
            logger.info(f"Authentication successful for user: {user_data.get('login')}")
            return True, user_data
        except GitHubAPIError as e:
            logger.error(f"Authentication failed: {e}")
            return False, {}

    def get_rate_limit_status(self) -> Dict:
        """
        Get current rate limit status.

        Returns:
            Rate limit information
        """
        try:
            response = self._make_request('GET', '/rate_limit')
            return self._json(response)
        except GitHubAPIError as e:
            logger.error(f"Failed to get rate limit status: {e}")
            return {
                'rate': {
                    'remaining': self.rate_limit_remaining,
                    'reset': int(self.rate_limit_reset.timestamp())
                }
            }


class GitHubRepository:
    """Read-only view of a single GitHub repository."""

    def __init__(self, client: GitHubClient, full_name: str):
        self.client = client
        self.full_name = full_name

    def __repr__(self) -> str:
        return f"GitHubRepository({self.full_name!r})"

    def get_pull_requests(self, state: str = "open") -> List[PullRequest]:
        """
        List pull requests of the repository.

        Args:
            state: 'open', 'closed' or 'all'

        Returns:
            Pull requests in the order GitHub returned them
        """
        logger.info(f"Fetching {state} PRs for {self.full_name}")

        pulls = self.client._get_paginated(f'/repos/{self.full_name}/pulls', params={'state': state})

        logger.info(f"Found {len(pulls)} {state} PRs")
        return [self.client.parser.parse_pull_request(self.full_name, data) for data in pulls]

    def get_pull_request(self, number: int) -> PullRequest:
        """
        Get pull request information.

        Args:
            number: Pull request number

        Returns:
            PullRequest object
        """
        logger.info(f"Fetching PR {self.full_name}#{number}")

        response = self.client._make_request('GET', f'/repos/{self.full_name}/pulls/{number}')
        return self.client.parser.parse_pull_request(self.full_name, self.client._json(response))

    def get_issue(self, number: int) -> Issue:
        """
        Get issue information.

        Args:
            number: Issue number

        Returns:
            Issue object
        """
        logger.info(f"Fetching issue {self.full_name}#{number}")

        response = self.client._make_request('GET', f'/repos/{self.full_name}/issues/{number}')
        return self.client.parser.parse_issue(self.full_name, self.client._json(response))

    def list_commits(self, pr_number: int) -> List[Commit]:
        """
        Get commits of a pull request.

        Args:
            pr_number: Pull request number

        Returns:
            Commits in the order GitHub returned them
        """
        logger.info(f"Fetching commits for {self.full_name}#{pr_number}")

        commits = self.client._get_paginated(f'/repos/{self.full_name}/pulls/{pr_number}/commits')

        logger.info(f"Found {len(commits)} commits")
        return self.client.parser.parse_commits(commits)
