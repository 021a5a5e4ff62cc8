"""
Command-line entry point for reviewing backport pull requests.

Usage:
    backport-review [-r REPO] [-u UPSTREAM] [-p PR] [-t TOKEN]

Example:
    backport-review -r graalvm/graalvm-community-jdk21u -u oracle/graal -p 42
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .config import AppConfig, setup_logging
from .formatting.console import ConsoleFormatter, FAILURE_MARKER
from .github.client import GitHubClient
from .github.exceptions import GitHubAPIError
from .review.reviewer import BackportReviewer


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="backport-review",
        description="Reviews backport pull requests.",
    )
    parser.add_argument("-r", "--repository", help="The repository to review.")
    parser.add_argument("-u", "--upstream-repository", help="The upstream repository to review.")
    parser.add_argument(
        "-i", "--tracking-repository",
        help="Repository holding the backport tracking issues (defaults to --repository).",
    )
    parser.add_argument("-p", "--pr", type=int, dest="pull_request", help="The pull request number to review.")
    parser.add_argument("-t", "--token", help="Github token to use when calling the Github API.")
    parser.add_argument("-c", "--config", help="YAML configuration file.")
    parser.add_argument("-w", "--workers", type=int, help="Review open PRs with this many worker threads.")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR).")
    parser.add_argument(
        "--fail-on-mismatch",
        action="store_true",
        default=None,
        help="Exit with status 1 when any reviewed PR has findings.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def load_config(args: argparse.Namespace) -> AppConfig:
    """Load configuration from YAML or the environment and apply CLI flags."""
    if args.config:
        config = AppConfig.from_yaml(args.config)
        if config.github.token is None:
            config = config.with_overrides(**{'github.token': AppConfig.from_env().github.token})
    else:
        config = AppConfig.from_env()

    config = config.with_overrides(**{
        'review.repository': args.repository,
        'review.upstream_repository': args.upstream_repository,
        'review.tracking_repository': args.tracking_repository,
        'review.max_workers': args.workers,
        'review.fail_on_mismatch': args.fail_on_mismatch,
        'github.token': args.token,
        'logging.level': args.log_level,
    })
    config.validate()
    return config


def create_client(config: AppConfig) -> GitHubClient:
    """
    Build the GitHub client and verify its credentials.

    Raises:
        GitHubAPIError: When a token is configured but rejected
    """
    client = GitHubClient(
        token=config.github.token,
        base_url=config.github.api_base_url,
        timeout=config.github.timeout_seconds,
        max_retries=config.github.max_retries,
    )
    if config.github.token:
        authenticated, _ = client.test_authentication()
        if not authenticated:
            raise GitHubAPIError("Failed to initialize GitHub instance: authentication rejected", status_code=401)
    return client


def log_rate_limit(client: GitHubClient) -> None:
    """Log the GitHub API budget left after a run."""
    rate = client.get_rate_limit_status().get('rate', {})
    logger.info(f"GitHub API budget: {rate.get('remaining')} requests remaining, resets at {rate.get('reset')}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args)
    except (ValueError, KeyError, OSError) as e:
        print(f"{FAILURE_MARKER} {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    setup_logging(config.logging)

    try:
        client = create_client(config)
    except GitHubAPIError as e:
        logger.error(str(e))
        print(f"{FAILURE_MARKER} {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    reviewer = BackportReviewer(client, config.review)
    formatter = ConsoleFormatter()
    reviews = []

    if args.pull_request is None:
        try:
            for review in reviewer.review_open_pull_requests():
                print(formatter.format_header(review))
                for line in formatter.format_review(review):
                    print(line)
                reviews.append(review)
        except GitHubAPIError as e:
            logger.error(f"Listing open PRs of {config.review.repository} failed: {e}")
            print(f"{FAILURE_MARKER} Listing open PRs of {config.review.repository} failed: {e}")
            return EXIT_FINDINGS
        print(formatter.format_summary(reviews))
        log_rate_limit(client)
    else:
        try:
            review = reviewer.review_pull_request(args.pull_request)
        except GitHubAPIError as e:
            logger.error(f"Review of PR #{args.pull_request} failed: {e}")
            print(f"{FAILURE_MARKER} Review of PR #{args.pull_request} failed: {e}")
            return EXIT_FINDINGS
        for line in formatter.format_review(review):
            print(line)
        if review.error is not None:
            return EXIT_FINDINGS
        reviews.append(review)

    if config.review.fail_on_mismatch and not all(r.passed for r in reviews):
        return EXIT_FINDINGS
    return EXIT_OK
