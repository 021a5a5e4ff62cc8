"""
Integration tests for the backport-review command line.
"""

import logging
import os
from unittest.mock import patch

import pytest

from backport_reviewer.cli import EXIT_CONFIG_ERROR, EXIT_FINDINGS, EXIT_OK, build_parser, main

from fake_github import API, BACKPORT, FakeGitHub


@pytest.fixture
def fake_github():
    fake = FakeGitHub()
    fake.add_json("https://api.github.com/user", {'login': 'reviewer'})
    with patch('requests.Session.request', side_effect=fake), patch.dict(os.environ, {}, clear=True):
        yield fake


class TestArgumentParsing:
    """Test command line argument parsing."""

    def test_defaults(self):
        args = build_parser().parse_args([])

        assert args.pull_request is None
        assert args.repository is None
        assert args.fail_on_mismatch is None

    def test_flags(self):
        args = build_parser().parse_args([
            "-r", "acme/backports", "-u", "acme/main", "-p", "12", "-t", "ghp_x", "--fail-on-mismatch",
        ])

        assert args.repository == "acme/backports"
        assert args.upstream_repository == "acme/main"
        assert args.pull_request == 12
        assert args.token == "ghp_x"
        assert args.fail_on_mismatch is True


class TestMain:
    """Test the main entry point against a fake GitHub."""

    def test_single_pr(self, fake_github, capsys):
        fake_github.add_backport(7)
        fake_github.add_upstream()
        fake_github.add_issue()

        exit_code = main(["-p", "7", "-t", "ghp_test"])

        out = capsys.readouterr().out.splitlines()
        assert exit_code == EXIT_OK
        assert out == [
            "✅ Diffs match.",
            "✅ All backport commits reference valid upstream commits.",
            "✅ Backport issue references upstream PR.",
        ]

    def test_all_open_prs(self, fake_github, capsys):
        pulls = [fake_github.add_backport(7), fake_github.add_backport(9, body="No links")]
        fake_github.add_json(f"{API}/{BACKPORT}/pulls", pulls)
        fake_github.add_upstream()
        fake_github.add_issue()

        exit_code = main([])

        out = capsys.readouterr().out
        assert exit_code == EXIT_OK
        assert f"Reviewing PR: https://github.com/{BACKPORT}/pull/7" in out
        assert "❌ No upstream PR found in:\nNo links" in out
        assert "1 of 2 PR(s) have findings: #9" in out

    def test_fail_on_mismatch(self, fake_github, capsys):
        fake_github.add_backport(9, body="No links")

        assert main(["-p", "9"]) == EXIT_OK
        assert main(["-p", "9", "--fail-on-mismatch"]) == EXIT_FINDINGS

    def test_rejected_token(self, fake_github, capsys):
        fake_github.add_error("https://api.github.com/user", 401)

        exit_code = main(["-p", "7", "-t", "ghp_bad"])

        assert exit_code == EXIT_CONFIG_ERROR
        assert "Failed to initialize GitHub instance" in capsys.readouterr().err
        assert fake_github.requested == ["https://api.github.com/user"]

    def test_invalid_repository(self, fake_github, capsys):
        exit_code = main(["-r", "not-a-repo"])

        assert exit_code == EXIT_CONFIG_ERROR
        assert fake_github.requested == []

    def test_all_open_prs_logs_rate_limit_budget(self, fake_github, capsys, caplog):
        fake_github.add_json(f"{API}/{BACKPORT}/pulls", [fake_github.add_backport(9, body="No links")])
        fake_github.add_json("https://api.github.com/rate_limit", {'rate': {'remaining': 4321, 'reset': 1700000000}})
        caplog.set_level(logging.INFO)

        assert main([]) == EXIT_OK
        assert "4321 requests remaining" in caplog.text
        assert fake_github.requested[-1] == "https://api.github.com/rate_limit"

    def test_single_pr_keeps_verdicts_when_issue_fetch_fails(self, fake_github, capsys):
        fake_github.add_backport(7)
        fake_github.add_upstream()
        fake_github.add_error(f"{API}/{BACKPORT}/issues/42", 500)

        exit_code = main(["-p", "7"])

        out = capsys.readouterr().out.splitlines()
        assert exit_code == EXIT_FINDINGS
        assert out[:2] == ["✅ Diffs match.", "✅ All backport commits reference valid upstream commits."]
        assert out[2].startswith("❌ Review aborted: GitHub API error: 500")

    @pytest.mark.parametrize("content", [
        "github:\n  colour: blue\n",
        "github: null\n",
        "just a string\n",
        "review: [unclosed\n",
    ])
    def test_malformed_config_file(self, fake_github, capsys, tmp_path, content):
        path = tmp_path / "config.yaml"
        path.write_text(content)

        exit_code = main(["-c", str(path)])

        assert exit_code == EXIT_CONFIG_ERROR
        assert capsys.readouterr().err.startswith("❌")
        assert fake_github.requested == []

    def test_unknown_pull_request(self, fake_github, capsys):
        exit_code = main(["-p", "404"])

        assert exit_code == EXIT_FINDINGS
        assert "Review of PR #404 failed" in capsys.readouterr().out
