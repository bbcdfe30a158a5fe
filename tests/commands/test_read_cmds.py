"""Tests for the read-only commands: list and stats."""

from click.testing import CliRunner

from agt.cli.cli import cli
from agt.core.context import AgtContext
from agt.core.github.types import Contributor, Issue, PullRequest, RepoStats
from tests.fakes.github import FakeGitHub
from tests.fakes.prompter import FakePrompter


def test_list_issues() -> None:
    github = FakeGitHub(open_issues=[Issue(number="3", title="Slow startup", label="perf")])
    ctx = AgtContext.for_test(github=github)

    result = CliRunner().invoke(cli, ["list", "--type", "issues"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Slow startup" in result.output
    assert "[perf]" in result.output


def test_list_prompts_for_kind() -> None:
    github = FakeGitHub(
        open_pull_requests=[
            PullRequest(number="9", title="Add login", branch="feature/1-add-login", is_draft=True)
        ]
    )
    ctx = AgtContext.for_test(github=github, prompter=FakePrompter(selects=["Pull Requests"]))

    result = CliRunner().invoke(cli, ["list"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Add login" in result.output
    assert "[draft]" in result.output
    assert "(feature/1-add-login)" in result.output


def test_list_empty() -> None:
    ctx = AgtContext.for_test(github=FakeGitHub())

    result = CliRunner().invoke(cli, ["list", "--type", "prs"], obj=ctx)

    assert result.exit_code == 0
    assert "No open pull requests found." in result.output


def test_stats_renders_summary() -> None:
    github = FakeGitHub(
        repo_stats=RepoStats(
            name="agt", description="Workflow CLI", stars=12, forks=3, open_issues=4, watchers=5
        ),
        contributors=[Contributor(login="octocat", contributions=42)],
    )
    ctx = AgtContext.for_test(github=github)

    result = CliRunner().invoke(cli, ["stats"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Workflow CLI" in result.output
    assert "octocat" in result.output
    assert "42" in result.output


def test_repeated_reads_hit_cache() -> None:
    github = FakeGitHub(open_issues=[Issue(number="3", title="Slow startup")])
    ctx = AgtContext.for_test(github=github)

    CliRunner().invoke(cli, ["list", "--type", "issues"], obj=ctx)
    CliRunner().invoke(cli, ["list", "--type", "issues"], obj=ctx)

    assert github.read_calls == {"list_open_issues": 1}
