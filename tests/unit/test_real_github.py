"""Tests for RealGitHub gh invocations and JSON parsing."""

import json

import pytest

from agt.core.errors import ClassifiedError, ErrorKind
from agt.core.github.real import (
    RealGitHub,
    issue_create_spec,
    label_create_spec,
    pull_request_create_spec,
    search_terms,
)
from agt.core.github.types import (
    NO_LABEL,
    Contributor,
    Issue,
    IssueDraft,
    IssueMatch,
    LabelDraft,
    PullRequestDraft,
    PullRequestMatch,
    SearchFilters,
    SearchState,
)
from tests.fakes.command_runner import FakeCommandRunner

ISSUE_LIST = ("gh", "issue", "list", "--state", "open", "--limit", "100", "--json", "number,title,labels")


def test_list_open_issues_takes_first_label_or_none() -> None:
    payload = [
        {"number": 12, "title": "Crash on start", "labels": [{"name": "bug"}, {"name": "p1"}]},
        {"number": 13, "title": "Docs", "labels": []},
    ]
    runner = FakeCommandRunner(outputs={ISSUE_LIST: json.dumps(payload)})

    issues = RealGitHub(runner).list_open_issues()

    assert issues == [
        Issue(number="12", title="Crash on start", label="bug"),
        Issue(number="13", title="Docs", label=NO_LABEL),
    ]


def test_invalid_json_is_command_failed() -> None:
    runner = FakeCommandRunner(outputs={ISSUE_LIST: "not json"})

    with pytest.raises(ClassifiedError) as exc_info:
        RealGitHub(runner).list_open_issues()

    assert exc_info.value.kind is ErrorKind.COMMAND_FAILED


def test_empty_output_is_empty_list() -> None:
    assert RealGitHub(FakeCommandRunner()).list_labels() == []


def test_list_contributors() -> None:
    runner = FakeCommandRunner(
        outputs={
            ("gh", "api", "repos/{owner}/{repo}/contributors?per_page=100"): json.dumps(
                [{"login": "octocat", "contributions": 42}, {"contributions": 1}]
            )
        }
    )

    assert RealGitHub(runner).list_contributors() == [Contributor(login="octocat", contributions=42)]


def test_repo_stats() -> None:
    runner = FakeCommandRunner(
        outputs={
            ("gh", "api", "repos/{owner}/{repo}"): json.dumps(
                {
                    "name": "agt",
                    "description": None,
                    "stargazers_count": 5,
                    "forks_count": 2,
                    "open_issues_count": 3,
                    "watchers_count": 5,
                }
            )
        }
    )

    stats = RealGitHub(runner).get_repo_stats()

    assert (stats.name, stats.description, stats.stars, stats.forks) == ("agt", "", 5, 2)


def test_issue_create_spec_omits_empty_options() -> None:
    spec = issue_create_spec(IssueDraft(title="T", body="B"))

    assert spec.argv == ["gh", "issue", "create", "--title", "T", "--body", "B"]


def test_issue_create_spec_with_options() -> None:
    spec = issue_create_spec(
        IssueDraft(
            title="T",
            body="B",
            assignees="octocat",
            labels=frozenset({"ui", "bug"}),
            milestone="v1",
        )
    )

    assert spec.args[-6:] == ("--assignee", "octocat", "--label", "bug,ui", "--milestone", "v1")


def test_pull_request_create_spec_adds_draft_flag() -> None:
    draft = PullRequestDraft(title="T", body="B", head="feat", base="main", is_draft=True)

    spec = pull_request_create_spec(draft)

    assert spec.argv[:2] == ["gh", "pr"]
    assert "--draft" in spec.args
    assert spec.args[spec.args.index("--head") + 1] == "feat"
    assert spec.args[spec.args.index("--base") + 1] == "main"


def test_label_create_spec() -> None:
    spec = label_create_spec(LabelDraft(name="bug", color="FF5733", description="Broken"))

    assert spec.argv == [
        "gh", "label", "create", "bug", "--color", "FF5733", "--description", "Broken",
    ]


def test_create_issue_returns_url() -> None:
    draft = IssueDraft(title="T", body="B")
    key = tuple(issue_create_spec(draft).argv)
    runner = FakeCommandRunner(outputs={key: "https://github.com/o/r/issues/1\n"})

    assert RealGitHub(runner).create_issue(draft) == "https://github.com/o/r/issues/1"
    assert len(runner.calls) == 1


def test_search_terms_combine_author_and_label() -> None:
    filters = SearchFilters(author="hubot", label="good first issue")

    assert search_terms("login", filters, with_label=True) == (
        'login label:"good first issue" author:hubot'
    )
    assert search_terms("login", filters, with_label=False) == "login author:hubot"


def test_search_issues_passes_state_and_parses_matches() -> None:
    key = (
        "gh", "issue", "list", "--search", "crash label:bug", "--state", "closed",
        "--limit", "100", "--json", "number,title,labels,author,state",
    )
    payload = [
        {
            "number": 7,
            "title": "Crash on start",
            "state": "CLOSED",
            "author": {"login": "hubot"},
            "labels": [{"name": "bug"}, {"name": "p1"}],
        },
        {"number": 8, "title": "Ghost", "state": "CLOSED", "author": None, "labels": []},
    ]
    runner = FakeCommandRunner(outputs={key: json.dumps(payload)})

    matches = RealGitHub(runner).search_issues(
        "crash", SearchFilters(state=SearchState.CLOSED, label="bug")
    )

    assert matches == [
        IssueMatch(
            number="7", title="Crash on start", state="CLOSED", author="hubot", labels=("bug", "p1")
        ),
        IssueMatch(number="8", title="Ghost", state="CLOSED", author="unknown"),
    ]


def test_search_pull_requests_ignores_label() -> None:
    key = (
        "gh", "pr", "list", "--search", "login", "--state", "merged",
        "--limit", "100", "--json", "number,title,headRefName,author,state,isDraft",
    )
    payload = [
        {
            "number": 9,
            "title": "Add login",
            "state": "MERGED",
            "author": {"login": "octocat"},
            "headRefName": "feature/add-login",
            "isDraft": False,
        }
    ]
    runner = FakeCommandRunner(outputs={key: json.dumps(payload)})

    matches = RealGitHub(runner).search_pull_requests(
        "login", SearchFilters(state=SearchState.MERGED, label="ignored")
    )

    assert matches == [
        PullRequestMatch(
            number="9",
            title="Add login",
            state="MERGED",
            author="octocat",
            branch="feature/add-login",
        )
    ]


@pytest.mark.parametrize(
    ("output", "login"),
    [
        ("github.com\n  ✓ Logged in to github.com account octocat (keyring)", "octocat"),
        ("github.com\n  ✓ Logged in to github.com as hubot (oauth_token)", "hubot"),
        ("github.com\n  ✓ Token scopes: repo", "unknown"),
    ],
)
def test_check_auth_reads_login(output: str, login: str) -> None:
    runner = FakeCommandRunner(outputs={("gh", "auth", "status"): output})

    assert RealGitHub(runner).check_auth() == login


def test_check_auth_failure_propagates() -> None:
    runner = FakeCommandRunner(
        failures={
            ("gh", "auth", "status"): ClassifiedError(
                ErrorKind.AUTH_FAILED, "You are not logged into any GitHub hosts"
            )
        }
    )

    with pytest.raises(ClassifiedError) as exc_info:
        RealGitHub(runner).check_auth()

    assert exc_info.value.kind is ErrorKind.AUTH_FAILED
