"""Production GitHub implementation using the gh CLI.

Each method is exactly one gh invocation through the CommandRunner. Command
construction lives in module-level ``*_spec`` functions so it can be tested
without running anything.
"""

import json
import re
from typing import Any

from agt.core.errors import ClassifiedError, ErrorKind
from agt.core.github.abc import GitHub
from agt.core.github.types import (
    NO_LABEL,
    Contributor,
    Issue,
    IssueDraft,
    IssueMatch,
    LabelDraft,
    PullRequest,
    PullRequestDraft,
    PullRequestMatch,
    RepoStats,
    SearchFilters,
)
from agt.core.subprocess import CommandRunner, CommandSpec

MAX_ITEMS_PER_PAGE = 100

# "Logged in to github.com account octocat (keyring)" or, from older gh, "... as octocat"
_LOGGED_IN = re.compile(r"Logged in to \S+ (?:account|as) ([^\s(]+)")


def _qualifier(name: str, value: str) -> str:
    return f'{name}:"{value}"' if " " in value else f"{name}:{value}"


def search_terms(query: str, filters: SearchFilters, *, with_label: bool) -> str:
    """Query plus ``author:``/``label:`` qualifiers; both filters apply together."""
    terms = [query]
    if with_label and filters.label:
        terms.append(_qualifier("label", filters.label))
    if filters.author:
        terms.append(_qualifier("author", filters.author))
    return " ".join(terms)


def issue_create_spec(draft: IssueDraft) -> CommandSpec:
    args = ["issue", "create", "--title", draft.title, "--body", draft.body]
    if draft.assignees:
        args.extend(["--assignee", draft.assignees])
    if draft.labels:
        args.extend(["--label", ",".join(sorted(draft.labels))])
    if draft.milestone:
        args.extend(["--milestone", draft.milestone])
    return CommandSpec.gh(*args)


def pull_request_create_spec(draft: PullRequestDraft) -> CommandSpec:
    args = [
        "pr",
        "create",
        "--title",
        draft.title,
        "--body",
        draft.body,
        "--head",
        draft.head,
        "--base",
        draft.base,
    ]
    if draft.reviewers:
        args.extend(["--reviewer", draft.reviewers])
    if draft.assignees:
        args.extend(["--assignee", draft.assignees])
    if draft.labels:
        args.extend(["--label", ",".join(sorted(draft.labels))])
    if draft.milestone:
        args.extend(["--milestone", draft.milestone])
    if draft.is_draft:
        args.append("--draft")
    return CommandSpec.gh(*args)


def label_create_spec(draft: LabelDraft) -> CommandSpec:
    args = ["label", "create", draft.name, "--color", draft.color]
    if draft.description:
        args.extend(["--description", draft.description])
    return CommandSpec.gh(*args)


class RealGitHub(GitHub):
    """Production implementation using gh CLI through a CommandRunner."""

    def __init__(self, runner: CommandRunner) -> None:
        self._runner = runner

    def _gh_json(self, *args: str) -> Any:
        spec = CommandSpec.gh(*args)
        raw = self._runner.run(spec).stdout
        if not raw.strip():
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise ClassifiedError(
                ErrorKind.COMMAND_FAILED,
                f"Invalid JSON from gh: {e}",
                context={"command": spec.command_line},
            ) from e

    def check_auth(self) -> str:
        output = self._runner.run(CommandSpec.gh("auth", "status")).stdout
        match = _LOGGED_IN.search(output)
        return match.group(1) if match else "unknown"

    def get_current_user(self) -> str:
        return self._runner.run(CommandSpec.gh("api", "user", "-q", ".login")).stdout.strip()

    def list_labels(self) -> list[str]:
        data = self._gh_json("label", "list", "--limit", str(MAX_ITEMS_PER_PAGE), "--json", "name")
        if not isinstance(data, list):
            return []
        return [str(item["name"]) for item in data if isinstance(item, dict) and item.get("name")]

    def list_open_issues(self) -> list[Issue]:
        data = self._gh_json(
            "issue",
            "list",
            "--state",
            "open",
            "--limit",
            str(MAX_ITEMS_PER_PAGE),
            "--json",
            "number,title,labels",
        )
        if not isinstance(data, list):
            return []
        issues: list[Issue] = []
        for item in data:
            labels = item.get("labels") or []
            first_label = labels[0].get("name") if labels else None
            issues.append(
                Issue(
                    number=str(item["number"]),
                    title=str(item.get("title", "")),
                    label=first_label or NO_LABEL,
                )
            )
        return issues

    def list_open_pull_requests(self) -> list[PullRequest]:
        data = self._gh_json(
            "pr",
            "list",
            "--state",
            "open",
            "--limit",
            str(MAX_ITEMS_PER_PAGE),
            "--json",
            "number,title,headRefName,isDraft",
        )
        if not isinstance(data, list):
            return []
        return [
            PullRequest(
                number=str(item["number"]),
                title=str(item.get("title", "")),
                branch=str(item.get("headRefName", "")),
                is_draft=bool(item.get("isDraft", False)),
            )
            for item in data
        ]

    def get_repo_stats(self) -> RepoStats:
        data = self._gh_json("api", "repos/{owner}/{repo}")
        if not isinstance(data, dict):
            raise ClassifiedError(
                ErrorKind.COMMAND_FAILED, "Unexpected repository payload from gh"
            )
        return RepoStats(
            name=str(data.get("name", "")),
            description=str(data.get("description") or ""),
            stars=int(data.get("stargazers_count", 0)),
            forks=int(data.get("forks_count", 0)),
            open_issues=int(data.get("open_issues_count", 0)),
            watchers=int(data.get("watchers_count", 0)),
        )

    def list_contributors(self) -> list[Contributor]:
        data = self._gh_json(
            "api", f"repos/{{owner}}/{{repo}}/contributors?per_page={MAX_ITEMS_PER_PAGE}"
        )
        if not isinstance(data, list):
            return []
        return [
            Contributor(login=str(item["login"]), contributions=int(item.get("contributions", 0)))
            for item in data
            if isinstance(item, dict) and item.get("login")
        ]

    def search_issues(self, query: str, filters: SearchFilters) -> list[IssueMatch]:
        data = self._gh_json(
            "issue",
            "list",
            "--search",
            search_terms(query, filters, with_label=True),
            "--state",
            filters.state.value,
            "--limit",
            str(MAX_ITEMS_PER_PAGE),
            "--json",
            "number,title,labels,author,state",
        )
        if not isinstance(data, list):
            return []
        return [
            IssueMatch(
                number=str(item["number"]),
                title=str(item.get("title", "")),
                state=str(item.get("state", "")),
                author=_author_login(item),
                labels=tuple(
                    str(label["name"]) for label in item.get("labels") or [] if label.get("name")
                ),
            )
            for item in data
        ]

    def search_pull_requests(self, query: str, filters: SearchFilters) -> list[PullRequestMatch]:
        data = self._gh_json(
            "pr",
            "list",
            "--search",
            search_terms(query, filters, with_label=False),
            "--state",
            filters.state.value,
            "--limit",
            str(MAX_ITEMS_PER_PAGE),
            "--json",
            "number,title,headRefName,author,state,isDraft",
        )
        if not isinstance(data, list):
            return []
        return [
            PullRequestMatch(
                number=str(item["number"]),
                title=str(item.get("title", "")),
                state=str(item.get("state", "")),
                author=_author_login(item),
                branch=str(item.get("headRefName", "")),
                is_draft=bool(item.get("isDraft", False)),
            )
            for item in data
        ]

    def create_issue(self, draft: IssueDraft) -> str:
        return self._runner.run(issue_create_spec(draft)).stdout.strip()

    def create_pull_request(self, draft: PullRequestDraft) -> str:
        return self._runner.run(pull_request_create_spec(draft)).stdout.strip()

    def create_label(self, draft: LabelDraft) -> None:
        self._runner.run(label_create_spec(draft))


def _author_login(item: dict[str, Any]) -> str:
    author = item.get("author")
    if isinstance(author, dict) and author.get("login"):
        return str(author["login"])
    return "unknown"
