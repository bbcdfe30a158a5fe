"""Tests for TemplateBodyAuthor."""

from pathlib import Path

from agt.core.templates import (
    BodyKind,
    ContextRequest,
    NoTemplateBodyAuthor,
    TemplateBodyAuthor,
    body_author_for,
    read_template_body,
    template_display_name,
)
from tests.fakes.prompter import FakePrompter

BUG_TEMPLATE = """---
name: Bug report
about: Report something broken
labels: bug
---
## Describe the bug

## Steps to reproduce
"""


def _write(root: Path, relative: str, content: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_pull_request_template_requests_open_issues_and_is_verbatim(tmp_path: Path) -> None:
    _write(tmp_path, ".github/PULL_REQUEST_TEMPLATE.md", "## Summary\n{{ Summary }}\n")
    author = TemplateBodyAuthor(tmp_path, FakePrompter())

    assert author.context_request(BodyKind.PULL_REQUEST) is ContextRequest.OPEN_ISSUES
    assert author.compose(BodyKind.PULL_REQUEST) == "## Summary\n{{ Summary }}\n"


def test_lowercase_pull_request_template_is_found(tmp_path: Path) -> None:
    _write(tmp_path, ".github/pull_request_template.md", "body")

    assert TemplateBodyAuthor(tmp_path, FakePrompter()).compose(BodyKind.PULL_REQUEST) == "body"


def test_no_templates_falls_back(tmp_path: Path) -> None:
    author = TemplateBodyAuthor(tmp_path, FakePrompter())

    assert author.context_request(BodyKind.PULL_REQUEST) is ContextRequest.NONE
    assert author.compose(BodyKind.PULL_REQUEST) is None
    assert author.compose(BodyKind.ISSUE) is None


def test_auto_templates_off_ignores_templates(tmp_path: Path) -> None:
    _write(tmp_path, ".github/PULL_REQUEST_TEMPLATE.md", "body")
    author = body_author_for(tmp_path, FakePrompter(), auto_templates=False)

    assert isinstance(author, NoTemplateBodyAuthor)
    assert author.context_request(BodyKind.PULL_REQUEST) is ContextRequest.NONE
    assert author.compose(BodyKind.PULL_REQUEST) is None


def test_issue_template_selected_and_front_matter_stripped(tmp_path: Path) -> None:
    _write(tmp_path, ".github/ISSUE_TEMPLATE/bug_report.md", BUG_TEMPLATE)
    _write(tmp_path, ".github/ISSUE_TEMPLATE/question.md", "Ask away\n")
    _write(tmp_path, ".github/ISSUE_TEMPLATE/config.yml", "blank_issues_enabled: false\n")
    prompter = FakePrompter(confirms=[True], selects=["Bug report"])
    author = TemplateBodyAuthor(tmp_path, prompter)

    body = author.compose(BodyKind.ISSUE)

    assert body is not None
    assert body.startswith("## Describe the bug")
    assert "name: Bug report" not in body
    assert prompter.asked == ["Would you like to use an issue template?", "Select a template:"]


def test_issue_template_declined(tmp_path: Path) -> None:
    _write(tmp_path, ".github/ISSUE_TEMPLATE/bug_report.md", BUG_TEMPLATE)
    author = TemplateBodyAuthor(tmp_path, FakePrompter(confirms=[False]))

    assert author.compose(BodyKind.ISSUE) is None


def test_display_name_prefers_front_matter_name(tmp_path: Path) -> None:
    bug = _write(tmp_path, "bug_report.md", BUG_TEMPLATE)
    plain = _write(tmp_path, "plain.md", "no front matter")

    assert template_display_name(bug) == "Bug report (bug_report.md)"
    assert template_display_name(plain) == "plain.md"


def test_malformed_front_matter_keeps_raw_text(tmp_path: Path) -> None:
    broken = _write(tmp_path, "broken.md", "---\nname: [unclosed\n---\nBody\n")

    assert read_template_body(broken).startswith("---\nname: [unclosed")


def test_no_template_author() -> None:
    author = NoTemplateBodyAuthor()

    assert author.context_request(BodyKind.ISSUE) is ContextRequest.NONE
    assert author.compose(BodyKind.PULL_REQUEST) is None


def test_auto_templates_on_uses_repository_templates(tmp_path: Path) -> None:
    author = body_author_for(tmp_path, FakePrompter(), auto_templates=True)

    assert isinstance(author, TemplateBodyAuthor)
