"""Body authoring from the repository's ``.github`` templates.

Workflows ask a BodyAuthor for an issue or pull-request body in two steps:
``context_request`` says what the orchestrator should fetch and show first, then
``compose`` returns the body (or None to fall back to a prompted description).
Template text is returned verbatim; issue templates have their YAML front matter
stripped.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path

import frontmatter
import yaml

from agt.core.prompts import Choice, Prompter

logger = logging.getLogger(__name__)

PULL_REQUEST_TEMPLATE_PATHS = (
    Path(".github") / "PULL_REQUEST_TEMPLATE.md",
    Path(".github") / "pull_request_template.md",
    Path("PULL_REQUEST_TEMPLATE.md"),
)
ISSUE_TEMPLATE_DIR = Path(".github") / "ISSUE_TEMPLATE"


class BodyKind(Enum):
    ISSUE = "issue"
    PULL_REQUEST = "pull-request"


class ContextRequest(Enum):
    NONE = "none"
    OPEN_ISSUES = "open-issues"


class BodyAuthor(ABC):
    """Supplies issue and pull-request bodies."""

    @abstractmethod
    def context_request(self, kind: BodyKind) -> ContextRequest:
        """Context the orchestrator should display before ``compose`` runs."""
        ...

    @abstractmethod
    def compose(self, kind: BodyKind) -> str | None:
        """Body text, or None when the user should type a description instead."""
        ...


class NoTemplateBodyAuthor(BodyAuthor):
    """Always falls back to a prompted description."""

    def context_request(self, kind: BodyKind) -> ContextRequest:
        return ContextRequest.NONE

    def compose(self, kind: BodyKind) -> str | None:
        return None


def find_pull_request_template(repo_root: Path) -> Path | None:
    for relative in PULL_REQUEST_TEMPLATE_PATHS:
        candidate = repo_root / relative
        if candidate.is_file():
            return candidate
    return None


def list_issue_templates(repo_root: Path) -> list[Path]:
    template_dir = repo_root / ISSUE_TEMPLATE_DIR
    if not template_dir.is_dir():
        return []
    return sorted(path for path in template_dir.iterdir() if path.suffix == ".md")


def template_display_name(path: Path) -> str:
    """Front matter ``name`` when present, else the file name."""
    try:
        post = frontmatter.loads(path.read_text(encoding="utf-8"))
    except yaml.YAMLError:
        return path.name
    name = post.metadata.get("name")
    if isinstance(name, str) and name.strip():
        return f"{name.strip()} ({path.name})"
    return path.name


def read_template_body(path: Path) -> str:
    """Template text without its YAML front matter.

    Malformed front matter is kept as part of the body rather than dropped.
    """
    content = path.read_text(encoding="utf-8")
    try:
        post = frontmatter.loads(content)
    except yaml.YAMLError:
        logger.warning("unparseable front matter in %s, using raw text", path)
        return content
    return post.content


class TemplateBodyAuthor(BodyAuthor):
    """Uses ``.github`` templates when they exist.

    Issue templates are offered through the prompter (confirm, then select);
    the pull-request template is used as-is.
    """

    def __init__(self, repo_root: Path, prompter: Prompter) -> None:
        self._repo_root = repo_root
        self._prompter = prompter

    def context_request(self, kind: BodyKind) -> ContextRequest:
        if kind is BodyKind.PULL_REQUEST and find_pull_request_template(self._repo_root):
            return ContextRequest.OPEN_ISSUES
        return ContextRequest.NONE

    def compose(self, kind: BodyKind) -> str | None:
        if kind is BodyKind.PULL_REQUEST:
            template = find_pull_request_template(self._repo_root)
            if template is None:
                return None
            logger.info("using pull request template %s", template)
            return template.read_text(encoding="utf-8")
        return self._compose_issue()

    def _compose_issue(self) -> str | None:
        templates = list_issue_templates(self._repo_root)
        if not templates:
            return None
        if not self._prompter.confirm("Would you like to use an issue template?", default=True):
            return None
        chosen = self._prompter.select(
            "Select a template:",
            [Choice(label=template_display_name(path), value=path) for path in templates],
        )
        logger.info("using issue template %s", chosen)
        return read_template_body(chosen)


def body_author_for(repo_root: Path, prompter: Prompter, *, auto_templates: bool) -> BodyAuthor:
    """Template-backed author when ``autoTemplates`` is on, else prompted descriptions only."""
    if auto_templates:
        return TemplateBodyAuthor(repo_root, prompter)
    return NoTemplateBodyAuthor()
