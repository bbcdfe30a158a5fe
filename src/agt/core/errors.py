"""Error taxonomy, classification, and user-facing formatting.

Every failure that reaches the CLI boundary is a ClassifiedError: one kind from a
closed taxonomy, an optional variant that narrows the kind, the original message,
and an immutable string context (command, cwd, stderr).

Classification is a pure function. Structured inputs (CommandFailure, known
exception types) are matched first; free-form text from external tools falls
back to ordered substring rules.
"""

import re
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

import click


class ErrorKind(Enum):
    """Closed set of error kinds."""

    REPOSITORY_MISSING = "repository-missing"
    TOOL_MISSING = "tool-missing"
    AUTH_FAILED = "auth-failed"
    COMMAND_FAILED = "command-failed"
    NETWORK_ERROR = "network-error"
    NETWORK_TIMEOUT = "network-timeout"
    CONNECTION_REFUSED = "connection-refused"
    INVALID_INPUT = "invalid-input"
    RESOURCE_NOT_FOUND = "resource-not-found"
    OPERATION_FAILED = "operation-failed"
    OPERATION_CANCELLED = "operation-cancelled"
    UNKNOWN = "unknown"


class ErrorVariant(Enum):
    """Subtypes that narrow an ErrorKind."""

    RATE_LIMIT = "rate-limit"
    ISSUE_NUMBER = "issue-number"
    BRANCH_NAME = "branch-name"
    COLOR = "color"
    EMPTY_FIELD = "empty-field"
    BRANCH = "branch"
    ISSUE = "issue"
    REBASE_CONFLICT = "rebase-conflict"
    NO_COMMITS = "no-commits"


RETRYABLE_KINDS = frozenset(
    {ErrorKind.NETWORK_ERROR, ErrorKind.NETWORK_TIMEOUT, ErrorKind.CONNECTION_REFUSED}
)


class ClassifiedError(Exception):
    """A failure mapped onto the error taxonomy.

    Attributes are read-only after construction; context is exposed as an
    immutable mapping.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        variant: ErrorVariant | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self._kind = kind
        self._variant = variant
        self._message = message
        self._context = MappingProxyType(dict(context or {}))

    @property
    def kind(self) -> ErrorKind:
        return self._kind

    @property
    def variant(self) -> ErrorVariant | None:
        return self._variant

    @property
    def message(self) -> str:
        return self._message

    @property
    def context(self) -> Mapping[str, str]:
        return self._context

    @property
    def is_retryable(self) -> bool:
        return self._kind in RETRYABLE_KINDS

    def __repr__(self) -> str:
        variant = f", variant={self._variant.value}" if self._variant else ""
        return f"ClassifiedError(kind={self._kind.value}{variant}, message={self._message!r})"


@dataclass(frozen=True)
class CommandFailure:
    """Structured record of a process that ran and exited non-zero."""

    program: str
    args: tuple[str, ...]
    exit_code: int | None
    stderr: str

    @property
    def command_line(self) -> str:
        return " ".join([self.program, *self.args])


# ============================================================================
# Classification
# ============================================================================

_TOOL_NOT_FOUND = re.compile(r"\b(git|gh)\b.*\bnot (found|installed)\b")


def _has_any(text: str, needles: tuple[str, ...]) -> bool:
    return any(needle in text for needle in needles)


def _classify_text(text: str) -> tuple[ErrorKind, ErrorVariant | None] | None:
    """Ordered substring rules over lowercased text. First match wins."""
    if _has_any(text, ("not a git repository", "not in a git directory")):
        return ErrorKind.REPOSITORY_MISSING, None
    if "rate limit" in text:
        return ErrorKind.NETWORK_ERROR, ErrorVariant.RATE_LIMIT

    if _has_any(text, ("command not found", "executable file not found")):
        return ErrorKind.TOOL_MISSING, None
    # "HTTP 404: Not Found" from gh is a missing resource, not a missing tool
    mentions_resource = _has_any(text, ("branch", "issue", "http"))
    if not mentions_resource and _TOOL_NOT_FOUND.search(text):
        return ErrorKind.TOOL_MISSING, None

    if _has_any(text, ("authentication", "not logged in", "auth login")):
        return ErrorKind.AUTH_FAILED, None
    # before the network rules: a branch named fix-timeout is missing, not timed out
    if "branch" in text and "not found" in text:
        return ErrorKind.RESOURCE_NOT_FOUND, ErrorVariant.BRANCH
    if "issue" in text and ("not found" in text or "could not resolve to an issue" in text):
        return ErrorKind.RESOURCE_NOT_FOUND, ErrorVariant.ISSUE
    if _has_any(text, ("network", "enotfound", "dns", "could not resolve host")):
        return ErrorKind.NETWORK_ERROR, None
    if _has_any(text, ("timeout", "timed out", "etimedout")):
        return ErrorKind.NETWORK_TIMEOUT, None
    if _has_any(text, ("econnrefused", "connection refused")):
        return ErrorKind.CONNECTION_REFUSED, None
    return None


def classify(raw: object) -> ClassifiedError:
    """Map a raw failure onto exactly one error kind.

    Deterministic and side-effect free. Accepts an already classified error
    (returned unchanged), a CommandFailure, any exception, or a plain message.

    Args:
        raw: The failure to classify

    Returns:
        ClassifiedError carrying the kind, optional variant and context
    """
    if isinstance(raw, ClassifiedError):
        return raw

    if isinstance(raw, (KeyboardInterrupt, click.Abort)):
        return ClassifiedError(ErrorKind.OPERATION_CANCELLED, "Operation cancelled by user")

    if isinstance(raw, subprocess.TimeoutExpired):
        cmd = raw.cmd if isinstance(raw.cmd, str) else " ".join(str(part) for part in raw.cmd)
        return ClassifiedError(
            ErrorKind.NETWORK_TIMEOUT,
            f"Command timed out after {raw.timeout}s",
            context={"command": cmd},
        )

    if isinstance(raw, FileNotFoundError) and raw.filename is not None:
        return ClassifiedError(
            ErrorKind.TOOL_MISSING,
            f"Executable not found: {raw.filename}",
            context={"program": str(raw.filename)},
        )

    if isinstance(raw, CommandFailure):
        message = raw.stderr.strip() or f"'{raw.command_line}' exited with code {raw.exit_code}"
        context = {"command": raw.command_line, "stderr": raw.stderr.strip()}
        if raw.exit_code is not None:
            context["exit_code"] = str(raw.exit_code)
        matched = _classify_text(raw.stderr.lower())
        if matched is not None:
            kind, variant = matched
        elif raw.exit_code is not None:
            kind, variant = ErrorKind.COMMAND_FAILED, None
        else:
            kind, variant = ErrorKind.UNKNOWN, None
        return ClassifiedError(kind, message, variant=variant, context=context)

    message = str(raw)
    matched = _classify_text(message.lower())
    if matched is None:
        return ClassifiedError(ErrorKind.UNKNOWN, message)
    kind, variant = matched
    return ClassifiedError(kind, message, variant=variant)


# ============================================================================
# Help catalog and formatting
# ============================================================================


@dataclass(frozen=True)
class ErrorHelp:
    """Human-facing description of an error kind."""

    title: str
    explanation: str
    solution: str | None
    docs: str | None = None


_KIND_HELP: dict[ErrorKind, ErrorHelp] = {
    ErrorKind.REPOSITORY_MISSING: ErrorHelp(
        "Not a Git Repository",
        "This directory is not a Git repository.",
        "Initialize a repository with: git init\nOr clone an existing one with: git clone <url>",
        "https://git-scm.com/docs/git-init",
    ),
    ErrorKind.TOOL_MISSING: ErrorHelp(
        "Required Tool Not Found",
        "git or the GitHub CLI (gh) is not installed or not on your PATH.",
        "Install Git from: https://git-scm.com/downloads\n"
        "Install GitHub CLI from: https://cli.github.com",
        "https://cli.github.com/manual/installation",
    ),
    ErrorKind.AUTH_FAILED: ErrorHelp(
        "GitHub Authentication Failed",
        "You are not authenticated with GitHub CLI.",
        "Authenticate with: gh auth login",
        "https://cli.github.com/manual/gh_auth_login",
    ),
    ErrorKind.COMMAND_FAILED: ErrorHelp(
        "Command Failed",
        "An external command failed to execute.",
        "Check the command output above for details.",
    ),
    ErrorKind.NETWORK_ERROR: ErrorHelp(
        "Network Error",
        "A network error occurred while connecting to GitHub.",
        "Check your internet connection.\n"
        "Verify that GitHub is accessible: https://www.githubstatus.com/",
    ),
    ErrorKind.NETWORK_TIMEOUT: ErrorHelp(
        "Network Timeout",
        "The request timed out while waiting for a response.",
        "Check your internet connection and try again.",
    ),
    ErrorKind.CONNECTION_REFUSED: ErrorHelp(
        "Connection Refused",
        "The connection was refused by the remote server.",
        "Check your internet connection and firewall settings.",
    ),
    ErrorKind.INVALID_INPUT: ErrorHelp(
        "Invalid Input",
        "The provided input is invalid.",
        "Please check the input format and try again.",
    ),
    ErrorKind.RESOURCE_NOT_FOUND: ErrorHelp(
        "Resource Not Found",
        "The requested resource could not be found.",
        "Verify that the resource exists and try again.",
    ),
    ErrorKind.OPERATION_FAILED: ErrorHelp(
        "Operation Failed",
        "The operation failed to complete.",
        "Check the error details above and try again.",
    ),
    ErrorKind.OPERATION_CANCELLED: ErrorHelp(
        "Operation Cancelled",
        "The operation was cancelled.",
        None,
    ),
    ErrorKind.UNKNOWN: ErrorHelp(
        "Unknown Error",
        "An unexpected error occurred.",
        "Run again with --debug and check ~/.agt/agt.log for details.",
    ),
}

_VARIANT_HELP: dict[ErrorVariant, ErrorHelp] = {
    ErrorVariant.RATE_LIMIT: ErrorHelp(
        "GitHub API Rate Limit Exceeded",
        "You have exceeded the GitHub API rate limit.",
        "Wait for the rate limit to reset or authenticate for higher limits.",
        "https://docs.github.com/en/rest/overview/resources-in-the-rest-api#rate-limiting",
    ),
    ErrorVariant.ISSUE_NUMBER: ErrorHelp(
        "Invalid Issue Number",
        "The issue number must be a positive integer.",
        "Enter a valid issue number (e.g., 1, 42, 123).",
    ),
    ErrorVariant.BRANCH_NAME: ErrorHelp(
        "Invalid Branch Name",
        "The branch name contains invalid characters.",
        "Use only letters, numbers, hyphens, underscores and slashes.",
        "https://git-scm.com/docs/git-check-ref-format",
    ),
    ErrorVariant.COLOR: ErrorHelp(
        "Invalid Color Code",
        "The color code must be a 6-digit hexadecimal value.",
        "Use format: RRGGBB or #RRGGBB (e.g., FF5733 or #FF5733).",
    ),
    ErrorVariant.EMPTY_FIELD: ErrorHelp(
        "Required Field Empty",
        "A required field cannot be empty.",
        "Please provide a value for the required field.",
    ),
    ErrorVariant.BRANCH: ErrorHelp(
        "Branch Not Found",
        "The specified branch does not exist.",
        "Check available branches with: git branch -a",
    ),
    ErrorVariant.ISSUE: ErrorHelp(
        "Issue Not Found",
        "The specified issue does not exist.",
        "Check available issues with: agt list",
    ),
    ErrorVariant.REBASE_CONFLICT: ErrorHelp(
        "Rebase Conflict",
        "The branch could not be rebased cleanly onto its base.",
        "Resolve the conflicts, then run: git rebase --continue\n"
        "Or give up on the sync with: git rebase --abort",
        "https://git-scm.com/docs/git-rebase",
    ),
    ErrorVariant.NO_COMMITS: ErrorHelp(
        "Nothing To Open",
        "The head branch has no commits that are not already on the base branch.",
        "Commit your changes before creating a pull request.",
    ),
}


def help_for(error: ClassifiedError) -> ErrorHelp:
    """Look up help text, preferring the variant entry over the kind entry."""
    if error.variant is not None and error.variant in _VARIANT_HELP:
        return _VARIANT_HELP[error.variant]
    return _KIND_HELP[error.kind]


def format_error(error: ClassifiedError) -> str:
    """Render a classified error as a multi-line message for stderr."""
    info = help_for(error)
    lines = [click.style(f"Error: {info.title}", fg="red", bold=True), "", info.explanation]

    if error.message and error.message != info.explanation:
        lines.extend(["", f"Details: {error.message}"])

    if "cwd" in error.context:
        lines.append(f"Current directory: {error.context['cwd']}")
    if "command" in error.context:
        lines.append(f"Command: {error.context['command']}")

    if info.solution:
        lines.extend(["", "To fix:"])
        lines.extend(f"  • {line}" for line in info.solution.splitlines())

    if info.docs:
        lines.extend(["", f"Docs: {info.docs}"])

    return "\n".join(lines)


_EXIT_CODES: dict[ErrorKind, int] = {
    ErrorKind.REPOSITORY_MISSING: 10,
    ErrorKind.TOOL_MISSING: 11,
    ErrorKind.AUTH_FAILED: 12,
    ErrorKind.NETWORK_ERROR: 20,
    ErrorKind.NETWORK_TIMEOUT: 20,
    ErrorKind.CONNECTION_REFUSED: 20,
    ErrorKind.OPERATION_CANCELLED: 130,
}


def exit_code_for(error: ClassifiedError) -> int:
    return _EXIT_CODES.get(error.kind, 1)
