"""Input validation and normalization.

All validators are pure. They return the normalized value or raise a
ClassifiedError of kind invalid-input at the point of bad input.
"""

import re

from agt.core.errors import ClassifiedError, ErrorKind, ErrorVariant

BRANCH_NAME_MAX_LENGTH = 255
_BRANCH_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_/-]+$")
_HEX_COLOR_PATTERN = re.compile(r"^[0-9A-Fa-f]{6}$")
_ISSUE_NUMBER_PATTERN = re.compile(r"^\d+$")

DEFAULT_LABEL_COLOR = "FFFFFF"

PROTECTED_BRANCHES = frozenset(
    {"main", "master", "develop", "development", "staging", "production", "release"}
)


def _invalid(variant: ErrorVariant, message: str, value: str) -> ClassifiedError:
    return ClassifiedError(
        ErrorKind.INVALID_INPUT, message, variant=variant, context={"input": value}
    )


def validate_not_empty(value: str | None, field_name: str) -> str:
    """Return ``value`` stripped, or raise if it is empty or whitespace."""
    if value is None or not value.strip():
        raise _invalid(ErrorVariant.EMPTY_FIELD, f"{field_name} cannot be empty.", value or "")
    return value.strip()


def validate_issue_number(value: str) -> int:
    stripped = value.strip()
    if not _ISSUE_NUMBER_PATTERN.match(stripped) or int(stripped) <= 0:
        raise _invalid(
            ErrorVariant.ISSUE_NUMBER,
            f"Invalid issue number '{value}'. Please enter a positive number.",
            value,
        )
    return int(stripped)


def sanitize_branch_name(name: str) -> str:
    """Turn free text into a branch-name fragment.

    Lowercases, turns whitespace runs into hyphens, drops anything outside
    ``[a-z0-9_-]``, collapses repeated hyphens and trims hyphens from the ends.
    Idempotent: sanitizing a sanitized name returns it unchanged.

    Examples:
        >>> sanitize_branch_name("Fix Login Bug!!")
        'fix-login-bug'
    """
    lowered = name.lower()
    hyphenated = re.sub(r"\s+", "-", lowered)
    cleaned = re.sub(r"[^a-z0-9_-]", "", hyphenated)
    collapsed = re.sub(r"-{2,}", "-", cleaned)
    return collapsed.strip("-")


def validate_branch_name(name: str) -> str:
    if not name:
        raise _invalid(ErrorVariant.BRANCH_NAME, "Branch name cannot be empty.", name)
    if len(name) > BRANCH_NAME_MAX_LENGTH:
        raise _invalid(
            ErrorVariant.BRANCH_NAME,
            f"Branch name is longer than {BRANCH_NAME_MAX_LENGTH} characters.",
            name,
        )
    if not _BRANCH_NAME_PATTERN.match(name):
        raise _invalid(
            ErrorVariant.BRANCH_NAME,
            f"Branch name '{name}' contains invalid characters.",
            name,
        )
    return name


def build_branch_name(branch_type: str, issue_number: str, title: str) -> str:
    """Compose ``<type>/<issue>-<slug>`` from an issue, validated.

    Falls back to ``<type>/<issue>`` when the title has no usable characters.
    """
    slug = sanitize_branch_name(title)
    name = f"{branch_type}/{issue_number}-{slug}" if slug else f"{branch_type}/{issue_number}"
    return validate_branch_name(name)


def validate_hex_color(color: str | None) -> str:
    """Normalize a label color to six uppercase hex digits.

    Empty input yields the default color. A single leading ``#`` is accepted.
    """
    if color is None or not color.strip():
        return DEFAULT_LABEL_COLOR
    cleaned = color.strip().removeprefix("#")
    if not _HEX_COLOR_PATTERN.match(cleaned):
        raise _invalid(
            ErrorVariant.COLOR,
            f"Invalid color '{color}'. Use a 6-digit hex code (e.g., FFFFFF or #FFFFFF).",
            color,
        )
    return cleaned.upper()


def parse_csv(value: str | None) -> list[str]:
    """Split comma-separated input, dropping blanks."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]
