"""Configuration loaded from ``.agtrc.json``.

The project-local file in the working directory wins; otherwise the copy in the
user's home directory is used. The document is merged over built-in defaults and
validated. A missing, unreadable or invalid document never fails the command:
the defaults are used and the problems are returned as warnings.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".agtrc.json"

_BRANCH_TYPE_NAME = re.compile(r"^[a-z]+$")


@dataclass(frozen=True)
class BranchType:
    id: str
    name: str
    description: str


DEFAULT_BRANCH_TYPES: tuple[BranchType, ...] = (
    BranchType(id="1", name="feature", description="Develop new features"),
    BranchType(id="2", name="bugfix", description="Fix bugs"),
    BranchType(id="3", name="hotfix", description="Urgent fixes"),
    BranchType(id="4", name="release", description="Prepare for a release"),
)


@dataclass(frozen=True)
class AgtConfig:
    """Immutable configuration data."""

    default_base_branch: str = "main"
    branch_types: tuple[BranchType, ...] = DEFAULT_BRANCH_TYPES
    auto_assign: bool = True
    default_labels: tuple[str, ...] = ()
    auto_templates: bool = True

    def to_document(self) -> dict[str, Any]:
        return {
            "defaultBaseBranch": self.default_base_branch,
            "branchTypes": [
                {"id": t.id, "name": t.name, "description": t.description}
                for t in self.branch_types
            ],
            "autoAssign": self.auto_assign,
            "defaultLabels": list(self.default_labels),
            "autoTemplates": self.auto_templates,
        }


@dataclass(frozen=True)
class LoadedConfig:
    config: AgtConfig
    source: Path | None
    warnings: tuple[str, ...] = field(default_factory=tuple)


class ConfigValidationError(ValueError):
    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__("Invalid configuration:\n" + "\n".join(f"  - {e}" for e in errors))


def validate_document(document: dict[str, Any]) -> AgtConfig:
    """Validate a merged config document and build an AgtConfig.

    Raises:
        ConfigValidationError: Listing every problem found
    """
    errors: list[str] = []

    base = document.get("defaultBaseBranch")
    if not isinstance(base, str) or not base.strip():
        errors.append("defaultBaseBranch must be a non-empty string")

    branch_types: list[BranchType] = []
    raw_types = document.get("branchTypes")
    if not isinstance(raw_types, list):
        errors.append("branchTypes must be an array")
    elif not raw_types:
        errors.append("branchTypes cannot be empty")
    else:
        for index, raw in enumerate(raw_types):
            if not isinstance(raw, dict):
                errors.append(f"branchTypes[{index}] must be an object")
                continue
            type_id, name, description = raw.get("id"), raw.get("name"), raw.get("description")
            if not type_id or not name or not description:
                errors.append(f"branchTypes[{index}] must have id, name, and description fields")
                continue
            if not isinstance(name, str) or not _BRANCH_TYPE_NAME.match(name):
                errors.append(f"branchTypes[{index}].name must contain only lowercase letters")
                continue
            branch_types.append(BranchType(id=str(type_id), name=name, description=str(description)))

    auto_assign = document.get("autoAssign")
    if not isinstance(auto_assign, bool):
        errors.append("autoAssign must be a boolean")

    labels = document.get("defaultLabels")
    if not isinstance(labels, list) or not all(isinstance(label, str) for label in labels):
        errors.append("defaultLabels must be an array of strings")

    auto_templates = document.get("autoTemplates")
    if not isinstance(auto_templates, bool):
        errors.append("autoTemplates must be a boolean")

    if errors:
        raise ConfigValidationError(errors)

    return AgtConfig(
        default_base_branch=str(base).strip(),
        branch_types=tuple(branch_types),
        auto_assign=bool(auto_assign),
        default_labels=tuple(labels or ()),
        auto_templates=bool(auto_templates),
    )


def config_path(cwd: Path, home: Path) -> Path:
    """Project-local config if it exists, else the home-directory path."""
    local_path = cwd / CONFIG_FILENAME
    if local_path.exists():
        return local_path
    return home / CONFIG_FILENAME


def load_config(cwd: Path, home: Path | None = None) -> LoadedConfig:
    """Load and validate configuration, falling back to defaults on any problem.

    Args:
        cwd: Working directory searched for a project-local config
        home: Home directory for the fallback config (defaults to Path.home())

    Returns:
        LoadedConfig with the effective config, the file it came from (None for
        defaults) and any warnings to show the user
    """
    path = config_path(cwd, home if home is not None else Path.home())
    if not path.exists():
        return LoadedConfig(config=AgtConfig(), source=None)

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("failed to read config path=%s error=%s", path, e)
        return LoadedConfig(
            config=AgtConfig(),
            source=None,
            warnings=(f"Failed to load config from {path}, using defaults.",),
        )

    if not isinstance(raw, dict):
        return LoadedConfig(
            config=AgtConfig(),
            source=None,
            warnings=(f"Config in {path} must be a JSON object, using defaults.",),
        )

    merged = {**AgtConfig().to_document(), **raw}
    try:
        config = validate_document(merged)
    except ConfigValidationError as e:
        logger.warning("invalid config path=%s errors=%s", path, e.errors)
        return LoadedConfig(
            config=AgtConfig(),
            source=None,
            warnings=(str(e), "Using default configuration instead."),
        )
    return LoadedConfig(config=config, source=path)


def save_config(config: AgtConfig, path: Path) -> Path:
    """Write the full config document to ``path`` as indented JSON."""
    path.write_text(json.dumps(config.to_document(), indent=2) + "\n", encoding="utf-8")
    logger.info("saved config path=%s", path)
    return path
