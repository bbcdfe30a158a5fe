"""Tests for config loading, validation and saving."""

import json
from pathlib import Path

import pytest

from agt.core.config import (
    CONFIG_FILENAME,
    DEFAULT_BRANCH_TYPES,
    AgtConfig,
    ConfigValidationError,
    load_config,
    save_config,
    validate_document,
)


def _write(directory: Path, document: object) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / CONFIG_FILENAME
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    loaded = load_config(tmp_path / "cwd", tmp_path / "home")

    assert loaded.config == AgtConfig()
    assert loaded.source is None
    assert loaded.warnings == ()


def test_partial_document_merges_over_defaults(tmp_path: Path) -> None:
    path = _write(tmp_path / "cwd", {"defaultBaseBranch": "develop", "defaultLabels": ["triage"]})

    loaded = load_config(tmp_path / "cwd", tmp_path / "home")

    assert loaded.source == path
    assert loaded.config.default_base_branch == "develop"
    assert loaded.config.default_labels == ("triage",)
    assert loaded.config.branch_types == DEFAULT_BRANCH_TYPES
    assert loaded.config.auto_assign is True


def test_local_file_wins_over_home(tmp_path: Path) -> None:
    _write(tmp_path / "home", {"defaultBaseBranch": "from-home"})
    _write(tmp_path / "cwd", {"defaultBaseBranch": "from-cwd"})

    loaded = load_config(tmp_path / "cwd", tmp_path / "home")

    assert loaded.config.default_base_branch == "from-cwd"


def test_home_file_used_when_no_local(tmp_path: Path) -> None:
    _write(tmp_path / "home", {"autoAssign": False})
    (tmp_path / "cwd").mkdir()

    loaded = load_config(tmp_path / "cwd", tmp_path / "home")

    assert loaded.config.auto_assign is False


def test_invalid_json_falls_back_with_warning(tmp_path: Path) -> None:
    (tmp_path / CONFIG_FILENAME).write_text("{not json", encoding="utf-8")

    loaded = load_config(tmp_path, tmp_path / "home")

    assert loaded.config == AgtConfig()
    assert loaded.warnings


def test_invalid_shape_falls_back_with_warning(tmp_path: Path) -> None:
    _write(tmp_path, {"branchTypes": [{"id": "1", "name": "Feature!", "description": "x"}]})

    loaded = load_config(tmp_path, tmp_path / "home")

    assert loaded.config == AgtConfig()
    assert "lowercase letters" in loaded.warnings[0]


def test_non_object_document_falls_back(tmp_path: Path) -> None:
    _write(tmp_path, ["not", "an", "object"])

    loaded = load_config(tmp_path, tmp_path / "home")

    assert loaded.config == AgtConfig()
    assert loaded.warnings


def test_validate_document_collects_every_error() -> None:
    document = AgtConfig().to_document()
    document.update({"defaultBaseBranch": "", "branchTypes": [], "autoAssign": "yes"})

    with pytest.raises(ConfigValidationError) as exc_info:
        validate_document(document)

    assert len(exc_info.value.errors) == 3


def test_save_then_load(tmp_path: Path) -> None:
    config = AgtConfig(default_base_branch="trunk", auto_templates=False, default_labels=("a",))

    save_config(config, tmp_path / CONFIG_FILENAME)
    loaded = load_config(tmp_path, tmp_path / "home")

    assert loaded.config == config
    saved = json.loads((tmp_path / CONFIG_FILENAME).read_text(encoding="utf-8"))
    assert saved["defaultBaseBranch"] == "trunk"
    assert saved["autoTemplates"] is False
