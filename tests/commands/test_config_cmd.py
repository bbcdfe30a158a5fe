import json
from pathlib import Path

from click.testing import CliRunner

from agt.cli.cli import cli
from agt.core.config import AgtConfig
from agt.core.context import AgtContext
from tests.fakes.prompter import FakePrompter


def test_show_prints_effective_config() -> None:
    ctx = AgtContext.for_test(config=AgtConfig(default_base_branch="develop"))

    result = CliRunner().invoke(cli, ["config", "--show"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "built-in defaults" in result.output
    assert '"defaultBaseBranch": "develop"' in result.output


def test_save_writes_project_config(tmp_path: Path) -> None:
    prompter = FakePrompter(texts=["develop", "bug, docs"], confirms=[False, True])
    ctx = AgtContext.for_test(cwd=tmp_path, home=tmp_path / "home", prompter=prompter)

    result = CliRunner().invoke(cli, ["config"], obj=ctx)

    assert result.exit_code == 0, result.output
    saved = json.loads((tmp_path / ".agtrc.json").read_text(encoding="utf-8"))
    assert saved["defaultBaseBranch"] == "develop"
    assert saved["autoAssign"] is False
    assert saved["autoTemplates"] is True
    assert saved["defaultLabels"] == ["bug", "docs"]
    assert len(saved["branchTypes"]) == 4


def test_save_global(tmp_path: Path) -> None:
    home = tmp_path / "home"
    home.mkdir()
    ctx = AgtContext.for_test(cwd=tmp_path, home=home)

    result = CliRunner().invoke(cli, ["config", "--global"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert (home / ".agtrc.json").exists()
    assert not (tmp_path / ".agtrc.json").exists()


def test_blank_base_branch_is_invalid_input(tmp_path: Path) -> None:
    ctx = AgtContext.for_test(cwd=tmp_path, prompter=FakePrompter(texts=["   "]))

    result = CliRunner().invoke(cli, ["config"], obj=ctx)

    assert result.exit_code == 1
    assert "Required Field Empty" in result.output
    assert "Unknown Error" not in result.output
    assert not (tmp_path / ".agtrc.json").exists()
