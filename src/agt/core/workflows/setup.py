"""First-run environment check and optional config file creation.

Steps run in order and stop at the first failure; every later step is
reported as skipped. Interactive ``gh auth login`` is never launched from here
because command output is captured; the user is told to run it instead.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from agt.core.config import CONFIG_FILENAME, save_config
from agt.core.context import AgtContext
from agt.core.ensure import TOOL_INSTALL_HINTS, Ensure
from agt.core.errors import ClassifiedError
from agt.core.prompts import Choice
from agt.core.repo_discovery import RepoContext
from agt.core.subprocess import CommandSpec


class StepStatus(Enum):
    PASS = "pass"
    FAIL = "fail"
    SKIP = "skip"


class ConfigLocation(Enum):
    LOCAL = "local"
    GLOBAL = "global"
    SKIP = "skip"


@dataclass(frozen=True)
class SetupStep:
    name: str
    status: StepStatus
    detail: str = ""


@dataclass(frozen=True)
class SetupReport:
    steps: tuple[SetupStep, ...]

    @property
    def ready(self) -> bool:
        """True when no step failed; a skipped config file is fine."""
        return all(step.status is not StepStatus.FAIL for step in self.steps)


STEP_NAMES = ("Git", "GitHub CLI", "Authentication", "Connection", "Configuration")


def _tool_version(ctx: AgtContext, program: str) -> str:
    Ensure.tool_available(ctx.runner, program)
    output = ctx.runner.run(CommandSpec(program=program, args=("--version",))).stdout
    return output.splitlines()[0].strip() if output else program


def _check_auth(ctx: AgtContext) -> str:
    login = ctx.github.check_auth()
    return f"Logged in as {login}"


def _check_connection(ctx: AgtContext) -> str:
    login = ctx.github.get_current_user()
    repo = ctx.repo.name if isinstance(ctx.repo, RepoContext) else "N/A"
    return f"User {login}, repository {repo}"


def _write_config(ctx: AgtContext) -> tuple[StepStatus, str]:
    location = ctx.prompter.select(
        "Where would you like to store your configuration?",
        [
            Choice(
                label=f"Local (current project only) - ./{CONFIG_FILENAME}",
                value=ConfigLocation.LOCAL,
            ),
            Choice(
                label=f"Global (all projects) - ~/{CONFIG_FILENAME}",
                value=ConfigLocation.GLOBAL,
            ),
            Choice(label="Skip", value=ConfigLocation.SKIP),
        ],
    )
    if location is ConfigLocation.SKIP:
        return StepStatus.SKIP, "Skipped by user"

    path: Path = (ctx.home if location is ConfigLocation.GLOBAL else ctx.cwd) / CONFIG_FILENAME
    try:
        save_config(ctx.config, path)
    except OSError as e:
        ctx.logger.warning("setup config write failed path=%s error=%s", path, e)
        return StepStatus.FAIL, f"Could not write {path}: {e.strerror or e}"
    return StepStatus.PASS, f"Saved to {path}"


def run_setup(ctx: AgtContext) -> SetupReport | None:
    """Check git, gh, authentication and the GitHub connection, then offer a config file.

    Returns None when the user declines to start.
    """
    if not ctx.prompter.confirm("Ready to begin setup?", default=True):
        return None

    checks = (
        (lambda: _tool_version(ctx, "git"), TOOL_INSTALL_HINTS["git"]),
        (lambda: _tool_version(ctx, "gh"), TOOL_INSTALL_HINTS["gh"]),
        (lambda: _check_auth(ctx), "Run 'gh auth login', then 'agt setup' again"),
        (lambda: _check_connection(ctx), "Check your network connection and gh login"),
    )

    steps: list[SetupStep] = []
    failed = False
    for name, (check, hint) in zip(STEP_NAMES, checks):
        if failed:
            steps.append(SetupStep(name, StepStatus.SKIP))
            continue
        try:
            with ctx.feedback.status(f"Checking {name}..."):
                detail = check()
        except ClassifiedError as e:
            ctx.logger.warning("setup step failed step=%s kind=%s", name, e.kind.value)
            ctx.feedback.error(f"{name}: {e.message}")
            ctx.feedback.info(hint)
            steps.append(SetupStep(name, StepStatus.FAIL, e.message))
            failed = True
            continue
        ctx.feedback.success(f"{name}: {detail}")
        steps.append(SetupStep(name, StepStatus.PASS, detail))

    if failed:
        steps.append(SetupStep(STEP_NAMES[-1], StepStatus.SKIP))
    else:
        status, detail = _write_config(ctx)
        steps.append(SetupStep(STEP_NAMES[-1], status, detail))

    report = SetupReport(steps=tuple(steps))
    ctx.logger.info("setup finished ready=%s", report.ready)
    return report
