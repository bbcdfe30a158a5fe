"""Application context with dependency injection."""

import logging
from dataclasses import dataclass
from pathlib import Path

import click

from agt.cli.output import user_output
from agt.core.cache import TTLCache
from agt.core.config import AgtConfig, LoadedConfig, load_config
from agt.core.git.abc import Git
from agt.core.git.real import RealGit
from agt.core.github.abc import GitHub
from agt.core.github.real import RealGitHub
from agt.core.prompts import ClickPrompter, Prompter
from agt.core.reads import CachedReads
from agt.core.repo_discovery import NoRepoSentinel, RepoContext, discover_repo_or_sentinel
from agt.core.structured_log import configure_logging
from agt.core.subprocess import CommandRunner, RealCommandRunner
from agt.core.templates import BodyAuthor, body_author_for
from agt.core.time.abc import Time
from agt.core.time.real import RealTime
from agt.core.user_feedback import InteractiveFeedback, UserFeedback


@dataclass(frozen=True)
class AgtContext:
    """Immutable context holding all dependencies for agt operations.

    Created at the CLI entry point and threaded through the workflows. The
    cache and logger live here rather than at module level so each process and
    repository gets its own.
    """

    runner: CommandRunner
    git: Git
    github: GitHub
    time: Time
    cache: TTLCache
    reads: CachedReads
    prompter: Prompter
    body_author: BodyAuthor
    feedback: UserFeedback
    cwd: Path  # Current working directory at CLI invocation
    home: Path
    repo: RepoContext | NoRepoSentinel
    loaded_config: LoadedConfig
    logger: logging.Logger

    @property
    def config(self) -> AgtConfig:
        return self.loaded_config.config

    @staticmethod
    def for_test(
        runner: CommandRunner | None = None,
        git: Git | None = None,
        github: GitHub | None = None,
        time: Time | None = None,
        cache: TTLCache | None = None,
        prompter: Prompter | None = None,
        body_author: BodyAuthor | None = None,
        feedback: UserFeedback | None = None,
        cwd: Path | None = None,
        home: Path | None = None,
        repo: RepoContext | NoRepoSentinel | None = None,
        config: AgtConfig | None = None,
    ) -> "AgtContext":
        """Create test context with optional pre-configured integration classes.

        Unspecified collaborators default to empty fakes. ``repo`` defaults to a
        RepoContext at ``cwd`` so workflow preconditions pass.

        Example:
            >>> github = FakeGitHub(labels=["bug"])
            >>> prompter = FakePrompter(texts=["Crash on start", ""])
            >>> ctx = AgtContext.for_test(github=github, prompter=prompter)
        """
        from tests.fakes.body_author import FakeBodyAuthor
        from tests.fakes.command_runner import FakeCommandRunner
        from tests.fakes.git import FakeGit
        from tests.fakes.github import FakeGitHub
        from tests.fakes.prompter import FakePrompter
        from tests.fakes.time import FakeTime
        from tests.fakes.user_feedback import FakeUserFeedback

        if runner is None:
            runner = FakeCommandRunner()

        if git is None:
            git = FakeGit()

        if github is None:
            github = FakeGitHub()

        if time is None:
            time = FakeTime()

        if cache is None:
            cache = TTLCache(time)

        if prompter is None:
            prompter = FakePrompter()

        if body_author is None:
            body_author = FakeBodyAuthor()

        if feedback is None:
            feedback = FakeUserFeedback()

        if cwd is None:
            cwd = Path("/test/repo")

        if repo is None:
            repo = RepoContext(root=cwd)

        return AgtContext(
            runner=runner,
            git=git,
            github=github,
            time=time,
            cache=cache,
            reads=CachedReads(github, cache, time),
            prompter=prompter,
            body_author=body_author,
            feedback=feedback,
            cwd=cwd,
            home=home or Path("/test/home"),
            repo=repo,
            loaded_config=LoadedConfig(config=config or AgtConfig(), source=None),
            logger=logging.getLogger("agt.test"),
        )


def safe_cwd() -> tuple[Path | None, str | None]:
    """Get current working directory, detecting if it no longer exists.

    Returns:
        (path, None) on success, (None, error_message) if the directory is gone
    """
    try:
        return (Path.cwd(), None)
    except (FileNotFoundError, OSError):
        return (None, "Current working directory no longer exists")


def create_context(*, debug: bool = False) -> AgtContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.

    Args:
        debug: Mirror log records to stderr
    """
    # 1. Capture cwd (no deps)
    cwd_result, error_msg = safe_cwd()
    if cwd_result is None:
        assert error_msg is not None
        user_output(click.style("Error: ", fg="red") + error_msg)
        user_output("\nPlease change to a valid directory and try again.")
        raise SystemExit(1)

    cwd = cwd_result
    home = Path.home()

    # 2. Logging before anything that runs a command
    logger = configure_logging(debug=debug)

    # 3. Repo discovery walks the filesystem; it never spawns git
    repo = discover_repo_or_sentinel(cwd)
    run_dir = repo.root if isinstance(repo, RepoContext) else cwd

    # 4. Config never fails hard; warnings are shown once here
    loaded_config = load_config(cwd, home)
    feedback = InteractiveFeedback()
    for warning in loaded_config.warnings:
        feedback.warning(warning)

    # 5. Integrations
    time = RealTime()
    runner = RealCommandRunner(run_dir, logger)
    github = RealGitHub(runner)
    cache = TTLCache(time)
    cache.start_sweeper()
    prompter = ClickPrompter()

    return AgtContext(
        runner=runner,
        git=RealGit(runner),
        github=github,
        time=time,
        cache=cache,
        reads=CachedReads(github, cache, time),
        prompter=prompter,
        body_author=body_author_for(
            run_dir, prompter, auto_templates=loaded_config.config.auto_templates
        ),
        feedback=feedback,
        cwd=cwd,
        home=home,
        repo=repo,
        loaded_config=loaded_config,
        logger=logger,
    )
