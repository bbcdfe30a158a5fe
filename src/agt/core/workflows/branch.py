"""Branch creation from an open issue, and bulk branch deletion."""

from dataclasses import dataclass, field
from enum import Enum

import click

from agt.core.config import BranchType
from agt.core.context import AgtContext
from agt.core.ensure import Ensure
from agt.core.errors import ClassifiedError
from agt.core.github.types import Issue
from agt.core.prompts import Choice
from agt.core.validation import PROTECTED_BRANCHES, build_branch_name
from agt.core.workflows.common import show_open_issues


@dataclass(frozen=True)
class BranchCreateResult:
    branch: str
    issue: Issue
    branch_type: BranchType


def create_branch(ctx: AgtContext) -> BranchCreateResult | None:
    """Create ``<type>/<issue>-<slug>`` for a selected open issue.

    Returns None when there are no open issues to branch from.
    """
    Ensure.workflow_ready(ctx.runner, ctx.repo)

    with ctx.feedback.status("Fetching open issues..."):
        issues = ctx.reads.open_issues()
    ctx.feedback.success(f"Found {len(issues)} open issue(s)")

    if not issues:
        ctx.feedback.warning("No open issues found.")
        return None

    show_open_issues(ctx, issues)
    issue = ctx.prompter.select(
        "Select an issue to create a branch:",
        [Choice(label=f"#{issue.number} - {issue.title}", value=issue) for issue in issues],
    )
    ctx.logger.info("issue selected number=%s", issue.number)

    branch_type = ctx.prompter.select(
        "Select a branch type:",
        [Choice(label=f"{t.name} - {t.description}", value=t) for t in ctx.config.branch_types],
    )

    name = build_branch_name(branch_type.name, issue.number, issue.title)
    ctx.feedback.info(click.style(f"Branch name: {name}", dim=True))

    with ctx.feedback.status(f"Creating branch '{name}'..."):
        ctx.git.create_branch(name)

    ctx.logger.info(
        "branch created name=%s issue=%s type=%s", name, issue.number, branch_type.name
    )
    ctx.feedback.success(f"Branch '{name}' has been successfully created")
    ctx.feedback.info(f"You can now start working on issue #{issue.number}")
    return BranchCreateResult(branch=name, issue=issue, branch_type=branch_type)


class DeleteScope(Enum):
    LOCAL = "local"
    REMOTE = "remote"


@dataclass(frozen=True)
class BranchDeleteFailure:
    branch: str
    scope: DeleteScope
    error: ClassifiedError


@dataclass
class BranchDeleteResult:
    deleted: list[tuple[str, DeleteScope]] = field(default_factory=list)
    failures: list[BranchDeleteFailure] = field(default_factory=list)


def deletable_branches(branches: list[str], current_branch: str | None) -> list[str]:
    """Drop the current branch and protected long-lived branches."""
    return [
        branch
        for branch in branches
        if branch != current_branch and branch not in PROTECTED_BRANCHES
    ]


def delete_branches(ctx: AgtContext) -> BranchDeleteResult:
    """Delete selected branches locally and/or on origin after confirmation.

    Each (branch, side) is one delete call. A failed delete is reported and the
    remaining deletions still run.
    """
    Ensure.workflow_ready(ctx.runner, ctx.repo)
    result = BranchDeleteResult()

    current = ctx.git.get_current_branch()
    with ctx.feedback.status("Fetching branches..."):
        branches = deletable_branches(ctx.git.list_remote_branches(), current)
    ctx.feedback.success(f"Found {len(branches)} deletable branch(es)")

    if not branches:
        ctx.feedback.warning("No branches available for deletion (protected branches excluded).")
        return result

    selected = ctx.prompter.multi_select(
        "Select branches to delete:",
        [Choice(label=branch, value=branch) for branch in branches],
    )
    if not selected:
        ctx.feedback.warning("No branches selected.")
        return result

    scopes = ctx.prompter.multi_select(
        "Select delete options:",
        [
            Choice(label="Delete local branches", value=DeleteScope.LOCAL),
            Choice(label="Delete remote branches", value=DeleteScope.REMOTE),
        ],
        preselected=[DeleteScope.LOCAL],
    )
    if not scopes:
        ctx.feedback.warning("No delete options selected.")
        return result

    confirmed = ctx.prompter.confirm(
        click.style(f"Are you sure you want to delete {len(selected)} branch(es)?", fg="red"),
        default=False,
    )
    if not confirmed:
        ctx.feedback.info("Branch deletion cancelled.")
        return result

    for branch in selected:
        for scope in (DeleteScope.LOCAL, DeleteScope.REMOTE):
            if scope not in scopes:
                continue
            try:
                with ctx.feedback.status(f"Deleting {scope.value} branch '{branch}'..."):
                    if scope is DeleteScope.LOCAL:
                        ctx.git.delete_local_branch(branch)
                    else:
                        ctx.git.delete_remote_branch(branch)
            except ClassifiedError as e:
                ctx.logger.error(
                    "branch deletion failed branch=%s scope=%s kind=%s",
                    branch,
                    scope.value,
                    e.kind.value,
                )
                ctx.feedback.error(f"Failed to delete {scope.value} branch '{branch}': {e.message}")
                result.failures.append(BranchDeleteFailure(branch=branch, scope=scope, error=e))
                continue
            ctx.logger.info("branch deleted branch=%s scope=%s", branch, scope.value)
            ctx.feedback.success(f"Deleted {scope.value} branch '{branch}'")
            result.deleted.append((branch, scope))

    ctx.feedback.info(
        f"Deleted {len(result.deleted)} branch ref(s), {len(result.failures)} failure(s)"
    )
    return result
