"""Pull-request creation workflow.

Before anything is pushed the head branch is compared with the freshly fetched
base. A branch that is behind can be rebased first; a failed rebase stops the
workflow. A branch with no commits over the base is never pushed.
"""

from dataclasses import dataclass

import click

from agt.core.branch_sync import BranchSyncEngine, BranchSyncStatus
from agt.core.cache import CacheKey
from agt.core.context import AgtContext
from agt.core.ensure import Ensure
from agt.core.errors import ClassifiedError, ErrorKind, ErrorVariant
from agt.core.github.types import PullRequestDraft
from agt.core.prompts import Choice
from agt.core.templates import BodyKind
from agt.core.validation import parse_csv, validate_not_empty
from agt.core.workflows.common import compose_body, resolve_assignees, select_labels


@dataclass(frozen=True)
class PullRequestResult:
    url: str
    draft: PullRequestDraft
    commit_count: int


def select_base_branch(ctx: AgtContext) -> str:
    with ctx.feedback.status("Fetching branches..."):
        branches = ctx.git.list_remote_branches()
    ctx.feedback.success(f"Found {len(branches)} branch(es)")
    if not branches:
        raise ClassifiedError(
            ErrorKind.RESOURCE_NOT_FOUND,
            "No remote branches found to use as the pull request base",
            variant=ErrorVariant.BRANCH,
        )

    default_base = ctx.config.default_base_branch
    return ctx.prompter.select(
        "Select base branch:",
        [
            Choice(label=f"{b} (default)" if b == default_base else b, value=b)
            for b in branches
        ],
        default=default_base if default_base in branches else None,
    )


def check_and_offer_resync(
    ctx: AgtContext, engine: BranchSyncEngine, head: str, base: str
) -> BranchSyncStatus | None:
    """Compare ``head`` with the fetched base and offer a rebase when behind.

    A failed check only warns. A failed rebase propagates.
    """
    try:
        with ctx.feedback.status("Checking branch sync status..."):
            status = engine.check_sync(head, base)
    except ClassifiedError as e:
        ctx.logger.warning("branch sync check failed kind=%s", e.kind.value)
        ctx.feedback.warning("Could not check branch sync (continuing anyway)")
        return None

    if status.is_synced:
        ctx.feedback.success(f"Branch is up to date with '{base}'")
        return status

    ctx.feedback.warning(f"Your branch is {status.behind} commit(s) behind '{base}'")
    if not ctx.prompter.confirm(
        f"Would you like to sync with '{base}' now? (recommended)", default=True
    ):
        ctx.feedback.warning("Proceeding without sync. Your PR may have conflicts.")
        return status

    with ctx.feedback.status(f"Syncing with '{base}'..."):
        engine.resync(base)
    ctx.feedback.success(f"Branch synced successfully with '{base}'")
    return status


def create_pull_request(ctx: AgtContext) -> PullRequestResult:
    """Prompt for a pull request, push the current branch and open the PR."""
    Ensure.workflow_ready(ctx.runner, ctx.repo)

    title = validate_not_empty(ctx.prompter.text("PR title", required=True), "PR title")
    ctx.logger.info("pr title entered title=%s", title)

    body = compose_body(ctx, BodyKind.PULL_REQUEST, "PR description")
    reviewers = ",".join(
        parse_csv(ctx.prompter.text("Reviewers (comma-separated, Enter to skip)"))
    )
    assignees = resolve_assignees(
        ctx, ctx.prompter.text("Assignees (comma-separated, Enter to skip)")
    )
    labels = select_labels(ctx)
    milestone = ctx.prompter.text("Milestone (Enter to skip)")
    is_draft = ctx.prompter.confirm("Create as draft PR?", default=False)
    base = select_base_branch(ctx)

    head = ctx.git.get_current_branch()
    if not head:
        raise ClassifiedError(
            ErrorKind.OPERATION_FAILED,
            "Not on a branch (detached HEAD). Check out the branch to open a PR from.",
        )
    ctx.feedback.info(click.style(f"Current branch: {head}", dim=True))

    engine = BranchSyncEngine(ctx.git)
    check_and_offer_resync(ctx, engine, head, base)

    commit_count = ctx.git.count_commits(engine.remote_ref(base), head)
    if commit_count == 0:
        raise ClassifiedError(
            ErrorKind.OPERATION_FAILED,
            f"No commits found between '{base}' and '{head}'. "
            "Please commit your changes before creating a PR.",
            variant=ErrorVariant.NO_COMMITS,
            context={"base": base, "head": head},
        )
    ctx.feedback.info(click.style(f"Found {commit_count} commit(s) to push.", dim=True))

    with ctx.feedback.status(f"Pushing branch '{head}' to remote..."):
        ctx.git.push_branch(head)
    ctx.feedback.success(f"Branch '{head}' pushed successfully")

    draft = PullRequestDraft(
        title=title,
        body=body,
        head=head,
        base=base,
        reviewers=reviewers,
        assignees=assignees,
        labels=labels,
        milestone=milestone,
        is_draft=is_draft,
    )
    with ctx.feedback.status("Creating pull request..."):
        url = ctx.github.create_pull_request(draft)
    ctx.reads.invalidate(CacheKey.OPEN_PULL_REQUESTS)

    ctx.logger.info(
        "pr created title=%s base=%s head=%s draft=%s url=%s", title, base, head, is_draft, url
    )
    ctx.feedback.success(
        "Pull request created successfully" + (" (draft)" if is_draft else "")
    )
    return PullRequestResult(url=url, draft=draft, commit_count=commit_count)
