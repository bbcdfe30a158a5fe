"""Repository summary as reported by GitHub, shown without further aggregation."""

from dataclasses import dataclass

from agt.core.context import AgtContext
from agt.core.ensure import Ensure
from agt.core.github.types import Contributor, RepoStats


@dataclass(frozen=True)
class RepositorySummary:
    stats: RepoStats
    contributors: list[Contributor]


def fetch_summary(ctx: AgtContext) -> RepositorySummary:
    Ensure.workflow_ready(ctx.runner, ctx.repo)

    with ctx.feedback.status("Fetching repository statistics..."):
        stats = ctx.reads.repo_stats()
        contributors = ctx.reads.contributors()
    ctx.feedback.success("Statistics loaded")
    return RepositorySummary(stats=stats, contributors=contributors)
