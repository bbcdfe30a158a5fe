"""Interactive workflow orchestrators.

Every workflow follows the same order: preconditions, prompts, cached reads,
mutating call(s), report. Mutating calls go straight to git or gh exactly once
and are never retried.
"""
