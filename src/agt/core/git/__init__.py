"""Git operations subpackage."""

from agt.core.git.abc import DEFAULT_REMOTE, Git
from agt.core.git.real import RealGit

__all__ = ["DEFAULT_REMOTE", "Git", "RealGit"]
