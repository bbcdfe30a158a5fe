"""GitHub operations subpackage."""

from agt.core.github.abc import GitHub
from agt.core.github.real import RealGitHub

__all__ = ["GitHub", "RealGitHub"]
