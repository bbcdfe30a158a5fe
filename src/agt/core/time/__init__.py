from agt.core.time.abc import Time
from agt.core.time.real import RealTime

__all__ = ["RealTime", "Time"]
