# Infrastructure Package
from .clock import ManualClock, SystemClock

__all__ = ["SystemClock", "ManualClock"]
