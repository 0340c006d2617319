# Application Package
from .scheduler import ReviewScheduler, interval_for_box, schedule_next
from .seed import SeedSet, load_seed
from .streak import compute_streak

__all__ = [
    "ReviewScheduler",
    "schedule_next",
    "interval_for_box",
    "SeedSet",
    "load_seed",
    "compute_streak",
]
