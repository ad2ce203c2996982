"""Small helpers shared by models, repositories and services.

- Time and rounding arithmetic for session hours (time_math.py)
"""

from .time_math import ensure_utc, hours_between, round_half_up, utcnow

__all__ = [
    "ensure_utc",
    "hours_between",
    "round_half_up",
    "utcnow",
]
