"""
Per-address activity totals, updated as events are applied.
"""

from reloop.user_stats.stats import UserStats
from reloop.user_stats.repo import UserStatsRepo
