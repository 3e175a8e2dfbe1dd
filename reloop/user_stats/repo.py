from reloop.core import Repo
from reloop.user_stats.stats import UserStats
from reloop.utils import normalize_address

COUNTERS = (
    "tokens_minted",
    "tokens_bought",
    "tokens_sold",
    "total_spent",
    "total_earned",
    "profit_received",
)


class UserStatsRepo(Repo):
    """
    Reading and writing :class:`UserStats` to database.
    """

    def get(self, address: str) -> UserStats | None:
        """
        Stats of an address (case-insensitive)

        Returns:
            The stats, ``None`` if the address has no activity
        """
        row = self.conn.execute(
            "SELECT * FROM user_stats WHERE address = ?", (normalize_address(address),)
        ).fetchone()
        if not row:
            return None
        return UserStats.from_row(row)

    def increment(self, address: str, **deltas: int) -> UserStats:
        """
        Add ``deltas`` to the counters of an address, creating a zeroed
        row first if there's none.

        Examples:
            ::

                repo.increment("0xabc...", tokens_sold=1, total_earned=920)

        Args:
            address: User address
            deltas: Counter name to a non-negative increment

        Returns:
            Updated stats

        Raises:
            ValueError: If a counter is unknown or a delta is negative
        """
        for name, delta in deltas.items():
            if not name in COUNTERS:
                raise ValueError(f"Unknown counter `{name}`")
            if delta < 0:
                raise ValueError(f"Counter `{name}` can't decrease (got {delta})")

        stats = self.get(address) or UserStats(address)
        for name, delta in deltas.items():
            setattr(stats, name, getattr(stats, name) + delta)
        self.conn.execute(
            "INSERT INTO user_stats VALUES(?,?,?,?,?,?,?) "
            "ON CONFLICT(address) DO UPDATE SET "
            "tokens_minted = excluded.tokens_minted, "
            "tokens_bought = excluded.tokens_bought, "
            "tokens_sold = excluded.tokens_sold, "
            "total_spent = excluded.total_spent, "
            "total_earned = excluded.total_earned, "
            "profit_received = excluded.profit_received",
            stats.to_row(),
        )
        return stats

    def purge(self):
        """
        Clear all database entries
        """
        self.conn.execute("DELETE FROM user_stats")
