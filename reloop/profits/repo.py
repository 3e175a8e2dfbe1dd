from typing import List
from reloop.core import Repo
from reloop.profits.distribution import ProfitDistribution
from reloop.utils import normalize_address

NEWEST_FIRST = "ORDER BY timestamp DESC, LENGTH(id) DESC, id DESC"


class ProfitDistributionsRepo(Repo):
    """
    Reading and writing :class:`ProfitDistribution` to database.
    """

    def get(self, id: str) -> ProfitDistribution | None:
        row = self.conn.execute(
            "SELECT * FROM profit_distributions WHERE id = ?", (id,)
        ).fetchone()
        if not row:
            return None
        return ProfitDistribution.from_row(row)

    def insert(self, distribution: ProfitDistribution) -> bool:
        """
        Insert a distribution unless one with the same id is stored

        Returns:
            ``True`` if the distribution was inserted
        """
        cursor = self.conn.execute(
            "INSERT INTO profit_distributions VALUES(?,?,?,?,?,?,?,?) "
            "ON CONFLICT DO NOTHING",
            distribution.to_row(),
        )
        return cursor.rowcount > 0

    def link_sale(self, tx_hash: str, token_id: int, sale_id: str) -> int:
        """
        Attach unlinked distributions of a token made in a transaction to a sale

        This is the only write to a stored distribution. It fills ``sale_id``
        when the Sale log comes after its payouts, and only while the column
        is still NULL. Every other field stays as first inserted.

        Returns:
            Number of linked distributions
        """
        cursor = self.conn.execute(
            "UPDATE profit_distributions SET sale_id = ? "
            "WHERE tx_hash = ? AND token_id = ? AND sale_id IS NULL",
            (sale_id, tx_hash.lower(), str(token_id)),
        )
        return cursor.rowcount

    def find_by_token(self, token_id: int) -> List[ProfitDistribution]:
        """
        All cascade payments of a token, newest first
        """
        rows = self.conn.execute(
            f"SELECT * FROM profit_distributions WHERE token_id = ? {NEWEST_FIRST}",
            (str(token_id),),
        ).fetchall()
        return [ProfitDistribution.from_row(r) for r in rows]

    def find_by_recipient(self, recipient: str, limit: int = 50) -> List[ProfitDistribution]:
        """
        Most recent cascade payments received by an address
        """
        rows = self.conn.execute(
            f"SELECT * FROM profit_distributions WHERE recipient = ? {NEWEST_FIRST} LIMIT ?",
            (normalize_address(recipient), limit),
        ).fetchall()
        return [ProfitDistribution.from_row(r) for r in rows]

    def purge(self):
        """
        Clear all database entries
        """
        self.conn.execute("DELETE FROM profit_distributions")
