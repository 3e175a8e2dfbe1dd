from typing import List, Tuple
from reloop.core import Repo
from reloop.sales.sale import Sale

NEWEST_FIRST = "ORDER BY timestamp DESC, block_number DESC, LENGTH(id) DESC, id DESC"


class SalesRepo(Repo):
    """
    Reading and writing :class:`Sale` to database.
    """

    def get(self, id: str) -> Sale | None:
        row = self.conn.execute("SELECT * FROM sales WHERE id = ?", (id,)).fetchone()
        if not row:
            return None
        return Sale.from_row(row)

    def insert(self, sale: Sale) -> bool:
        """
        Insert a sale unless a sale with the same id is stored

        Returns:
            ``True`` if the sale was inserted
        """
        cursor = self.conn.execute(
            "INSERT INTO sales VALUES(?,?,?,?,?,?,?,?,?) ON CONFLICT DO NOTHING",
            sale.to_row(),
        )
        return cursor.rowcount > 0

    def find_by_transaction(self, tx_hash: str, token_id: int) -> Sale | None:
        """
        Find the sale of a token made in a transaction

        Args:
            tx_hash: Transaction hash
            token_id: Token id

        Returns:
            The first such sale in log order, ``None`` if there's none
        """
        row = self.conn.execute(
            "SELECT * FROM sales WHERE tx_hash = ? AND token_id = ? "
            "ORDER BY LENGTH(id), id LIMIT 1",
            (tx_hash.lower(), str(token_id)),
        ).fetchone()
        if not row:
            return None
        return Sale.from_row(row)

    def find_by_token(self, token_id: int) -> List[Sale]:
        """
        All sales of a token, newest first
        """
        rows = self.conn.execute(
            f"SELECT * FROM sales WHERE token_id = ? {NEWEST_FIRST}", (str(token_id),)
        ).fetchall()
        return [Sale.from_row(r) for r in rows]

    def find(self, limit: int, offset: int = 0) -> List[Sale]:
        """
        Page of sales, newest first
        """
        rows = self.conn.execute(
            f"SELECT * FROM sales {NEWEST_FIRST} LIMIT ? OFFSET ?", (limit, offset)
        ).fetchall()
        return [Sale.from_row(r) for r in rows]

    def totals(self) -> Tuple[int, int, int]:
        """
        Aggregate over all sales.

        Prices are decimal text that may not fit into 64 bits,
        so the sums are computed in Python.

        Returns:
            ``(count, sum of prices, sum of profits)``
        """
        count, volume, profit = 0, 0, 0
        for price, sale_profit in self.conn.execute("SELECT price, profit FROM sales"):
            count += 1
            volume += int(price)
            profit += int(sale_profit)
        return count, volume, profit

    def purge(self):
        """
        Clear all database entries
        """
        self.conn.execute("DELETE FROM sales")
