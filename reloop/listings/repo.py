from typing import List
from reloop.core import Repo
from reloop.listings.listing import Listing


class ListingsRepo(Repo):
    """
    Reading and writing :class:`Listing` to database.
    """

    def get(self, token_id: int) -> Listing | None:
        """
        Find the listing slot of a token, active or not
        """
        row = self.conn.execute(
            "SELECT * FROM listings WHERE token_id = ?", (str(token_id),)
        ).fetchone()
        if not row:
            return None
        return Listing.from_row(row)

    def upsert(self, listing: Listing):
        """
        Write the listing slot of a token, replacing every field of an
        existing slot.
        """
        self.conn.execute(
            "INSERT INTO listings VALUES(?,?,?,?,?,?) "
            "ON CONFLICT(token_id) DO UPDATE SET "
            "seller = excluded.seller, price = excluded.price, "
            "active = excluded.active, listed_at = excluded.listed_at, "
            "tx_hash = excluded.tx_hash",
            listing.to_row(),
        )

    def deactivate(self, token_id: int) -> bool:
        """
        Mark the listing of a token inactive

        Returns:
            ``False`` if the token was never listed
        """
        cursor = self.conn.execute(
            "UPDATE listings SET active = 0 WHERE token_id = ?", (str(token_id),)
        )
        return cursor.rowcount > 0

    def find_active(self, limit: int, offset: int = 0) -> List[Listing]:
        """
        Page of active listings, newest first
        """
        rows = self.conn.execute(
            "SELECT * FROM listings WHERE active = 1 "
            "ORDER BY listed_at DESC, LENGTH(token_id) DESC, token_id DESC "
            "LIMIT ? OFFSET ?",
            (limit, offset),
        ).fetchall()
        return [Listing.from_row(r) for r in rows]

    def count_active(self) -> int:
        return self.conn.execute(
            "SELECT COUNT(*) FROM listings WHERE active = 1"
        ).fetchone()[0]

    def purge(self):
        """
        Clear all database entries
        """
        self.conn.execute("DELETE FROM listings")
