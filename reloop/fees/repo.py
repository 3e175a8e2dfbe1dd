from typing import List
from reloop.core import Repo
from reloop.fees.fee import PlatformFeeRecord


class PlatformFeesRepo(Repo):
    """
    Reading and writing :class:`PlatformFeeRecord` to database.
    """

    def insert(self, fee: PlatformFeeRecord) -> bool:
        """
        Insert a fee record unless one with the same id is stored

        Returns:
            ``True`` if the record was inserted
        """
        cursor = self.conn.execute(
            "INSERT INTO platform_fees VALUES(?,?,?,?,?) ON CONFLICT DO NOTHING",
            fee.to_row(),
        )
        return cursor.rowcount > 0

    def find_by_token(self, token_id: int) -> List[PlatformFeeRecord]:
        rows = self.conn.execute(
            "SELECT * FROM platform_fees WHERE token_id = ? "
            "ORDER BY timestamp DESC, LENGTH(id) DESC, id DESC",
            (str(token_id),),
        ).fetchall()
        return [PlatformFeeRecord.from_row(r) for r in rows]

    def purge(self):
        """
        Clear all database entries
        """
        self.conn.execute("DELETE FROM platform_fees")
