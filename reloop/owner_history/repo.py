from typing import List
from reloop.core import Repo
from reloop.owner_history.record import OwnerHistoryRecord


class OwnerHistoryRepo(Repo):
    """
    Reading and writing :class:`OwnerHistoryRecord` to database.
    """

    def insert(self, record: OwnerHistoryRecord) -> bool:
        """
        Insert a record unless a record with the same id is stored

        Returns:
            ``True`` if the record was inserted
        """
        cursor = self.conn.execute(
            "INSERT INTO owner_history VALUES(?,?,?,?,?,?,?,?) ON CONFLICT DO NOTHING",
            record.to_row(),
        )
        return cursor.rowcount > 0

    def find_by_token(self, token_id: int) -> List[OwnerHistoryRecord]:
        """
        Ownership chain of a token, newest first
        """
        rows = self.conn.execute(
            "SELECT * FROM owner_history WHERE token_id = ? "
            "ORDER BY timestamp DESC, block_number DESC, log_index DESC",
            (str(token_id),),
        ).fetchall()
        return [OwnerHistoryRecord.from_row(r) for r in rows]

    def purge(self):
        """
        Clear all database entries
        """
        self.conn.execute("DELETE FROM owner_history")
