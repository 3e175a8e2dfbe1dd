from reloop.core import Repo
from reloop.cursors.cursor import Cursor


class CursorsRepo(Repo):
    """
    Reading and writing :class:`Cursor` to database.
    """

    def get(self, name: str) -> Cursor | None:
        """
        Get a cursor by name for the current chain

        Returns:
            The cursor, ``None`` if nothing was processed yet
        """
        row = self.conn.execute(
            "SELECT * FROM cursors WHERE chain_id = ? AND name = ?",
            (self.chain_id, name),
        ).fetchone()
        if not row:
            return None
        return Cursor.from_row(row)

    def advance(self, name: str, block_number: int, log_index: int):
        """
        Move the cursor forward to ``(block_number, log_index)``.

        A cursor never moves backwards: if the stored position is
        at or after the new one, nothing changes.
        """
        self.conn.execute(
            "INSERT INTO cursors VALUES(?,?,?,?) "
            "ON CONFLICT(chain_id, name) DO UPDATE SET "
            "block_number = excluded.block_number, log_index = excluded.log_index "
            "WHERE excluded.block_number > cursors.block_number "
            "OR (excluded.block_number = cursors.block_number "
            "AND excluded.log_index > cursors.log_index)",
            (self.chain_id, name, block_number, log_index),
        )

    def purge(self):
        """
        Clear all database entries
        """
        self.conn.execute("DELETE FROM cursors")
