from typing import List, Tuple
from reloop.events.event import Event
from reloop.core import Repo


class EventsRepo(Repo):
    """
    Reading and writing :class:`Event` to database.

    This is the local event log: every decoded event of the indexed
    contracts, unique by ``(chain_id, transaction_hash, log_index)``.
    """

    def find_after(
        self, position: Tuple[int, int] | None = None, limit: int = 1000
    ) -> List[Event]:
        """
        Find events strictly after a position, in chain order.

        Args:
            position: ``(block_number, log_index)``, ``None`` for the beginning
            limit: Maximum number of events to return

        Returns:
            Events ordered by block number, then by log index
        """
        block_number, log_index = position if position else (-1, -1)
        rows = self.conn.execute(
            "SELECT * FROM events WHERE chain_id = ? "
            "AND (block_number > ? OR (block_number = ? AND log_index > ?)) "
            "ORDER BY block_number, log_index LIMIT ?",
            (self.chain_id, block_number, block_number, log_index, limit),
        ).fetchall()
        return [Event.from_row(r) for r in rows]

    def save(self, events: List[Event]):
        """
        Save a set of events into the database. Already saved events
        are ignored.

        Args:
            events: List of events to save
        """
        rows = [e.to_row() for e in events]
        self.conn.executemany(
            "INSERT INTO events VALUES(?,?,?,?,?,?,?,?) ON CONFLICT DO NOTHING", rows
        )

    def purge(self):
        """
        Clean all database entries
        """
        self.conn.execute("DELETE FROM events")
