from typing import List
from reloop.calls.call import Call
from reloop.core import Repo
from reloop.utils import normalize_address


class CallsRepo(Repo):
    """
    Cache of block-pinned contract reads (:class:`Call`).
    """

    def get(self, address: str, calldata: str, block_number: int) -> Call | None:
        """
        Cached read of ``calldata`` on ``address`` at ``block_number``,
        ``None`` on a miss
        """
        row = self.conn.execute(
            "SELECT chain_id, address, calldata, block_number, response FROM calls "
            "WHERE chain_id = ? AND address = ? AND calldata = ? AND block_number = ?",
            (self.chain_id, normalize_address(address), calldata.lower(), block_number),
        ).fetchone()
        return None if row is None else Call.from_row(row)

    def save(self, calls: List[Call]):
        """
        Cache ``calls``. A read that is already cached is left untouched.
        """
        self.conn.executemany(
            "INSERT OR IGNORE INTO calls VALUES(?,?,?,?,?)",
            [c.to_row() for c in calls],
        )

    def purge(self):
        self.conn.execute("DELETE FROM calls")
