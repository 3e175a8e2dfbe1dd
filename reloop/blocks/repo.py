from typing import Iterable, List
from reloop.blocks.block import Block
from reloop.core import Repo


class BlocksRepo(Repo):
    """
    Timestamp cache of already resolved blocks.
    """

    def find(self, numbers: Iterable[int]) -> List[Block]:
        """
        Cached blocks among ``numbers``, sorted by number.
        Numbers that were never saved are simply absent.
        """
        wanted = sorted(set(numbers))
        if not wanted:
            return []
        placeholders = ",".join("?" * len(wanted))
        rows = self.conn.execute(
            "SELECT chain_id, block_number, timestamp FROM blocks "
            f"WHERE chain_id = ? AND block_number IN ({placeholders}) "
            "ORDER BY block_number",
            [self.chain_id] + wanted,
        )
        return [Block.from_row(r) for r in rows]

    def save(self, blocks: List[Block]):
        """
        Cache ``blocks``. Already cached numbers are kept as is.
        """
        self.conn.executemany(
            "INSERT OR IGNORE INTO blocks VALUES(?,?,?)",
            [b.to_row() for b in blocks],
        )

    def purge(self):
        self.conn.execute("DELETE FROM blocks")
