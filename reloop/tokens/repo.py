from typing import List
from reloop.core import Repo
from reloop.tokens.token import Token
from reloop.utils import normalize_address

#: Newest mint first. Token ids are decimal text, so the numeric
#: order is by length first.
NEWEST_FIRST = "ORDER BY minted_at DESC, LENGTH(token_id) DESC, token_id DESC"


class TokensRepo(Repo):
    """
    Reading and writing :class:`Token` to database.
    """

    def get(self, token_id: int) -> Token | None:
        """
        Find a token by id

        Returns:
            The token, ``None`` if it's not minted (or not indexed yet)
        """
        row = self.conn.execute(
            "SELECT * FROM tokens WHERE token_id = ?", (str(token_id),)
        ).fetchone()
        if not row:
            return None
        return Token.from_row(row)

    def exists(self, token_id: int) -> bool:
        row = self.conn.execute(
            "SELECT 1 FROM tokens WHERE token_id = ?", (str(token_id),)
        ).fetchone()
        return not row is None

    def insert(self, token: Token) -> bool:
        """
        Insert a token unless a token with the same id is stored

        Returns:
            ``True`` if the token was inserted
        """
        cursor = self.conn.execute(
            "INSERT INTO tokens VALUES(?,?,?,?,?,?,?,?) ON CONFLICT DO NOTHING",
            token.to_row(),
        )
        return cursor.rowcount > 0

    def set_owner(self, token_id: int, owner: str) -> bool:
        """
        Update the current owner of a token

        Returns:
            ``False`` if the token doesn't exist
        """
        cursor = self.conn.execute(
            "UPDATE tokens SET owner = ? WHERE token_id = ?",
            (normalize_address(owner), str(token_id)),
        )
        return cursor.rowcount > 0

    def set_token_uri(self, token_id: int, token_uri: str) -> bool:
        """
        Update the metadata URI of a token

        Returns:
            ``False`` if the token doesn't exist
        """
        cursor = self.conn.execute(
            "UPDATE tokens SET token_uri = ? WHERE token_id = ?",
            (token_uri, str(token_id)),
        )
        return cursor.rowcount > 0

    def find(self, limit: int, offset: int = 0) -> List[Token]:
        """
        Page of tokens, newest mint first
        """
        rows = self.conn.execute(
            f"SELECT * FROM tokens {NEWEST_FIRST} LIMIT ? OFFSET ?", (limit, offset)
        ).fetchall()
        return [Token.from_row(r) for r in rows]

    def find_by_owner(self, owner: str) -> List[Token]:
        """
        All tokens currently owned by an address, newest mint first
        """
        rows = self.conn.execute(
            f"SELECT * FROM tokens WHERE owner = ? {NEWEST_FIRST}",
            (normalize_address(owner),),
        ).fetchall()
        return [Token.from_row(r) for r in rows]

    def find_by_minter(self, minter: str) -> List[Token]:
        """
        All tokens minted by an address, newest mint first
        """
        rows = self.conn.execute(
            f"SELECT * FROM tokens WHERE minter = ? {NEWEST_FIRST}",
            (normalize_address(minter),),
        ).fetchall()
        return [Token.from_row(r) for r in rows]

    def find_missing_uri(self) -> List[Token]:
        """
        Tokens whose metadata URI couldn't be resolved at mint
        """
        rows = self.conn.execute(
            "SELECT * FROM tokens WHERE token_uri IS NULL "
            "ORDER BY minted_at, LENGTH(token_id), token_id"
        ).fetchall()
        return [Token.from_row(r) for r in rows]

    def count(self) -> int:
        return self.conn.execute("SELECT COUNT(*) FROM tokens").fetchone()[0]

    def purge(self):
        """
        Clear all database entries
        """
        self.conn.execute("DELETE FROM tokens")
