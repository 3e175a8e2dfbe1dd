"""
Ownership chain of every token.

Note:
    Plain ERC-721 transfers only move :attr:`reloop.tokens.Token.owner`.
    History records come from the mint and from marketplace purchases.
"""

from reloop.owner_history.record import OwnerHistoryRecord
from reloop.owner_history.repo import OwnerHistoryRepo
