"""
Minted ReLoop NFTs.

A :class:`Token` is created once on ``TokenMinted`` together with its
profit cascade configuration (``depth`` and ``profit_splits_bps``), and
only its owner and metadata URI change afterwards.
"""

from reloop.tokens.token import Token
from reloop.tokens.repo import TokensRepo
