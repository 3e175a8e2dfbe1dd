from __future__ import annotations
from typing import Any, Dict, Tuple

from reloop.core import Core
from reloop.listings.repo import ListingsRepo
from reloop.owner_history.repo import OwnerHistoryRepo
from reloop.profits.repo import ProfitDistributionsRepo
from reloop.sales.repo import SalesRepo
from reloop.tokens.repo import TokensRepo
from reloop.tokens.token import Token
from reloop.user_stats.repo import UserStatsRepo
from reloop.user_stats.stats import UserStats
from reloop.utils import normalize_address

DEFAULT_LIMIT = 20
MAX_LIMIT = 100
#: Number of recent profit distributions in a user profile
RECENT_PROFITS_LIMIT = 50


class QueryService(Core):
    """
    Read-only queries over the derived tables.

    Every method returns plain JSON-serializable dicts: keys are camelCase,
    token ids, wei amounts and timestamps are decimal strings.

    Pagination ``limit`` defaults to 20 and is capped at 100.

    Args:
        tokens_repo: Repo of tokens
        listings_repo: Repo of listings
        sales_repo: Repo of sales
        owner_history_repo: Repo of ownership records
        profits_repo: Repo of profit distributions
        user_stats_repo: Repo of user stats
        kwargs: Args for the :class:`reloop.core.Core`
    """

    def __init__(
        self,
        tokens_repo: TokensRepo,
        listings_repo: ListingsRepo,
        sales_repo: SalesRepo,
        owner_history_repo: OwnerHistoryRepo,
        profits_repo: ProfitDistributionsRepo,
        user_stats_repo: UserStatsRepo,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._tokens_repo = tokens_repo
        self._listings_repo = listings_repo
        self._sales_repo = sales_repo
        self._owner_history_repo = owner_history_repo
        self._profits_repo = profits_repo
        self._user_stats_repo = user_stats_repo

    @staticmethod
    def create(**kwargs) -> QueryService:
        """
        Create an instance of :class:`QueryService`

        Args:
            kwargs: Args for the :class:`reloop.core.Core`

        Returns:
            An instance of :class:`QueryService`
        """
        return QueryService(
            TokensRepo(**kwargs),
            ListingsRepo(**kwargs),
            SalesRepo(**kwargs),
            OwnerHistoryRepo(**kwargs),
            ProfitDistributionsRepo(**kwargs),
            UserStatsRepo(**kwargs),
            **kwargs,
        )

    def list_tokens(self, limit: int = DEFAULT_LIMIT, offset: int = 0) -> Dict[str, Any]:
        """
        Page of tokens, newest mint first

        Returns:
            ``{"tokens": [...], "limit": ..., "offset": ...}``
        """
        limit, offset = _page(limit, offset)
        tokens = self._tokens_repo.find(limit, offset)
        return {
            "tokens": [self._token_dict(t) for t in tokens],
            "limit": limit,
            "offset": offset,
        }

    def get_token(self, token_id: int) -> Dict[str, Any] | None:
        """
        Token with its ownership chain, current listing and sales.

        The listing is included only while it's active.

        Returns:
            ``{"token", "ownerHistory", "listing", "sales"}``,
            ``None`` if the token doesn't exist
        """
        token = self._tokens_repo.get(token_id)
        if token is None:
            return None
        listing = self._listings_repo.get(token_id)
        return {
            "token": self._token_dict(token),
            "ownerHistory": [
                r.to_dict() for r in self._owner_history_repo.find_by_token(token_id)
            ],
            "listing": listing.to_dict() if listing and listing.active else None,
            "sales": [s.to_dict() for s in self._sales_repo.find_by_token(token_id)],
        }

    def get_listing(self, token_id: int) -> Dict[str, Any] | None:
        """
        Active listing of a token

        Returns:
            ``{"listing": ...}``, ``None`` if the token isn't listed
        """
        listing = self._listings_repo.get(token_id)
        if listing is None or not listing.active:
            return None
        return {"listing": listing.to_dict()}

    def list_listings(self, limit: int = DEFAULT_LIMIT, offset: int = 0) -> Dict[str, Any]:
        """
        Page of active listings, newest first
        """
        limit, offset = _page(limit, offset)
        listings = self._listings_repo.find_active(limit, offset)
        return {
            "listings": [l.to_dict() for l in listings],
            "limit": limit,
            "offset": offset,
        }

    def list_sales(self, limit: int = DEFAULT_LIMIT, offset: int = 0) -> Dict[str, Any]:
        """
        Page of sales, newest first
        """
        limit, offset = _page(limit, offset)
        sales = self._sales_repo.find(limit, offset)
        return {
            "sales": [s.to_dict() for s in sales],
            "limit": limit,
            "offset": offset,
        }

    def get_user(self, address: str) -> Dict[str, Any]:
        """
        Profile of an address. The lookup is case-insensitive.

        Addresses without any activity get zeroed stats and empty lists.

        Returns:
            ``{"stats", "ownedTokens", "mintedTokens", "recentProfits"}``
        """
        address = normalize_address(address)
        stats = self._user_stats_repo.get(address) or UserStats(address)
        return {
            "stats": stats.to_dict(),
            "ownedTokens": [
                self._token_dict(t) for t in self._tokens_repo.find_by_owner(address)
            ],
            "mintedTokens": [
                self._token_dict(t) for t in self._tokens_repo.find_by_minter(address)
            ],
            "recentProfits": [
                d.to_dict()
                for d in self._profits_repo.find_by_recipient(
                    address, RECENT_PROFITS_LIMIT
                )
            ],
        }

    def get_token_profits(self, token_id: int) -> Dict[str, Any] | None:
        """
        Profit cascade payments of a token, newest first

        Returns:
            ``{"profits": [...]}``, ``None`` if the token doesn't exist
        """
        if not self._tokens_repo.exists(token_id):
            return None
        return {
            "profits": [d.to_dict() for d in self._profits_repo.find_by_token(token_id)]
        }

    def get_stats(self) -> Dict[str, Any]:
        """
        Marketplace totals, aggregated over all rows on every call
        """
        sales, volume, profit = self._sales_repo.totals()
        return {
            "totalTokens": self._tokens_repo.count(),
            "totalSales": sales,
            "activeListings": self._listings_repo.count_active(),
            "totalVolume": str(volume),
            "totalProfitDistributed": str(profit),
        }

    def _token_dict(self, token: Token) -> Dict[str, Any]:
        return {**token.to_dict(), "metadataUrl": token.metadata_url(self.ipfs_gateway)}


def _page(limit: int, offset: int) -> Tuple[int, int]:
    return max(1, min(limit, MAX_LIMIT)), max(0, offset)
