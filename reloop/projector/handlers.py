"""
Handlers applying ReLoop events to the derived tables.

Each handler receives the :class:`reloop.projector.Projector` (for its
repos) and the :class:`reloop.events.Event`. Handlers never commit, the
projector wraps every call into a transaction.

Immutable records are keyed by the event uid (``{tx_hash}-{log_index}``),
and counters only move when the keyed insert actually inserted. That's
what makes replaying an event a no-op.
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Callable, Dict

from reloop.events.event import Event
from reloop.exceptions import InvalidEventError
from reloop.listings.listing import Listing
from reloop.owner_history.record import OwnerHistoryRecord
from reloop.profits.distribution import ProfitDistribution
from reloop.fees.fee import PlatformFeeRecord
from reloop.sales.sale import Sale
from reloop.tokens.token import Token
from reloop.utils import is_zero_address

if TYPE_CHECKING:
    from reloop.projector.service import Projector

logger = logging.getLogger(__name__)


def on_token_minted(p: Projector, event: Event):
    args = event.args
    token_id = int(args["tokenId"])
    if p.tokens_repo.exists(token_id):
        return

    depth = int(args["depth"])
    splits = [int(s) for s in args["profitSplitsBps"]]
    if len(splits) != depth:
        raise InvalidEventError(
            f"Token {token_id}: depth {depth} doesn't match "
            f"{len(splits)} profit splits ({event.uid})"
        )
    if any(s < 0 for s in splits):
        raise InvalidEventError(
            f"Token {token_id}: negative profit split {splits} ({event.uid})"
        )

    token_uri = p.calls_service.token_uri(event.address, token_id, event.block_number)
    p.tokens_repo.insert(
        Token(
            token_id=token_id,
            minter=args["minter"],
            owner=args["minter"],
            token_uri=token_uri,
            depth=depth,
            profit_splits_bps=splits,
            minted_at=event.block_timestamp,
            mint_tx_hash=event.transaction_hash,
        )
    )
    p.owner_history_repo.insert(
        OwnerHistoryRecord(
            id=event.uid,
            token_id=token_id,
            owner=args["minter"],
            purchase_price=0,
            timestamp=event.block_timestamp,
            tx_hash=event.transaction_hash,
            block_number=event.block_number,
            log_index=event.log_index,
        )
    )
    p.user_stats_repo.increment(args["minter"], tokens_minted=1)


def on_transfer(p: Projector, event: Event):
    args = event.args
    # Mints are handled by TokenMinted
    if is_zero_address(args["from"]):
        return
    token_id = int(args["tokenId"])
    if not p.tokens_repo.set_owner(token_id, args["to"]):
        logger.warning("Transfer of unknown token %d (%s)", token_id, event.uid)


def on_owner_history_updated(p: Projector, event: Event):
    args = event.args
    p.owner_history_repo.insert(
        OwnerHistoryRecord(
            id=event.uid,
            token_id=int(args["tokenId"]),
            owner=args["newOwner"],
            purchase_price=int(args["purchasePrice"]),
            timestamp=event.block_timestamp,
            tx_hash=event.transaction_hash,
            block_number=event.block_number,
            log_index=event.log_index,
        )
    )


def on_listed(p: Projector, event: Event):
    args = event.args
    p.listings_repo.upsert(
        Listing(
            token_id=int(args["tokenId"]),
            seller=args["seller"],
            price=int(args["price"]),
            active=True,
            listed_at=event.block_timestamp,
            tx_hash=event.transaction_hash,
        )
    )


def on_delisted(p: Projector, event: Event):
    token_id = int(event.args["tokenId"])
    if not p.listings_repo.deactivate(token_id):
        logger.debug("Delisting of never listed token %d (%s)", token_id, event.uid)


def on_sale(p: Projector, event: Event):
    args = event.args
    token_id = int(args["tokenId"])
    price, profit = int(args["price"]), int(args["profit"])
    if profit > price:
        raise InvalidEventError(
            f"Token {token_id}: sale profit {profit} exceeds price {price} ({event.uid})"
        )

    sale = Sale(
        id=event.uid,
        token_id=token_id,
        seller=args["seller"],
        buyer=args["buyer"],
        price=price,
        profit=profit,
        timestamp=event.block_timestamp,
        tx_hash=event.transaction_hash,
        block_number=event.block_number,
    )
    inserted = p.sales_repo.insert(sale)
    p.listings_repo.deactivate(token_id)
    p.tokens_repo.set_owner(token_id, sale.buyer)
    if not inserted:
        return

    p.user_stats_repo.increment(sale.seller, tokens_sold=1, total_earned=price - profit)
    p.user_stats_repo.increment(sale.buyer, tokens_bought=1, total_spent=price)
    p.profits_repo.link_sale(sale.tx_hash, token_id, sale.id)


def on_profit_distributed(p: Projector, event: Event):
    args = event.args
    token_id = int(args["tokenId"])
    sale = p.sales_repo.find_by_transaction(event.transaction_hash, token_id)
    distribution = ProfitDistribution(
        id=event.uid,
        token_id=token_id,
        sale_id=None if sale is None else sale.id,
        recipient=args["recipient"],
        amount=int(args["amount"]),
        generation=int(args["generation"]),
        timestamp=event.block_timestamp,
        tx_hash=event.transaction_hash,
    )
    if p.profits_repo.insert(distribution):
        p.user_stats_repo.increment(
            distribution.recipient, profit_received=distribution.amount
        )


def on_platform_fee_collected(p: Projector, event: Event):
    args = event.args
    p.fees_repo.insert(
        PlatformFeeRecord(
            id=event.uid,
            token_id=int(args["tokenId"]),
            amount=int(args["amount"]),
            timestamp=event.block_timestamp,
            tx_hash=event.transaction_hash,
        )
    )


#: Event name to handler
HANDLERS: Dict[str, Callable[[Projector, Event], None]] = {
    "TokenMinted": on_token_minted,
    "Transfer": on_transfer,
    "OwnerHistoryUpdated": on_owner_history_updated,
    "Listed": on_listed,
    "Delisted": on_delisted,
    "Sale": on_sale,
    "ProfitDistributed": on_profit_distributed,
    "PlatformFeeCollected": on_platform_fee_collected,
}
