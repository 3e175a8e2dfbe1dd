"""
Shared configuration and storage plumbing: :class:`Core`, :class:`Repo`
and the database schema.
"""

import os
from os.path import exists
from sqlite3 import Connection, connect
from functools import cached_property
from web3 import Web3

from reloop.exceptions import ConfigurationError
from reloop.utils import DEFAULT_IPFS_GATEWAY, normalize_address

#: ReLoopRWA deployment on Mantle Sepolia
DEFAULT_RWA_ADDRESS = "0xaA4886d00e3A22aB6f4b5105CC782B1C29c3d910"
#: ReLoopMarketplace deployment on Mantle Sepolia
DEFAULT_MARKETPLACE_ADDRESS = "0x003f586c9Dc9de4FeE29c49E437230258cb4cA9E"
#: Block both contracts were deployed at
DEFAULT_START_BLOCK = 33427584
#: Seconds before an RPC request is abandoned
DEFAULT_RPC_TIMEOUT = 10

web3_cache = {}
db_cache = {}
chain_id_cache = {}


class Core:
    """
    Base of every repo and service. Holds the indexer settings and hands
    out the RPC client and the database connection.

    Nothing is opened in the constructor. ``w3`` and ``conn`` are created
    on first access, so the query side (API, ``get_*`` calls) runs with a
    database path alone and never needs an RPC url.

    **Configuration**

    Every argument falls back to an environment variable when omitted:

    +--------------------------+--------------------------------+
    | Argument                 | Environment variable           |
    +==========================+================================+
    | ``rpc``                  | ``WEB3_PROVIDER_URI``          |
    +--------------------------+--------------------------------+
    | ``db_path``              | ``RELOOP_DB_PATH``             |
    +--------------------------+--------------------------------+
    | ``rwa_address``          | ``RELOOP_RWA_ADDRESS``         |
    +--------------------------+--------------------------------+
    | ``marketplace_address``  | ``RELOOP_MARKETPLACE_ADDRESS`` |
    +--------------------------+--------------------------------+
    | ``start_block``          | ``RELOOP_START_BLOCK``         |
    +--------------------------+--------------------------------+
    | ``ipfs_gateway``         | ``RELOOP_IPFS_GATEWAY``        |
    +--------------------------+--------------------------------+

    Contract addresses and the start block default to the Mantle Sepolia
    deployment.

    **Caching**

    Clients are shared per process: one :class:`web3.Web3` (and chain id)
    per rpc url, one :class:`sqlite3.Connection` per database path.
    Repos built with the same path therefore write in the same transaction.

    Args:
        rpc: JSON-RPC endpoint url
        db_path: Path to the SQLite file
        w3: Ready web3 client, takes precedence over ``rpc``
        conn: Ready connection, takes precedence over ``db_path``
        rwa_address: Address of the NFT contract
        marketplace_address: Address of the marketplace contract
        start_block: First block to index
        ipfs_gateway: Gateway prefix for ``ipfs://`` URIs
    """

    #: JSON-RPC endpoint url, ``None`` until resolved or when ``w3`` is given
    rpc: str | None
    #: SQLite file path, ``None`` until resolved or when ``conn`` is given
    db_path: str | None

    def __init__(
        self,
        rpc: str | None = None,
        db_path: str | None = None,
        w3: Web3 | None = None,
        conn: Connection | None = None,
        rwa_address: str | None = None,
        marketplace_address: str | None = None,
        start_block: int | None = None,
        ipfs_gateway: str | None = None,
    ):
        self.rpc = rpc
        self.db_path = db_path
        self._w3 = w3
        self._conn = conn
        self._rwa_address = rwa_address
        self._marketplace_address = marketplace_address
        self._start_block = start_block
        self._ipfs_gateway = ipfs_gateway

    @cached_property
    def rwa_address(self) -> str:
        """
        Address of the ReLoopRWA (NFT) contract, lowercase
        """
        address = self._rwa_address or os.environ.get(
            "RELOOP_RWA_ADDRESS", DEFAULT_RWA_ADDRESS
        )
        return normalize_address(address)

    @cached_property
    def marketplace_address(self) -> str:
        """
        Address of the ReLoopMarketplace contract, lowercase
        """
        address = self._marketplace_address or os.environ.get(
            "RELOOP_MARKETPLACE_ADDRESS", DEFAULT_MARKETPLACE_ADDRESS
        )
        return normalize_address(address)

    @cached_property
    def start_block(self) -> int:
        """
        First block to index
        """
        if not self._start_block is None:
            return self._start_block
        return int(os.environ.get("RELOOP_START_BLOCK", DEFAULT_START_BLOCK))

    @cached_property
    def ipfs_gateway(self) -> str:
        """
        HTTP gateway prefix used to rewrite ``ipfs://`` URIs
        """
        if not self._ipfs_gateway is None:
            return self._ipfs_gateway
        return os.environ.get("RELOOP_IPFS_GATEWAY", DEFAULT_IPFS_GATEWAY)

    @cached_property
    def chain_id(self) -> int:
        """
        Chain id reported by the RPC, asked once per rpc url
        """
        if not self.rpc:
            return self.w3.eth.chain_id
        if self.rpc not in chain_id_cache:
            chain_id_cache[self.rpc] = self.w3.eth.chain_id
        return chain_id_cache[self.rpc]

    @cached_property
    def w3(self) -> Web3:
        """
        RPC client
        """
        if not self._w3 is None:
            return self._w3

        if self.rpc is None:
            self.rpc = os.environ.get("WEB3_PROVIDER_URI")

        if self.rpc is None:
            raise ConfigurationError(
                "Ethereum RPC is not set. "
                "Use `WEB3_PROVIDER_URI` env variable or pass rpc explicitly"
            )

        if not self.rpc in web3_cache:
            web3_cache[self.rpc] = Web3(
                Web3.HTTPProvider(
                    self.rpc, request_kwargs={"timeout": DEFAULT_RPC_TIMEOUT}
                )
            )

        return web3_cache[self.rpc]

    @cached_property
    def conn(self) -> Connection:
        """
        :class:`sqlite3.Connection` to the database
        """
        if not self._conn is None:
            return self._conn

        if self.db_path is None:
            self.db_path = os.environ.get("RELOOP_DB_PATH")

        if self.db_path is None:
            raise ConfigurationError(
                "Database path is not set. "
                "Use `RELOOP_DB_PATH` env variable or pass db_path explicitly"
            )

        if not self.db_path in db_cache:
            db_cache[self.db_path] = connection_from_path(self.db_path)

        return db_cache[self.db_path]


class Repo(Core):
    """
    Base class for any repo. Repos read and write one table
    through :attr:`Core.conn`.

    Important:
        Repo writes open (or join) a transaction and never commit on their
        own. The caller decides where the unit of work ends: the projector
        commits once per applied event.

    Examples:

        ::

            tokens = TokensRepo(db_path="reloop.db")
            tokens.set_owner(1, "0x9f3b...")  # pending
            tokens.commit()                   # visible to readers
    """

    def commit(self):
        self.conn.commit()

    def rollback(self):
        """
        Discard every write pending on the shared connection
        """
        self.conn.rollback()


def connection_from_path(path: str) -> Connection:
    """
    Open the SQLite file at ``path``, creating the schema when the file
    is new (or for ``:memory:``).

    The connection may be shared between threads. Only the projector
    writes to it, everyone else reads.

    Note:
        There are no migrations. A schema change needs a fresh file
        and a resync.
    """

    is_fresh = path == ":memory:" or not exists(path)
    conn = connect(path, check_same_thread=False)
    if is_fresh:
        init_db(conn)

    return conn


def init_db(conn: Connection):
    """
    Create every table and index of the indexer.

    Integer columns that can exceed 64 bits (token ids, prices, amounts
    and the running totals) are stored as decimal text.
    """
    cursor = conn.cursor()
    # Raw event log
    cursor.execute(
        """CREATE TABLE IF NOT EXISTS events
            (chain_id integer, block_number integer, block_timestamp integer, \
            transaction_hash text, log_index integer, address text, event text, args text)"""
    )
    cursor.execute(
        """CREATE UNIQUE INDEX IF NOT EXISTS idx_events_id \
        ON events(chain_id,transaction_hash,log_index)
    """
    )
    cursor.execute(
        """CREATE INDEX IF NOT EXISTS idx_events_position \
        ON events(chain_id,block_number,log_index)
    """
    )

    # Blocks table
    cursor.execute(
        """CREATE TABLE IF NOT EXISTS blocks
                (chain_id integer, block_number integer, timestamp integer)"""
    )
    cursor.execute(
        """CREATE UNIQUE INDEX IF NOT EXISTS idx_blocks_id
            ON blocks(chain_id,block_number)"""
    )

    # Calls

    cursor.execute(
        """CREATE TABLE IF NOT EXISTS calls
                (chain_id integer, address text, calldata text, \
                block_number integer, response text)"""
    )
    cursor.execute(
        """CREATE UNIQUE INDEX IF NOT EXISTS idx_calls_id
            ON calls(chain_id,address,calldata,block_number)"""
    )

    # Cursors

    cursor.execute(
        """CREATE TABLE IF NOT EXISTS cursors
                (chain_id integer, name text, block_number integer, log_index integer, \
                PRIMARY KEY (chain_id, name))"""
    )

    # Tokens

    cursor.execute(
        """CREATE TABLE IF NOT EXISTS tokens
                (token_id text PRIMARY KEY, minter text, owner text, token_uri text, \
                depth integer, profit_splits_bps text, minted_at integer, mint_tx_hash text)"""
    )
    cursor.execute(
        "CREATE INDEX IF NOT EXISTS idx_tokens_minted_at ON tokens(minted_at)"
    )
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_tokens_owner ON tokens(owner)")
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_tokens_minter ON tokens(minter)")

    # Listings

    cursor.execute(
        """CREATE TABLE IF NOT EXISTS listings
                (token_id text PRIMARY KEY, seller text, price text, active integer, \
                listed_at integer, tx_hash text)"""
    )
    cursor.execute(
        """CREATE INDEX IF NOT EXISTS idx_listings_active
            ON listings(active,listed_at)"""
    )

    # Sales

    cursor.execute(
        """CREATE TABLE IF NOT EXISTS sales
                (id text PRIMARY KEY, token_id text, seller text, buyer text, \
                price text, profit text, timestamp integer, tx_hash text, block_number integer)"""
    )
    cursor.execute(
        "CREATE INDEX IF NOT EXISTS idx_sales_token ON sales(token_id,timestamp)"
    )
    cursor.execute("CREATE INDEX IF NOT EXISTS idx_sales_tx ON sales(tx_hash)")

    # Owner history

    cursor.execute(
        """CREATE TABLE IF NOT EXISTS owner_history
                (id text PRIMARY KEY, token_id text, owner text, purchase_price text, \
                timestamp integer, tx_hash text, block_number integer, log_index integer)"""
    )
    cursor.execute(
        """CREATE INDEX IF NOT EXISTS idx_owner_history_token
            ON owner_history(token_id,block_number,log_index)"""
    )

    # Profit distributions

    cursor.execute(
        """CREATE TABLE IF NOT EXISTS profit_distributions
                (id text PRIMARY KEY, token_id text, sale_id text, recipient text, \
                amount text, generation integer, timestamp integer, tx_hash text)"""
    )
    cursor.execute(
        """CREATE INDEX IF NOT EXISTS idx_profit_distributions_token
            ON profit_distributions(token_id,timestamp)"""
    )
    cursor.execute(
        """CREATE INDEX IF NOT EXISTS idx_profit_distributions_recipient
            ON profit_distributions(recipient,timestamp)"""
    )
    cursor.execute(
        """CREATE INDEX IF NOT EXISTS idx_profit_distributions_tx
            ON profit_distributions(tx_hash,token_id)"""
    )

    # Platform fees

    cursor.execute(
        """CREATE TABLE IF NOT EXISTS platform_fees
                (id text PRIMARY KEY, token_id text, amount text, timestamp integer, \
                tx_hash text)"""
    )

    # User stats

    cursor.execute(
        """CREATE TABLE IF NOT EXISTS user_stats
                (address text PRIMARY KEY, tokens_minted integer, tokens_bought integer, \
                tokens_sold integer, total_spent text, total_earned text, profit_received text)"""
    )

    conn.commit()
