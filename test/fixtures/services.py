import pytest

from reloop.blocks import BlocksRepo, BlocksService
from reloop.calls import CallsRepo, CallsService
from reloop.cursors import CursorsRepo
from reloop.events import EventsRepo, EventsService
from reloop.fees import PlatformFeesRepo
from reloop.listings import ListingsRepo
from reloop.owner_history import OwnerHistoryRepo
from reloop.profits import ProfitDistributionsRepo
from reloop.projector import Projector
from reloop.query import QueryService
from reloop.sales import SalesRepo
from reloop.tokens import TokensRepo
from reloop.user_stats import UserStatsRepo

from fixtures.w3 import START_BLOCK, Web3Mock


@pytest.fixture
def core_args(db_path: str, w3_mock: Web3Mock):
    """
    Args for reloop.core.Core pointing at the test database and the web3 mock
    """
    return {"db_path": db_path, "w3": w3_mock, "start_block": START_BLOCK}


@pytest.fixture
def blocks_repo(core_args) -> BlocksRepo:
    return BlocksRepo(**core_args)


@pytest.fixture
def blocks_service(blocks_repo: BlocksRepo, core_args) -> BlocksService:
    return BlocksService(blocks_repo, **core_args)


@pytest.fixture
def calls_repo(core_args) -> CallsRepo:
    return CallsRepo(**core_args)


@pytest.fixture
def calls_service(calls_repo: CallsRepo, core_args) -> CallsService:
    """
    Instance of CallsService that gives up after the first failure
    """
    return CallsService(calls_repo, max_tries=1, **core_args)


@pytest.fixture
def cursors_repo(core_args) -> CursorsRepo:
    return CursorsRepo(**core_args)


@pytest.fixture
def events_repo(core_args) -> EventsRepo:
    return EventsRepo(**core_args)


@pytest.fixture
def events_service(
    events_repo: EventsRepo,
    cursors_repo: CursorsRepo,
    blocks_service: BlocksService,
    core_args,
) -> EventsService:
    return EventsService(events_repo, cursors_repo, blocks_service, chunk_size=100, **core_args)


@pytest.fixture
def tokens_repo(core_args) -> TokensRepo:
    return TokensRepo(**core_args)


@pytest.fixture
def listings_repo(core_args) -> ListingsRepo:
    return ListingsRepo(**core_args)


@pytest.fixture
def sales_repo(core_args) -> SalesRepo:
    return SalesRepo(**core_args)


@pytest.fixture
def owner_history_repo(core_args) -> OwnerHistoryRepo:
    return OwnerHistoryRepo(**core_args)


@pytest.fixture
def profits_repo(core_args) -> ProfitDistributionsRepo:
    return ProfitDistributionsRepo(**core_args)


@pytest.fixture
def fees_repo(core_args) -> PlatformFeesRepo:
    return PlatformFeesRepo(**core_args)


@pytest.fixture
def user_stats_repo(core_args) -> UserStatsRepo:
    return UserStatsRepo(**core_args)


@pytest.fixture
def projector(
    events_service: EventsService,
    calls_service: CallsService,
    cursors_repo: CursorsRepo,
    tokens_repo: TokensRepo,
    listings_repo: ListingsRepo,
    sales_repo: SalesRepo,
    owner_history_repo: OwnerHistoryRepo,
    profits_repo: ProfitDistributionsRepo,
    fees_repo: PlatformFeesRepo,
    user_stats_repo: UserStatsRepo,
    core_args,
) -> Projector:
    return Projector(
        events_service,
        calls_service,
        cursors_repo,
        tokens_repo,
        listings_repo,
        sales_repo,
        owner_history_repo,
        profits_repo,
        fees_repo,
        user_stats_repo,
        **core_args,
    )


@pytest.fixture
def query_service(core_args) -> QueryService:
    return QueryService.create(**core_args)
