"""Pytest fixtures: fake clock, in-memory table, dev-disk content store, orchestrator, test client."""
import pytest
from httpx import ASGITransport, AsyncClient

from assetstore.core.config import Settings
from assetstore.main import create_app
from assetstore.services.asset_storage import AssetStorage
from assetstore.services.content.local import LocalContentStore
from assetstore.services.metatoken import MemoryTable, MetaTokenStore

NOW = 1_700_000_000


class FakeClock:
    """Callable clock the stores and orchestrator read instead of time.time."""

    def __init__(self, now: float = NOW) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def table():
    return MemoryTable()


@pytest.fixture
def meta_token_store(table, clock):
    return MetaTokenStore(table, clock=clock)


@pytest.fixture
def content_store(tmp_path):
    return LocalContentStore(tmp_path / "assets")


@pytest.fixture
def asset_storage(meta_token_store, content_store, clock):
    return AssetStorage(meta_token_store, meta_token_store, content_store, clock=clock)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        storage_backend="local",
        dev_assets_dir=str(tmp_path / "assets"),
        meta_backend="memory",
        log_json=False,
        metrics_secret=None,
        base_path="",
    )


@pytest.fixture
def api_table():
    return MemoryTable()


@pytest.fixture
def app(settings, api_table, tmp_path):
    """App over real-clock stores: tokens minted by the API use time.time()."""
    store = MetaTokenStore(api_table)
    storage = AssetStorage(store, store, LocalContentStore(tmp_path / "assets"))
    return create_app(asset_storage=storage, settings=settings)


@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
