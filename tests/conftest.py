import pytest

from database import MemoryKeyValueStore, SqlKeyValueStore, get_engine
from features.store import RecordStore


@pytest.fixture
def memory_adapter():
    return MemoryKeyValueStore()


@pytest.fixture
def sqlite_url(tmp_path):
    return f"sqlite:///{tmp_path / 'store.db'}"


@pytest.fixture
def sql_adapter(sqlite_url):
    return SqlKeyValueStore(get_engine(sqlite_url))


@pytest.fixture
def store(memory_adapter):
    return RecordStore(memory_adapter)


@pytest.fixture
def seeded_store(store):
    store.initialize()
    return store
