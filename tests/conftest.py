import pytest

from rackkeeper.db.scorekeeper_storage import ScorekeeperStorage
from rackkeeper.db.store import KeyValueStore, create_db_engine
from rackkeeper.engine.engine import Engine
from rackkeeper.match import Player


@pytest.fixture
def db_engine():
    return create_db_engine("sqlite://")


@pytest.fixture
def store(db_engine) -> KeyValueStore:
    return KeyValueStore(db_engine)


@pytest.fixture
def storage(store) -> ScorekeeperStorage:
    return ScorekeeperStorage(store)


@pytest.fixture
def engine(storage) -> Engine:
    return Engine(storage)


@pytest.fixture
def alice() -> Player:
    return Player.create("Alice")


@pytest.fixture
def bob() -> Player:
    return Player.create("Bob")
