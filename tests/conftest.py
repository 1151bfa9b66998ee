import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.config import StoreConfig  # noqa: E402
from app.contracts.game import GameServices, Recipient  # noqa: E402


class FakeItemDefinition:
    def __init__(self, name):
        self.name = name


class FakeItem:
    def __init__(self, definition, quantity):
        self.definition = definition
        self.quantity = quantity


class FakeCatalog:
    """Item catalog backed by a fixed set of names."""

    def __init__(self, names=("wood", "stone", "rifle.ak"), broken=()):
        self.definitions = {name: FakeItemDefinition(name) for name in names}
        self.broken = set(broken)
        self.resolved = []
        self.created = []

    def resolve(self, name):
        self.resolved.append(name)
        return self.definitions.get(name)

    def instantiate(self, definition, quantity):
        if definition.name in self.broken:
            return None
        item = FakeItem(definition, quantity)
        self.created.append(item)
        return item


class FakeInventory:
    def __init__(self, slots=30):
        self.slots = slots
        self.items = []

    def try_place(self, handle):
        if len(self.items) >= self.slots:
            return False
        self.items.append(handle)
        return True


class FakeWorld:
    def __init__(self):
        self.dropped = []

    def drop_near(self, handle, recipient):
        self.dropped.append((handle, recipient.id))


class FakeConfigStore:
    def __init__(self):
        self.saved = []

    def save(self, config):
        self.saved.append(config)


@pytest.fixture
def recipient():
    return Recipient(id="76561198000000001", display_name="Bob")


@pytest.fixture
def store_config():
    return StoreConfig(api_key="test-key", claim_command="tgclaim", secret_command="tgsecret")


@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def inventory():
    return FakeInventory()


@pytest.fixture
def world():
    return FakeWorld()


@pytest.fixture
def services(catalog, inventory, world):
    return GameServices(catalog=catalog, inventory=inventory, world=world)


@pytest.fixture
def config_store():
    return FakeConfigStore()
