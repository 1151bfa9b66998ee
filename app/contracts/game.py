from dataclasses import dataclass
from typing import Any, Optional, Protocol

from pydantic import BaseModel

from app.config import StoreConfig


class Recipient(BaseModel):
    id: str
    display_name: str


class ItemCatalog(Protocol):
    def resolve(self, name: str) -> Optional[Any]:
        """Return the item definition registered under ``name``, if any."""
        ...

    def instantiate(self, definition: Any, quantity: int) -> Optional[Any]:
        """Create an item stack, or return None when the engine refuses."""
        ...


class Inventory(Protocol):
    def try_place(self, handle: Any) -> bool:
        ...


class World(Protocol):
    def drop_near(self, handle: Any, recipient: Recipient) -> None:
        ...


class ConfigStore(Protocol):
    def save(self, config: StoreConfig) -> None:
        ...


@dataclass(frozen=True)
class GameServices:
    catalog: ItemCatalog
    inventory: Inventory
    world: World
