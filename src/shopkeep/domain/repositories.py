from abc import ABC, abstractmethod
from typing import Sequence, Tuple

from shopkeep.domain.models.character_profile import CharacterProfile
from shopkeep.domain.models.curation import ShopEntry
from shopkeep.domain.models.magic_item import MagicItemRecord


class ItemLibrary(ABC):
    @abstractmethod
    def load_all(self) -> Tuple[MagicItemRecord, ...]:
        """Flattened, stably ordered read of every item family."""
        raise NotImplementedError


class CharacterLibrary(ABC):
    @abstractmethod
    def load_all(self) -> Tuple[CharacterProfile, ...]:
        raise NotImplementedError


class CuratorModel(ABC):
    @abstractmethod
    def complete(self, system_prompt: str, user_message: str) -> str:
        raise NotImplementedError


class SpecialsStore(ABC):
    @abstractmethod
    def replace(self, entries: Sequence[ShopEntry]) -> None:
        raise NotImplementedError

    @abstractmethod
    def read_entries(self) -> list[ShopEntry]:
        raise NotImplementedError
