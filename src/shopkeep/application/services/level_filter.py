from __future__ import annotations

from typing import Iterable, Sequence

from shopkeep.application.services.pricing import FALLBACK_RARITY, normalize_rarity
from shopkeep.domain.models.character_profile import MIN_LEVEL, CharacterProfile
from shopkeep.domain.models.magic_item import MagicItemRecord


# Minimum party level per rarity. Must stay monotonic in rarity order.
RARITY_MIN_LEVEL = {
    "common": 1,
    "uncommon": 1,
    "rare": 5,
    "very rare": 11,
    "legendary": 17,
    "artifact": 17,
}


def minimum_level_for(rarity: str | None) -> int:
    normalized = normalize_rarity(rarity).lower()
    if normalized in RARITY_MIN_LEVEL:
        return RARITY_MIN_LEVEL[normalized]
    return RARITY_MIN_LEVEL[FALLBACK_RARITY.lower()]


def is_rarity_allowed(rarity: str | None, level: int) -> bool:
    return int(level) >= minimum_level_for(rarity)


def party_level(characters: Iterable[CharacterProfile]) -> int:
    levels = [character.level for character in characters]
    if not levels:
        return MIN_LEVEL
    return min(levels)


def filter_by_level(pool: Sequence[MagicItemRecord], level: int) -> list[MagicItemRecord]:
    return [item for item in pool if is_rarity_allowed(item.rarity, level)]
