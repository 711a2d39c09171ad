from __future__ import annotations

import random
from typing import Sequence

from shopkeep.application.services.pricing import normalize_rarity, roll_price_for_item
from shopkeep.application.services.selection_reconciler import ReconcileResult
from shopkeep.domain.models.curation import SPECIALS_CATEGORY, ShopEntry
from shopkeep.domain.models.magic_item import MagicItemRecord


def display_rarity(item: MagicItemRecord) -> str:
    rarity = normalize_rarity(item.rarity)
    if item.attunement:
        return f"{rarity}, {item.attunement}"
    return rarity


def assemble(
    result: ReconcileResult,
    pool: Sequence[MagicItemRecord],
    rng: random.Random | None = None,
) -> list[ShopEntry]:
    by_key: dict[str, MagicItemRecord] = {}
    for item in pool:
        by_key.setdefault(item.key, item)
    source = rng or random.Random()

    entries: list[ShopEntry] = []
    for selection in result.response.selections:
        for claim in selection.claims:
            item = by_key.get(claim.name.lower())
            if item is None:
                continue
            entries.append(
                ShopEntry(
                    name=item.name,
                    cost=roll_price_for_item(item, source),
                    rarity=display_rarity(item),
                    description=f"Recommended for {selection.character}: {claim.reason} | {item.description}",
                    category=SPECIALS_CATEGORY,
                )
            )
    return entries
