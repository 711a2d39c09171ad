"""Reproducible monthly shop rotation.

Unlike curated session specials, the rotation is fully deterministic for a
given calendar period so every reader of the shop sees the same stock.
"""

from __future__ import annotations

import hashlib
import random
import re
from datetime import date
from typing import Sequence

from shopkeep.application.services.pricing import normalize_rarity, price_tier_for_item, roll_price
from shopkeep.domain.models.curation import ShopEntry
from shopkeep.domain.models.magic_item import MagicItemRecord


ROTATION_CATEGORY = "monthly"
DEFAULT_ROTATION_SIZE = 6

_PERIOD_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def current_period(today: date | None = None) -> str:
    value = today or date.today()
    return f"{value.year:04d}-{value.month:02d}"


def derive_rotation_seed(period: str) -> int:
    if not _PERIOD_RE.match(str(period or "")):
        raise ValueError(f"rotation period must look like YYYY-MM, got {period!r}")
    digest = hashlib.sha256(f"rotation:{period}".encode("utf-8")).hexdigest()
    return int(digest, 16) % (2**32)


def derive_rotation_rng(period: str) -> random.Random:
    return random.Random(derive_rotation_seed(period))


def monthly_rotation(
    pool: Sequence[MagicItemRecord],
    period: str,
    count: int = DEFAULT_ROTATION_SIZE,
) -> list[ShopEntry]:
    rng = derive_rotation_rng(period)
    size = max(0, min(int(count), len(pool)))
    picks = rng.sample(list(pool), size)
    return [
        ShopEntry(
            name=item.name,
            cost=roll_price(price_tier_for_item(item), rng),
            rarity=normalize_rarity(item.rarity),
            description=item.description,
            category=ROTATION_CATEGORY,
        )
        for item in picks
    ]
