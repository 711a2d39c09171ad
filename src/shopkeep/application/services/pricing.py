from __future__ import annotations

import random
from dataclasses import dataclass

from shopkeep.domain.models.magic_item import MagicItemRecord


FALLBACK_RARITY = "Rare"
DEFAULT_RARITY = "Uncommon"

CONSUMABLE_KEYWORDS = ("potion", "scroll", "ammunition", "oil", "elixir", "philter")


@dataclass(frozen=True)
class PriceTier:
    rarity: str
    min: int
    max: int

    def __post_init__(self) -> None:
        if self.min > self.max:
            raise ValueError(f"price tier {self.rarity} has min {self.min} above max {self.max}")

    def clamp(self, price: int) -> int:
        return max(self.min, min(self.max, price))


# DMG guideline ranges with shop markup.
PRICING_TABLE: tuple[PriceTier, ...] = (
    PriceTier("Common", 50, 100),
    PriceTier("Uncommon", 100, 500),
    PriceTier("Rare", 500, 5000),
    PriceTier("Very Rare", 5000, 50000),
    PriceTier("Legendary", 50000, 200000),
    PriceTier("Artifact", 200000, 500000),
)

CONSUMABLE_PRICING_TABLE: tuple[PriceTier, ...] = (
    PriceTier("Common", 25, 75),
    PriceTier("Uncommon", 75, 300),
    PriceTier("Rare", 300, 3000),
    PriceTier("Very Rare", 3000, 30000),
    PriceTier("Legendary", 30000, 100000),
)


def normalize_rarity(rarity: str | None) -> str:
    value = str(rarity or "").strip()
    if "varies" in value.lower():
        return FALLBACK_RARITY
    if "," in value:
        # "Uncommon (+1), Rare (+2)" -> "Uncommon"
        value = value.split(",", 1)[0].strip()
        paren = value.find("(")
        if paren > 0:
            value = value[:paren].strip()
    return value


def _lookup(table: tuple[PriceTier, ...], rarity: str | None) -> PriceTier:
    normalized = normalize_rarity(rarity).lower()
    for tier in table:
        if tier.rarity.lower() == normalized:
            return tier
    for tier in table:
        if tier.rarity == DEFAULT_RARITY:
            return tier
    return table[0]


def price_tier(rarity: str | None) -> PriceTier:
    return _lookup(PRICING_TABLE, rarity)


def consumable_price_tier(rarity: str | None) -> PriceTier:
    return _lookup(CONSUMABLE_PRICING_TABLE, rarity)


def is_consumable(item_name: str) -> bool:
    lowered = str(item_name or "").lower()
    return any(keyword in lowered for keyword in CONSUMABLE_KEYWORDS)


def price_tier_for_item(item: MagicItemRecord) -> PriceTier:
    if is_consumable(item.name):
        return consumable_price_tier(item.rarity)
    return price_tier(item.rarity)


def _granularity(price: int) -> int:
    if price < 100:
        return 5
    if price < 1000:
        return 25
    if price < 10000:
        return 100
    return 500


def round_to_nice_number(price: int) -> int:
    step = _granularity(price)
    return ((price + step // 2) // step) * step


def roll_price(tier: PriceTier, rng: random.Random | None = None) -> int:
    """Average of two uniform draws, rounded to a shop-friendly figure."""
    if tier.min == tier.max:
        return tier.min
    source = rng or random.Random()
    first = source.randint(tier.min, tier.max)
    second = source.randint(tier.min, tier.max)
    return tier.clamp(round_to_nice_number((first + second) // 2))


def roll_price_linear(tier: PriceTier, rng: random.Random | None = None) -> int:
    if tier.min == tier.max:
        return tier.min
    source = rng or random.Random()
    return tier.clamp(round_to_nice_number(source.randint(tier.min, tier.max)))


def roll_price_for_item(item: MagicItemRecord, rng: random.Random | None = None) -> int:
    return roll_price(price_tier_for_item(item), rng)


def _format_gold(amount: int) -> str:
    return f"{amount:,}"


def _table_rows(table: tuple[PriceTier, ...]) -> list[str]:
    rows = ["| Rarity | Min GP | Max GP |", "|--------|--------|--------|"]
    for tier in table:
        rows.append(f"| {tier.rarity} | {_format_gold(tier.min)} | {_format_gold(tier.max)} |")
    return rows


def format_pricing_table() -> str:
    lines = ["**Magic Item Pricing Table**", ""]
    lines.extend(_table_rows(PRICING_TABLE))
    lines.extend(["", "**Consumable Pricing (Potions, Scrolls, Oils)**", ""])
    lines.extend(_table_rows(CONSUMABLE_PRICING_TABLE))
    return "\n".join(lines) + "\n"
