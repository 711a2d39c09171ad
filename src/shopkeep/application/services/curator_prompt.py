from __future__ import annotations

from typing import Sequence

from shopkeep.application.services.pricing import normalize_rarity
from shopkeep.domain.models.character_profile import CharacterProfile
from shopkeep.domain.models.magic_item import MagicItemRecord


DEFAULT_ITEMS_PER_CHARACTER = 4

CURATOR_SYSTEM_PROMPT = """You are a D&D 5e magic item curator. Your job is to select personalized magic items for each character in a party.

RULES:
- Select exactly {count} items per character
- Pick items that match the character's class, backstory, and playstyle
- Mix mechanically useful items with thematically interesting ones
- No duplicate items across characters (each item can only be recommended once)
- Return ONLY valid JSON, no other text
- CRITICAL: The "name" field must be copied EXACTLY from the item pool. Do not rename, abbreviate, or add parenthetical notes to item names.
- Only select items that appear in the provided pool. Do not invent items or reference the character's existing equipment.

RESPONSE FORMAT (JSON only):
{{
  "selections": [
    {{
      "character": "Character Name",
      "items": [
        {{"name": "Exact Item Name From Pool", "reason": "Brief reason why this suits them"}}
      ]
    }}
  ]
}}"""


def build_system_prompt(items_per_character: int = DEFAULT_ITEMS_PER_CHARACTER) -> str:
    return CURATOR_SYSTEM_PROMPT.format(count=int(items_per_character))


def _character_block(character: CharacterProfile) -> list[str]:
    lines = [
        f"### {character.name} ({character.class_level})",
        f"- Backstory: {character.backstory}",
    ]
    if character.playstyle:
        lines.append(f"- Playstyle: {character.playstyle}")
    if character.inventory:
        lines.append(f"- Current inventory: {', '.join(character.inventory)}")
    lines.append("")
    return lines


def build_curator_prompt(
    characters: Sequence[CharacterProfile],
    pool: Sequence[MagicItemRecord],
    *,
    items_per_character: int = DEFAULT_ITEMS_PER_CHARACTER,
) -> str:
    lines = ["## Characters", ""]
    for character in characters:
        lines.extend(_character_block(character))

    lines.extend(["## Available Item Pool", ""])
    for item in pool:
        lines.append(f"- {item.name} ({normalize_rarity(item.rarity)})")

    lines.append("")
    lines.append(
        f"Select exactly {int(items_per_character)} items for each of the "
        f"{len(characters)} characters. Return ONLY JSON."
    )
    return "\n".join(lines) + "\n"
