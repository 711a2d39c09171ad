from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple


MIN_LEVEL = 1
MAX_LEVEL = 20

_LEVEL_RE = re.compile(r"\blevel\s*(\d+)", re.IGNORECASE)
_NUMBER_RE = re.compile(r"\d+")


def parse_level(class_level: str | None) -> int:
    """Extract the character level from free text such as "Level 5 Paladin".

    Text with no usable number falls back to MIN_LEVEL so an unreadable sheet
    can never unlock higher-rarity items.
    """
    text = str(class_level or "")
    match = _LEVEL_RE.search(text) or _NUMBER_RE.search(text)
    if match is None:
        return MIN_LEVEL
    value = int(match.group(1) if match.groups() else match.group(0))
    if value < MIN_LEVEL:
        return MIN_LEVEL
    return min(value, MAX_LEVEL)


@dataclass(frozen=True)
class CharacterProfile:
    name: str
    class_level: str
    backstory: str = ""
    playstyle: Optional[str] = None
    inventory: Tuple[str, ...] = ()
    discord_handle: Optional[str] = None

    @property
    def level(self) -> int:
        return parse_level(self.class_level)

    def summary(self) -> str:
        return f"{self.name} ({self.class_level}): {self.backstory}"

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "CharacterProfile":
        name = str(payload.get("name", "")).strip()
        if not name:
            raise ValueError("character profile is missing a name")
        raw_inventory = payload.get("current_inventory", payload.get("inventory")) or []
        if not isinstance(raw_inventory, list):
            raise ValueError(f"inventory for '{name}' must be a list")
        backstory = payload.get("backstory_summary", payload.get("backstory", ""))
        playstyle = str(payload.get("playstyle") or "").strip() or None
        handle = str(payload.get("discord_handle") or "").strip() or None
        return cls(
            name=name,
            class_level=str(payload.get("class_level", "")).strip(),
            backstory=str(backstory or "").strip(),
            playstyle=playstyle,
            inventory=tuple(str(entry) for entry in raw_inventory),
            discord_handle=handle,
        )
