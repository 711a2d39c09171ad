from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class MagicItemRecord:
    name: str
    rarity: str
    description: str = ""
    kind: Optional[str] = None
    attunement: Optional[str] = None

    @property
    def key(self) -> str:
        return self.name.lower()

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "MagicItemRecord":
        name = str(payload.get("name", "")).strip()
        if not name:
            raise ValueError("magic item row is missing a name")
        kind = str(payload.get("type") or "").strip() or None
        attunement = str(payload.get("attunement") or "").strip() or None
        return cls(
            name=name,
            rarity=str(payload.get("rarity", "")).strip(),
            description=str(payload.get("description", "")).strip(),
            kind=kind,
            attunement=attunement,
        )
