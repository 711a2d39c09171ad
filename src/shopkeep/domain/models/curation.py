from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from shopkeep.domain.errors import ExtractionError


SPECIALS_CATEGORY = "specials"

_logger = logging.getLogger(__name__)


@dataclass
class CuratorClaim:
    name: str
    reason: str = ""


@dataclass
class CuratorSelection:
    character: str
    claims: List[CuratorClaim] = field(default_factory=list)


@dataclass
class CuratorResponse:
    selections: List[CuratorSelection] = field(default_factory=list)

    def claim_count(self) -> int:
        return sum(len(selection.claims) for selection in self.selections)

    @classmethod
    def from_payload(cls, payload: Any, *, raw_response: str = "") -> "CuratorResponse":
        """Schema-check a parsed model reply.

        Only a wrong top-level shape is fatal. A malformed selection or an
        item row without a usable name is skipped so the remaining picks
        still go through reconciliation. ``"items": null`` reads as no items.
        """
        if not isinstance(payload, dict):
            raise ExtractionError("curator response is not a JSON object", raw_response=raw_response)
        rows = payload.get("selections")
        if not isinstance(rows, list):
            raise ExtractionError("curator response has no 'selections' list", raw_response=raw_response)

        selections: List[CuratorSelection] = []
        for index, row in enumerate(rows):
            character = row.get("character") if isinstance(row, dict) else None
            items = row.get("items") if isinstance(row, dict) else None
            if items is None and isinstance(row, dict):
                items = []
            if not isinstance(character, str) or not isinstance(items, list):
                _logger.warning(
                    "Curator selection malformed, skipped",
                    extra={"selection_index": index, "row": repr(row)},
                )
                continue
            claims: List[CuratorClaim] = []
            for item in items:
                name = item.get("name") if isinstance(item, dict) else None
                if not isinstance(name, str) or not name.strip():
                    _logger.warning(
                        "Curator item without a name skipped",
                        extra={"character": character, "row": repr(item)},
                    )
                    continue
                reason = item.get("reason")
                claims.append(CuratorClaim(name=name, reason=reason if isinstance(reason, str) else ""))
            selections.append(CuratorSelection(character=character.strip(), claims=claims))
        return cls(selections=selections)


@dataclass(frozen=True)
class ShopEntry:
    name: str
    cost: int
    rarity: str
    description: str
    category: str = SPECIALS_CATEGORY

    def to_payload(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "category": self.category,
            "cost": self.cost,
            "description": self.description,
            "rarity": self.rarity,
        }

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ShopEntry":
        return cls(
            name=str(payload.get("name", "")),
            cost=int(payload.get("cost", 0)),
            rarity=str(payload.get("rarity", "")),
            description=str(payload.get("description", "")),
            category=str(payload.get("category") or SPECIALS_CATEGORY),
        )
