from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from shopkeep.domain.errors import ValidationWarning
from shopkeep.domain.models.curation import CuratorClaim, CuratorResponse, CuratorSelection
from shopkeep.domain.models.magic_item import MagicItemRecord


_logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    response: CuratorResponse
    warnings: list[ValidationWarning] = field(default_factory=list)

    def accepted_count(self) -> int:
        return self.response.claim_count()


class PoolIndex:
    """Exact lookup by lowercase name plus the pool's original ordering.

    The ordered list decides which item wins a substring match, so it must
    follow the filtered pool exactly.
    """

    def __init__(self, pool: Sequence[MagicItemRecord]) -> None:
        self._by_key: dict[str, MagicItemRecord] = {}
        self._ordered_keys: list[str] = []
        for item in pool:
            key = item.key
            if key in self._by_key:
                continue
            self._by_key[key] = item
            self._ordered_keys.append(key)

    def get(self, key: str) -> MagicItemRecord | None:
        return self._by_key.get(key)

    def match(self, claimed_name: str) -> str | None:
        name = claimed_name.strip().lower()
        if not name:
            return None
        if name in self._by_key:
            return name

        # "goggles of night (for enhanced sight)" -> "goggles of night"
        paren = name.find(" (")
        if paren > 0:
            stripped = name[:paren].strip()
            if stripped in self._by_key:
                return stripped

        for key in self._ordered_keys:
            if key in name:
                return key
        for key in self._ordered_keys:
            if name in key:
                return key
        return None


def reconcile(response: CuratorResponse, pool: Sequence[MagicItemRecord]) -> ReconcileResult:
    """Map every claim onto a canonical pool entry or drop it.

    A canonical item may back at most one claim across the whole response;
    later claims for the same item are dropped as duplicates. Dropped claims
    are reported as warnings, never raised.
    """
    index = PoolIndex(pool)
    claimed: set[str] = set()
    warnings: list[ValidationWarning] = []
    selections: list[CuratorSelection] = []

    for selection in response.selections:
        accepted: list[CuratorClaim] = []
        for claim in selection.claims:
            key = index.match(claim.name)
            if key is None:
                warnings.append(_warn(ValidationWarning.HALLUCINATED, claim.name, selection.character))
                continue
            if key in claimed:
                warnings.append(_warn(ValidationWarning.DUPLICATE, claim.name, selection.character))
                continue
            claimed.add(key)
            record = index.get(key)
            accepted.append(CuratorClaim(name=record.name, reason=claim.reason))
        selections.append(CuratorSelection(character=selection.character, claims=accepted))

    return ReconcileResult(response=CuratorResponse(selections=selections), warnings=warnings)


def _warn(kind: str, item: str, character: str) -> ValidationWarning:
    if kind == ValidationWarning.DUPLICATE:
        message = "Curator duplicated item across characters, dropping"
    else:
        message = "Curator hallucinated item, dropping"
    _logger.warning(message, extra={"item": item, "character": character})
    return ValidationWarning(kind=kind, item=item, character=character)
