from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Callable

from shopkeep.application.services.curator_prompt import (
    DEFAULT_ITEMS_PER_CHARACTER,
    build_curator_prompt,
    build_system_prompt,
)
from shopkeep.application.services.level_filter import filter_by_level, party_level
from shopkeep.application.services.response_extractor import extract_json
from shopkeep.application.services.selection_reconciler import reconcile
from shopkeep.application.services.specials_assembler import assemble
from shopkeep.domain.errors import LoadError, ValidationWarning
from shopkeep.domain.models.curation import CuratorResponse, ShopEntry
from shopkeep.domain.repositories import CharacterLibrary, CuratorModel, ItemLibrary, SpecialsStore


@dataclass
class CurationResult:
    entries: list[ShopEntry]
    warnings: list[ValidationWarning] = field(default_factory=list)
    party_level: int = 1
    eligible_count: int = 0
    elapsed_seconds: float = 0.0


class CurationService:
    def __init__(
        self,
        item_library: ItemLibrary,
        character_library: CharacterLibrary,
        curator_model: CuratorModel,
        specials_store: SpecialsStore,
        *,
        items_per_character: int = DEFAULT_ITEMS_PER_CHARACTER,
        rng_factory: Callable[[], random.Random] = random.Random,
    ) -> None:
        self.item_library = item_library
        self.character_library = character_library
        self.curator_model = curator_model
        self.specials_store = specials_store
        self.items_per_character = max(1, int(items_per_character))
        self._rng_factory = rng_factory
        self._logger = logging.getLogger(__name__)

    def refresh_session_specials(self) -> CurationResult:
        """Run one curation pass and replace the stored session specials.

        Nothing is written unless every step up to assembly succeeded; any
        LoadError, GenerationError, ExtractionError or PersistError leaves the
        previous artifact in place.
        """
        self._logger.info("Refreshing session specials via LLM curation")

        pool = self.item_library.load_all()
        self._logger.info("Loaded magic items", extra={"count": len(pool)})

        characters = self.character_library.load_all()
        if not characters:
            raise LoadError("no characters found")
        self._logger.info("Loaded characters", extra={"count": len(characters)})

        level = party_level(characters)
        eligible = filter_by_level(pool, level)
        self._logger.info("Filtered items by level", extra={"min_level": level, "eligible": len(eligible)})

        user_message = build_curator_prompt(characters, eligible, items_per_character=self.items_per_character)
        system_prompt = build_system_prompt(self.items_per_character)

        started = time.monotonic()
        self._logger.info("Sending curator prompt", extra={"message_length": len(user_message)})
        raw_response = self.curator_model.complete(system_prompt, user_message)
        elapsed = time.monotonic() - started

        document = extract_json(raw_response)
        response = CuratorResponse.from_payload(document, raw_response=raw_response)
        result = reconcile(response, eligible)

        entries = assemble(result, eligible, self._rng_factory())
        self.specials_store.replace(entries)
        self._logger.info(
            "Session specials written",
            extra={"item_count": len(entries), "dropped": len(result.warnings)},
        )

        return CurationResult(
            entries=entries,
            warnings=list(result.warnings),
            party_level=level,
            eligible_count=len(eligible),
            elapsed_seconds=elapsed,
        )
