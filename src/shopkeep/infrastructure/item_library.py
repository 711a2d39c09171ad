import json
from pathlib import Path
from typing import Sequence

from shopkeep.domain.errors import LoadError
from shopkeep.domain.models.magic_item import MagicItemRecord
from shopkeep.domain.repositories import ItemLibrary


DEFAULT_FAMILIES = ("magic_weapons", "magic_armor", "magic_potions", "wondrous_items")


class JsonItemLibrary(ItemLibrary):
    """Reads one ``<family>.json`` file per item family, each shaped ``{"items": [...]}``."""

    def __init__(self, root_dir: str | Path, families: Sequence[str] = DEFAULT_FAMILIES) -> None:
        self.root_dir = Path(root_dir)
        self.families = tuple(families)

    def _family_path(self, family: str) -> Path:
        return self.root_dir / f"{family}.json"

    def load_family(self, family: str) -> list[MagicItemRecord]:
        path = self._family_path(family)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise LoadError(f"failed to read {path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise LoadError(f"failed to parse {path}: {exc}") from exc

        rows = raw.get("items") if isinstance(raw, dict) else None
        if not isinstance(rows, list):
            raise LoadError(f"{path} has no 'items' list")

        records: list[MagicItemRecord] = []
        for position, row in enumerate(rows):
            if not isinstance(row, dict):
                raise LoadError(f"{path} item #{position} is not an object")
            try:
                records.append(MagicItemRecord.from_payload(row))
            except ValueError as exc:
                raise LoadError(f"{path} item #{position}: {exc}") from exc
        return records

    def load_all(self) -> tuple[MagicItemRecord, ...]:
        records: list[MagicItemRecord] = []
        for family in self.families:
            records.extend(self.load_family(family))
        return tuple(records)
