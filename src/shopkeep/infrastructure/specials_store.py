import json
import os
import tempfile
from pathlib import Path
from typing import Sequence

from shopkeep.domain.errors import LoadError, PersistError
from shopkeep.domain.models.curation import ShopEntry
from shopkeep.domain.repositories import SpecialsStore


class JsonSpecialsStore(SpecialsStore):
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def replace(self, entries: Sequence[ShopEntry]) -> None:
        """Swap in a new artifact; readers see either the old file or the new one."""
        document = {"items": [entry.to_payload() for entry in entries]}
        serialized = json.dumps(document, ensure_ascii=False, indent=2)

        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                dir=str(self.path.parent),
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(serialized)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as exc:
            raise PersistError(f"failed to write session specials to {self.path}: {exc}") from exc
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass

    def read_entries(self) -> list[ShopEntry]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise LoadError(f"failed to read session specials {self.path}: {exc}") from exc
        rows = raw.get("items") if isinstance(raw, dict) else None
        if not isinstance(rows, list):
            return []
        return [ShopEntry.from_payload(row) for row in rows if isinstance(row, dict)]
